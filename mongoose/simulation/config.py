"""Config — load simulation parameters from YAML files.

Arena size, the route length bound, per-kind cadences, spawn periods and
preference tables live in YAML and are parsed into a typed dataclass
here.  Every key is optional; missing keys keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from mongoose.creatures.policies import DEFAULT_PREFERENCES, PreferenceTable
from mongoose.world.cell import Kind


def _default_movement_periods() -> dict[Kind, float]:
    return {Kind.SNAKE: 0.5, Kind.MOUSE: 0.35, Kind.MONGOOSE: 0.2}


def _default_planning_periods() -> dict[Kind, float]:
    return {Kind.SNAKE: 3.0, Kind.MOUSE: 2.0}


def _kind_map(raw: dict[str, float], defaults: dict[Kind, float]) -> dict[Kind, float]:
    merged = dict(defaults)
    for name, value in raw.items():
        merged[Kind(name)] = float(value)
    return merged


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        arena_width: Number of grid columns.
        arena_height: Number of grid rows.
        path_length_bound: Longest route (in steps) the planner returns.
        tick_seconds: Default tick delta fed to every cooldown.
        wander_attempts: Draws allowed when picking a wander cell.
        movement_periods: Seconds between movement steps, per kind.
        planning_periods: Seconds between planning cycles, per AI kind.
        berry_spawn_period: Seconds between berry spawns.
        snake_spawn_period: Seconds between snake spawns.
        mouse_spawn_period: Seconds between mouse spawns.
        mouse_lifetime: Seconds a mouse stays before escaping.
        preferences: Target preference table per AI kind.
    """

    seed: int = 42
    arena_width: int = 20
    arena_height: int = 20
    path_length_bound: int = 8
    tick_seconds: float = 1.0 / 64.0
    wander_attempts: int = 10

    movement_periods: dict[Kind, float] = field(
        default_factory=_default_movement_periods,
    )
    planning_periods: dict[Kind, float] = field(
        default_factory=_default_planning_periods,
    )

    berry_spawn_period: float = 3.0
    snake_spawn_period: float = 5.0
    mouse_spawn_period: float = 4.0
    mouse_lifetime: float = 30.0

    preferences: dict[Kind, PreferenceTable] = field(
        default_factory=lambda: dict(DEFAULT_PREFERENCES),
    )

    def __post_init__(self) -> None:
        if self.path_length_bound < 1:
            msg = f"path_length_bound must be positive, got {self.path_length_bound}"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a kind name or preference table is invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        preferences = dict(DEFAULT_PREFERENCES)
        for name, mapping in (data.get("preferences") or {}).items():
            preferences[Kind(name)] = PreferenceTable.from_mapping(mapping or {})

        return cls(
            seed=data.get("seed", cls.seed),
            arena_width=data.get("arena_width", cls.arena_width),
            arena_height=data.get("arena_height", cls.arena_height),
            path_length_bound=data.get(
                "path_length_bound",
                cls.path_length_bound,
            ),
            tick_seconds=data.get("tick_seconds", cls.tick_seconds),
            wander_attempts=data.get("wander_attempts", cls.wander_attempts),
            movement_periods=_kind_map(
                data.get("movement_periods") or {},
                _default_movement_periods(),
            ),
            planning_periods=_kind_map(
                data.get("planning_periods") or {},
                _default_planning_periods(),
            ),
            berry_spawn_period=data.get(
                "berry_spawn_period",
                cls.berry_spawn_period,
            ),
            snake_spawn_period=data.get(
                "snake_spawn_period",
                cls.snake_spawn_period,
            ),
            mouse_spawn_period=data.get(
                "mouse_spawn_period",
                cls.mouse_spawn_period,
            ),
            mouse_lifetime=data.get("mouse_lifetime", cls.mouse_lifetime),
            preferences=preferences,
        )
