"""Policies — per-kind preference tables for choosing what to chase.

Each planning cycle an AI agent rolls an integer in ``[0, 10)`` and the
table for its kind maps that roll to one choice.  Tables are listed in
order; each entry claims ``weight`` consecutive roll values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from mongoose.world.cell import Kind

ROLL_RANGE = 10


class Action(Enum):
    """What an agent decides to do for one planning cycle."""

    CHASE = auto()
    WANDER = auto()
    IDLE = auto()


@dataclass(frozen=True)
class Choice:
    """One outcome of a preference roll.

    Attributes:
        action: Chase, wander, or idle.
        kind: Entity kind to chase (CHASE only).
    """

    action: Action
    kind: Kind | None = None


@dataclass(frozen=True)
class PreferenceTable:
    """Ordered ``(weight, choice)`` entries whose weights sum to ``ROLL_RANGE``."""

    entries: tuple[tuple[int, Choice], ...]

    def __post_init__(self) -> None:
        if any(weight < 0 for weight, _ in self.entries):
            msg = "preference weights must be non-negative"
            raise ValueError(msg)
        total = sum(weight for weight, _ in self.entries)
        if total != ROLL_RANGE:
            msg = f"preference weights must sum to {ROLL_RANGE}, got {total}"
            raise ValueError(msg)

    def choose(self, roll: int) -> Choice:
        """Return the choice whose sub-range contains ``roll``."""
        upper = 0
        for weight, choice in self.entries:
            upper += weight
            if roll < upper:
                return choice
        msg = f"roll {roll} outside [0, {ROLL_RANGE})"
        raise ValueError(msg)

    @classmethod
    def from_mapping(cls, mapping: dict[str, int]) -> PreferenceTable:
        """Build a table from config keys ``chase_<kind>``, ``wander``, ``idle``.

        Raises:
            ValueError: On an unknown key or kind, or bad weights.
        """
        entries: list[tuple[int, Choice]] = []
        for key, weight in mapping.items():
            if key == "wander":
                choice = Choice(Action.WANDER)
            elif key == "idle":
                choice = Choice(Action.IDLE)
            elif key.startswith("chase_"):
                choice = Choice(Action.CHASE, Kind(key.removeprefix("chase_")))
            else:
                msg = f"unknown preference key {key!r}"
                raise ValueError(msg)
            entries.append((int(weight), choice))
        return cls(entries=tuple(entries))


# Snakes are quick enough to catch mice, so they favour them over berries.
DEFAULT_PREFERENCES: dict[Kind, PreferenceTable] = {
    Kind.SNAKE: PreferenceTable.from_mapping(
        {"chase_mouse": 5, "chase_berry": 3, "wander": 1, "idle": 1},
    ),
    Kind.MOUSE: PreferenceTable.from_mapping(
        {"chase_berry": 4, "wander": 5, "idle": 1},
    ),
}
