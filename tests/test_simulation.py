"""Tests for mongoose.simulation — config loading, context, and the tick loop."""

from pathlib import Path

import pytest

from mongoose.creatures.agent import Agent, Berry, EntityTarget
from mongoose.creatures.policies import PreferenceTable
from mongoose.simulation.config import SimulationConfig
from mongoose.simulation.context import SimulationContext
from mongoose.simulation.cooldown import Cooldown, RepeatingCooldown
from mongoose.simulation.engine import SimulationEngine
from mongoose.simulation.events import Blocked, Escaped, Event, Scoreboard
from mongoose.simulation.spawning import spawn_berry, spawn_mouse, spawn_snake
from mongoose.world.cell import Cell, Direction, Kind
from mongoose.world.errors import InvariantViolation


def assert_registry_matches_grid(ctx: SimulationContext) -> None:
    """Every occupied cell belongs to a live entity that covers it, and back."""
    expected = {}
    for entity in ctx.entities.values():
        for cell in entity.cells:
            if ctx.world.in_bounds(cell):
                expected[cell] = entity.entity_id
    actual = {c: occ.entity_id for c, occ in ctx.world.occupied_cells().items()}
    assert actual == expected


class TestSimulationConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.arena_width == 20
        assert cfg.arena_height == 20
        assert cfg.path_length_bound == 8
        assert cfg.movement_periods[Kind.SNAKE] == 0.5
        assert cfg.planning_periods[Kind.SNAKE] == 3.0

    def test_rejects_bad_bound(self) -> None:
        with pytest.raises(ValueError):
            SimulationConfig(path_length_bound=0)

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(
            "seed: 99\n"
            "arena_width: 12\n"
            "path_length_bound: 6\n"
            "movement_periods:\n"
            "  snake: 0.25\n"
            "preferences:\n"
            "  snake:\n"
            "    chase_berry: 7\n"
            "    idle: 3\n",
        )
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.arena_width == 12
        assert cfg.arena_height == 20
        assert cfg.path_length_bound == 6
        assert cfg.movement_periods[Kind.SNAKE] == 0.25
        assert cfg.movement_periods[Kind.MOUSE] == 0.35
        assert cfg.preferences[Kind.SNAKE] == PreferenceTable.from_mapping(
            {"chase_berry": 7, "idle": 3},
        )
        assert Kind.MOUSE in cfg.preferences

    def test_from_yaml_bad_preferences(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("preferences:\n  mouse:\n    wander: 3\n")
        with pytest.raises(ValueError):
            SimulationConfig.from_yaml(yaml_file)

    def test_from_yaml_empty_sections_keep_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text(
            "seed: 5\n"
            "movement_periods:\n"
            "planning_periods:\n"
            "preferences:\n",
        )
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 5
        assert cfg.movement_periods == SimulationConfig().movement_periods
        assert cfg.planning_periods == SimulationConfig().planning_periods
        assert cfg.preferences == SimulationConfig().preferences

    def test_from_yaml_empty_preference_table(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "blank.yaml"
        yaml_file.write_text("preferences:\n  snake:\n")
        with pytest.raises(ValueError):
            SimulationConfig.from_yaml(yaml_file)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")

    def test_shipped_default_config_loads(self) -> None:
        path = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
        cfg = SimulationConfig.from_yaml(path)
        assert cfg == SimulationConfig()


class TestCooldowns:
    """Tests for countdown timers."""

    def test_one_shot_stays_ready(self) -> None:
        timer = Cooldown(period=0.5)
        assert not timer.tick(0.25)
        assert timer.tick(0.25)
        assert timer.tick(0.25)
        timer.reset()
        assert not timer.ready

    def test_repeating_carries_overshoot(self) -> None:
        timer = RepeatingCooldown(period=1.0)
        fired = [timer.tick(0.75) for _ in range(4)]
        assert fired == [False, True, True, True]


class TestScoreboard:
    """Tests for the running tallies."""

    def test_increment(self) -> None:
        board = Scoreboard()
        board.increment("snakes_killed")
        board.increment("berries_eaten_by_mongoose")
        assert board.snakes_killed == 1
        assert board.score == 1
        assert board.as_dict()["mice_escaped"] == 0

    def test_unknown_counter(self) -> None:
        with pytest.raises(AttributeError):
            Scoreboard().increment("hawks_fed")


class TestSimulationContext:
    """Tests for the entity registry."""

    def test_ids_are_unique(self, context: SimulationContext) -> None:
        snake = context.spawn_agent(Kind.SNAKE, [Cell(1, 1), Cell(1, 2)])
        berry = context.spawn_berry(Cell(3, 3))
        ids = [snake.entity_id, berry.entity_id]
        ids += [s.segment_id for s in snake.body.segments]
        assert len(set(ids)) == len(ids)

    def test_despawn_frees_cells(self, context: SimulationContext) -> None:
        snake = context.spawn_agent(Kind.SNAKE, [Cell(0, 1), Cell(0, 0), Cell(-1, 0)])
        context.despawn(snake.entity_id)
        assert context.world.occupied_cells() == {}
        assert context.entity(snake.entity_id) is None

    def test_despawn_unknown_is_fatal(self, context: SimulationContext) -> None:
        with pytest.raises(InvariantViolation):
            context.despawn(12345)

    def test_spawn_on_occupied_cell_is_fatal(self, context: SimulationContext) -> None:
        context.spawn_berry(Cell(2, 2))
        with pytest.raises(InvariantViolation):
            context.spawn_berry(Cell(2, 2))

    def test_entities_of(self, context: SimulationContext) -> None:
        context.spawn_berry(Cell(1, 1))
        context.spawn_berry(Cell(2, 2))
        context.spawn_agent(Kind.MOUSE, [Cell(3, 3)])
        assert len(context.entities_of(Kind.BERRY)) == 2
        assert len(context.entities_of(Kind.MOUSE)) == 1

    def test_drain_events(self, context: SimulationContext) -> None:
        context.emit(Escaped(entity_id=7))
        assert context.drain_events() == [Escaped(entity_id=7)]
        assert context.drain_events() == []


class TestSpawning:
    """Tests for the spawners."""

    def test_snake_starts_in_void(self, context: SimulationContext) -> None:
        for _ in range(10):
            snake = spawn_snake(context)
            assert 2 <= len(snake.body) <= 5
            assert all(not context.world.in_bounds(c) for c in snake.cells)
            snake.body.check_links()
            # One step from the head always lands inside the arena.
            assert any(context.world.in_bounds(n) for n in snake.head.neighbours())

    def test_berry_and_mouse_land_on_free_cells(
        self,
        context: SimulationContext,
    ) -> None:
        for _ in range(10):
            spawn_berry(context)
            spawn_mouse(context)
        assert_registry_matches_grid(context)


class TestSimulationEngine:
    """Tests for the tick loop."""

    def test_engine_initialises(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        assert engine.tick == 0
        assert engine.context.world.width == default_config.arena_width
        assert engine.protagonist.head == Cell(10, 10)
        assert len(engine.protagonist.body) == 3

    def test_step_advances_tick(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.step()
        assert engine.tick == 1
        assert engine.elapsed == default_config.tick_seconds

    def test_spawners_fire_on_schedule(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.run(ticks=64 * 5)
        assert engine.context.entities_of(Kind.SNAKE)

    def test_long_run_keeps_grid_consistent(self) -> None:
        cfg = SimulationConfig(seed=7, arena_width=12, arena_height=12)
        engine = SimulationEngine(config=cfg)
        for tick in range(64 * 40):
            engine.step()
            if tick % 32 == 0:
                assert_registry_matches_grid(engine.context)
            for agent in engine.context.agents():
                assert len(agent.route) <= cfg.path_length_bound
        assert_registry_matches_grid(engine.context)

    def test_determinism(self) -> None:
        """Same seed must produce identical state after N ticks."""
        cfg = SimulationConfig(seed=777, arena_width=10, arena_height=10)
        engine_a = SimulationEngine(config=cfg)
        engine_b = SimulationEngine(config=cfg)
        engine_a.run(ticks=64 * 20)
        engine_b.run(ticks=64 * 20)
        assert engine_a.snapshot() == engine_b.snapshot()
        assert engine_a.context.scoreboard == engine_b.context.scoreboard

    def test_steering(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.press(Direction.LEFT)
        engine.step(dt=0.2)
        assert engine.protagonist.head == Cell(9, 10)
        engine.release()
        engine.step(dt=0.2)
        assert engine.protagonist.head == Cell(9, 10)

    def test_plan_chases_berry(self) -> None:
        cfg = SimulationConfig(
            preferences={Kind.SNAKE: PreferenceTable.from_mapping({"chase_berry": 10})},
        )
        engine = SimulationEngine(config=cfg)
        ctx = engine.context
        snake = ctx.spawn_agent(Kind.SNAKE, [Cell(2, 2), Cell(1, 2)])
        berry = ctx.spawn_berry(Cell(5, 4))
        assert engine.plan(snake)
        assert snake.target == EntityTarget(berry.entity_id)
        assert snake.route[-1] == Cell(5, 4)
        assert len(snake.route) <= cfg.path_length_bound

        # A route in progress is kept.
        assert not engine.plan(snake)

        # Losing the target clears everything for a fresh roll.
        ctx.despawn(berry.entity_id)
        assert not engine.plan(snake)
        assert snake.target is None
        assert not snake.route

    def test_plan_without_candidates(self) -> None:
        cfg = SimulationConfig(
            preferences={Kind.SNAKE: PreferenceTable.from_mapping({"chase_mouse": 10})},
        )
        engine = SimulationEngine(config=cfg)
        snake = engine.context.spawn_agent(Kind.SNAKE, [Cell(2, 2), Cell(1, 2)])
        assert not engine.plan(snake)
        assert snake.target is None

    def test_mouse_escapes(self) -> None:
        cfg = SimulationConfig(mouse_lifetime=1.0)
        engine = SimulationEngine(config=cfg)
        mouse = engine.context.spawn_agent(Kind.MOUSE, [Cell(1, 1)])
        events = engine.step(dt=1.0)
        assert engine.context.entity(mouse.entity_id) is None
        assert engine.context.scoreboard.mice_escaped == 1
        assert Escaped(entity_id=mouse.entity_id) in events
        assert not engine.context.world.is_occupied(Cell(1, 1))

    def test_ai_agent_walks_its_route(self) -> None:
        cfg = SimulationConfig(
            preferences={Kind.MOUSE: PreferenceTable.from_mapping({"chase_berry": 10})},
        )
        engine = SimulationEngine(config=cfg)
        ctx = engine.context
        mouse = ctx.spawn_agent(Kind.MOUSE, [Cell(2, 2)])
        ctx.spawn_berry(Cell(4, 2))
        # Planning (2.0 s) and movement (0.35 s) both fire on this tick.
        engine.step(dt=2.0)
        assert mouse.head != Cell(2, 2)
        engine.step(dt=0.35)
        assert mouse.head == Cell(4, 2)
        assert ctx.scoreboard.berries_eaten_by_mice == 1

    def test_step_hands_back_the_tick_events(
        self,
        default_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=default_config)
        engine.press(Direction.RIGHT)  # into the mongoose's own body
        events = engine.step(dt=0.2)
        assert events == [
            Blocked(
                entity_id=engine.protagonist.entity_id,
                cell=Cell(11, 10),
                occupant_kind=Kind.MONGOOSE,
            ),
        ]
        assert engine.context.events == []
        # The blocked attempt waits out the cooldown before retrying.
        assert engine.step(dt=0.1) == []

    def test_held_direction_against_own_body_stays_bounded(
        self,
        default_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=default_config)
        mongoose_id = engine.protagonist.entity_id
        engine.press(Direction.RIGHT)
        seen: list[Event] = []
        engine.run(ticks=64 * 60, on_event=seen.append)

        blocked = [
            e for e in seen if isinstance(e, Blocked) and e.entity_id == mongoose_id
        ]
        period = default_config.movement_periods[Kind.MONGOOSE]
        assert 0 < len(blocked) <= int(60 / period) + 1
        assert engine.protagonist.head == Cell(10, 10)
        assert engine.context.events == []

    def test_agent_eaten_earlier_in_the_tick_does_not_move(self) -> None:
        engine = SimulationEngine(config=SimulationConfig())
        ctx = engine.context
        snake = ctx.spawn_agent(Kind.SNAKE, [Cell(2, 2), Cell(1, 2)])
        mouse = ctx.spawn_agent(Kind.MOUSE, [Cell(3, 2)])
        snake.target = EntityTarget(mouse.entity_id)
        snake.route.append(Cell(3, 2))
        mouse.route.append(Cell(3, 3))
        for agent in (snake, mouse):
            agent.move_cooldown.elapsed = agent.move_cooldown.period

        engine.step()

        assert ctx.entity(mouse.entity_id) is None
        assert mouse.head == Cell(3, 2)
        assert not ctx.world.is_occupied(Cell(3, 3))
        assert ctx.world.occupant_at(Cell(3, 2)).entity_id == snake.entity_id
        assert ctx.scoreboard.mice_eaten_by_snakes == 1
        assert_registry_matches_grid(ctx)

    def test_snapshot(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        snap = engine.snapshot()
        assert snap[engine.protagonist.entity_id] == {
            "kind": "mongoose",
            "cells": [(10, 10), (11, 10), (11, 9)],
        }
        assert all(isinstance(e, (Agent, Berry)) for e in engine.context.entities.values())
