"""SimulationEngine — the main tick loop.

Owns the simulation context and advances it in a fixed order each tick:

1. Spawners (berries, mice, snakes) on their own periods
2. Mouse ageing; mice past their lifetime escape
3. AI agents in spawn order: planning (if due), then movement (if due)
4. Protagonist steering from the held input direction

Each agent's steps run to completion before the next agent acts, so the
first agent to reach a cell wins it and later ones see it occupied.
Events emitted during a tick are drained and handed back by ``step``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from mongoose.creatures.agent import Agent, EntityTarget
from mongoose.planning.pathfinding import PathPlanner
from mongoose.planning.targeting import TargetSelector, resolve_goal
from mongoose.simulation.config import SimulationConfig
from mongoose.simulation.context import SimulationContext
from mongoose.simulation.cooldown import RepeatingCooldown
from mongoose.simulation.events import Escaped, Event
from mongoose.simulation.movement import MovementEngine, MoveResult
from mongoose.simulation.spawning import (
    spawn_berry,
    spawn_mouse,
    spawn_protagonist,
    spawn_snake,
)
from mongoose.world.cell import Direction, Kind

logger = structlog.get_logger()

Spawner = Callable[[SimulationContext], object]


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        context: Shared grid, registry, scoreboard, events, and RNG.
        planner: Bounded route search.
        selector: Weighted target choice.
        movement: Body movement and collision resolution.
        protagonist: The player-steered mongoose.
        held_direction: Direction the player is holding, if any.
        tick: Ticks advanced so far.
        elapsed: Simulated seconds advanced so far.
    """

    config: SimulationConfig
    context: SimulationContext = field(init=False)
    planner: PathPlanner = field(init=False)
    selector: TargetSelector = field(init=False)
    movement: MovementEngine = field(init=False, default_factory=MovementEngine)
    protagonist: Agent = field(init=False)
    held_direction: Direction | None = None
    tick: int = 0
    elapsed: float = 0.0
    _spawners: list[tuple[RepeatingCooldown, Spawner]] = field(
        init=False,
        repr=False,
        default_factory=list,
    )

    def __post_init__(self) -> None:
        """Build the context and spawn the protagonist."""
        self.context = SimulationContext(config=self.config)
        self.planner = PathPlanner(max_length=self.config.path_length_bound)
        self.selector = TargetSelector(
            max_distance=self.config.path_length_bound,
            wander_attempts=self.config.wander_attempts,
        )
        self._spawners = [
            (RepeatingCooldown(self.config.snake_spawn_period), spawn_snake),
            (RepeatingCooldown(self.config.berry_spawn_period), spawn_berry),
            (RepeatingCooldown(self.config.mouse_spawn_period), spawn_mouse),
        ]
        self.protagonist = spawn_protagonist(self.context)

    # -- Player input --------------------------------------------------------

    def press(self, direction: Direction) -> None:
        """Hold ``direction``; the mongoose steps that way when it can."""
        self.held_direction = direction

    def release(self) -> None:
        """Stop steering the mongoose."""
        self.held_direction = None

    # -- Tick loop -----------------------------------------------------------

    def step(self, dt: float | None = None) -> list[Event]:
        """Advance the simulation by one tick of ``dt`` seconds.

        Args:
            dt: Tick delta; defaults to ``config.tick_seconds``.

        Returns:
            Events emitted during this tick, drained from the context.
        """
        if dt is None:
            dt = self.config.tick_seconds
        ctx = self.context

        for timer, spawn in self._spawners:
            if timer.tick(dt):
                spawn(ctx)

        self._age_mice(dt)

        for agent in ctx.agents():
            if agent is self.protagonist or agent.plan_cooldown is None:
                continue
            # An earlier agent may have eaten this one during this tick.
            if ctx.entity(agent.entity_id) is None:
                continue
            self.update_agent(agent, dt)

        self._steer_protagonist(dt)

        self.tick += 1
        self.elapsed += dt
        return ctx.drain_events()

    def run(
        self,
        ticks: int,
        on_event: Callable[[Event], None] | None = None,
    ) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of steps to take.
            on_event: Called with every event, in emission order.
        """
        for _ in range(ticks):
            events = self.step()
            if on_event is not None:
                for event in events:
                    on_event(event)

    def update_agent(self, agent: Agent, dt: float) -> None:
        """Tick one AI agent's cooldowns and act on whichever fire."""
        if agent.plan_cooldown is not None and agent.plan_cooldown.tick(dt):
            agent.plan_cooldown.reset()
            self.plan(agent)
        if agent.move_cooldown.tick(dt):
            agent.move_cooldown.reset()
            self.movement.advance(self.context, agent)

    def plan(self, agent: Agent) -> bool:
        """Run one planning cycle for ``agent``.

        A despawned entity target is dropped and the agent re-rolls next
        cycle.  An agent that still has a route keeps it.  Otherwise a
        new target is chosen and a route toward it searched for.

        Returns:
            True if a new route was stored.
        """
        ctx = self.context
        target = agent.target
        if isinstance(target, EntityTarget) and ctx.entity(target.entity_id) is None:
            agent.clear_plan()
            return False
        if agent.route:
            return False

        target = self.selector.select(ctx, agent)
        goal = None if target is None else resolve_goal(ctx, target)
        route = None if goal is None else self.planner.plan(ctx.world, agent.head, goal)
        if route is None:
            agent.clear_plan()
            return False
        agent.target = target
        agent.route.extend(route)
        return True

    def snapshot(self) -> dict[int, dict[str, object]]:
        """Return each live entity's kind and cells, head first, for rendering."""
        return {
            entity_id: {
                "kind": entity.kind.value,
                "cells": [tuple(c) for c in entity.cells],
            }
            for entity_id, entity in self.context.entities.items()
        }

    # -- Internals -----------------------------------------------------------

    def _age_mice(self, dt: float) -> None:
        ctx = self.context
        for agent in ctx.agents():
            agent.age += dt
            if agent.kind is Kind.MOUSE and agent.age >= self.config.mouse_lifetime:
                ctx.despawn(agent.entity_id)
                ctx.scoreboard.increment("mice_escaped")
                ctx.emit(Escaped(entity_id=agent.entity_id))
                logger.info("mouse_escaped", entity_id=agent.entity_id)

    def _steer_protagonist(self, dt: float) -> None:
        mongoose = self.protagonist
        if self.context.entity(mongoose.entity_id) is None:
            return
        if not mongoose.move_cooldown.tick(dt) or self.held_direction is None:
            return
        result = self.movement.steer(self.context, mongoose, self.held_direction)
        # A refused step at the arena edge retries next tick; a blocked one
        # waits out the cooldown so it is reported once per period.
        if result.moved or result is MoveResult.BLOCKED:
            mongoose.move_cooldown.reset()
