"""TargetSelector — decide what an AI agent should pursue next.

Each planning cycle without an active route, the agent rolls against the
preference table for its kind and either chases a nearby entity of some
kind, wanders to a random free cell close by, or idles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mongoose.creatures.agent import CellTarget, EntityTarget, Target
from mongoose.creatures.policies import ROLL_RANGE, Action
from mongoose.planning.pathfinding import DEFAULT_MAX_LENGTH
from mongoose.world.cell import Cell

if TYPE_CHECKING:
    from mongoose.creatures.agent import Agent
    from mongoose.simulation.context import SimulationContext
    from mongoose.world.cell import Kind


def coordinate_sum_distance(a: Cell, b: Cell) -> int:
    """Return ``|dx + dy|`` between two cells.

    This is a cheap proximity proxy, not Manhattan distance: offsets of
    opposite sign cancel, so an entity three columns right and three
    rows down counts as distance 0.
    """
    return abs((b.x - a.x) + (b.y - a.y))


def resolve_goal(ctx: SimulationContext, target: Target) -> Cell | None:
    """Return the cell a target currently stands for, or None if it is gone."""
    if isinstance(target, CellTarget):
        return target.cell
    entity = ctx.entity(target.entity_id)
    if entity is None:
        return None
    return entity.head


@dataclass
class TargetSelector:
    """Weighted-random target choice.

    Attributes:
        max_distance: Chase radius under ``coordinate_sum_distance``;
            the wander box has half-width ``max_distance // 2``.
        wander_attempts: Draws allowed when looking for a free wander cell.
    """

    max_distance: int = DEFAULT_MAX_LENGTH
    wander_attempts: int = 10

    def select(self, ctx: SimulationContext, agent: Agent) -> Target | None:
        """Roll a new target for ``agent``; None means idle this cycle."""
        table = ctx.config.preferences.get(agent.kind)
        if table is None:
            return None
        choice = table.choose(int(ctx.rng.integers(0, ROLL_RANGE)))
        match choice.action:
            case Action.CHASE:
                return self._chase(ctx, agent, choice.kind)
            case Action.WANDER:
                return self._wander(ctx, agent)
        return None

    def _chase(
        self,
        ctx: SimulationContext,
        agent: Agent,
        kind: Kind | None,
    ) -> EntityTarget | None:
        if kind is None:
            return None
        candidates = [
            e
            for e in ctx.entities_of(kind)
            if e.entity_id != agent.entity_id
            and coordinate_sum_distance(agent.head, e.head) <= self.max_distance
        ]
        if not candidates:
            return None
        chosen = candidates[int(ctx.rng.integers(len(candidates)))]
        return EntityTarget(chosen.entity_id)

    def _wander(self, ctx: SimulationContext, agent: Agent) -> CellTarget | None:
        half = self.max_distance // 2
        head = agent.head
        world = ctx.world
        x_lo, x_hi = max(0, head.x - half), min(world.width - 1, head.x + half)
        y_lo, y_hi = max(0, head.y - half), min(world.height - 1, head.y + half)
        if x_lo > x_hi or y_lo > y_hi:
            return None
        for _ in range(self.wander_attempts):
            cell = Cell(
                int(ctx.rng.integers(x_lo, x_hi + 1)),
                int(ctx.rng.integers(y_lo, y_hi + 1)),
            )
            if cell != head and not world.is_occupied(cell):
                return CellTarget(cell)
        return None
