"""MovementEngine — advance agents one cell at a time.

Moving is follow-the-leader: the head takes the destination, every
other segment takes the cell of the segment ahead of it, and the cell
left behind by the tail is freed.  When the destination is occupied the
interaction table decides whether the occupant is eaten first or the
move is refused.

Growth is two-phase.  Eating appends a new segment on the tail's cell
right after the move; on the next move that duplicate trails into the
tail's old cell instead of freeing it, so the body covers one more cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

import structlog

from mongoose.creatures.agent import EntityTarget
from mongoose.simulation.events import Blocked, Consumed, Grew
from mongoose.simulation.interactions import InteractionRule, Outcome, resolve

if TYPE_CHECKING:
    from mongoose.creatures.agent import Agent
    from mongoose.simulation.context import SimulationContext
    from mongoose.world.cell import Cell, Direction, Occupant

logger = structlog.get_logger()


class MoveResult(Enum):
    """What a single movement attempt did."""

    WAITED = auto()
    MOVED = auto()
    ATE = auto()
    BLOCKED = auto()

    @property
    def moved(self) -> bool:
        """Return True if the body actually advanced."""
        return self in (MoveResult.MOVED, MoveResult.ATE)


@dataclass
class MovementEngine:
    """Steps agents along their routes and resolves collisions."""

    def advance(self, ctx: SimulationContext, agent: Agent) -> MoveResult:
        """Take the next waypoint off ``agent.route`` and move there.

        A chased entity that has despawned cancels the route.  A blocked
        move clears the route so the agent replans; reaching the end of
        the route drops the target.
        """
        target = agent.target
        if isinstance(target, EntityTarget) and ctx.entity(target.entity_id) is None:
            agent.clear_plan()
            return MoveResult.WAITED
        if not agent.route:
            return MoveResult.WAITED

        result = self.step_into(ctx, agent, agent.route.popleft())
        if result is MoveResult.BLOCKED:
            agent.route.clear()
        elif not agent.route:
            agent.target = None
        return result

    def steer(
        self,
        ctx: SimulationContext,
        agent: Agent,
        direction: Direction,
    ) -> MoveResult:
        """Move ``agent`` one step in ``direction`` (player input).

        Steps that would leave the arena are refused without an event.
        """
        destination = agent.head.step(direction)
        if not ctx.world.in_bounds(destination):
            return MoveResult.WAITED
        return self.step_into(ctx, agent, destination)

    def step_into(
        self,
        ctx: SimulationContext,
        agent: Agent,
        destination: Cell,
    ) -> MoveResult:
        """Resolve whatever holds ``destination`` and shift the body onto it."""
        occupant = ctx.world.occupant_at(destination)
        grows = False
        if occupant is not None:
            rule = resolve(agent.kind, occupant.kind)
            if rule.outcome is Outcome.BLOCK:
                ctx.emit(
                    Blocked(
                        entity_id=agent.entity_id,
                        cell=destination,
                        occupant_kind=occupant.kind,
                    ),
                )
                logger.debug(
                    "move_blocked",
                    entity_id=agent.entity_id,
                    kind=agent.kind.value,
                    cell=tuple(destination),
                    occupant=occupant.kind.value,
                )
                return MoveResult.BLOCKED
            self._consume(ctx, agent, occupant, rule, destination)
            grows = rule.grows and agent.is_segmented

        self._shift(ctx, agent, destination)

        if grows:
            agent.body.grow(ctx.next_id())
            ctx.emit(Grew(entity_id=agent.entity_id, length=len(agent.body)))
        if occupant is not None:
            return MoveResult.ATE
        return MoveResult.MOVED

    @staticmethod
    def _consume(
        ctx: SimulationContext,
        agent: Agent,
        occupant: Occupant,
        rule: InteractionRule,
        cell: Cell,
    ) -> None:
        """Despawn the eaten entity and score it."""
        ctx.despawn(occupant.entity_id)
        if rule.counter is not None:
            ctx.scoreboard.increment(rule.counter)
        ctx.emit(
            Consumed(
                scorer_id=agent.entity_id,
                scorer_kind=agent.kind,
                victim_id=occupant.entity_id,
                victim_kind=occupant.kind,
                cell=cell,
            ),
        )
        logger.info(
            "consumed",
            scorer=agent.entity_id,
            scorer_kind=agent.kind.value,
            victim=occupant.entity_id,
            victim_kind=occupant.kind.value,
            cell=tuple(cell),
        )

    @staticmethod
    def _shift(ctx: SimulationContext, agent: Agent, destination: Cell) -> None:
        """Occupy ``destination`` with the head and free the old tail cell."""
        ctx.world.set(destination, agent.occupant)
        vacated = agent.body.shift(destination)
        if vacated is not None:
            ctx.world.unset(vacated)
        agent.body.check_links()
