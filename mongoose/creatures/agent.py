"""Agent and Berry — the entities that live in the arena.

A Berry is an immobile single cell.  An Agent owns a segmented body
(single-segment for mice), a planned route, an optional target, and the
cooldowns that decide when it plans and moves.  Agents hold no behaviour
of their own: planning, movement, and interactions are resolved by the
subsystems in ``mongoose.planning`` and ``mongoose.simulation``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from mongoose.creatures.body import SegmentedBody
from mongoose.simulation.cooldown import Cooldown
from mongoose.world.cell import Cell, Kind, Occupant


@dataclass(frozen=True)
class CellTarget:
    """Pursue a fixed cell."""

    cell: Cell


@dataclass(frozen=True)
class EntityTarget:
    """Pursue a tracked entity wherever it currently is."""

    entity_id: int


Target = CellTarget | EntityTarget


@dataclass
class Berry:
    """A single food item.

    Attributes:
        entity_id: Unique identifier.
        cell: Where the berry lies.
    """

    entity_id: int
    cell: Cell

    @property
    def kind(self) -> Kind:
        return Kind.BERRY

    @property
    def head(self) -> Cell:
        return self.cell

    @property
    def cells(self) -> list[Cell]:
        return [self.cell]

    @property
    def occupant(self) -> Occupant:
        return Occupant(entity_id=self.entity_id, kind=Kind.BERRY)


@dataclass
class Agent:
    """A moving creature.

    Attributes:
        entity_id: Unique identifier.
        kind: MOUSE, SNAKE, or MONGOOSE.
        body: Ordered body segments, head first.
        route: Waypoints still to visit, next waypoint first.
        target: What the agent is currently pursuing, if anything.
        move_cooldown: Movement cadence.
        plan_cooldown: Planning cadence (None for the player-steered
            protagonist).
        age: Seconds since spawn.
    """

    entity_id: int
    kind: Kind
    body: SegmentedBody
    move_cooldown: Cooldown
    plan_cooldown: Cooldown | None = None
    route: deque[Cell] = field(default_factory=deque)
    target: Target | None = None
    age: float = 0.0

    @property
    def head(self) -> Cell:
        """Return the head cell."""
        return self.body.head

    @property
    def cells(self) -> list[Cell]:
        """Return every segment's cell, head first."""
        return self.body.cells

    @property
    def occupant(self) -> Occupant:
        """Return the tag this agent writes on every cell it holds."""
        return Occupant(entity_id=self.entity_id, kind=self.kind)

    @property
    def is_segmented(self) -> bool:
        """Return True for creatures that can grow extra segments."""
        return self.kind is not Kind.MOUSE

    def clear_plan(self) -> None:
        """Drop the current route and target."""
        self.route.clear()
        self.target = None


Entity = Berry | Agent
