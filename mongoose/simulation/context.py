"""SimulationContext — the shared mutable state of one run.

Holds the occupancy grid, the entity registry, the scoreboard, the
pending event queue, and the seeded RNG.  Every subsystem receives the
context explicitly; nothing here is global.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import numpy as np
import structlog
from numpy.random import Generator

from mongoose.creatures.agent import Agent, Berry, Entity
from mongoose.creatures.body import Segment, SegmentedBody
from mongoose.simulation.config import SimulationConfig
from mongoose.simulation.cooldown import Cooldown
from mongoose.simulation.events import Event, Scoreboard
from mongoose.world.cell import Cell, Kind
from mongoose.world.errors import InvariantViolation
from mongoose.world.grid import GridWorld

logger = structlog.get_logger()


@dataclass
class SimulationContext:
    """Everything the core subsystems read and mutate.

    Attributes:
        config: Loaded simulation configuration.
        world: The occupancy grid.
        entities: Live entities by id, in spawn order.
        scoreboard: Running tallies.
        events: Events not yet drained by a consumer.
        rng: Seeded random generator.
    """

    config: SimulationConfig
    world: GridWorld = field(init=False)
    entities: dict[int, Entity] = field(init=False, default_factory=dict)
    scoreboard: Scoreboard = field(init=False, default_factory=Scoreboard)
    events: list[Event] = field(init=False, default_factory=list)
    rng: Generator = field(init=False)
    _next_id: int = field(init=False, default=1, repr=False)

    def __post_init__(self) -> None:
        self.world = GridWorld(
            width=self.config.arena_width,
            height=self.config.arena_height,
        )
        self.rng = np.random.default_rng(self.config.seed)

    def next_id(self) -> int:
        """Return a fresh identifier for an entity or a segment."""
        value = self._next_id
        self._next_id += 1
        return value

    # -- Registry ------------------------------------------------------------

    def entity(self, entity_id: int) -> Entity | None:
        """Return the live entity with ``entity_id``, or None if despawned."""
        return self.entities.get(entity_id)

    def entities_of(self, kind: Kind) -> list[Entity]:
        """Return live entities of ``kind`` in spawn order."""
        return [e for e in self.entities.values() if e.kind is kind]

    def agents(self) -> Iterator[Agent]:
        """Iterate over a snapshot of live agents in spawn order."""
        for entity in list(self.entities.values()):
            if isinstance(entity, Agent):
                yield entity

    def spawn_berry(self, cell: Cell) -> Berry:
        """Place a berry on a free cell."""
        berry = Berry(entity_id=self.next_id(), cell=cell)
        self.world.set(cell, berry.occupant)
        self.entities[berry.entity_id] = berry
        logger.debug("berry_spawned", entity_id=berry.entity_id, cell=tuple(cell))
        return berry

    def spawn_agent(
        self,
        kind: Kind,
        cells: Iterable[Cell],
        *,
        planning: bool = True,
    ) -> Agent:
        """Create an agent whose body covers ``cells`` (head first).

        Args:
            kind: MOUSE, SNAKE, or MONGOOSE.
            cells: Segment cells, head first; void cells are allowed.
            planning: Whether the agent runs its own planning cycle.

        Returns:
            The registered agent.
        """
        entity_id = self.next_id()
        body = SegmentedBody(
            segments=[Segment(segment_id=self.next_id(), cell=c) for c in cells],
        )
        plan_cooldown = None
        if planning:
            plan_cooldown = Cooldown(self.config.planning_periods[kind])
        agent = Agent(
            entity_id=entity_id,
            kind=kind,
            body=body,
            move_cooldown=Cooldown(self.config.movement_periods[kind]),
            plan_cooldown=plan_cooldown,
        )
        for cell in dict.fromkeys(body.cells):
            self.world.set(cell, agent.occupant)
        self.entities[entity_id] = agent
        logger.debug(
            "agent_spawned",
            entity_id=entity_id,
            kind=kind.value,
            cells=[tuple(c) for c in body.cells],
        )
        return agent

    def despawn(self, entity_id: int) -> Entity:
        """Remove an entity and free every arena cell it held.

        Raises:
            InvariantViolation: If the entity is unknown or one of its
                in-arena cells is not recorded as its own.
        """
        entity = self.entities.pop(entity_id, None)
        if entity is None:
            msg = f"despawning unknown entity {entity_id}"
            raise InvariantViolation(msg)
        for cell in dict.fromkeys(entity.cells):
            if not self.world.in_bounds(cell):
                continue
            occupant = self.world.unset(cell)
            if occupant is not None and occupant.entity_id != entity_id:
                msg = (
                    f"cell {tuple(cell)} of entity {entity_id} was held by "
                    f"entity {occupant.entity_id}"
                )
                raise InvariantViolation(msg)
        return entity

    # -- Events --------------------------------------------------------------

    def emit(self, event: Event) -> None:
        """Queue an event for consumers."""
        self.events.append(event)

    def drain_events(self) -> list[Event]:
        """Return and clear every queued event."""
        drained, self.events = self.events, []
        return drained
