"""Domain events and the scoreboard that tallies them.

Events are queued on the simulation context as they happen and drained
by whoever displays or records them.  The scoreboard is updated in
place by the movement engine at the moment of consumption.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from mongoose.world.cell import Cell, Kind


@dataclass(frozen=True)
class Consumed:
    """``scorer`` stepped onto ``victim`` and ate it."""

    scorer_id: int
    scorer_kind: Kind
    victim_id: int
    victim_kind: Kind
    cell: Cell


@dataclass(frozen=True)
class Grew:
    """An agent appended a segment; ``length`` is its new segment count."""

    entity_id: int
    length: int


@dataclass(frozen=True)
class Blocked:
    """An agent's move into ``cell`` was refused."""

    entity_id: int
    cell: Cell
    occupant_kind: Kind


@dataclass(frozen=True)
class Escaped:
    """A mouse outlived its lifetime and left the arena."""

    entity_id: int


Event = Consumed | Grew | Blocked | Escaped


@dataclass
class Scoreboard:
    """Running tallies for the whole run."""

    berries_eaten_by_mongoose: int = 0
    berries_eaten_by_snakes: int = 0
    berries_eaten_by_mice: int = 0
    snakes_killed: int = 0
    mice_eaten_by_mongoose: int = 0
    mice_eaten_by_snakes: int = 0
    mice_escaped: int = 0

    @property
    def score(self) -> int:
        """The player's score: berries eaten by the mongoose."""
        return self.berries_eaten_by_mongoose

    def increment(self, counter: str) -> None:
        """Add one to the named counter.

        Raises:
            AttributeError: If ``counter`` is not a scoreboard field.
        """
        if counter not in {f.name for f in fields(self)}:
            msg = f"unknown scoreboard counter {counter!r}"
            raise AttributeError(msg)
        setattr(self, counter, getattr(self, counter) + 1)

    def as_dict(self) -> dict[str, int]:
        """Return every counter by name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
