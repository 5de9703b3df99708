"""Cell — coordinates, occupant kinds, and occupant tags.

A cell is a plain integer coordinate.  What sits on it is described by
an ``Occupant`` tag that names the owning entity and its kind, so the
grid never needs to know anything about bodies or behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Cardinal step directions, in the fixed order used for traversal."""

    LEFT = (-1, 0)
    UP = (0, 1)
    RIGHT = (1, 0)
    DOWN = (0, -1)


class Cell(NamedTuple):
    """An integer grid coordinate ``(x, y)``."""

    x: int
    y: int

    def step(self, direction: Direction) -> Cell:
        """Return the neighbouring cell one step in ``direction``."""
        dx, dy = direction.value
        return Cell(self.x + dx, self.y + dy)

    def neighbours(self) -> list[Cell]:
        """Return the four cardinal neighbours in ``Direction`` order."""
        return [self.step(d) for d in Direction]

    def is_adjacent(self, other: Cell) -> bool:
        """Return True if ``other`` is exactly one cardinal step away."""
        return abs(self.x - other.x) + abs(self.y - other.y) == 1


class Kind(Enum):
    """Occupant kinds known to the arena."""

    BERRY = "berry"
    MOUSE = "mouse"
    SNAKE = "snake"
    MONGOOSE = "mongoose"


@dataclass(frozen=True)
class Occupant:
    """Tag recorded on an occupied cell.

    Attributes:
        entity_id: Identifier of the owning entity.
        kind: What sort of entity holds the cell.
    """

    entity_id: int
    kind: Kind
