"""GridWorld — occupancy grid for the arena.

The GridWorld records which entity holds each cell and answers the
connectivity questions used by path planning.  Connectivity is derived
from occupancy on demand: two grid-adjacent cells are linked iff both
are free, so there is no separate edge set to keep in step.

Coordinates outside ``[0, width) x [0, height)`` are the *void*.  The
void is never stored: it always reads as free, it has no links, and
setting or clearing a void cell is a silent no-op.  Freshly spawned
snakes rely on this while their bodies are still off-screen.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from mongoose.world.cell import Cell, Occupant
from mongoose.world.errors import InvariantViolation

if TYPE_CHECKING:
    from numpy.random import Generator

logger = structlog.get_logger()


@dataclass
class GridWorld:
    """A 2D occupancy grid.

    Attributes:
        width: Number of columns in the arena.
        height: Number of rows in the arena.
        occupants: 2D list of occupant tags indexed as ``occupants[y][x]``.
    """

    width: int
    height: int
    occupants: list[list[Occupant | None]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise an empty arena."""
        if self.width <= 0 or self.height <= 0:
            msg = f"arena must be non-empty, got {self.width}x{self.height}"
            raise ValueError(msg)
        self.occupants = [[None] * self.width for _ in range(self.height)]

    def in_bounds(self, cell: Cell) -> bool:
        """Return True if ``cell`` lies inside the arena."""
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    # -- Mutation ------------------------------------------------------------

    def set(self, cell: Cell, occupant: Occupant) -> None:
        """Record ``occupant`` on a free cell, cutting its links.

        Args:
            cell: Target coordinate.
            occupant: Tag to record.

        Raises:
            InvariantViolation: If the cell is already occupied.
        """
        if not self.in_bounds(cell):
            return
        current = self.occupants[cell.y][cell.x]
        if current is not None:
            logger.error(
                "set_occupied_cell",
                cell=tuple(cell),
                current=current.kind.value,
                incoming=occupant.kind.value,
            )
            msg = f"setting arena location {tuple(cell)} that was already set"
            raise InvariantViolation(msg)
        self.occupants[cell.y][cell.x] = occupant

    def unset(self, cell: Cell) -> Occupant | None:
        """Clear an occupied cell and return its former occupant.

        The cell regains a link to every free neighbour.  Void cells
        return None.

        Raises:
            InvariantViolation: If an in-arena cell is already free.
        """
        if not self.in_bounds(cell):
            return None
        current = self.occupants[cell.y][cell.x]
        if current is None:
            logger.error("unset_free_cell", cell=tuple(cell))
            msg = f"unsetting arena location {tuple(cell)} that was already unset"
            raise InvariantViolation(msg)
        self.occupants[cell.y][cell.x] = None
        return current

    def unset_if_present(self, cell: Cell) -> Occupant | None:
        """Clear ``cell`` if something holds it; otherwise do nothing."""
        if self.occupant_at(cell) is None:
            return None
        return self.unset(cell)

    # -- Queries -------------------------------------------------------------

    def occupant_at(self, cell: Cell) -> Occupant | None:
        """Return the occupant tag on ``cell`` (None when free or void)."""
        if not self.in_bounds(cell):
            return None
        return self.occupants[cell.y][cell.x]

    def is_occupied(self, cell: Cell) -> bool:
        """Return True if an in-arena cell holds an occupant."""
        return self.occupant_at(cell) is not None

    def has_edge(self, a: Cell, b: Cell) -> bool:
        """Return True if ``a`` and ``b`` are linked in the free-space graph.

        Two cells are linked iff both lie in the arena, are grid-adjacent,
        and are both unoccupied.
        """
        return (
            a.is_adjacent(b)
            and self.in_bounds(a)
            and self.in_bounds(b)
            and not self.is_occupied(a)
            and not self.is_occupied(b)
        )

    def open_neighbours(self, cell: Cell) -> list[Cell]:
        """Return in-arena, unoccupied neighbours in ``Direction`` order."""
        return [
            n
            for n in cell.neighbours()
            if self.in_bounds(n) and not self.is_occupied(n)
        ]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every in-arena cell, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield Cell(x, y)

    def occupied_cells(self) -> dict[Cell, Occupant]:
        """Return a mapping of every occupied cell to its occupant."""
        return {
            Cell(x, y): occ
            for y, row in enumerate(self.occupants)
            for x, occ in enumerate(row)
            if occ is not None
        }

    def random_free_cell(
        self,
        rng: Generator,
        *,
        attempts: int = 10,
    ) -> Cell | None:
        """Draw random in-arena cells until a free one turns up.

        Args:
            rng: Seeded random generator.
            attempts: How many draws to try before giving up.

        Returns:
            A free cell, or None if every draw landed on an occupied one.
        """
        for _ in range(attempts):
            cell = Cell(
                int(rng.integers(0, self.width)),
                int(rng.integers(0, self.height)),
            )
            if not self.is_occupied(cell):
                return cell
        return None
