"""SegmentedBody — a chain of body parts moving follow-the-leader.

The head is ``segments[0]`` and the tail is ``segments[-1]``.  Every
consecutive pair is grid-adjacent, except right after a growth event,
when the new tail sits on the same cell as the segment ahead of it for
one movement tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mongoose.world.cell import Cell
from mongoose.world.errors import InvariantViolation


@dataclass
class Segment:
    """One body part.

    Attributes:
        segment_id: Identifier unique within the simulation.
        cell: Current coordinate (may lie in the void).
    """

    segment_id: int
    cell: Cell


@dataclass
class SegmentedBody:
    """Ordered body parts, head first.

    Attributes:
        segments: Body parts from head to tail.
    """

    segments: list[Segment] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.segments:
            msg = "a body needs at least one segment"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def head(self) -> Cell:
        """Return the head segment's cell."""
        return self.segments[0].cell

    @property
    def tail(self) -> Cell:
        """Return the tail segment's cell."""
        return self.segments[-1].cell

    @property
    def cells(self) -> list[Cell]:
        """Return every segment's cell, head first (duplicates kept)."""
        return [s.cell for s in self.segments]

    @property
    def growth_pending(self) -> bool:
        """Return True while the tail still coincides with the segment ahead."""
        return len(self.segments) > 1 and self.segments[-1].cell == self.segments[-2].cell

    def position_of(self, segment_id: int) -> Cell:
        """Return the cell of the segment with ``segment_id``.

        Raises:
            InvariantViolation: If no segment carries that identifier.
        """
        for segment in self.segments:
            if segment.segment_id == segment_id:
                return segment.cell
        msg = f"segment {segment_id} is not part of this body"
        raise InvariantViolation(msg)

    def shift(self, new_head: Cell) -> Cell | None:
        """Move the head to ``new_head`` and drag the rest along.

        Each segment takes the cell previously held by the one ahead of
        it.  When the last segment was a growth duplicate it lands on the
        cell it already shared, so nothing is vacated.

        Args:
            new_head: Cell the head moves onto.

        Returns:
            The cell vacated by the former tail, or None when the vacate
            step is suppressed by a pending growth.
        """
        gap = new_head
        for segment in self.segments:
            segment.cell, gap = gap, segment.cell
        if self.segments[-1].cell == gap:
            return None
        return gap

    def grow(self, segment_id: int) -> Segment:
        """Append a new segment on the tail's cell."""
        segment = Segment(segment_id=segment_id, cell=self.tail)
        self.segments.append(segment)
        return segment

    def check_links(self) -> None:
        """Verify that consecutive segments are adjacent or coincident.

        Raises:
            InvariantViolation: On any other gap between two segments.
        """
        for front, back in zip(self.segments, self.segments[1:]):
            if front.cell != back.cell and not front.cell.is_adjacent(back.cell):
                msg = (
                    f"segments {front.segment_id} at {tuple(front.cell)} and "
                    f"{back.segment_id} at {tuple(back.cell)} are neither "
                    "adjacent nor at the same place"
                )
                raise InvariantViolation(msg)
