"""PathPlanner — bounded simple-path search over free cells.

The planner does not look for the shortest route.  It runs a
depth-first search and returns the first simple path that reaches the
goal within ``max_length`` steps.  At each cell, neighbours are tried
nearest-to-goal first, ties broken by ``Direction`` order, so the result
is fully determined by the occupancy grid.  Branches that can no longer
reach the goal in the steps left are cut, which keeps the search small
without changing which path is found first.

Each step follows the grid's free-space links (``GridWorld.open_neighbours``).
The start and goal cells are treated as passable whatever holds them:
the start is the asking agent's own head and the goal may be the very
thing it is chasing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mongoose.world.cell import Cell
    from mongoose.world.grid import GridWorld

DEFAULT_MAX_LENGTH = 8


def manhattan(a: Cell, b: Cell) -> int:
    """Return the number of cardinal steps between ``a`` and ``b``."""
    return abs(a.x - b.x) + abs(a.y - b.y)


@dataclass
class PathPlanner:
    """Finds length-bounded, collision-free routes.

    Attributes:
        max_length: Longest route returned, counted in steps.
    """

    max_length: int = DEFAULT_MAX_LENGTH

    def plan(self, world: GridWorld, start: Cell, goal: Cell) -> list[Cell] | None:
        """Return a route from ``start`` to ``goal``.

        Args:
            world: Occupancy grid to route through.
            start: The asking agent's head (may lie in the void).
            goal: Destination cell inside the arena.

        Returns:
            Cells to visit in order, excluding ``start`` and ending at
            ``goal``, at most ``max_length`` long; or None when no such
            route exists.
        """
        if start == goal or not world.in_bounds(goal):
            return None
        if manhattan(start, goal) > self.max_length:
            return None
        path: list[Cell] = []
        if self._extend(world, start, goal, path, {start}):
            return path
        return None

    def _extend(
        self,
        world: GridWorld,
        cell: Cell,
        goal: Cell,
        path: list[Cell],
        visited: set[Cell],
    ) -> bool:
        """Depth-first step; leaves the found route in ``path``."""
        steps_left = self.max_length - len(path) - 1
        candidates = world.open_neighbours(cell)
        if cell.is_adjacent(goal) and goal not in candidates:
            candidates.append(goal)
        for nxt in sorted(candidates, key=lambda n: manhattan(n, goal)):
            if nxt in visited or manhattan(nxt, goal) > steps_left:
                continue
            path.append(nxt)
            if nxt == goal:
                return True
            visited.add(nxt)
            if self._extend(world, nxt, goal, path, visited):
                return True
            visited.remove(nxt)
            path.pop()
        return False
