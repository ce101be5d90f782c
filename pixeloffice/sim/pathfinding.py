"""Grid-based pathfinding (BFS, 4-connected)."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from pixeloffice.sim.contracts import Cell, TileKind

# Neighbour order is part of the contract: equal-length routes are resolved
# by trying up, down, left, right in that order.
NEIGHBOR_OFFSETS: tuple[Cell, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass(frozen=True)
class TileGrid:
    cols: int
    rows: int
    tiles: tuple[tuple[TileKind, ...], ...]

    @classmethod
    def open_room(cls, cols: int, rows: int, kind: TileKind = TileKind.TILE_FLOOR) -> "TileGrid":
        return cls(cols=cols, rows=rows, tiles=tuple((kind,) * cols for _ in range(rows)))

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.cols and 0 <= row < self.rows

    def tile_at(self, col: int, row: int) -> TileKind | None:
        if not self.in_bounds(col, row):
            return None
        return self.tiles[row][col]

    def is_walkable(self, col: int, row: int, blocked: set[Cell]) -> bool:
        if not self.in_bounds(col, row):
            return False
        if self.tiles[row][col] == TileKind.WALL:
            return False
        if (col, row) in blocked:
            return False
        return True

    def walkable_tiles(self, blocked: set[Cell]) -> list[Cell]:
        return [
            (col, row)
            for row in range(self.rows)
            for col in range(self.cols)
            if self.is_walkable(col, row, blocked)
        ]


def find_path(start: Cell, goal: Cell, grid: TileGrid, blocked: set[Cell]) -> list[Cell]:
    """Return the cells leading from ``start`` (exclusive) to ``goal`` (inclusive).

    An empty list means there is nothing to walk: the goal is the start, the
    goal is not walkable, or it cannot be reached.
    """
    if start == goal:
        return []
    if not grid.is_walkable(goal[0], goal[1], blocked):
        return []

    queue: deque[Cell] = deque([start])
    came_from: dict[Cell, Cell | None] = {start: None}

    while queue:
        current = queue.popleft()
        if current == goal:
            break
        col, row = current
        for dc, dr in NEIGHBOR_OFFSETS:
            neighbor = (col + dc, row + dr)
            if neighbor in came_from:
                continue
            if not grid.is_walkable(neighbor[0], neighbor[1], blocked):
                continue
            came_from[neighbor] = current
            queue.append(neighbor)

    if goal not in came_from:
        return []

    path: list[Cell] = []
    current: Cell | None = goal
    while current is not None and current != start:
        path.append(current)
        current = came_from[current]
    path.reverse()
    return path
