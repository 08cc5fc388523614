"""Board geometry for the 5x5 Bagh-Chal graph: cells, sides and adjacency.

Cells are indexed ``row * 5 + col``. Every intersection is joined to its
orthogonal neighbours; intersections with even ``row + col`` parity also carry
the four diagonal lines (the Alquerque pattern).
"""

from enum import Enum, IntEnum
from typing import FrozenSet, Optional, Tuple

SIZE = 5
NUM_CELLS = SIZE * SIZE
CENTER = 12

START_TIGER_CELLS = (0, 4, 20, 24)
TOTAL_GOATS = 20
GOATS_TO_WIN = 5  # captures needed for a tiger victory

ORTHOGONAL_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


class Cell(IntEnum):
    EMPTY = 0
    GOAT = 1
    TIGER = 2


class Side(str, Enum):
    GOAT = "goat"
    TIGER = "tiger"

    @property
    def opponent(self) -> "Side":
        return Side.TIGER if self is Side.GOAT else Side.GOAT

    @property
    def piece(self) -> Cell:
        return Cell.GOAT if self is Side.GOAT else Cell.TIGER


def index(row: int, col: int) -> int:
    return row * SIZE + col


def row_col(cell: int) -> Tuple[int, int]:
    return divmod(cell, SIZE)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


def center_distance(cell: int) -> int:
    """Manhattan distance from ``cell`` to the centre intersection."""
    r, c = row_col(cell)
    return abs(r - 2) + abs(c - 2)


class BoardTopology:
    """Immutable adjacency graph over the 25 intersections.

    Built eagerly on construction; ``adjacency`` keeps the order orthogonal
    neighbours first, then diagonals, so move generation is deterministic.
    """

    def __init__(self) -> None:
        neighbours = []
        for cell in range(NUM_CELLS):
            r, c = row_col(cell)
            dirs = ORTHOGONAL_DIRS
            if (r + c) % 2 == 0:
                dirs = ORTHOGONAL_DIRS + DIAGONAL_DIRS
            neighbours.append(tuple(index(r + dr, c + dc) for dr, dc in dirs if in_bounds(r + dr, c + dc)))
        self._adjacency: Tuple[Tuple[int, ...], ...] = tuple(neighbours)
        self._adjacent_sets: Tuple[FrozenSet[int], ...] = tuple(frozenset(n) for n in neighbours)

    def adjacency(self, cell: int) -> Tuple[int, ...]:
        return self._adjacency[cell]

    def is_adjacent(self, a: int, b: int) -> bool:
        if not (0 <= a < NUM_CELLS and 0 <= b < NUM_CELLS):
            return False
        return b in self._adjacent_sets[a]

    def landing_from_jump(self, src: int, over: int) -> Optional[int]:
        """Landing cell for a jump from ``src`` over ``over``, or None.

        The displacement ``src -> over`` is doubled. The jump is rejected when
        the landing falls off the grid, or when either leg is not a real edge of
        the graph (e.g. a diagonal through an odd-parity intersection).
        """
        if not self.is_adjacent(src, over):
            return None
        sr, sc = row_col(src)
        orow, ocol = row_col(over)
        lr, lc = 2 * orow - sr, 2 * ocol - sc
        if not in_bounds(lr, lc):
            return None
        landing = index(lr, lc)
        if landing not in self._adjacent_sets[over]:
            return None
        return landing


TOPOLOGY = BoardTopology()
