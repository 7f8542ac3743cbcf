"""Board model: owns every cell, the adjacency cache and mine placement."""

import logging
import random
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .cell import Cell, CellType
from .utils import get_neighborhoods

logger = logging.getLogger(__name__)


class Board:
    """Fixed-size grid of cells addressed by (x, y) or flat index ``y * width + x``."""

    def __init__(self, width: int, height: int, mines_count: int) -> None:
        """
        Create an empty board with every cell closed and regular.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mines_count: Total number of mines, must satisfy 0 <= mines_count < width * height.

        Raises:
            ValueError: If the dimensions or the mine count are invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")
        if mines_count >= width * height:
            raise ValueError(
                f"mines_count ({mines_count}) must be smaller than the number "
                f"of cells ({width * height})."
            )

        self.width: int = width
        self.height: int = height
        self.mines_count: int = mines_count

        self.cells: List[Cell] = [
            Cell(x, y, y * width + x) for y in range(height) for x in range(width)
        ]
        self.mines_placed: bool = False
        self.game_over: bool = False
        self.won: bool = False

        # constrained_by[i] -> indices of cells whose constraint currently contains cell i
        self.constrained_by: List[Set[int]] = [set() for _ in self.cells]

        self._neighborhoods: Tuple[Tuple[int, ...], ...] = get_neighborhoods(
            width, height
        )

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the board.")
        return self.cells[y * self.width + x]

    def neighbors(self, cell: Cell) -> List[Cell]:
        """Return the cells in the 8-neighborhood of ``cell``."""
        return [self.cells[i] for i in self._neighborhoods[cell.index]]

    def neighbor_indices(self, index: int) -> Tuple[int, ...]:
        return self._neighborhoods[index]

    # -------------------------------------------------------------------------
    # Mine placement
    # -------------------------------------------------------------------------

    def place_mines(self, rng: Optional[random.Random] = None) -> None:
        """
        Scatter ``mines_count`` mines uniformly, redrawing any position already taken.

        Args:
            rng: Random source; a fresh ``random.Random()`` when omitted.

        Raises:
            ValueError: If mines were already placed on this board.
        """
        if self.mines_placed:
            raise ValueError("Mines have already been placed on this board.")

        rng = rng if rng is not None else random.Random()
        placed = 0
        while placed < self.mines_count:
            x = rng.randrange(self.width)
            y = rng.randrange(self.height)
            cell = self.cells[y * self.width + x]
            if not cell.is_mine:
                cell.cell_type = CellType.MINE
                placed += 1

        self._finish_placement()

    def place_mines_at(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Place mines at explicit coordinates.

        Raises:
            ValueError: If mines were already placed, a position repeats or is
                out of bounds, or the count differs from ``mines_count``.
        """
        if self.mines_placed:
            raise ValueError("Mines have already been placed on this board.")

        unique = set(positions)
        if len(unique) != self.mines_count:
            raise ValueError(
                f"Expected {self.mines_count} distinct mine positions, got {len(unique)}."
            )
        for x, y in unique:
            if not self.in_bounds(x, y):
                raise ValueError(f"Mine position ({x}, {y}) is outside the board.")
            self.cells[y * self.width + x].cell_type = CellType.MINE

        self._finish_placement()

    def _finish_placement(self) -> None:
        """Populate every cell (mines included) with its adjacent mine count."""
        for cell in self.cells:
            count = sum(1 for n in self.neighbors(cell) if n.is_mine)
            if count > 8:
                raise RuntimeError(
                    f"Cell ({cell.x}, {cell.y}) reports {count} adjacent mines."
                )
            cell.num_mines = count

        self.mines_placed = True
        logger.debug(
            "Placed %d mines on a %dx%d board", self.mines_count, self.width, self.height
        )

    # -------------------------------------------------------------------------
    # Derived counts
    # -------------------------------------------------------------------------

    def flagged_neighbors_count(self, cell: Cell) -> int:
        return sum(1 for n in self.neighbors(cell) if n.flagged)

    def mines_remaining_around(self, cell: Cell) -> int:
        """
        Mines around an opened numbered cell that have not been flagged yet.

        Returns 0 for closed cells and cells without adjacent mines. The value
        goes negative when the player places more flags than the count.
        """
        if cell.opened and cell.num_mines > 0:
            return cell.num_mines - self.flagged_neighbors_count(cell)
        return 0

    def flags_placed(self) -> int:
        return sum(1 for c in self.cells if c.flagged)

    def mines_remaining(self) -> int:
        """Total mines minus flags placed; negative when over-flagged."""
        return self.mines_count - self.flags_placed()

    def closed_count(self) -> int:
        return sum(1 for c in self.cells if c.closed)

    def mine_positions(self) -> Set[Tuple[int, int]]:
        return {(c.x, c.y) for c in self.cells if c.is_mine}
