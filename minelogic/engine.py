"""Game session: reveal cascade, flag toggling, hint updates and win detection."""

import logging
import random
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .board import Board
from .cell import Cell, CellState, CellType
from .config import get_level
from .probability import ProbabilityEstimator
from .solver import ConstraintSolver

logger = logging.getLogger(__name__)


class Minesweeper:
    """One game: a board with mines placed, plus the solver and estimator bound to it."""

    def __init__(
        self,
        width: int,
        height: int,
        mines_count: int,
        rng: Optional[random.Random] = None,
        mine_positions: Optional[List[Tuple[int, int]]] = None,
    ) -> None:
        """
        Initialize a game and place its mines.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mines_count: Total number of mines, must be smaller than width * height.
            rng: Random source for mine placement.
            mine_positions: Explicit mine coordinates; bypasses random placement.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.board: Board = Board(width, height, mines_count)
        if mine_positions is not None:
            self.board.place_mines_at(mine_positions)
        else:
            self.board.place_mines(rng)

        self.solver: ConstraintSolver = ConstraintSolver(self.board)
        self.estimator: ProbabilityEstimator = ProbabilityEstimator(self.board)

        self.moves_count: int = 0
        self.refresh()

        logger.info(
            "New game: %dx%d with %d mines", width, height, mines_count
        )

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    @property
    def mines_count(self) -> int:
        return self.board.mines_count

    @property
    def won(self) -> bool:
        return self.board.won

    def is_game_over(self) -> bool:
        return self.board.game_over

    def mines_remaining(self) -> int:
        """Total mines minus flags placed; may be negative."""
        return self.board.mines_remaining()

    def cell(self, x: int, y: int) -> Cell:
        return self.board.cell(x, y)

    # -------------------------------------------------------------------------
    # Player actions
    # -------------------------------------------------------------------------

    def open(self, x: int, y: int) -> Tuple[int, Dict[str, Any]]:
        """
        Open a cell, cascading over zero-risk neighborhoods.

        Args:
            x: X-coordinate of the cell to open.
            y: Y-coordinate of the cell to open.

        Returns:
            Tuple of (status, payload) where status is:
                - -1: Mine opened (loss)
                - 0: Non-terminal open (or no-op)
                - 1: Win

            Payload contains "opened_cells": List[(x, y, num_mines)] for every
            cell this action opened; it is empty for no-ops.
        """
        if self.board.game_over or not self.board.in_bounds(x, y):
            logger.debug("Ignoring open at (%d, %d)", x, y)
            return 0, {}

        cell = self.board.cell(x, y)
        if cell.flagged:
            return 0, {}

        self.moves_count += 1

        if cell.cell_type is CellType.MINE:
            cell.state = CellState.OPENED
            self.board.game_over = True
            self.board.won = False
            logger.info("Mine opened at (%d, %d); game lost", x, y)
            self.refresh()
            return -1, {
                "opened_cells": [(x, y, cell.num_mines)],
                "all_mines": frozenset(self.board.mine_positions()),
            }

        opened = self._cascade(cell)
        return self._after_action({"opened_cells": opened})

    def toggle_flag(self, x: int, y: int) -> Tuple[int, Dict[str, Any]]:
        """
        Toggle the flag on a closed cell.

        Returns:
            Tuple of (status, payload) with the same status codes as ``open``;
            payload holds "mines_remaining".
        """
        if self.board.game_over or not self.board.in_bounds(x, y):
            logger.debug("Ignoring flag at (%d, %d)", x, y)
            return 0, {}

        cell = self.board.cell(x, y)
        if not cell.closed:
            return 0, {}

        self.moves_count += 1
        cell.toggle_flag()

        return self._after_action({"mines_remaining": self.mines_remaining()})

    def refresh(self) -> None:
        """Rebuild constraints, run deduction and re-estimate every cell."""
        self.solver.update()
        self.estimator.update()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _cascade(self, start: Cell) -> List[Tuple[int, int, int]]:
        """
        Open ``start`` and flood outwards from every cell that has no mines
        left to find around it.

        Cells reached by the flood are only opened when they are regular and
        closed, so flags and mines stop it.
        """
        board = self.board
        opened: List[Tuple[int, int, int]] = []
        frontier: Deque[Cell] = deque([start])
        first = True

        while frontier:
            cell = frontier.popleft()
            if first:
                first = False
            elif cell.cell_type is not CellType.REGULAR or not cell.closed:
                continue

            if cell.closed:
                cell.state = CellState.OPENED
                opened.append((cell.x, cell.y, cell.num_mines))

            if cell.num_mines == 0 or board.mines_remaining_around(cell) == 0:
                for n in board.neighbors(cell):
                    if n.cell_type is CellType.REGULAR and n.closed:
                        frontier.append(n)

        return opened

    def _after_action(self, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        self.refresh()
        if self.check_for_win():
            return 1, payload
        return 0, payload

    def check_for_win(self) -> bool:
        """
        Evaluate the win condition and end the game when it holds.

        The game is won when every mine is flagged with no wrong flags, or
        when the only closed cells left are the mines.
        """
        board = self.board
        correct = 0
        incorrect = 0
        remaining = 0

        for c in board.cells:
            if c.cell_type is CellType.FLAGGED:
                incorrect += 1
            elif c.cell_type is CellType.FLAGGED_MINE:
                correct += 1
            if c.closed:
                remaining += 1

        flagged_all_mines = correct == board.mines_count and incorrect == 0
        only_mines_left = remaining == board.mines_count
        if flagged_all_mines or only_mines_left:
            board.game_over = True
            board.won = True
            logger.info("Game won after %d moves", self.moves_count)
            return True
        return False


def new_game(
    width: int,
    height: int,
    mines_count: int,
    rng: Optional[random.Random] = None,
) -> Minesweeper:
    """Start a new game with randomly placed mines."""
    return Minesweeper(width, height, mines_count, rng=rng)


def new_game_from_preset(
    level: str, rng: Optional[random.Random] = None
) -> Minesweeper:
    """Start a new game using one of the ``config.LEVELS`` presets."""
    width, height, mines_count = get_level(level)
    return Minesweeper(width, height, mines_count, rng=rng)
