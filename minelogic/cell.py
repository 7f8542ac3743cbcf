"""Cell state model: cell categories, open state and per-cell constraints."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Set

UNDETERMINED = -1


class CellType(Enum):
    """What a cell holds, and whether the player has marked it."""

    REGULAR = "regular"
    MINE = "mine"
    FLAGGED = "flagged"
    FLAGGED_MINE = "flagged_mine"


class CellState(Enum):
    CLOSED = "closed"
    OPENED = "opened"


_FLAG_TOGGLE = {
    CellType.REGULAR: CellType.FLAGGED,
    CellType.MINE: CellType.FLAGGED_MINE,
    CellType.FLAGGED: CellType.REGULAR,
    CellType.FLAGGED_MINE: CellType.MINE,
}


@dataclass
class CellConstraint:
    """
    Deduced relation of one opened cell.

    Attributes:
        cells: Flat indices of the closed, unflagged neighbors the count applies to.
        num_mines: Mines still unaccounted for among ``cells``.
    """

    cells: Set[int] = field(default_factory=set)
    num_mines: int = 0

    def clear(self) -> None:
        self.cells.clear()
        self.num_mines = 0


@dataclass(eq=False)
class Cell:
    """
    A single grid position.

    ``mine_percentage`` is -1 while undetermined, otherwise an integer
    percentage in [0, 100].
    """

    x: int
    y: int
    index: int
    cell_type: CellType = CellType.REGULAR
    state: CellState = CellState.CLOSED
    num_mines: int = 0
    mine_percentage: int = UNDETERMINED
    constraint: CellConstraint = field(default_factory=CellConstraint)

    @property
    def is_mine(self) -> bool:
        return self.cell_type in (CellType.MINE, CellType.FLAGGED_MINE)

    @property
    def flagged(self) -> bool:
        return self.cell_type in (CellType.FLAGGED, CellType.FLAGGED_MINE)

    @property
    def closed(self) -> bool:
        return self.state is CellState.CLOSED

    @property
    def opened(self) -> bool:
        return self.state is CellState.OPENED

    def toggle_flag(self) -> None:
        """Cycle the player mark: Regular <-> Flagged, Mine <-> FlaggedMine."""
        self.cell_type = _FLAG_TOGGLE[self.cell_type]
