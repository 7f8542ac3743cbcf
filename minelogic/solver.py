"""Constraint-based deduction over opened numbered cells."""

import logging
from typing import Set, Tuple

from .board import Board
from .cell import UNDETERMINED, Cell

logger = logging.getLogger(__name__)

SAFE_PERCENTAGE = 0
MINE_PERCENTAGE = 100


class ConstraintSolver:
    """
    Rebuilds per-cell constraints and applies subset deduction between neighbors.

    The solver uses two passes per turn:
    1. Rebuild: every opened, unsatisfied cell records its closed unflagged
       neighbors and the number of mines still hidden among them.
    2. Resolve: whenever a neighbor's constraint is a subset of a cell's
       constraint, the cells only the larger one sees are either all safe or
       all mines, depending on the two counts.
    """

    def __init__(self, board: Board) -> None:
        self.board = board

        # Metrics / counters (for analysis)
        self.attempted_subset_count: int = 0
        self.inferred_safe_count: int = 0
        self.inferred_mine_count: int = 0

    def update(self) -> Tuple[Set[int], Set[int]]:
        """Forget last turn's deductions, then rebuild and resolve."""
        self.clear_deductions()
        self.rebuild_constraints()
        return self.resolve_constraints()

    def clear_deductions(self) -> None:
        """Reset every closed, unflagged cell to undetermined."""
        for cell in self.board.cells:
            if cell.closed and not cell.flagged:
                cell.mine_percentage = UNDETERMINED

    # -------------------------------------------------------------------------
    # Step 1: rebuild
    # -------------------------------------------------------------------------

    def rebuild_constraints(self) -> None:
        board = self.board
        for inbound in board.constrained_by:
            inbound.clear()

        for cell in board.cells:
            self._rebuild_cell(cell)

    def _rebuild_cell(self, cell: Cell) -> None:
        board = self.board
        constraint = cell.constraint
        constraint.clear()

        # Already satisfied or not even opened yet: asserts nothing.
        remaining = board.mines_remaining_around(cell)
        if cell.closed or cell.flagged or remaining == 0:
            return

        for n in board.neighbors(cell):
            if n.closed and not n.flagged:
                constraint.cells.add(n.index)
                board.constrained_by[n.index].add(cell.index)

        constraint.num_mines = remaining

    # -------------------------------------------------------------------------
    # Step 2: resolve
    # -------------------------------------------------------------------------

    def resolve_constraints(self) -> Tuple[Set[int], Set[int]]:
        """
        Apply subset deduction for every opened cell with a non-empty constraint.

        Masters are visited in flat-index order and, within one master, mine
        marks are written after safe marks, so conflicting deductions end with
        whichever write came last.

        Returns:
            (safe, mines): flat indices marked 0% and 100% during this pass.
        """
        all_safe: Set[int] = set()
        all_mines: Set[int] = set()

        for master in self.board.cells:
            if not master.opened or not master.constraint.cells:
                continue

            safe, mines = self._resolve_master(master)
            for i in safe:
                self.board.cells[i].mine_percentage = SAFE_PERCENTAGE
            for i in mines:
                self.board.cells[i].mine_percentage = MINE_PERCENTAGE

            all_safe |= safe
            all_mines |= mines

        self.inferred_safe_count += len(all_safe)
        self.inferred_mine_count += len(all_mines)
        if all_safe or all_mines:
            logger.debug(
                "Subset deduction: %d safe, %d mines", len(all_safe), len(all_mines)
            )
        return all_safe, all_mines

    def _resolve_master(self, master: Cell) -> Tuple[Set[int], Set[int]]:
        safe: Set[int] = set()
        mines: Set[int] = set()
        master_set = master.constraint.cells
        master_mines = master.constraint.num_mines

        for candidate in self.board.neighbors(master):
            current_set = candidate.constraint.cells
            if not current_set:
                continue

            self.attempted_subset_count += 1
            if not current_set <= master_set:
                continue

            difference = master_set - current_set
            candidate_mines = candidate.constraint.num_mines

            # The subset accounts for every mine the master still needs.
            if candidate_mines == master_mines:
                safe |= difference

            # The shortfall can only be made up by every cell of the difference.
            elif (
                candidate_mines < master_mines
                and len(difference) + candidate_mines == master_mines
            ):
                mines |= difference

        return safe, mines
