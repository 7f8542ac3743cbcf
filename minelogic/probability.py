"""Heuristic mine-percentage estimation from local neighbor densities."""

from .board import Board
from .cell import UNDETERMINED, Cell
from .solver import MINE_PERCENTAGE, SAFE_PERCENTAGE


class ProbabilityEstimator:
    """
    Approximate mine likelihood for closed cells the solver did not resolve.

    Each opened numbered neighbor contributes ``remaining / available * 100``
    and the estimate is the rounded mean of these contributions. This is a
    local average, not a joint probability over the frontier.
    """

    def __init__(self, board: Board) -> None:
        self.board = board

    def update(self) -> None:
        for cell in self.board.cells:
            cell.mine_percentage = self.estimate(cell)

    def estimate(self, cell: Cell) -> int:
        """Return the estimated mine percentage for ``cell`` (-1 when undetermined)."""
        # Flagged cells are treated as mines.
        if cell.flagged:
            return MINE_PERCENTAGE

        if cell.opened:
            return SAFE_PERCENTAGE

        # Hard-set by a deduction: keep it.
        if cell.mine_percentage in (SAFE_PERCENTAGE, MINE_PERCENTAGE):
            return cell.mine_percentage

        board = self.board
        percent = 0.0
        checked = 0

        for nc in board.neighbors(cell):
            surrounding_mines = nc.num_mines
            if surrounding_mines < 1 or nc.closed:
                continue

            around = board.neighbors(nc)
            avail = sum(1 for n in around if n.closed and not n.flagged)
            flagged = sum(1 for n in around if n.flagged)
            left_to_find = surrounding_mines - flagged

            if flagged == surrounding_mines:
                return SAFE_PERCENTAGE

            if surrounding_mines == avail + flagged:
                return MINE_PERCENTAGE

            if avail == 0:
                raise RuntimeError(
                    f"Cell ({nc.x}, {nc.y}) has no closed neighbors but borders "
                    f"closed cell ({cell.x}, {cell.y})."
                )

            checked += 1
            percent += left_to_find / avail * 100

        if checked == 0:
            return UNDETERMINED

        # Over-flagged neighbors contribute negative shares.
        return min(MINE_PERCENTAGE, max(SAFE_PERCENTAGE, int(round(percent / checked))))
