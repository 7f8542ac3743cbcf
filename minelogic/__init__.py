"""
minelogic

Logic engine for a grid-based mine-detection puzzle:
- Board state: mine placement, adjacency, open/flag transitions
- Reveal cascade: flood-opening of zero-risk neighborhoods
- Subset deduction: provably safe or mined cells from neighboring constraints
- Probability estimate: local-average mine percentage for everything else
"""

from .board import Board
from .cell import UNDETERMINED, Cell, CellConstraint, CellState, CellType
from .config import DEFAULT_LEVEL, LEVELS, configure_logging
from .engine import Minesweeper, new_game, new_game_from_preset
from .probability import ProbabilityEstimator
from .solver import ConstraintSolver
from .analysis import (
    compute_calibration,
    format_hints,
    run_hint_level_analysis,
    run_hint_many_tests,
    run_hint_single_test,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Board",
    "Cell",
    "CellConstraint",
    "CellState",
    "CellType",
    "Minesweeper",
    "ConstraintSolver",
    "ProbabilityEstimator",
    "UNDETERMINED",
    # Game API
    "new_game",
    "new_game_from_preset",
    # Configuration
    "LEVELS",
    "DEFAULT_LEVEL",
    "configure_logging",
    # Analysis functions
    "format_hints",
    "compute_calibration",
    "run_hint_single_test",
    "run_hint_many_tests",
    "run_hint_level_analysis",
]
