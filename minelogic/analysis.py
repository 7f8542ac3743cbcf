"""Analysis and benchmarking tools for the engine's hints."""

import random
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .cell import UNDETERMINED, Cell
from .config import LEVELS
from .engine import Minesweeper
from .solver import MINE_PERCENTAGE, SAFE_PERCENTAGE

Sample = Tuple[int, bool]


def format_hints(game: Minesweeper, *, show_coords: bool = True) -> str:
    """
    Format the current board and hints as a human-readable string.

    Args:
        game: Game whose state will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where opened cells show their count, flags show 'F', an
        opened mine shows '*', closed cells show their mine percentage and
        undetermined closed cells show '.'.
    """
    w, h = game.width, game.height

    def cell_str(c: Cell) -> str:
        if c.flagged:
            return "F"
        if c.opened:
            return "*" if c.is_mine else str(c.num_mines)
        if c.mine_percentage == UNDETERMINED:
            return "."
        return str(c.mine_percentage)

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{x:3d}" for x in range(w))
        lines.append("    " + header)
        lines.append("    " + "-" * (4 * w - 1))

    for y in range(h):
        row = " ".join(f"{cell_str(game.cell(x, y)):>3}" for x in range(w))
        lines.append(f"{y:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def _pick_guess(game: Minesweeper, candidates: List[Cell], rng: random.Random) -> Cell:
    """Lowest estimate wins; undetermined cells are valued at the global mine density."""
    density = max(game.mines_remaining(), 0) / len(candidates) * 100
    determined = [c for c in candidates if c.mine_percentage != UNDETERMINED]
    undetermined = [c for c in candidates if c.mine_percentage == UNDETERMINED]

    if determined:
        best = min(determined, key=lambda c: c.mine_percentage)
        if best.mine_percentage <= density or not undetermined:
            return best
    return rng.choice(undetermined)


def run_hint_single_test(
    width: int,
    height: int,
    mines_count: int,
    *,
    rng: Optional[random.Random] = None,
    show_board: bool = False,
) -> Dict[str, object]:
    """
    Auto-play one game using nothing but the engine's hints.

    Each turn flags a 100% cell if one exists, otherwise opens a 0% cell,
    otherwise guesses the closed cell with the lowest estimate. Before every
    guess the estimates of all closed cells are recorded together with
    whether the cell really holds a mine.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        rng: Random source for mine placement and tie-breaking guesses.
        show_board: If True, print the final board with hints.

    Returns:
        Per-game metrics: "status" (-1 loss, 1 win), "moves_count",
        "guesses_count", "flags_count", "opened_cells_count",
        "inferred_safe_count", "inferred_mine_count",
        "attempted_subset_count", "unsound_hints_count" and "samples".
    """
    rng = rng if rng is not None else random.Random()
    game = Minesweeper(width, height, mines_count, rng=rng)

    guesses = 0
    flags = 0
    unsound = 0
    samples: List[Sample] = []
    status = 0

    while not game.is_game_over():
        candidates = [c for c in game.board.cells if c.closed and not c.flagged]
        if not candidates:
            raise RuntimeError("Game is still running but every closed cell is flagged.")

        for c in candidates:
            if c.mine_percentage == SAFE_PERCENTAGE and c.is_mine:
                unsound += 1
            elif c.mine_percentage == MINE_PERCENTAGE and not c.is_mine:
                unsound += 1

        mine = next((c for c in candidates if c.mine_percentage == MINE_PERCENTAGE), None)
        if mine is not None:
            status, _ = game.toggle_flag(mine.x, mine.y)
            flags += 1
            continue

        safe = next((c for c in candidates if c.mine_percentage == SAFE_PERCENTAGE), None)
        if safe is not None:
            status, _ = game.open(safe.x, safe.y)
            continue

        samples.extend(
            (c.mine_percentage, c.is_mine)
            for c in candidates
            if c.mine_percentage != UNDETERMINED
        )
        target = _pick_guess(game, candidates, rng)
        guesses += 1
        status, _ = game.open(target.x, target.y)

    if show_board:
        print(format_hints(game, show_coords=True))
        print()
        print(f"Finished with status {status}.")

    return {
        "status": status,
        "moves_count": game.moves_count,
        "guesses_count": guesses,
        "flags_count": flags,
        "opened_cells_count": sum(1 for c in game.board.cells if c.opened),
        "inferred_safe_count": game.solver.inferred_safe_count,
        "inferred_mine_count": game.solver.inferred_mine_count,
        "attempted_subset_count": game.solver.attempted_subset_count,
        "unsound_hints_count": unsound,
        "samples": samples,
    }


def compute_calibration(
    samples: List[Sample], bins: int = 10
) -> Dict[str, np.ndarray]:
    """
    Bin (estimate, is_mine) samples and compare estimates with observed mine rates.

    Args:
        samples: Pairs of (estimated percentage, whether the cell was a mine).
            Undetermined (-1) estimates must be filtered out beforehand.
        bins: Number of equal-width bins over [0, 100].

    Returns:
        Dict with "edges" (bins + 1), and per-bin "count", "mean_estimate"
        and "mine_rate" (both in [0, 1], NaN for empty bins).
    """
    if bins <= 0:
        raise ValueError("bins must be positive.")

    edges = np.linspace(0.0, 100.0, bins + 1)
    if not samples:
        empty = np.full(bins, np.nan)
        return {
            "edges": edges,
            "count": np.zeros(bins, dtype=int),
            "mean_estimate": empty,
            "mine_rate": empty.copy(),
        }

    data = np.asarray(samples, dtype=float)
    estimates = data[:, 0]
    outcomes = data[:, 1]
    if np.any(estimates < 0) or np.any(estimates > 100):
        raise ValueError("Estimates must lie in [0, 100].")

    idx = np.clip(np.digitize(estimates, edges[1:-1]), 0, bins - 1)
    count = np.bincount(idx, minlength=bins)
    est_sum = np.bincount(idx, weights=estimates, minlength=bins)
    mine_sum = np.bincount(idx, weights=outcomes, minlength=bins)

    with np.errstate(invalid="ignore", divide="ignore"):
        mean_estimate = np.where(count > 0, est_sum / count / 100.0, np.nan)
        mine_rate = np.where(count > 0, mine_sum / count, np.nan)

    return {
        "edges": edges,
        "count": count,
        "mean_estimate": mean_estimate,
        "mine_rate": mine_rate,
    }


def run_hint_many_tests(
    width: int,
    height: int,
    mines_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
    bins: int = 10,
) -> Dict[str, object]:
    """
    Run many independent auto-played games and return averaged metrics.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        runs: Number of independent games to run.
        seed: Seed for a shared random source; OS entropy when omitted.
        bins: Number of calibration bins.

    Returns:
        Averages of the per-game metrics (prefixed with "avg_"), plus:
        - win_rate
        - unsound_hints_total
        - calibration (see compute_calibration)
        - calibration_error: count-weighted mean |estimate - mine_rate|
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    sums: Dict[str, float] = defaultdict(float)
    samples: List[Sample] = []
    wins = 0
    unsound_total = 0

    for _ in range(runs):
        payload = run_hint_single_test(width, height, mines_count, rng=rng)
        status = payload["status"]
        if status == 1:
            wins += 1
        elif status != -1:
            raise RuntimeError(f"Unexpected game status: {status}")

        for k, v in payload.items():
            if k in ("status", "samples"):
                continue
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                sums[f"avg_{k}"] += float(v)

        unsound_total += int(payload["unsound_hints_count"])  # type: ignore[arg-type]
        samples.extend(payload["samples"])  # type: ignore[arg-type]

    out: Dict[str, object] = {k: total / runs for k, total in sums.items()}
    out["win_rate"] = wins / runs
    out["unsound_hints_total"] = unsound_total

    calibration = compute_calibration(samples, bins=bins)
    out["calibration"] = calibration

    count = calibration["count"]
    filled = count > 0
    if np.any(filled):
        gaps = np.abs(calibration["mean_estimate"][filled] - calibration["mine_rate"][filled])
        out["calibration_error"] = float(np.average(gaps, weights=count[filled]))
    else:
        out["calibration_error"] = 0.0

    return out


def run_hint_level_analysis(
    runs: int,
    *,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, object]]:
    """
    Run aggregated tests on every preset level and plot summaries.

    Args:
        runs: Number of independent games to run per level.
        seed: Seed for reproducible runs.
        show: If True, display the figures.

    Returns:
        Mapping from level name to the statistics returned by run_hint_many_tests().
    """
    results: Dict[str, Dict[str, object]] = {}
    for level, (w, h, m) in LEVELS.items():
        results[level] = run_hint_many_tests(w, h, m, runs, seed=seed)

    level_names = list(LEVELS.keys())
    x = np.arange(len(level_names))

    # 1) Win rate by level
    win_rates = [float(results[n]["win_rate"]) for n in level_names]  # type: ignore[arg-type]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, win_rates)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Hint-driven win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()

    # 2) Deductions made (by kind)
    safe = [float(results[n]["avg_inferred_safe_count"]) for n in level_names]  # type: ignore[arg-type]
    mines = [float(results[n]["avg_inferred_mine_count"]) for n in level_names]  # type: ignore[arg-type]

    bar_w = 0.35
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, safe, width=bar_w, label="safe")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, mines, width=bar_w, label="mine")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average deductions")  # type: ignore[misc]
    plt.title("Average subset deductions (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    # 3) Calibration curves
    plt.figure()  # type: ignore[misc]
    plt.plot([0.0, 1.0], [0.0, 1.0], linestyle="--", color="gray", label="ideal")  # type: ignore[misc]
    for n in level_names:
        cal = results[n]["calibration"]
        plt.plot(cal["mean_estimate"], cal["mine_rate"], marker="o", label=n)  # type: ignore[index,misc]
    plt.xlabel("Estimated mine probability")  # type: ignore[misc]
    plt.ylabel("Observed mine rate")  # type: ignore[misc]
    plt.title("Calibration of the local-average estimate")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    if show:
        plt.show()  # type: ignore[misc]

    return results
