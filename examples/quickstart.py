"""
Quickstart example for the minelogic engine.

This script demonstrates basic usage of the engine and its hints.
"""

import random

from minelogic import (
    configure_logging,
    format_hints,
    new_game_from_preset,
    run_hint_many_tests,
)


def main():
    configure_logging()

    print("=" * 60)
    print("minelogic - Quickstart Example")
    print("=" * 60)

    # Example 1: Open a cell and look at the hints
    print("\n1. Opening the centre of a Beginner game (8x8, 10 mines)...")
    print("-" * 60)

    game = new_game_from_preset("beginner", rng=random.Random(7))
    status, payload = game.open(game.width // 2, game.height // 2)

    print(f"Status: {status}")
    print(f"Cells opened: {len(payload.get('opened_cells', []))}")
    print(f"Mines remaining: {game.mines_remaining()}")
    print()
    print(format_hints(game))

    # Example 2: Follow the hints for the rest of the game
    print("\n2. Following hints until the game ends...")
    print("-" * 60)

    while not game.is_game_over():
        closed = [c for c in game.board.cells if c.closed and not c.flagged]
        mine = next((c for c in closed if c.mine_percentage == 100), None)
        if mine is not None:
            game.toggle_flag(mine.x, mine.y)
            continue
        known = [c for c in closed if c.mine_percentage >= 0]
        target = min(known, key=lambda c: c.mine_percentage) if known else closed[0]
        game.open(target.x, target.y)

    print("WON" if game.won else "LOST")
    print(format_hints(game))

    # Example 3: Run multiple games for hint statistics
    print("\n3. Running 50 Beginner games for statistics...")
    print("-" * 60)

    results = run_hint_many_tests(8, 8, 10, runs=50, seed=1)

    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average moves per game: {results['avg_moves_count']:.1f}")
    print(f"Average guesses per game: {results['avg_guesses_count']:.1f}")
    print(f"Calibration error: {results['calibration_error']:.3f}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
