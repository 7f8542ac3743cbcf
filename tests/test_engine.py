import random

import pytest

from minelogic import LEVELS, Minesweeper, new_game, new_game_from_preset
from minelogic.cell import CellState, CellType


def test_new_game_rejects_invalid_configuration():
    with pytest.raises(ValueError):
        new_game(3, 3, 9, random.Random(0))
    with pytest.raises(ValueError):
        new_game(0, 3, 1, random.Random(0))


def test_new_game_from_preset():
    game = new_game_from_preset("expert", rng=random.Random(5))

    assert (game.width, game.height, game.mines_count) == LEVELS["expert"]
    assert sum(1 for c in game.board.cells if c.is_mine) == 99
    assert not game.is_game_over()
    assert game.mines_remaining() == 99


def test_unknown_preset_raises_key_error():
    with pytest.raises(KeyError):
        new_game_from_preset("nightmare")


def test_end_to_end_cascade_wins_small_board():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])

    status, payload = game.open(2, 2)

    assert status == 1
    assert game.won
    assert game.is_game_over()
    assert len(payload["opened_cells"]) == 8
    assert game.cell(0, 0).closed
    assert all(c.opened for c in game.board.cells if not c.is_mine)
    assert [c.num_mines for c in game.board.cells] == [0, 1, 0, 1, 1, 0, 0, 0, 0]


def test_opening_a_mine_loses_without_cascade():
    game = Minesweeper(3, 3, 1, mine_positions=[(1, 1)])

    status, payload = game.open(1, 1)

    assert status == -1
    assert game.is_game_over()
    assert not game.won
    assert payload["all_mines"] == frozenset({(1, 1)})
    assert game.cell(1, 1).opened
    assert sum(1 for c in game.board.cells if c.opened) == 1


def test_actions_after_game_over_are_ignored():
    game = Minesweeper(3, 3, 1, mine_positions=[(1, 1)])
    game.open(1, 1)

    assert game.open(0, 0) == (0, {})
    assert game.toggle_flag(0, 0) == (0, {})
    assert game.cell(0, 0).closed
    assert game.cell(0, 0).cell_type is CellType.REGULAR


def test_out_of_bounds_input_is_ignored():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])

    assert game.open(-1, 0) == (0, {})
    assert game.open(3, 0) == (0, {})
    assert game.toggle_flag(0, 5) == (0, {})
    assert all(c.closed for c in game.board.cells)
    assert game.moves_count == 0


def test_numbered_cell_does_not_cascade():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])

    status, payload = game.open(1, 1)

    assert status == 0
    assert payload["opened_cells"] == [(1, 1, 1)]
    assert not game.is_game_over()


def test_flagging_opened_cell_is_noop():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])
    game.open(1, 1)

    assert game.toggle_flag(1, 1) == (0, {})
    assert game.cell(1, 1).cell_type is CellType.REGULAR
    assert game.mines_remaining() == 1


def test_opening_flagged_cell_is_noop():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])
    game.toggle_flag(2, 2)

    assert game.open(2, 2) == (0, {})
    assert game.cell(2, 2).closed
    assert game.cell(2, 2).cell_type is CellType.FLAGGED


def test_flagging_every_mine_wins():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])

    status, payload = game.toggle_flag(0, 0)

    assert status == 1
    assert payload["mines_remaining"] == 0
    assert game.won
    assert game.is_game_over()


def test_wrong_flag_prevents_win():
    game = Minesweeper(3, 3, 2, mine_positions=[(0, 0), (2, 0)])

    assert game.toggle_flag(1, 2)[0] == 0
    assert game.toggle_flag(0, 0)[0] == 0
    status, payload = game.toggle_flag(2, 0)

    assert status == 0
    assert payload["mines_remaining"] == -1
    assert not game.won
    assert not game.is_game_over()


def test_only_mines_left_closed_wins():
    game = Minesweeper(4, 1, 1, mine_positions=[(0, 0)])

    status, _ = game.open(3, 0)

    assert status == 1
    assert game.won
    assert [c.state for c in game.board.cells] == [
        CellState.CLOSED,
        CellState.OPENED,
        CellState.OPENED,
        CellState.OPENED,
    ]


def test_over_flagging_reports_negative_mines_remaining():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])
    game.toggle_flag(1, 1)
    game.toggle_flag(2, 2)

    assert game.mines_remaining() == -1
    assert not game.is_game_over()


def test_opening_satisfied_number_chords_neighbors():
    game = Minesweeper(5, 3, 2, mine_positions=[(0, 0), (4, 2)])
    game.open(1, 1)
    game.toggle_flag(0, 0)
    assert not game.is_game_over()

    status, payload = game.open(1, 1)

    assert status == 1
    assert (0, 1, 1) in payload["opened_cells"]
    assert all(c.opened for c in game.board.cells if not c.is_mine)
    assert game.cell(0, 0).cell_type is CellType.FLAGGED_MINE
    assert game.cell(4, 2).closed


def test_cascade_stops_at_flags():
    game = Minesweeper(5, 1, 1, mine_positions=[(0, 0)])
    game.toggle_flag(2, 0)

    status, payload = game.open(4, 0)

    assert status == 0
    assert payload["opened_cells"] == [(4, 0, 0), (3, 0, 0)]
    assert game.cell(1, 0).closed


def test_cascade_on_empty_board_terminates():
    game = Minesweeper(100, 100, 0)

    status, payload = game.open(0, 0)

    assert status == 1
    assert len(payload["opened_cells"]) == 100 * 100
    assert all(c.opened for c in game.board.cells)


def test_open_state_is_monotonic_and_mine_count_fixed():
    rng = random.Random(11)
    game = new_game(9, 9, 10, rng)
    mines = game.board.mine_positions()
    opened = set()

    while not game.is_game_over():
        x, y = rng.randrange(9), rng.randrange(9)
        if rng.random() < 0.2:
            game.toggle_flag(x, y)
        else:
            game.open(x, y)

        now_opened = {c.index for c in game.board.cells if c.opened}
        assert opened <= now_opened
        opened = now_opened
        assert game.board.mine_positions() == mines
