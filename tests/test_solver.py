from minelogic import Minesweeper
from minelogic.cell import UNDETERMINED, CellState


def _open_top_row(game):
    for x in range(game.width):
        game.cell(x, 0).state = CellState.OPENED


def test_rebuild_records_closed_unflagged_neighbors():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 1)])
    _open_top_row(game)
    game.solver.rebuild_constraints()

    left, middle, right = (game.cell(x, 0) for x in range(3))
    assert left.constraint.cells == {3, 4}
    assert left.constraint.num_mines == 1
    assert middle.constraint.cells == {3, 4, 5}
    assert middle.constraint.num_mines == 1
    # No mines around it: asserts nothing.
    assert right.constraint.cells == set()

    assert game.board.constrained_by[3] == {0, 1}
    assert game.board.constrained_by[5] == {1}
    assert game.board.constrained_by[8] == set()


def test_closed_cells_carry_no_constraint():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])
    game.solver.rebuild_constraints()

    assert all(not c.constraint.cells for c in game.board.cells)
    assert all(not inbound for inbound in game.board.constrained_by)


def test_subset_with_equal_counts_marks_difference_safe():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 1)])
    _open_top_row(game)
    game.solver.rebuild_constraints()

    safe, mines = game.solver.resolve_constraints()

    assert safe == {5}
    assert mines == set()
    assert game.cell(2, 1).mine_percentage == 0


def test_subset_with_shortfall_marks_difference_mined():
    game = Minesweeper(3, 3, 2, mine_positions=[(0, 1), (2, 1)])
    _open_top_row(game)

    safe, mines = game.solver.update()

    assert safe == set()
    assert mines == {3, 5}
    assert game.cell(0, 1).mine_percentage == 100
    assert game.cell(2, 1).mine_percentage == 100


def test_identical_constraints_deduce_nothing():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 0)])
    for cell in game.board.cells:
        if not cell.is_mine:
            cell.state = CellState.OPENED

    safe, mines = game.solver.update()

    assert safe == set()
    assert mines == set()
    assert game.cell(1, 0).constraint.cells == {0}


def test_flagged_mines_satisfy_constraints():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 1)])
    _open_top_row(game)
    game.cell(0, 1).toggle_flag()

    game.solver.rebuild_constraints()

    assert all(not c.constraint.cells for c in game.board.cells)
    assert all(not inbound for inbound in game.board.constrained_by)


def test_rebuild_clears_previous_turn():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 1)])
    _open_top_row(game)
    game.refresh()
    assert game.board.constrained_by[3] == {0, 1}

    game.cell(0, 1).toggle_flag()
    game.refresh()

    assert game.board.constrained_by[3] == set()
    assert game.cell(0, 0).constraint.num_mines == 0


def test_deductions_are_recomputed_each_turn():
    game = Minesweeper(3, 3, 1, mine_positions=[(0, 1)])
    _open_top_row(game)
    game.refresh()
    assert game.cell(2, 1).mine_percentage == 0

    for x in range(3):
        game.cell(x, 0).state = CellState.CLOSED
    game.refresh()

    assert game.cell(2, 1).mine_percentage == UNDETERMINED


def test_solver_hints_are_sound_during_play():
    game = Minesweeper(9, 9, 10, mine_positions=[
        (0, 0), (4, 0), (8, 1), (2, 3), (6, 4),
        (1, 6), (5, 6), (8, 7), (3, 8), (7, 8),
    ])
    game.open(4, 4)

    for _ in range(40):
        if game.is_game_over():
            break
        closed = [c for c in game.board.cells if c.closed and not c.flagged]
        for c in closed:
            if c.mine_percentage == 0:
                assert not c.is_mine
            elif c.mine_percentage == 100:
                assert c.is_mine
        mine = next((c for c in closed if c.mine_percentage == 100), None)
        if mine is not None:
            game.toggle_flag(mine.x, mine.y)
            continue
        safe = next((c for c in closed if c.mine_percentage == 0), None)
        if safe is None:
            break
        game.open(safe.x, safe.y)

    assert not (game.is_game_over() and not game.won)
