import numpy as np
import pytest

from sapper.board import MINE, Board, count_adjacent_mines, generate_board
from sapper.exceptions import InvalidDimensions


def brute_force_count(board, row, col):
    return sum(1 for n_row, n_col in board.neighbors(row, col)
               if board.is_mine(n_row, n_col))


@pytest.mark.parametrize('seed', range(5))
@pytest.mark.parametrize('rows, cols, mines', [
    (9, 9, 10),
    (16, 30, 99),
    (1, 5, 2),
    (3, 3, 8),
])
def test_generated_board_has_mines_and_counts(seed, rows, cols, mines):
    board = generate_board(rows, cols, mines, rng=np.random.default_rng(seed))

    assert board.shape == (rows, cols)
    assert board.mine_count == mines
    assert np.count_nonzero(board.kinds == MINE) == mines

    for row in range(rows):
        for col in range(cols):
            if not board.is_mine(row, col):
                assert board.kind(row, col) == brute_force_count(board, row, col)


@pytest.mark.parametrize('rows, cols, mines', [
    (0, 9, 10),
    (9, 0, 10),
    (9, 9, 0),
    (9, 9, 81),
    (9, 9, 100),
    (-1, 9, 1),
])
def test_generate_rejects_bad_dimensions(rows, cols, mines):
    with pytest.raises(InvalidDimensions):
        generate_board(rows, cols, mines)


def test_invalid_dimensions_is_a_value_error():
    with pytest.raises(ValueError):
        generate_board(2, 2, 4)


def test_from_mines_places_exact_positions(wall_board):
    assert wall_board.mine_count == 10
    assert all(wall_board.is_mine(row, 4) for row in range(9))
    assert wall_board.is_mine(8, 8)

    assert [wall_board.kind(row, 3) for row in range(9)] == [2, 3, 3, 3, 3, 3, 3, 3, 2]
    assert wall_board.kind(0, 0) == 0
    assert wall_board.kind(8, 7) == 1
    assert wall_board.kind(7, 7) == 1
    assert wall_board.kind(8, 6) == 0


def test_from_mines_rejects_duplicates():
    with pytest.raises(ValueError, match='Duplicate'):
        Board.from_mines(3, 3, [(0, 0), (0, 0)])


def test_from_mines_rejects_positions_off_the_board():
    with pytest.raises(ValueError, match='outside'):
        Board.from_mines(3, 3, [(3, 0)])


def test_board_is_read_only(wall_board):
    with pytest.raises(ValueError):
        wall_board.kinds[0, 0] = MINE


def test_boards_compare_by_layout(wall_board):
    assert Board(wall_board.kinds) == wall_board
    assert Board.from_mines(9, 9, [(0, 0)]) != wall_board


def test_count_adjacent_mines_is_edge_clipped():
    mines = np.array([
        [True, False],
        [False, False],
    ])
    assert count_adjacent_mines(mines).tolist() == [
        [0, 1],
        [1, 1],
    ]


def test_neighbors_are_clipped_at_corners(wall_board):
    assert set(wall_board.neighbors(0, 0)) == {(0, 1), (1, 0), (1, 1)}
    assert len(list(wall_board.neighbors(4, 4))) == 8
