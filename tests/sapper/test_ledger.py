import pytest

from sapper.board import Board
from sapper.exceptions import UnknownGame
from sapper.game import Game
from sapper.ledger import FLAG, OPEN, MoveLedger, outcome_of


@pytest.fixture
def ledger(storage):
    return MoveLedger(storage)


@pytest.fixture
def game_id(storage):
    return storage.create_game('alice', 9, 9, 10, 'board', 'visible', False, False, 0)


def test_move_numbers_start_at_one_and_increase(ledger, game_id):
    assert ledger.append(game_id, 0, 0, OPEN, 'safe') == 1
    assert ledger.append(game_id, 1, 2, FLAG, 'flagged') == 2
    assert ledger.append(game_id, 1, 2, FLAG, 'unflagged') == 3

    moves = ledger.moves(game_id)
    assert [m.move_number for m in moves] == [1, 2, 3]
    assert [m.result for m in moves] == ['safe', 'flagged', 'unflagged']


def test_move_numbers_follow_the_highest_stored(ledger, storage, game_id):
    storage.append_move(game_id, 7, 0, 0, OPEN, 'safe')
    assert ledger.append(game_id, 1, 1, OPEN, 'safe') == 8


def test_each_game_has_its_own_numbering(ledger, storage, game_id):
    other_id = storage.create_game('bob', 9, 9, 10, 'board', 'visible', False, False, 0)
    ledger.append(game_id, 0, 0, OPEN, 'safe')
    ledger.append(game_id, 0, 1, OPEN, 'safe')

    assert ledger.append(other_id, 0, 0, OPEN, 'safe') == 1


def test_append_to_unknown_game(ledger):
    with pytest.raises(UnknownGame):
        ledger.append(404, 0, 0, OPEN, 'safe')


def test_append_rejects_unknown_actions(ledger, game_id):
    with pytest.raises(ValueError):
        ledger.append(game_id, 0, 0, 'chord', 'safe')
    assert ledger.moves(game_id) == []


def test_outcomes(wall_board):
    game = Game(wall_board)

    game.flag_cell(8, 8)
    assert outcome_of(game, FLAG, 8, 8) == 'flagged'
    game.flag_cell(8, 8)
    assert outcome_of(game, FLAG, 8, 8) == 'unflagged'

    game.open_cell(0, 0)
    assert outcome_of(game, OPEN, 0, 0) == 'safe'

    game.open_cell(0, 4)
    assert outcome_of(game, OPEN, 0, 4) == 'mine'


def test_winning_outcome():
    game = Game(Board.from_mines(3, 3, [(0, 0)]))
    game.open_cell(2, 2)
    assert outcome_of(game, OPEN, 2, 2) == 'win'
