import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from sapper.board import Board
from sapper.game import Game
from sapper.storage.sql import SqlStorage


# A wall of mines down column 4, plus one in the bottom-right corner
# (. marks a cell with no neighbouring mines):
#
#    . . . 2 * 2 . . .
#    . . . 3 * 3 . . .
#    ...
#    . . . 2 * 2 . 1 *
#
WALL_MINES = [(row, 4) for row in range(9)] + [(8, 8)]


@pytest.fixture
def wall_board():
    return Board.from_mines(9, 9, WALL_MINES)


@pytest.fixture
def wall_game(wall_board):
    return Game(wall_board)


@pytest.fixture
def engine():
    return create_engine('sqlite://',
                         connect_args={'check_same_thread': False},
                         poolclass=StaticPool)


@pytest.fixture
def storage(engine):
    storage = SqlStorage(engine=engine)
    yield storage
    storage.close()
