"""
The ledger is the append-only record of moves made in a saved game.
"""
import logging
from typing import List

from sapper.game import Game
from sapper.storage.base import BaseStorage, StoredMove

logger = logging.getLogger(__name__)


OPEN = 'open'
FLAG = 'flag'

ACTIONS = (OPEN, FLAG)

RESULT_SAFE = 'safe'
RESULT_MINE = 'mine'
RESULT_WIN = 'win'
RESULT_FLAGGED = 'flagged'
RESULT_UNFLAGGED = 'unflagged'


def outcome_of(game: Game, action: str, row: int, col: int) -> str:
    """Label the result of a move that was just applied to game"""
    if action == FLAG:
        return RESULT_FLAGGED if game.is_flagged(row, col) else RESULT_UNFLAGGED
    elif game.is_over():
        return RESULT_MINE
    elif game.is_won():
        return RESULT_WIN
    else:
        return RESULT_SAFE


class MoveLedger(object):
    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def append(self, game_id: int, row: int, col: int, action: str, result: str) -> int:
        """Record a move, returning its move number

        Move numbers start at 1 and follow the highest number already stored
        for the game. Raises UnknownGame if the game was never saved.
        """
        if action not in ACTIONS:
            raise ValueError(f'Unknown action {action!r}')

        move_number = self.storage.max_move_number(game_id) + 1
        self.storage.append_move(game_id, move_number, row, col, action, result)
        return move_number

    def moves(self, game_id: int) -> List[StoredMove]:
        return self.storage.list_moves(game_id)
