"""
Rebuild saved games and describe how they were played.

The restored Game already holds the final visibility grid; moves are only
narrated, never re-applied.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from sapper import codec
from sapper.board import Board
from sapper.exceptions import UnknownGame
from sapper.game import Game
from sapper.ledger import FLAG, MoveLedger
from sapper.storage.base import BaseStorage, StoredGame, StoredMove

logger = logging.getLogger(__name__)


RESULT_DISPLAY = {
    'safe': 'cell opened',
    'mine': 'hit a mine',
    'win': 'cleared the board',
    'flagged': 'flag placed',
    'unflagged': 'flag removed',
}


def load_game(storage: BaseStorage, game_id: int) -> Tuple[StoredGame, Game]:
    """Fetch a saved game and restore it to a playable Game"""
    record = storage.load_game(game_id)
    if record is None:
        raise UnknownGame(game_id)

    board = Board(codec.decode(record.board_state, record.rows, record.cols))
    visibility = codec.decode(record.visible_state, record.rows, record.cols)
    game = Game.from_state(board, visibility,
                           over=record.game_over,
                           won=record.game_won,
                           opened_cells=record.opened_cells)
    logger.debug('Restored game %d: %r', game_id, game)
    return record, game


def narrate_move(move: StoredMove) -> str:
    """Describe one move, with coordinates counted from 1"""
    verb = 'Flag' if move.action == FLAG else 'Open'
    result = RESULT_DISPLAY.get(move.result, move.result)
    return f'Move {move.move_number}: {verb} {move.row + 1} {move.col + 1} - {result}'


def narrate(moves: Iterable[StoredMove]) -> List[str]:
    return [narrate_move(move) for move in moves]


@dataclass
class Replay:
    record: StoredGame
    game: Game
    moves: List[StoredMove] = field(default_factory=list)

    @classmethod
    def load(cls, storage: BaseStorage, game_id: int) -> 'Replay':
        record, game = load_game(storage, game_id)
        moves = MoveLedger(storage).moves(game_id)
        return cls(record, game, moves)

    def narration(self) -> List[str]:
        return narrate(self.moves)
