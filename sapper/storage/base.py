"""
Storage keeps saved games and the moves made in them.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class GameSummary:
    id: int
    player_name: str
    rows: int
    cols: int
    mines: int
    game_over: bool
    game_won: bool
    created_at: datetime
    updated_at: datetime

    @property
    def status(self) -> str:
        if self.game_over:
            return 'lost'
        elif self.game_won:
            return 'won'
        else:
            return 'active'


@dataclass(frozen=True)
class StoredGame(GameSummary):
    board_state: str
    visible_state: str
    opened_cells: int


@dataclass(frozen=True)
class StoredMove:
    game_id: int
    move_number: int
    row: int
    col: int
    action: str
    result: str
    created_at: Optional[datetime] = None


class BaseStorage(object):
    """Persist games as encoded snapshots, plus an ordered log of their moves

    Implementations raise StorageFailure when the backend fails, and
    UnknownGame when a move refers to a game that does not exist.
    """

    def create_game(self, player_name: str, rows: int, cols: int, mines: int,
                    board_state: str, visible_state: str,
                    game_over: bool, game_won: bool, opened_cells: int) -> int:
        """Save a new game, returning its id"""
        raise NotImplementedError

    def update_game(self, game_id: int, board_state: str, visible_state: str,
                    game_over: bool, game_won: bool, opened_cells: int) -> bool:
        """Overwrite the snapshot of a game. Return False if it doesn't exist"""
        raise NotImplementedError

    def load_game(self, game_id: int) -> Optional[StoredGame]:
        """Return the game with the given id, or None"""
        raise NotImplementedError

    def list_games(self) -> List[GameSummary]:
        """Return all games, most recently created first"""
        raise NotImplementedError

    def list_active_games(self) -> List[GameSummary]:
        """Return unfinished games, most recently updated first"""
        raise NotImplementedError

    def delete_game(self, game_id: int) -> bool:
        """Remove a game along with all of its moves"""
        raise NotImplementedError

    def append_move(self, game_id: int, move_number: int, row: int, col: int,
                    action: str, result: str) -> None:
        raise NotImplementedError

    def list_moves(self, game_id: int) -> List[StoredMove]:
        """Return the moves of a game in ascending move_number order"""
        raise NotImplementedError

    def max_move_number(self, game_id: int) -> int:
        """Return the highest move number recorded for a game, or 0"""
        raise NotImplementedError

    def close(self) -> None:
        pass
