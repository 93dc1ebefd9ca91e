from sapper.storage.base import BaseStorage, GameSummary, StoredGame, StoredMove
from sapper.storage.sql import SqlStorage

__all__ = ['BaseStorage', 'GameSummary', 'SqlStorage', 'StoredGame', 'StoredMove']
