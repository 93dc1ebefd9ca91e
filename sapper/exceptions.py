class SapperError(Exception):
    """Base class for all errors raised by sapper"""


class InvalidDimensions(SapperError, ValueError):
    def __init__(self, rows, cols, mines):
        super().__init__(
            f'Invalid game parameters: {rows}x{cols} board with {mines} mines')
        self.rows = rows
        self.cols = cols
        self.mines = mines


class SnapshotError(SapperError, ValueError):
    """A stored grid could not be decoded or does not fit the board"""


class UnknownGame(SapperError, LookupError):
    def __init__(self, game_id):
        super().__init__(f'No game with id {game_id}')
        self.game_id = game_id


class StorageFailure(SapperError):
    """The storage backend failed to read or write a record"""
