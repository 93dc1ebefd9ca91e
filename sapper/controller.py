import logging
from typing import Callable, Optional, Tuple

from sapper import codec
from sapper.exceptions import InvalidDimensions, SnapshotError, StorageFailure, UnknownGame
from sapper.game import Game
from sapper.ledger import FLAG, OPEN, MoveLedger, outcome_of
from sapper.replay import Replay, load_game
from sapper.storage.base import BaseStorage
from sapper.view import View

logger = logging.getLogger(__name__)


QUIT = 'quit'
QUIT_TOKENS = ('q', 'quit')

DEFAULT_PLAYER = 'Player'

MOVE_PROMPT = 'Enter coordinates (row col), or M row col to flag, q to quit: '

Command = Tuple[str, Optional[int], Optional[int]]


def parse_command(text: str) -> Optional[Command]:
    """Turn a line of player input into (action, row, col)

    Coordinates are entered counting from 1 and returned counting from 0.
    Returns None for blank input, raises ValueError if it can't be parsed.
    """
    parts = text.split()
    if not parts:
        return None

    if len(parts) == 1 and parts[0].lower() in QUIT_TOKENS:
        return QUIT, None, None

    if len(parts) == 3 and parts[0].upper() == 'M':
        action, coords = FLAG, parts[1:]
    elif len(parts) == 2:
        action, coords = OPEN, parts
    else:
        raise ValueError('Invalid input! Use: row col, or M row col')

    try:
        row, col = (int(c) - 1 for c in coords)
    except ValueError:
        raise ValueError('Row and column must be whole numbers') from None

    return action, row, col


class Controller(object):
    """Runs games against a storage backend, talking to the player via a View

    :param prompt: called with a message, returns a line of player input
    :param game_factory: builds a new Game from (rows, cols, mines)
    """

    def __init__(self, storage: BaseStorage, view: View = None,
                 prompt: Callable[[str], str] = None,
                 game_factory: Callable[[int, int, int], Game] = Game.new):
        self.storage = storage
        self.view = view or View()
        self.prompt = prompt or input
        self.game_factory = game_factory
        self.ledger = MoveLedger(storage)

    def prompt_number(self, message: str, default: int) -> int:
        text = self.prompt(message).strip()
        if not text:
            return default

        try:
            number = int(text)
        except ValueError:
            return default
        return number if number > 0 else default

    def ask_game(self, rows: int, cols: int, mines: int) -> Game:
        """Prompt for the board size until it makes a valid game"""
        while True:
            game_rows = self.prompt_number(f'Number of rows (default {rows}): ', rows)
            game_cols = self.prompt_number(f'Number of columns (default {cols}): ', cols)
            game_mines = self.prompt_number(f'Number of mines (default {mines}): ', mines)

            try:
                return self.game_factory(game_rows, game_cols, game_mines)
            except InvalidDimensions as e:
                self.view.show_error(str(e))

    def new_game(self, player: str = None, rows: int = 9, cols: int = 9, mines: int = 10) -> int:
        self.view.show_welcome()

        try:
            if not player:
                player = self.prompt('Player name: ').strip() or DEFAULT_PLAYER
            game = self.ask_game(rows, cols, mines)
        except EOFError:
            self.view.show_error('Input ended before a game was started')
            return 1

        rows, cols = game.dimensions
        try:
            game_id = self.storage.create_game(
                player, rows, cols, game.mine_count,
                codec.encode(game.board_snapshot()),
                codec.encode(game.visibility_snapshot()),
                game.is_over(), game.is_won(), game.opened_count,
            )
        except StorageFailure as e:
            self.view.show_error(f'Unable to save the new game: {e}')
            return 1

        logger.info('Started game %d for %s: %r', game_id, player, game)
        return self.play(game, game_id)

    def save(self, game_id: int, game: Game) -> bool:
        try:
            saved = self.storage.update_game(
                game_id,
                codec.encode(game.board_snapshot()),
                codec.encode(game.visibility_snapshot()),
                game.is_over(), game.is_won(), game.opened_count,
            )
        except StorageFailure as e:
            self.view.show_error(f'Unable to save game #{game_id}: {e}')
            return False

        if not saved:
            self.view.show_error(f'Game #{game_id} no longer exists')
        return saved

    def record_move(self, game_id: int, game: Game, action: str, row: int, col: int):
        result = outcome_of(game, action, row, col)
        try:
            self.ledger.append(game_id, row, col, action, result)
        except (StorageFailure, UnknownGame) as e:
            self.view.show_error(f'Unable to record move: {e}')
        self.save(game_id, game)

    def play(self, game: Game, game_id: int) -> int:
        """Main game loop. Returns once the game ends or the player quits"""
        while not game.is_finished():
            self.view.show_board(game)

            try:
                text = self.prompt(MOVE_PROMPT)
            except EOFError:
                text = QUIT

            try:
                command = parse_command(text)
            except ValueError as e:
                self.view.show_error(str(e))
                continue

            if command is None:
                continue

            action, row, col = command
            if action == QUIT:
                self.save(game_id, game)
                self.view.show_message(
                    f'Game #{game_id} saved. Continue it with: sapper --resume {game_id}')
                return 0

            if not game.board.contains(row, col):
                self.view.show_error('Coordinates are outside the board!')
                continue

            if action == FLAG:
                if not game.flag_cell(row, col):
                    self.view.show_error('Unable to flag this cell')
                    continue
                self.view.show_message('Flag toggled')
            else:
                if not game.open_cell(row, col):
                    self.view.show_error('Unable to open this cell')
                    continue
                self.view.show_message('Cell opened')

            self.record_move(game_id, game, action, row, col)

        self.view.show_board(game)
        if game.is_won():
            self.view.show_win()
        else:
            self.view.show_loss()
        return 0

    def _load(self, game_id: int):
        try:
            return load_game(self.storage, game_id)
        except UnknownGame as e:
            self.view.show_error(str(e))
        except (StorageFailure, SnapshotError) as e:
            self.view.show_error(f'Unable to load game #{game_id}: {e}')
        return None, None

    def resume(self, game_id: int) -> int:
        record, game = self._load(game_id)
        if game is None:
            return 1

        if game.is_finished():
            self.view.show_error(f'Game #{game_id} is already finished')
            return 1

        self.view.show_message(f'Resuming game #{game_id} for {record.player_name}')
        return self.play(game, game_id)

    def replay(self, game_id: int) -> int:
        try:
            replay = Replay.load(self.storage, game_id)
        except UnknownGame as e:
            self.view.show_error(str(e))
            return 1
        except (StorageFailure, SnapshotError) as e:
            self.view.show_error(f'Unable to load game #{game_id}: {e}')
            return 1

        self.view.show_replay(replay.record, replay.narration())
        self.view.show_board(replay.game)
        if replay.game.is_won():
            self.view.show_win()
        elif replay.game.is_over():
            self.view.show_loss()
        else:
            self.view.show_message('This game is not finished yet.')
        return 0

    def list_games(self, active_only: bool = False) -> int:
        try:
            if active_only:
                games = self.storage.list_active_games()
            else:
                games = self.storage.list_games()
        except StorageFailure as e:
            self.view.show_error(f'Unable to list games: {e}')
            return 1

        title = 'Unfinished games' if active_only else 'Saved games'
        self.view.show_game_list(games, title=title)
        return 0

    def delete(self, game_id: int) -> int:
        try:
            deleted = self.storage.delete_game(game_id)
        except StorageFailure as e:
            self.view.show_error(f'Unable to delete game #{game_id}: {e}')
            return 1

        if not deleted:
            self.view.show_error(str(UnknownGame(game_id)))
            return 1

        self.view.show_message(f'Game #{game_id} deleted')
        return 0
