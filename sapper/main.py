import logging

from configargparse import ArgumentParser

from sapper.controller import Controller
from sapper.exceptions import StorageFailure
from sapper.storage.sql import DEFAULT_DATABASE_URL, SqlStorage
from sapper.view import View

logger = logging.getLogger(__name__)


def build_parser():
    parser = ArgumentParser(
        description='Minesweeper in the terminal, with saved games and replays',
        default_config_files=['~/.sapper.conf', './sapper.conf'])

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('-n', '--new',
                      action='store_true',
                      help='Start a new game (default)')
    mode.add_argument('-l', '--list',
                      action='store_true',
                      help='List saved games')
    mode.add_argument('--active',
                      action='store_true',
                      help='List unfinished games')
    mode.add_argument('-r', '--replay',
                      type=int,
                      metavar='ID',
                      help='Replay the game with the given ID')
    mode.add_argument('--resume',
                      type=int,
                      metavar='ID',
                      help='Continue an unfinished game')
    mode.add_argument('--delete',
                      type=int,
                      metavar='ID',
                      help='Delete a saved game and its moves')
    mode.add_argument('--rules',
                      action='store_true',
                      help='Explain how to play')

    parser.add_argument('-c', '--config',
                        is_config_file=True,
                        help='Config file path')
    parser.add_argument('--player',
                        help='Player name to save new games under',
                        env_var='SAPPER_PLAYER')
    parser.add_argument('--rows',
                        type=int,
                        default=9,
                        help='Default number of rows offered for new games',
                        env_var='SAPPER_ROWS')
    parser.add_argument('--cols',
                        type=int,
                        default=9,
                        help='Default number of columns offered for new games',
                        env_var='SAPPER_COLS')
    parser.add_argument('--mines',
                        type=int,
                        default=10,
                        help='Default number of mines offered for new games',
                        env_var='SAPPER_MINES')
    parser.add_argument('--database-url',
                        default=DEFAULT_DATABASE_URL,
                        help='SQLAlchemy URL of the database holding saved games',
                        env_var='SAPPER_DATABASE_URL')

    parser.add_argument('-v', '--verbose', help='increase output verbosity',
                        action='store_true')
    parser.add_argument('--debug', help='echo database queries',
                        action='store_true',
                        env_var='SAPPER_DEBUG')
    return parser


def run(args, controller: Controller) -> int:
    if args.rules:
        controller.view.show_help()
        return 0
    if args.list:
        return controller.list_games()
    if args.active:
        return controller.list_games(active_only=True)
    if args.replay is not None:
        return controller.replay(args.replay)
    if args.resume is not None:
        return controller.resume(args.resume)
    if args.delete is not None:
        return controller.delete(args.delete)

    return controller.new_game(args.player, args.rows, args.cols, args.mines)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    view = View()
    try:
        storage = SqlStorage(args.database_url, debug=args.debug)
    except StorageFailure as e:
        view.show_error(str(e))
        return 1

    try:
        return run(args, Controller(storage, view))
    except KeyboardInterrupt:
        view.show_message('')
        return 130
    finally:
        storage.close()
