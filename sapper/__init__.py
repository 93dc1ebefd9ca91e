from sapper.board import Board, generate_board
from sapper.game import Game
from sapper.main import main
from sapper.version import VERSION

__all__ = ['Board', 'Game', 'generate_board', 'main']


__version__ = VERSION


if __name__ == '__main__':
    main()
