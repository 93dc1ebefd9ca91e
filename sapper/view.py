import sys
from typing import Iterable, TextIO

from sapper.game import Game
from sapper.storage.base import GameSummary

HELP_TEXT = '''\
=== Minesweeper help ===

Command line options:
  --new, -n         Start a new game (default)
  --list, -l        List saved games
  --active          List unfinished games
  --replay, -r ID   Replay the game with the given ID
  --resume ID       Continue an unfinished game
  --delete ID       Delete a saved game and its moves
  --rules           Show this explanation
  --help, -h        Show command line help

Entering moves:
  row col           Open a cell
  M row col         Flag or unflag a cell
  q or quit         Leave the game (progress is saved)

Examples:
  1 1               Open the cell in row 1, column 1
  M 2 3             Flag the cell in row 2, column 3
  q                 Leave the game

Board symbols:
  .                 Hidden cell
  M                 Flagged cell
  *                 Mine
  1-8               Number of mines in neighbouring cells
  (blank)           Empty cell
'''

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class View(object):
    """Text rendering of games and messages for a terminal"""

    def __init__(self, out: TextIO = None, err: TextIO = None):
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def line(self, text=''):
        print(text, file=self.out)

    def show_welcome(self):
        self.line('=== Welcome to Minesweeper! ===')
        self.line()

    def show_help(self):
        self.line(HELP_TEXT)

    def show_message(self, message):
        self.line(message)

    def show_error(self, message):
        print(f'Error: {message}', file=self.err)

    def render_board(self, game: Game) -> str:
        """Draw the board with row and column numbers counted from 1"""
        width = max(2, len(str(max(game.rows, game.cols))))
        lines = [' ' * (width + 1) + ''.join('%*d ' % (width, col + 1) for col in range(game.cols))]
        for row, glyphs in enumerate(game.glyphs()):
            lines.append('%*d ' % (width, row + 1) + ''.join('%*s ' % (width, g) for g in glyphs))
        return '\n'.join(lines)

    def show_board(self, game: Game):
        self.line()
        self.line('=== Board ===')
        self.line()
        self.line(self.render_board(game))
        self.line(f'Mines: {game.mine_count}  Flags: {game.flag_count}')
        self.line()

    def show_win(self):
        self.line()
        self.line('Congratulations! You won!')
        self.line()

    def show_loss(self):
        self.line()
        self.line('Game over! You hit a mine!')
        self.line()

    def show_game_list(self, games: Iterable[GameSummary], title='Saved games'):
        games = list(games)
        self.line(f'=== {title} ===')
        self.line()

        if not games:
            self.line('No saved games found.')
            self.line()
            return

        header = '%-5s %-15s %-5s %-5s %-5s %-7s %-19s %-19s' % (
            'ID', 'Player', 'Rows', 'Cols', 'Mines', 'Status', 'Created', 'Updated')
        self.line(header)
        self.line('-' * len(header))

        for game in games:
            self.line('%-5d %-15s %-5d %-5d %-5d %-7s %-19s %-19s' % (
                game.id,
                game.player_name,
                game.rows,
                game.cols,
                game.mines,
                game.status,
                game.created_at.strftime(DATE_FORMAT),
                game.updated_at.strftime(DATE_FORMAT),
            ))

        self.line()
        self.line('To replay a game use: sapper --replay <ID>')
        self.line()

    def show_replay(self, record: GameSummary, narration: Iterable[str]):
        self.line(f'=== Replay of game #{record.id} ===')
        self.line(f'Player: {record.player_name}  '
                  f'Board: {record.rows}x{record.cols}  Mines: {record.mines}')
        self.line()

        narration = list(narration)
        if not narration:
            self.line('No moves were recorded for this game.')
        for text in narration:
            self.line(text)
        self.line()
