import logging
from collections import deque
from typing import List, Optional, Tuple

import numpy as np

from sapper.board import MINE, Board, generate_board
from sapper.exceptions import SnapshotError

logger = logging.getLogger(__name__)


HIDDEN = -2
FLAGGED = -3

GLYPH_HIDDEN = '.'
GLYPH_FLAGGED = 'M'
GLYPH_MINE = '*'
GLYPH_EMPTY = ' '


def hidden_grid(rows: int, cols: int) -> np.ndarray:
    return np.full((rows, cols), HIDDEN, dtype=np.int8)


def cell_glyph(state: int) -> str:
    """Single character shown to the player for a visibility state"""
    if state == HIDDEN:
        return GLYPH_HIDDEN
    elif state == FLAGGED:
        return GLYPH_FLAGGED
    elif state == MINE:
        return GLYPH_MINE
    elif state == 0:
        return GLYPH_EMPTY
    else:
        return str(state)


class Game(object):
    """One game of minesweeper: the board, what the player sees, and outcome

    ``over`` is set when a mine is opened, ``won`` when every safe cell has
    been opened. Once either is set, no further moves are accepted.
    """

    def __init__(self, board: Board, visibility: Optional[np.ndarray] = None):
        self.board = board

        if visibility is None:
            visibility = hidden_grid(board.rows, board.cols)
        self.visibility = self._check_shape(visibility, 'visibility')

        self.over = False
        self.won = False
        self.opened_cells = 0

    @classmethod
    def new(cls, rows: int = 9, cols: int = 9, mines: int = 10,
            rng: Optional[np.random.Generator] = None) -> 'Game':
        return cls(generate_board(rows, cols, mines, rng=rng))

    @classmethod
    def from_state(cls, board: Board, visibility: np.ndarray,
                   over: bool, won: bool, opened_cells: int) -> 'Game':
        game = cls(board)
        game.restore(board, visibility, over, won, opened_cells)
        return game

    def _check_shape(self, grid, name) -> np.ndarray:
        grid = np.array(grid, dtype=np.int8)
        if grid.shape != self.board.shape:
            raise SnapshotError(
                f'{name} grid has shape {grid.shape}, expected {self.board.shape}')
        return grid

    def restore(self, board: Board, visibility: np.ndarray,
                over: bool, won: bool, opened_cells: int) -> None:
        """Load previously saved state

        Only the grid shapes are checked. The caller is trusted to pass a
        visibility grid, counter and flags that belong to this board.
        """
        self.board = board
        self.visibility = self._check_shape(visibility, 'visibility')
        self.over = bool(over)
        self.won = bool(won)
        self.opened_cells = int(opened_cells)

    @property
    def rows(self) -> int:
        return self.board.rows

    @property
    def cols(self) -> int:
        return self.board.cols

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.board.rows, self.board.cols

    @property
    def mine_count(self) -> int:
        return self.board.mine_count

    @property
    def opened_count(self) -> int:
        return self.opened_cells

    @property
    def flag_count(self) -> int:
        return int(np.count_nonzero(self.visibility == FLAGGED))

    @property
    def safe_cells(self) -> int:
        return self.rows * self.cols - self.mine_count

    def is_over(self) -> bool:
        return self.over

    def is_won(self) -> bool:
        return self.won

    def is_finished(self) -> bool:
        return self.over or self.won

    def state(self, row: int, col: int) -> int:
        return int(self.visibility[row, col])

    def is_flagged(self, row: int, col: int) -> bool:
        return self.visibility[row, col] == FLAGGED

    def is_revealed(self, row: int, col: int) -> bool:
        return self.visibility[row, col] not in (HIDDEN, FLAGGED)

    def board_snapshot(self) -> np.ndarray:
        return self.board.kinds.copy()

    def visibility_snapshot(self) -> np.ndarray:
        return self.visibility.copy()

    def open_cell(self, row: int, col: int) -> bool:
        """Reveal the cell at (row, col)

        Returns False without changing anything if the coords are off the
        board, the game has finished, or the cell is flagged or already
        revealed. Opening a mine loses the game but is still a successful move.
        """
        if not self.board.contains(row, col) or self.is_finished():
            return False
        if self.visibility[row, col] != HIDDEN:
            return False

        self._reveal(row, col)

        if self.board.is_mine(row, col):
            self.lose()
            return True

        if self.board.kind(row, col) == 0:
            self.cascade_empty(row, col)

        self.check_winning_state()
        return True

    def flag_cell(self, row: int, col: int) -> bool:
        """Toggle the flag on a hidden cell"""
        if not self.board.contains(row, col) or self.is_finished():
            return False

        state = self.visibility[row, col]
        if state == HIDDEN:
            self.visibility[row, col] = FLAGGED
        elif state == FLAGGED:
            self.visibility[row, col] = HIDDEN
        else:
            return False
        return True

    def _reveal(self, row: int, col: int) -> None:
        self.visibility[row, col] = self.board.kind(row, col)
        self.opened_cells += 1

    def cascade_empty(self, row: int, col: int) -> None:
        """Reveal all neighbours of empty cells, breadth-first

        Flagged cells are left alone and stop the cascade.
        """
        queue = deque([(row, col)])

        while queue:
            cell = queue.popleft()

            for n_row, n_col in self.board.neighbors(*cell):
                if self.visibility[n_row, n_col] != HIDDEN:
                    continue

                self._reveal(n_row, n_col)
                if self.board.kind(n_row, n_col) == 0:
                    queue.append((n_row, n_col))

        logger.debug('Cascade from (%d, %d) opened %d cells in total',
                     row, col, self.opened_cells)

    def reveal_mines(self) -> None:
        """Show every mine. Does not count towards opened cells"""
        self.visibility[self.board.mines] = MINE

    def lose(self) -> None:
        logger.info('Lose :(')
        self.over = True
        self.reveal_mines()

    def did_win(self) -> bool:
        return self.opened_cells == self.safe_cells

    def check_winning_state(self) -> None:
        if not self.is_finished() and self.did_win():
            logger.info('WIN!!!')
            self.won = True

    def glyph(self, row: int, col: int) -> str:
        return cell_glyph(self.visibility[row, col])

    def glyphs(self) -> List[List[str]]:
        return [[cell_glyph(state) for state in line] for line in self.visibility]

    def __repr__(self):
        status = 'lost' if self.over else 'won' if self.won else 'playing'
        return (f'<{self.__class__.__name__} {self.rows}x{self.cols} '
                f'mines={self.mine_count} opened={self.opened_cells} {status}>')
