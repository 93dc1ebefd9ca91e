"""
Mine layout and adjacency counts.

A Board is immutable once built: its kinds grid holds MINE for mined cells and
the number of neighbouring mines for every other cell.
"""
import logging
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np
from scipy.ndimage import convolve

from sapper.exceptions import InvalidDimensions, SnapshotError

logger = logging.getLogger(__name__)


Coord = Tuple[int, int]

MINE = -1

NEIGHBOR_DELTAS = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
)

# Sums the 8 surrounding cells, excluding the centre
NEIGHBOR_KERNEL = np.array([
    [1, 1, 1],
    [1, 0, 1],
    [1, 1, 1],
], dtype=np.int8)


def validate_dimensions(rows: int, cols: int, mine_count: int) -> None:
    if rows < 1 or cols < 1 or mine_count < 1 or mine_count >= rows * cols:
        raise InvalidDimensions(rows, cols, mine_count)


def count_adjacent_mines(mines: np.ndarray) -> np.ndarray:
    """Return the number of mines around each cell of a boolean mine mask
    """
    return convolve(mines.astype(np.int8), NEIGHBOR_KERNEL,
                    mode='constant', cval=0)


class Board:
    def __init__(self, kinds):
        kinds = np.array(kinds, dtype=np.int8)
        if kinds.ndim != 2 or 0 in kinds.shape:
            raise SnapshotError(f'Board must be a non-empty 2D grid, got shape {kinds.shape}')

        kinds.setflags(write=False)
        self.kinds = kinds

    @classmethod
    def from_mines(cls, rows: int, cols: int, positions: Iterable[Coord]) -> 'Board':
        """Build a board with mines at exactly the given (row, col) positions
        """
        positions = [(int(row), int(col)) for row, col in positions]
        validate_dimensions(rows, cols, len(positions))

        mines = np.zeros((rows, cols), dtype=bool)
        for row, col in positions:
            if not (0 <= row < rows and 0 <= col < cols):
                raise ValueError(f'Mine position ({row}, {col}) is outside a {rows}x{cols} board')
            if mines[row, col]:
                raise ValueError(f'Duplicate mine position ({row}, {col})')
            mines[row, col] = True

        kinds = count_adjacent_mines(mines)
        kinds[mines] = MINE
        return cls(kinds)

    @property
    def rows(self) -> int:
        return self.kinds.shape[0]

    @property
    def cols(self) -> int:
        return self.kinds.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.kinds.shape

    @property
    def mine_count(self) -> int:
        return int(np.count_nonzero(self.kinds == MINE))

    @property
    def mines(self) -> np.ndarray:
        return self.kinds == MINE

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def kind(self, row: int, col: int) -> int:
        return int(self.kinds[row, col])

    def is_mine(self, row: int, col: int) -> bool:
        return self.kinds[row, col] == MINE

    def neighbors(self, row: int, col: int) -> Iterator[Coord]:
        """Yield the in-bounds coords around (row, col)"""
        for d_row, d_col in NEIGHBOR_DELTAS:
            n_row, n_col = row + d_row, col + d_col
            if self.contains(n_row, n_col):
                yield n_row, n_col

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.kinds, other.kinds)

    def __hash__(self):
        return hash((self.shape, self.kinds.tobytes()))

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.rows}x{self.cols} mines={self.mine_count}>'


def generate_board(rows: int, cols: int, mine_count: int,
                   rng: Optional[np.random.Generator] = None) -> Board:
    """Place mine_count mines uniformly at random

    The first click is not protected: any cell may hold a mine.
    """
    validate_dimensions(rows, cols, mine_count)

    if rng is None:
        rng = np.random.default_rng()

    flat_positions = rng.choice(rows * cols, size=mine_count, replace=False)
    board = Board.from_mines(rows, cols, (divmod(int(i), cols) for i in flat_positions))
    logger.debug('Generated %r', board)
    return board
