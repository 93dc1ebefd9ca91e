"""
Text encoding of board and visibility grids, for storage.

Grids are written as a small JSON document:

    {"version": 1, "rows": 2, "cols": 3, "cells": [-2, -2, 1, -3, 0, -1]}

Cells are listed row-major. Values use the same integers as the game:

    -3 - flagged
    -2 - hidden
    -1 - mine
    0-8 - number of neighbouring mines
"""
import json
from typing import Any, Dict

import numpy as np

from sapper.exceptions import SnapshotError

FORMAT_VERSION = 1

MIN_CELL = -3
MAX_CELL = 8


def encode(grid) -> str:
    """Serialize a 2D grid (a Board, or any array-like of cell values)"""
    kinds = getattr(grid, 'kinds', grid)
    cells = np.asarray(kinds, dtype=np.int8)
    if cells.ndim != 2:
        raise SnapshotError(f'Only 2D grids can be encoded, got shape {cells.shape}')

    rows, cols = cells.shape
    document = {
        'version': FORMAT_VERSION,
        'rows': rows,
        'cols': cols,
        'cells': cells.reshape(-1).tolist(),
    }
    return json.dumps(document, separators=(',', ':'))


def _load(blob: str) -> Dict[str, Any]:
    try:
        document = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f'Snapshot is not valid JSON: {e}') from e

    if not isinstance(document, dict):
        raise SnapshotError('Snapshot must be a JSON object')

    version = document.get('version')
    if version != FORMAT_VERSION:
        raise SnapshotError(f'Unsupported snapshot version {version!r}')

    return document


def decode(blob: str, rows: int, cols: int) -> np.ndarray:
    """Deserialize a grid, checking it has the expected dimensions
    """
    document = _load(blob)

    if (document.get('rows'), document.get('cols')) != (rows, cols):
        raise SnapshotError(
            f'Snapshot is {document.get("rows")}x{document.get("cols")}, '
            f'expected {rows}x{cols}')

    cells = document.get('cells')
    if not isinstance(cells, list) or len(cells) != rows * cols:
        raise SnapshotError(f'Snapshot must hold {rows * cols} cells')
    if not all(isinstance(c, int) and not isinstance(c, bool) for c in cells):
        raise SnapshotError('Snapshot cells must be integers')
    if cells and not (MIN_CELL <= min(cells) and max(cells) <= MAX_CELL):
        raise SnapshotError(f'Snapshot cells must lie within [{MIN_CELL}, {MAX_CELL}]')

    return np.array(cells, dtype=np.int8).reshape(rows, cols)
