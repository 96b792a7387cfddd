from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from .pieces import Piece, Shape
from .rules import BOARD_HEIGHT, BOARD_WIDTH


EMPTY = 0


class Board:
    """Fixed-size grid of locked cells.

    The grid uses 0 for empty cells and the locking piece's ``TetrominoType``
    value for filled cells, so a cell identifies both its type and its color.
    Row 0 is the top of the visible board; pieces may sit partially above it
    (negative rows) while spawning.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = self.create_empty_grid()

    def create_empty_grid(self) -> np.ndarray:
        return np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid = self.create_empty_grid()

    def cell(self, x: int, y: int) -> int:
        return int(self.grid[y, x])

    def is_valid_position(
        self,
        piece: Piece,
        offset_x: int = 0,
        offset_y: int = 0,
        shape: Optional[Shape] = None,
    ) -> bool:
        shape = piece.shape if shape is None else shape
        origin_x = piece.x + offset_x
        origin_y = piece.y + offset_y
        h, w = shape.shape
        for row in range(h):
            for col in range(w):
                if not shape[row, col]:
                    continue
                x = origin_x + col
                y = origin_y + row
                if x < 0 or x >= self.width or y >= self.height:
                    return False
                # Spawn buffer above the board is always free
                if y < 0:
                    continue
                if self.grid[y, x] != EMPTY:
                    return False
        return True

    def lock_piece(self, piece: Piece) -> None:
        for x, y in piece.cells():
            if 0 <= y < self.height and 0 <= x < self.width:
                self.grid[y, x] = piece.token

    def find_complete_lines(self) -> List[int]:
        return [int(row) for row in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def clear_lines(self, lines: Iterable[int]) -> int:
        # Bottom-most first so earlier removals never shift pending indices
        rows = sorted({int(row) for row in lines if 0 <= row < self.height}, reverse=True)
        if not rows:
            return 0
        for row in rows:
            self.grid = np.delete(self.grid, row, axis=0)
        new_rows = np.zeros((len(rows), self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, self.grid))
        return len(rows)

    def is_game_over(self) -> bool:
        return bool(np.any(self.grid[0] != EMPTY))

    def get_ghost_position(self, piece: Piece) -> int:
        offset = 0
        while self.is_valid_position(piece, 0, offset + 1):
            offset += 1
        return offset

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
