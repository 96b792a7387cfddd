from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .rules import BOARD_WIDTH


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


BASE_SHAPES = {
    TetrominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}

COLORS = {
    TetrominoType.I: "#00f0f0",
    TetrominoType.O: "#f0f000",
    TetrominoType.T: "#a000f0",
    TetrominoType.S: "#00f000",
    TetrominoType.Z: "#f00000",
    TetrominoType.J: "#0000f0",
    TetrominoType.L: "#f0a000",
}


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a matrix 90 degrees clockwise into a new array.

    Row ``c`` of the result is column ``c`` of ``shape`` read bottom to top.
    """
    return shape[::-1].T.copy()


@dataclass(eq=False)
class Piece:
    """A single tetromino with its active shape and board origin.

    Pieces never check bounds themselves; callers move them only after the
    board has accepted the new placement.
    """

    kind: TetrominoType
    shape: Shape = field(init=False)
    x: int = field(init=False)
    y: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.kind = TetrominoType(self.kind)
        self.shape = BASE_SHAPES[self.kind].copy()
        self.x = (BOARD_WIDTH - self.shape.shape[1]) // 2
        self.y = 0

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def token(self) -> int:
        return int(self.kind)

    def rotate(self) -> Shape:
        return rotate_cw(self.shape)

    def apply_rotation(self, shape: Optional[Shape] = None) -> None:
        self.shape = rotate_cw(self.shape) if shape is None else shape.copy()

    def move_left(self) -> None:
        self.x -= 1

    def move_right(self) -> None:
        self.x += 1

    def move_down(self) -> None:
        self.y += 1

    def clone(self) -> "Piece":
        cloned = Piece(self.kind)
        cloned.x = self.x
        cloned.y = self.y
        cloned.shape = self.shape.copy()
        return cloned

    def cells(self, offset_x: int = 0, offset_y: int = 0) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((self.x + offset_x + dx, self.y + offset_y + dy))
        return cells


def random_piece_type(rng: Optional[random.Random] = None) -> TetrominoType:
    # Independent uniform draw per call, not a shuffled bag
    return (rng or random).choice(list(TetrominoType))


def create_random_piece(rng: Optional[random.Random] = None) -> Piece:
    return Piece(random_piece_type(rng))
