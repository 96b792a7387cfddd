import random

import numpy as np

from block_drop.game import Piece, TetrominoType, create_random_piece, random_piece_type
from block_drop.game.pieces import BASE_SHAPES, COLORS, rotate_cw


def test_new_piece_spawns_centered_at_top():
    assert (Piece(TetrominoType.I).x, Piece(TetrominoType.I).y) == (3, 0)
    assert (Piece(TetrominoType.O).x, Piece(TetrominoType.O).y) == (4, 0)
    assert (Piece(TetrominoType.T).x, Piece(TetrominoType.T).y) == (3, 0)


def test_shape_does_not_alias_canonical_matrix():
    piece = Piece(TetrominoType.T)
    piece.shape[0, 0] = 1
    assert BASE_SHAPES[TetrominoType.T][0, 0] == 0
    assert Piece(TetrominoType.T).shape[0, 0] == 0


def test_rotate_is_clockwise_and_pure():
    piece = Piece(TetrominoType.J)
    before = piece.shape.copy()
    rotated = piece.rotate()
    # J: [[1,0,0],[1,1,1],[0,0,0]] -> [[0,1,1],[0,1,0],[0,1,0]]
    assert np.array_equal(rotated, np.array([[0, 1, 1], [0, 1, 0], [0, 1, 0]]))
    assert np.array_equal(piece.shape, before)


def test_rotation_round_trip_for_every_type():
    for kind in TetrominoType:
        piece = Piece(kind)
        for _ in range(4):
            piece.apply_rotation(piece.rotate())
            assert piece.kind == kind
            assert piece.color == COLORS[kind]
        assert np.array_equal(piece.shape, BASE_SHAPES[kind])


def test_rotate_cw_returns_independent_array():
    shape = BASE_SHAPES[TetrominoType.S]
    rotated = rotate_cw(shape)
    rotated[0, 0] = 5
    assert BASE_SHAPES[TetrominoType.S][2, 0] == 0


def test_moves_adjust_origin_without_bounds_checks():
    piece = Piece(TetrominoType.O)
    for _ in range(10):
        piece.move_left()
    piece.move_right()
    piece.move_down()
    assert (piece.x, piece.y) == (-5, 1)


def test_clone_is_independent():
    piece = Piece(TetrominoType.L)
    piece.move_down()
    piece.apply_rotation()
    copy = piece.clone()
    assert (copy.kind, copy.x, copy.y, copy.color) == (piece.kind, piece.x, piece.y, piece.color)
    assert np.array_equal(copy.shape, piece.shape)

    copy.move_left()
    copy.shape[:] = 0
    assert piece.x == 3
    assert piece.shape.any()


def test_cells_are_absolute_coordinates():
    piece = Piece(TetrominoType.T)
    assert piece.cells() == [(4, 0), (3, 1), (4, 1), (5, 1)]
    assert piece.cells(offset_y=2) == [(4, 2), (3, 3), (4, 3), (5, 3)]


def test_random_draws_cover_all_types():
    rng = random.Random(7)
    seen = {random_piece_type(rng) for _ in range(500)}
    assert seen == set(TetrominoType)


def test_create_random_piece_is_at_spawn():
    piece = create_random_piece(random.Random(3))
    assert isinstance(piece.kind, TetrominoType)
    assert piece.y == 0
    assert np.array_equal(piece.shape, BASE_SHAPES[piece.kind])
