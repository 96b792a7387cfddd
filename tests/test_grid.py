import numpy as np

from block_drop.game import Board, Piece, TetrominoType


def test_board_starts_empty_with_fixed_dimensions():
    board = Board()
    assert board.grid.shape == (20, 10)
    assert not board.grid.any()
    board.grid[5, 5] = 3
    board.reset()
    assert board.grid.shape == (20, 10)
    assert not board.grid.any()


def test_spawn_placement_is_valid_for_every_type():
    board = Board()
    for kind in TetrominoType:
        assert board.is_valid_position(Piece(kind))


def test_walls_and_floor_are_rejected():
    board = Board()
    piece = Piece(TetrominoType.O)
    piece.x = -1
    assert not board.is_valid_position(piece)
    piece.x = 9
    assert not board.is_valid_position(piece)
    piece.x = 8
    assert board.is_valid_position(piece)
    piece.y = 18
    assert board.is_valid_position(piece)
    assert not board.is_valid_position(piece, 0, 1)


def test_overlap_with_locked_cell_is_rejected():
    board = Board()
    board.grid[18, 4] = int(TetrominoType.Z)
    piece = Piece(TetrominoType.O)
    piece.y = 17
    assert not board.is_valid_position(piece)
    assert board.is_valid_position(piece, 2, 0)


def test_rows_above_board_skip_occupancy_but_not_walls():
    board = Board()
    piece = Piece(TetrominoType.O)
    piece.y = -1
    assert board.is_valid_position(piece)
    board.grid[0, 4] = 1
    assert not board.is_valid_position(piece)
    piece.y = -2
    assert board.is_valid_position(piece)
    piece.x = -1
    assert not board.is_valid_position(piece)


def test_override_shape_is_used_instead_of_current():
    board = Board()
    piece = Piece(TetrominoType.I)
    # Vertical I fills column x + 2
    vertical = piece.rotate()
    piece.x = -3
    assert not board.is_valid_position(piece)
    assert not board.is_valid_position(piece, 0, 0, vertical)
    piece.x = -2
    assert board.is_valid_position(piece, 0, 0, vertical)


def test_lock_piece_writes_token_and_drops_hidden_cells():
    board = Board()
    piece = Piece(TetrominoType.O)
    piece.y = -1
    board.lock_piece(piece)
    filled = list(zip(*np.nonzero(board.grid)))
    assert filled == [(0, 4), (0, 5)]
    assert board.cell(4, 0) == int(TetrominoType.O)


def test_clear_lines_removes_rows_and_keeps_order():
    board = Board()
    for row in range(board.height):
        board.grid[row, row % board.width] = 1
    board.grid[2, :] = 2
    board.grid[5, :] = 3
    original = board.grid.copy()

    assert board.find_complete_lines() == [2, 5]
    assert board.clear_lines([2, 5]) == 2

    assert board.grid.shape == (20, 10)
    assert not board.grid[0].any() and not board.grid[1].any()
    remaining = [r for r in range(20) if r not in (2, 5)]
    for new_row, old_row in enumerate(remaining, start=2):
        assert np.array_equal(board.grid[new_row], original[old_row])
    assert board.find_complete_lines() == []


def test_clear_lines_accepts_any_order():
    board = Board()
    board.grid[17:20, :] = 1
    board.grid[16, 0] = 4
    assert board.clear_lines([19, 17, 18]) == 3
    assert board.grid[19, 0] == 4
    assert int(board.grid.astype(bool).sum()) == 1


def test_game_over_only_when_top_row_occupied():
    board = Board()
    assert not board.is_game_over()
    board.grid[1, :] = 1
    assert not board.is_game_over()
    board.grid[0, 9] = 1
    assert board.is_game_over()


def test_ghost_position():
    board = Board()
    piece = Piece(TetrominoType.T)
    assert board.get_ghost_position(piece) == 18
    board.grid[10, 4] = 1
    assert board.get_ghost_position(piece) == 8
    assert (piece.x, piece.y) == (3, 0)


def test_height_and_holes():
    board = Board()
    assert board.get_max_height() == 0
    board.grid[15, 2] = 1
    board.grid[18, 2] = 1
    assert board.get_max_height() == 5
    assert board.count_holes() == 3
