"""Game module for Block Drop.

Exports the core game engine and supporting classes:
- Board: Grid representation, collision tests and line clearing
- Piece: Tetromino piece with rotation mechanics
- TetrominoType: Enum of available piece types
- ScoringRules: Scoring and level progression tables
- BlockDropGame: Session state machine, commands and gravity tick
"""

from .grid import Board
from .pieces import Piece, TetrominoType, create_random_piece, random_piece_type
from .rules import ScoringRules
from .core import Action, BlockDropGame, BoardState, GameConfig, GameSnapshot, GameState

__all__ = [
    "Board",
    "Piece",
    "TetrominoType",
    "create_random_piece",
    "random_piece_type",
    "ScoringRules",
    "Action",
    "BlockDropGame",
    "BoardState",
    "GameConfig",
    "GameSnapshot",
    "GameState",
]
