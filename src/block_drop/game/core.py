from __future__ import annotations

import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Deque, List, Optional, Tuple

import numpy as np

from .grid import Board
from .pieces import Piece, create_random_piece
from .rules import PREVIEW_SIZE, WALL_KICKS, ScoringRules


logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class GameState(str, Enum):
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameOver"


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    HOLD = 5
    NONE = 6


@dataclass
class GameConfig:
    preview_size: int = PREVIEW_SIZE
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.preview_size < PREVIEW_SIZE:
            raise ValueError(f"preview_size must be at least {PREVIEW_SIZE}, got {self.preview_size}")


@dataclass(frozen=True, eq=False)
class BoardState:
    grid: np.ndarray
    ghost_offset: int


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view of a session for hosts; holds copies only."""

    state: GameState
    score: int
    level: int
    lines: int
    board: BoardState
    current_piece: Optional[Piece]
    next_pieces: Tuple[Piece, ...]
    hold_piece: Optional[Piece]
    can_hold: bool
    drop_interval: int


class BlockDropGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.clock = clock or monotonic_ms
        self.rng = random.Random(self.config.random_seed)
        self.board = Board()
        self.state = GameState.READY
        self.current: Optional[Piece] = None
        self.held: Optional[Piece] = None
        self.can_hold = True
        self.queue: Deque[Piece] = deque()
        self.score = 0
        self.level = 0
        self.lines = 0
        self.drop_interval = self.rules.drop_interval(0)
        self.last_drop_time = 0
        self._fill_queue()

    def seed(self, seed: Optional[int]) -> None:
        self.rng = random.Random(seed)
        self._fill_queue()

    def _fill_queue(self) -> None:
        self.queue = deque(create_random_piece(self.rng) for _ in range(self.config.preview_size))

    def _playing(self) -> bool:
        return self.state == GameState.PLAYING and self.current is not None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.board.reset()
        self.current = None
        self.held = None
        self.can_hold = True
        self.score = 0
        self.level = 0
        self.lines = 0
        self.drop_interval = self.rules.drop_interval(0)
        self._fill_queue()

    def start(self) -> bool:
        """Begin a fresh session; from paused or game over this is a restart."""
        self.reset()
        self.state = GameState.PLAYING
        logger.debug("Starting new session")
        self.spawn_piece()
        self.last_drop_time = self.clock()
        return True

    def spawn_piece(self) -> bool:
        self.current = self.queue.popleft() if self.queue else create_random_piece(self.rng)
        self.queue.append(create_random_piece(self.rng))
        self.can_hold = True
        if not self.board.is_valid_position(self.current):
            self._end_game("spawn blocked")
            return False
        return True

    def toggle_pause(self) -> bool:
        if self.state == GameState.PLAYING:
            self.state = GameState.PAUSED
        elif self.state == GameState.PAUSED:
            self.state = GameState.PLAYING
            self.last_drop_time = self.clock()
        else:
            return False
        logger.debug("Game %s", self.state.value)
        return True

    def _end_game(self, reason: str) -> None:
        self.state = GameState.GAME_OVER
        logger.info("Game over (%s): score=%d level=%d lines=%d", reason, self.score, self.level, self.lines)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def move_left(self) -> bool:
        if not self._playing():
            return False
        if self.board.is_valid_position(self.current, -1, 0):
            self.current.move_left()
            return True
        return False

    def move_right(self) -> bool:
        if not self._playing():
            return False
        if self.board.is_valid_position(self.current, 1, 0):
            self.current.move_right()
            return True
        return False

    def move_down(self) -> bool:
        """Step the piece down one row, or lock it when it has landed."""
        if not self._playing():
            return False
        if self.board.is_valid_position(self.current, 0, 1):
            self.current.move_down()
            self.score += self.rules.soft_drop_points
            return True
        self._lock_current_piece()
        return False

    def rotate(self) -> bool:
        if not self._playing():
            return False
        rotated = self.current.rotate()
        if self.board.is_valid_position(self.current, 0, 0, rotated):
            self.current.apply_rotation(rotated)
            return True
        for kick in WALL_KICKS:
            if self.board.is_valid_position(self.current, kick, 0, rotated):
                self.current.x += kick
                self.current.apply_rotation(rotated)
                return True
        return False

    def hard_drop(self) -> bool:
        if not self._playing():
            return False
        distance = 0
        while self.board.is_valid_position(self.current, 0, 1):
            self.current.move_down()
            distance += 1
        self.score += distance * self.rules.hard_drop_points
        self._lock_current_piece()
        return True

    def hold(self) -> bool:
        if not self._playing() or not self.can_hold:
            return False
        self.can_hold = False
        if self.held is None:
            self.held = Piece(self.current.kind)
            self.spawn_piece()
            # spawn_piece re-arms hold for the new piece; this turn already used it
            self.can_hold = False
        else:
            # Both pieces come back at spawn orientation and position
            current_kind = self.current.kind
            self.current = Piece(self.held.kind)
            self.held = Piece(current_kind)
            if not self.board.is_valid_position(self.current):
                self._end_game("hold swap blocked")
        return True

    def step(self, action: Action) -> bool:
        action = Action(action)
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.move_down()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        if action == Action.HOLD:
            return self.hold()
        return False

    def update(self, now: Optional[int] = None) -> bool:
        """Apply gravity once if the drop interval has elapsed.

        Gravity reuses ``move_down`` and therefore scores soft-drop points.
        """
        if self.state != GameState.PLAYING:
            return False
        if now is None:
            now = self.clock()
        if now - self.last_drop_time < self.drop_interval:
            return False
        self.move_down()
        self.last_drop_time = now
        return True

    def _lock_current_piece(self) -> None:
        if self.current is None:
            return
        self.board.lock_piece(self.current)
        logger.debug("Locked %s at (%d, %d)", self.current.kind.name, self.current.x, self.current.y)
        completed = self.board.find_complete_lines()
        if completed:
            cleared = self.board.clear_lines(completed)
            self.score += self.rules.score_for_lines(cleared, self.level)
            self.lines += cleared
            logger.debug("Cleared %d line(s), total %d", cleared, self.lines)
            new_level = self.rules.level_for_lines(self.lines)
            if new_level > self.level:
                self.level = new_level
                self.drop_interval = self.rules.drop_interval(self.level)
                logger.info("Level up: %d (drop interval %d ms)", self.level, self.drop_interval)
        if self.board.is_game_over():
            self._end_game("stack reached the top")
            return
        self.spawn_piece()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def current_piece(self) -> Optional[Piece]:
        return self.current.clone() if self.current is not None else None

    @property
    def hold_piece(self) -> Optional[Piece]:
        return self.held.clone() if self.held is not None else None

    @property
    def next_pieces(self) -> List[Piece]:
        return [piece.clone() for piece in self.queue]

    def get_board_state(self) -> BoardState:
        ghost = self.board.get_ghost_position(self.current) if self.current is not None else 0
        return BoardState(grid=self.board.clone_state(), ghost_offset=ghost)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            state=self.state,
            score=self.score,
            level=self.level,
            lines=self.lines,
            board=self.get_board_state(),
            current_piece=self.current_piece,
            next_pieces=tuple(self.next_pieces),
            hold_piece=self.hold_piece,
            can_hold=self.can_hold,
            drop_interval=self.drop_interval,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.board.clone_state()
        if self.current is not None and self.state != GameState.GAME_OVER:
            for x, y in self.current.cells():
                if 0 <= y < self.board.height and 0 <= x < self.board.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current.token
        return state
