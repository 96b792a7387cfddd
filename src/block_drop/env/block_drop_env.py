from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_drop.game import Action, BlockDropGame, GameConfig, GameState, TetrominoType
from block_drop.game.pieces import COLORS
from block_drop.game.rules import WALL_KICKS


def _hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


PALETTE = {int(kind): _hex_to_rgb(color) for kind, color in COLORS.items()}
EMPTY_RGB = (30, 30, 36)


def compute_action_mask(game: BlockDropGame) -> np.ndarray:
    mask = np.zeros((len(Action),), dtype=np.bool_)
    mask[Action.NONE] = True
    if game.state != GameState.PLAYING or game.current is None:
        return mask
    board, piece = game.board, game.current
    mask[Action.LEFT] = board.is_valid_position(piece, -1, 0)
    mask[Action.RIGHT] = board.is_valid_position(piece, 1, 0)
    rotated = piece.rotate()
    mask[Action.ROTATE] = any(board.is_valid_position(piece, dx, 0, rotated) for dx in (0, *WALL_KICKS))
    mask[Action.SOFT_DROP] = True
    mask[Action.HARD_DROP] = True
    mask[Action.HOLD] = game.can_hold
    return mask


class BlockDropEnv(gym.Env):
    """Single-player falling-block environment driven by discrete commands.

    Every step applies one ``Action`` and then advances a virtual clock by
    ``frame_ms`` before ticking gravity, so episodes are reproducible and
    independent of wall time. The reward is the engine score delta.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        frame_ms: int = 100,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self._now = 0
        self.game = BlockDropGame(config, clock=lambda: self._now)
        self.render_mode = render_mode
        self.frame_ms = int(frame_ms)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.board.height, self.game.board.width
        k = self.game.config.preview_size
        n_types = len(TetrominoType)

        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_types, high=n_types, shape=(h, w), dtype=np.int8),
                "next": spaces.Box(low=1, high=n_types, shape=(k,), dtype=np.int8),
                "hold": spaces.Discrete(n_types + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        held = self.game.held
        obs: Dict[str, Any] = {
            "board": self.game.get_state().astype(np.int8),
            "next": np.array([piece.token for piece in self.game.queue], dtype=np.int8),
            "hold": 0 if held is None else held.token,
        }
        return obs

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "action_mask": compute_action_mask(self.game),
            "score": self.game.score,
            "level": self.game.level,
            "lines": self.game.lines,
            "max_height": self.game.board.get_max_height(),
            "holes": self.game.board.count_holes(),
            "steps": self._steps,
        }
        return info

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.seed(seed)
        self._now = 0
        self._steps = 0
        self.game.start()
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"Invalid action {action!r}")
        score_before = self.game.score

        self.game.step(Action(int(action)))
        self._now += self.frame_ms
        self.game.update(self._now)

        self._steps += 1
        terminated = self.game.state == GameState.GAME_OVER
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(self.game.score - score_before)

        obs = self._get_obs()
        info = self._get_info()
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = self._last_obs["board"] if self._last_obs is not None else self.game.get_state()
            cell = 12
            h, w = board.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = PALETTE.get(abs(int(board[y, x])), EMPTY_RGB)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
