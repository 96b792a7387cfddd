"""Gymnasium environments for Block Drop."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default Block Drop environment (7 discrete commands)
register(
    id="BlockDrop-v0",
    entry_point="block_drop.env.block_drop_env:BlockDropEnv",
)

__all__ = ["BlockDrop-v0"]
