from __future__ import annotations

import argparse
import logging
from typing import Optional

import gymnasium as gym

import block_drop.env  # noqa: F401
from block_drop.env.wrappers import ResampleInvalidActionWrapper


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = ResampleInvalidActionWrapper(gym.make("BlockDrop-v0"))
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample(mask=info["action_mask"].astype("int8"))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logging.info("Episode %d finished: score=%d lines=%d", episodes, info["score"], info["lines"])
            obs, info = env.reset()
    env.close()
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper())
    total_reward = run_random(args.steps, args.seed)
    print(f"Random agent total reward: {total_reward:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
