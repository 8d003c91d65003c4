from __future__ import annotations

import argparse
import random
from typing import Optional

import gymnasium as gym

import shape_puzzle.env  # noqa: F401  ensure registration
from shape_puzzle.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper


def make_env(resample: bool = False) -> gym.Env:
    env = FlattenDiscreteActionWrapper(gym.make("ShapeMatch-v0"))
    if resample:
        env = ResampleInvalidActionWrapper(env)
    return env


def run_random(episodes: int = 5, seed: Optional[int] = None, resample: bool = False) -> float:
    """Play random episodes; returns the mean episode length in steps."""
    rng = random.Random(seed)
    env = make_env(resample=resample)
    total_steps = 0
    obs, info = env.reset(seed=seed)
    for ep in range(episodes):
        steps = 0
        while True:
            # Prefer valid actions if available
            valid = info.get("valid_actions", [])
            if valid and not resample:
                piece, hole = rng.choice(valid)
                action = piece * env.holes + hole
            else:
                action = env.action_space.sample()
            obs, reward, terminated, truncated, info = env.step(action)
            steps += 1
            if terminated or truncated:
                break
        total_steps += steps
        print(f"episode {ep + 1}: {steps} steps, placed {info['placed']}/{info['target']}")
        obs, info = env.reset()
    env.close()
    return total_steps / max(1, episodes)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--resample", action="store_true", help="Sample blindly and let the wrapper fix invalid picks")
    return p


def main() -> None:
    args = build_parser().parse_args()
    mean_steps = run_random(args.episodes, args.seed, args.resample)
    print(f"Random agent mean episode length: {mean_steps:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
