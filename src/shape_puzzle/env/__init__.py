"""Gymnasium environments for Shape Puzzle."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .shape_match_env import ShapeMatchEnv

# Register the shape matching environment (tray slot, hole slot actions)
register(
    id="ShapeMatch-v0",
    entry_point="shape_puzzle.env.shape_match_env:ShapeMatchEnv",
)

__all__ = ["ShapeMatchEnv", "ShapeMatch-v0"]
