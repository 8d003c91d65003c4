from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from shape_puzzle.game import (
    ALL_SHAPES,
    DEFAULT_COLORS,
    MatchResult,
    Modality,
    RoundConfig,
    RoundController,
    Scheduler,
)
from shape_puzzle.game.shapes import hex_to_rgb

SHAPE_INDEX = {shape: i for i, shape in enumerate(ALL_SHAPES)}


def _compute_action_mask(controller: RoundController, slots: int) -> np.ndarray:
    mask = np.zeros((slots, slots), dtype=np.bool_)
    for p_idx, piece in enumerate(controller.pieces[:slots]):
        if not piece.draggable:
            continue
        for h_idx, hole in enumerate(controller.holes[:slots]):
            if not hole.occupied and hole.required_shape == piece.shape:
                mask[p_idx, h_idx] = True
    return mask


class ShapeMatchEnv(gym.Env):
    """Agent-facing wrapper around one RoundController.

    Action: (tray slot, hole slot). Each step is a complete pointer drag of that
    piece dropped on that hole, so placement goes through the same sessions and
    MatchEngine as the interactive game.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[RoundConfig] = None,
        render_mode: Optional[str] = None,
        match_reward: float = 1.0,
        win_bonus: float = 5.0,
        invalid_action_penalty: float = -0.1,
        max_episode_steps: int = 100,
    ) -> None:
        super().__init__()
        self.config = config or RoundConfig()
        self.render_mode = render_mode
        self.match_reward = float(match_reward)
        self.win_bonus = float(win_bonus)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.max_episode_steps = int(max_episode_steps)

        self.slots = len(ALL_SHAPES)
        n_kinds = len(ALL_SHAPES)
        # Shape indices per slot, -1 where the slot is empty or the piece is placed
        self.observation_space = spaces.Dict(
            {
                "holes": spaces.Box(low=-1, high=n_kinds - 1, shape=(self.slots,), dtype=np.int8),
                "occupied": spaces.MultiBinary(self.slots),
                "pieces": spaces.Box(low=-1, high=n_kinds - 1, shape=(self.slots,), dtype=np.int8),
            }
        )
        self.action_space = spaces.MultiDiscrete((self.slots, self.slots))

        # Env time is the step count; delayed callbacks are cosmetic only
        self._steps = 0
        self.controller = RoundController(scheduler=Scheduler(clock=lambda: self._steps))
        self.controller.start_round(self.config)

    def _get_obs(self) -> Dict[str, Any]:
        holes = np.full((self.slots,), -1, dtype=np.int8)
        occupied = np.zeros((self.slots,), dtype=np.int8)
        pieces = np.full((self.slots,), -1, dtype=np.int8)
        for i, hole in enumerate(self.controller.holes[: self.slots]):
            holes[i] = SHAPE_INDEX[hole.required_shape]
            occupied[i] = int(hole.occupied)
        for i, piece in enumerate(self.controller.pieces[: self.slots]):
            if not piece.placed:
                pieces[i] = SHAPE_INDEX[piece.shape]
        return {"holes": holes, "occupied": occupied, "pieces": pieces}

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        mask = _compute_action_mask(self.controller, self.slots)
        return [(int(p), int(h)) for p, h in zip(*np.nonzero(mask))]

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.controller, self.slots),
            "valid_actions": self.get_valid_actions(),
            "placed": self.controller.progress.placed_count,
            "target": self.controller.progress.target_count,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self._steps = 0
        if seed is not None:
            self.controller.generator.rng = random.Random(seed)
        config = (options or {}).get("config", self.config)
        self.config = config
        self.controller.start_round(config)
        return self._get_obs(), self._get_info()

    def _drag(self, piece_idx: int, hole_idx: int) -> Optional[MatchResult]:
        controller = self.controller
        if not (0 <= piece_idx < len(controller.pieces) and 0 <= hole_idx < len(controller.holes)):
            return None
        piece = controller.pieces[piece_idx]
        node = controller.scene.node_for(piece)
        if controller.begin_drag(piece, Modality.POINTER, *node.rect.center) is None:
            return None
        return controller.drop_on(controller.holes[hole_idx])

    def step(self, action):
        piece_idx, hole_idx = map(int, np.asarray(action).reshape(-1)[:2])
        result = self._drag(piece_idx, hole_idx)
        self._steps += 1
        self.controller.scheduler.run_due()

        reward_components: Dict[str, float] = {}
        if result is MatchResult.ACCEPTED:
            reward_components["match"] = self.match_reward
            if self.controller.won:
                reward_components["win"] = self.win_bonus
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(self.controller.won)
        truncated = not terminated and self._steps >= self.max_episode_steps
        info = self._get_info()
        info["reward_components"] = reward_components
        info["result"] = result.value if result is not None else None
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        # Top row: holes (dim when empty, full colour when filled); bottom row: tray
        cell = 16
        img = np.full((2 * cell, self.slots * cell, 3), 30, dtype=np.uint8)
        for i, hole in enumerate(self.controller.holes[: self.slots]):
            rgb = np.array(hex_to_rgb(DEFAULT_COLORS[hole.required_shape]), dtype=np.uint16)
            color = rgb if hole.occupied else rgb // 3
            img[2 : cell - 2, i * cell + 2 : (i + 1) * cell - 2, :] = color.astype(np.uint8)
        for i, piece in enumerate(self.controller.pieces[: self.slots]):
            if piece.placed:
                continue
            img[cell + 2 : 2 * cell - 2, i * cell + 2 : (i + 1) * cell - 2, :] = hex_to_rgb(DEFAULT_COLORS[piece.shape])
        return img

    def close(self) -> None:
        self.controller.scheduler.cancel_all()
