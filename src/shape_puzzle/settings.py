"""User preference record: shape count, active shapes and colours.

Stored as JSON. Whatever is on disk is merged over the defaults, so older or
partial files keep working.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from shape_puzzle.game.round import RoundConfig
from shape_puzzle.game.shapes import ALL_SHAPES, DEFAULT_COLORS, ShapeId, hex_to_rgb, parse_shape

logger = logging.getLogger(__name__)

ENV_VAR = "SHAPE_PUZZLE_SETTINGS"


def default_settings_path() -> Path:
    override = os.environ.get(ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".shape_puzzle" / "settings.json"


@dataclass
class ShapeSettings:
    count: int = 6
    active_shapes: List[ShapeId] = field(default_factory=lambda: list(ALL_SHAPES))
    colors: Dict[ShapeId, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))

    def active_shape_set(self) -> Tuple[ShapeId, ...]:
        return tuple(self.active_shapes)

    def target_count(self) -> int:
        return int(self.count)

    def to_round_config(self) -> RoundConfig:
        return RoundConfig(self.active_shape_set(), self.target_count())

    def color_for(self, shape: ShapeId) -> Tuple[int, int, int]:
        return hex_to_rgb(self.colors.get(shape, DEFAULT_COLORS[shape]))

    def to_json(self) -> Dict[str, Any]:
        data = asdict(self)
        data["active_shapes"] = [s.value for s in self.active_shapes]
        data["colors"] = {s.value: c for s, c in self.colors.items()}
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any], base: Optional["ShapeSettings"] = None) -> "ShapeSettings":
        """Merge a stored record over `base` (defaults when omitted)."""
        out = base or cls()
        if "count" in data:
            out.count = int(data["count"])
        if "active_shapes" in data:
            out.active_shapes = [parse_shape(s) for s in data["active_shapes"]]
        colors = dict(out.colors)
        for name, value in (data.get("colors") or {}).items():
            try:
                shape = parse_shape(name)
                if not isinstance(value, str):
                    raise ValueError(f"expected a hex string, got {value!r}")
                hex_to_rgb(value)
            except ValueError as exc:
                logger.warning("Dropping colour entry %r: %s", name, exc)
                continue
            colors[shape] = value
        out.colors = colors
        return out


def load_settings(path: Optional[Path] = None) -> ShapeSettings:
    path = Path(path) if path is not None else default_settings_path()
    if not path.exists():
        return ShapeSettings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
        return ShapeSettings.from_json(data)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.error("Failed to load settings from %s: %s", path, exc)
        return ShapeSettings()


def save_settings(settings: ShapeSettings, path: Optional[Path] = None) -> Path:
    path = Path(path) if path is not None else default_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.to_json(), f, ensure_ascii=False, indent=2)
    return path
