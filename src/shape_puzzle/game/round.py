from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .shapes import FALLBACK_SHAPES, ShapeId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundConfig:
    """Shapes allowed in a round and how many holes to build."""

    active_shapes: Tuple[ShapeId, ...] = tuple(ShapeId)
    target_count: int = 6

    @classmethod
    def of(cls, active_shapes: Iterable[ShapeId], target_count: int) -> "RoundConfig":
        return cls(tuple(ShapeId(s) for s in active_shapes), int(target_count))

    def effective_shapes(self) -> Tuple[ShapeId, ...]:
        shapes = tuple(dict.fromkeys(ShapeId(s) for s in self.active_shapes))
        if not shapes:
            logger.debug("Empty active shape set, using fallback %s", [s.value for s in FALLBACK_SHAPES])
            return FALLBACK_SHAPES
        return shapes

    def effective_count(self) -> int:
        available = len(self.effective_shapes())
        return max(1, min(int(self.target_count), available))


@dataclass(frozen=True)
class Round:
    shapes: Tuple[ShapeId, ...]
    hole_order: Tuple[ShapeId, ...]
    tray_order: Tuple[ShapeId, ...]

    def __len__(self) -> int:
        return len(self.shapes)


class RoundGenerator:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def _shuffled(self, shapes: Iterable[ShapeId]) -> list[ShapeId]:
        out = list(shapes)
        self.rng.shuffle(out)
        return out

    def generate(self, config: RoundConfig) -> Round:
        # Shuffle then truncate: every active shape is equally likely to be dropped
        chosen = self._shuffled(config.effective_shapes())[: config.effective_count()]
        return Round(
            shapes=tuple(chosen),
            hole_order=tuple(self._shuffled(chosen)),
            tray_order=tuple(self._shuffled(chosen)),
        )
