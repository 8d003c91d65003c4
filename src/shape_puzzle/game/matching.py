from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from shape_puzzle.audio import AudioCues

from .board import Hole, Piece, PieceState
from .scene import Scene
from .timers import Scheduler

logger = logging.getLogger(__name__)

POP_ANIMATION_MS = 300


class MatchResult(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class RoundProgress:
    placed_count: int = 0
    target_count: int = 0

    @property
    def won(self) -> bool:
        return self.target_count > 0 and self.placed_count == self.target_count


class MatchEngine:
    """Single authority for committing a piece into a hole."""

    def __init__(
        self,
        progress: RoundProgress,
        scene: Scene,
        cues: AudioCues,
        scheduler: Scheduler,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        self.progress = progress
        self.scene = scene
        self.cues = cues
        self.scheduler = scheduler
        self.on_complete = on_complete
        self._completed = False

    @staticmethod
    def accepts(piece: Piece, hole: Hole) -> bool:
        return (
            piece.shape == hole.required_shape
            and not hole.occupied
            and piece.state is PieceState.DRAGGING
        )

    def attempt_place(self, piece: Piece, hole: Optional[Hole]) -> MatchResult:
        if hole is None or not self.accepts(piece, hole):
            logger.debug("Rejected %s on %s", piece, hole)
            return MatchResult.REJECTED

        self.cues.on_piece_matched()
        hole.occupied = True
        piece.state = PieceState.PLACED
        node = self.scene.anchor(piece, hole)
        node.animating = True
        self.scheduler.call_later(POP_ANIMATION_MS, lambda: setattr(node, "animating", False))

        self.progress.placed_count += 1
        logger.debug("Placed %s (%d/%d)", piece.shape.value, self.progress.placed_count, self.progress.target_count)
        if self.progress.won and not self._completed:
            self._completed = True
            self.cues.on_round_won()
            if self.on_complete is not None:
                self.on_complete()
        return MatchResult.ACCEPTED
