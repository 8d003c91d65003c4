from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Dict, List, Optional

from shape_puzzle.audio import AudioCues, NullCues

from .board import Hole, Piece
from .drag import DragSession, PointerDragSession, TouchDragSession
from .matching import MatchEngine, MatchResult, RoundProgress
from .round import Round, RoundConfig, RoundGenerator
from .scene import Scene
from .timers import Scheduler

logger = logging.getLogger(__name__)


class Modality(Enum):
    POINTER = "pointer"
    TOUCH = "touch"


SESSION_TYPES = {
    Modality.POINTER: PointerDragSession,
    Modality.TOUCH: TouchDragSession,
}


class RoundController:
    """Owns one round at a time: holes, pieces, drag sessions and progress.

    `start_round` throws all of it away, pending delayed callbacks included,
    and builds fresh instances; only the last configuration survives, so
    `reset` can replay it.
    """

    def __init__(
        self,
        cues: Optional[AudioCues] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        scene: Optional[Scene] = None,
    ) -> None:
        self.cues = cues if cues is not None else NullCues()
        self.scheduler = scheduler or Scheduler()
        self.generator = RoundGenerator(rng)
        self.scene = scene or Scene()
        self.on_round_complete: List[Callable[[], None]] = []

        self.config: Optional[RoundConfig] = None
        self.round: Optional[Round] = None
        self.holes: List[Hole] = []
        self.pieces: List[Piece] = []
        self.progress = RoundProgress()
        self.engine: Optional[MatchEngine] = None
        self.sessions: Dict[Piece, Dict[Modality, DragSession]] = {}
        self.active_session: Optional[DragSession] = None
        self.active_pointer_id: Optional[int] = None

    def subscribe(self, callback: Callable[[], None]) -> None:
        self.on_round_complete.append(callback)

    def _notify_complete(self) -> None:
        logger.info("Round complete: %d/%d placed", self.progress.placed_count, self.progress.target_count)
        for callback in list(self.on_round_complete):
            callback()

    def start_round(self, config: RoundConfig) -> Round:
        self.config = config
        self.scheduler.cancel_all()
        self.active_session = None
        self.active_pointer_id = None
        self.scene.clear()

        rnd = self.generator.generate(config)
        self.round = rnd
        self.holes = [Hole(id=i, required_shape=s) for i, s in enumerate(rnd.hole_order)]
        self.pieces = [Piece(id=i, shape=s) for i, s in enumerate(rnd.tray_order)]
        self.progress = RoundProgress(placed_count=0, target_count=len(rnd.shapes))
        self.engine = MatchEngine(self.progress, self.scene, self.cues, self.scheduler, self._notify_complete)

        for hole in self.holes:
            self.scene.add_hole(hole)
        self.sessions = {}
        for piece in self.pieces:
            self.scene.add_piece(piece)
            self.sessions[piece] = {
                modality: cls(piece, self.scene, self.engine) for modality, cls in SESSION_TYPES.items()
            }
        self.scene.layout()
        logger.info("New round: %s", [s.value for s in rnd.shapes])
        return rnd

    def reset(self) -> Round:
        return self.start_round(self.config or RoundConfig())

    @property
    def won(self) -> bool:
        return self.progress.won

    def session_for(self, piece: Piece, modality: Modality) -> DragSession:
        return self.sessions[piece][modality]

    def piece_at(self, x: float, y: float) -> Optional[Piece]:
        piece = self.scene.piece_at(x, y)
        if piece is not None and piece.draggable:
            return piece
        return None

    def begin_drag(self, piece: Piece, modality: Modality, x: float, y: float,
                   pointer_id: Optional[int] = None) -> Optional[DragSession]:
        if self.active_session is not None:
            logger.debug("Drag already in progress; ignoring %s start", modality.value)
            return None
        if piece not in self.sessions:
            logger.debug("Piece %r is not part of the current round", piece)
            return None
        session = self.session_for(piece, modality)
        if not session.begin(x, y):
            return None
        self.active_session = session
        self.active_pointer_id = pointer_id
        return session

    def _owns(self, pointer_id: Optional[int]) -> bool:
        if self.active_session is None:
            return False
        return self.active_pointer_id is None or pointer_id == self.active_pointer_id

    def move_drag(self, x: float, y: float, pointer_id: Optional[int] = None) -> None:
        if self._owns(pointer_id):
            self.active_session.update(x, y)  # type: ignore[union-attr]

    def end_drag(self, x: float, y: float, pointer_id: Optional[int] = None) -> Optional[MatchResult]:
        if not self._owns(pointer_id):
            logger.debug("Drop at (%s, %s) without an active drag", x, y)
            return None
        session, self.active_session, self.active_pointer_id = self.active_session, None, None
        return session.end(x, y)  # type: ignore[union-attr]

    def drop_on(self, hole: Optional[Hole]) -> Optional[MatchResult]:
        session = self.active_session
        if not isinstance(session, PointerDragSession):
            logger.debug("Direct drop without an active pointer drag")
            return None
        self.active_session, self.active_pointer_id = None, None
        return session.drop_on(hole)

    def cancel_drag(self) -> Optional[MatchResult]:
        session, self.active_session, self.active_pointer_id = self.active_session, None, None
        if session is None:
            return None
        return session.cancel()
