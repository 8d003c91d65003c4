"""Drag sessions: one uniform begin/update/end contract over two input modalities.

``PointerDragSession`` follows a mouse drag: the piece stays where it is while
the front end paints a drag image from ``payload`` and ``cursor``.
``TouchDragSession`` follows a finger: the piece's node is lifted onto the
scene's drag layer and tracks the touch point.

Either way the drop is handed to the MatchEngine; anything other than an
accepted placement puts the piece back exactly where it came from.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

from .board import Hole, Piece, PieceState
from .matching import MatchEngine, MatchResult
from .scene import Node, Scene

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    REVERTED = "reverted"


class DragSession(ABC):
    modality = ""

    def __init__(self, piece: Piece, scene: Scene, engine: MatchEngine) -> None:
        self.piece = piece
        self.scene = scene
        self.engine = engine
        self.state = SessionState.IDLE
        self.detached = False
        self.origin_parent: Optional[Node] = None
        self.origin_index = -1
        self.pointer_offset: Tuple[float, float] = (0.0, 0.0)
        self.last_result: Optional[MatchResult] = None
        # Terminal state of the most recent drag
        self.outcome: Optional[SessionState] = None

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def node(self) -> Node:
        return self.scene.node_for(self.piece)

    def detach(self) -> None:
        self.detached = True

    def begin(self, x: float, y: float) -> bool:
        if self.detached or self.active or self.piece.state is not PieceState.TRAY:
            logger.debug("Ignoring %s drag start on %s piece", self.modality, self.piece.state.value)
            return False
        node = self.node
        self.origin_parent = node.parent
        self.origin_index = node.index_in_parent()
        self.pointer_offset = (x - node.rect.x, y - node.rect.y)
        self.piece.state = PieceState.DRAGGING
        self.state = SessionState.ACTIVE
        self._on_begin(node, x, y)
        return True

    def update(self, x: float, y: float) -> None:
        if not self.active:
            logger.debug("Ignoring %s move without an active drag", self.modality)
            return
        self._on_update(self.node, x, y)

    def end(self, x: float, y: float) -> Optional[MatchResult]:
        if not self.active:
            logger.debug("Ignoring %s drop without an active drag", self.modality)
            return None
        return self._finish(self._resolve_target(x, y))

    def cancel(self) -> Optional[MatchResult]:
        if not self.active:
            return None
        return self._finish(None)

    def _finish(self, hole: Optional[Hole]) -> MatchResult:
        node = self.node
        self._clear_overrides(node)
        result = self.engine.attempt_place(self.piece, hole)
        self.last_result = result
        if result is MatchResult.ACCEPTED:
            self.state = SessionState.COMMITTED
            self.outcome = SessionState.COMMITTED
            self.detach()
        else:
            self._revert(node)
        return result

    def _revert(self, node: Node) -> None:
        self.piece.state = PieceState.TRAY
        if self.origin_parent is not None:
            self.scene.restore(node, self.origin_parent, self.origin_index)
        self.outcome = SessionState.REVERTED
        self.state = SessionState.IDLE

    @abstractmethod
    def _on_begin(self, node: Node, x: float, y: float) -> None: ...

    @abstractmethod
    def _on_update(self, node: Node, x: float, y: float) -> None: ...

    @abstractmethod
    def _resolve_target(self, x: float, y: float) -> Optional[Hole]: ...

    @abstractmethod
    def _clear_overrides(self, node: Node) -> None: ...


class PointerDragSession(DragSession):
    modality = "pointer"

    def __init__(self, piece: Piece, scene: Scene, engine: MatchEngine) -> None:
        super().__init__(piece, scene, engine)
        self.payload: Optional[str] = None
        self.cursor: Optional[Tuple[float, float]] = None

    def _on_begin(self, node: Node, x: float, y: float) -> None:
        # The drag carries the shape as plain text, like a native drag payload
        self.payload = self.piece.shape.value
        self.cursor = (x, y)

    def _on_update(self, node: Node, x: float, y: float) -> None:
        self.cursor = (x, y)

    def _resolve_target(self, x: float, y: float) -> Optional[Hole]:
        return self.scene.hole_at(x, y)

    def _clear_overrides(self, node: Node) -> None:
        self.payload = None
        self.cursor = None

    def drop_on(self, hole: Optional[Hole]) -> Optional[MatchResult]:
        """Drop delivered straight onto a known target."""
        if not self.active:
            logger.debug("Ignoring pointer drop without an active drag")
            return None
        return self._finish(hole)


class TouchDragSession(DragSession):
    modality = "touch"

    def _on_begin(self, node: Node, x: float, y: float) -> None:
        self.scene.float_node(node, node.rect.copy())
        self._move(node, x, y)

    def _on_update(self, node: Node, x: float, y: float) -> None:
        self._move(node, x, y)

    def _move(self, node: Node, x: float, y: float) -> None:
        dx, dy = self.pointer_offset
        node.rect.topleft = (round(x - dx), round(y - dy))

    def _resolve_target(self, x: float, y: float) -> Optional[Hole]:
        # Hide the lifted piece so it does not cover the hole beneath the finger
        node = self.node
        node.visible = False
        try:
            return self.scene.hole_at(x, y)
        finally:
            node.visible = True

    def _clear_overrides(self, node: Node) -> None:
        node.floating = False
