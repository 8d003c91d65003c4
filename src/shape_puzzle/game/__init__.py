"""Game module for Shape Puzzle.

Exports the interaction and matching engine:
- ShapeId: Closed catalog of shapes with labels and default colours
- RoundConfig / RoundGenerator: Which shapes play and in what order
- Hole / Piece: Board slots and movable tokens
- PointerDragSession / TouchDragSession: One drag contract, two input modalities
- MatchEngine: Placement authority and win detection
- RoundController: Owns a round and routes drags
"""

from .shapes import ShapeId, ALL_SHAPES, FALLBACK_SHAPES, DEFAULT_COLORS, SHAPE_LABELS
from .round import RoundConfig, Round, RoundGenerator
from .board import Hole, Piece, PieceState
from .scene import Scene, SceneLayout, Node
from .timers import Scheduler
from .matching import MatchEngine, MatchResult, RoundProgress
from .drag import DragSession, PointerDragSession, TouchDragSession, SessionState
from .core import RoundController, Modality

__all__ = [
    "ShapeId",
    "ALL_SHAPES",
    "FALLBACK_SHAPES",
    "DEFAULT_COLORS",
    "SHAPE_LABELS",
    "RoundConfig",
    "Round",
    "RoundGenerator",
    "Hole",
    "Piece",
    "PieceState",
    "Scene",
    "SceneLayout",
    "Node",
    "Scheduler",
    "MatchEngine",
    "MatchResult",
    "RoundProgress",
    "DragSession",
    "PointerDragSession",
    "TouchDragSession",
    "SessionState",
    "RoundController",
    "Modality",
]
