from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .shapes import ShapeId


class PieceState(Enum):
    TRAY = "tray"
    DRAGGING = "dragging"
    PLACED = "placed"


@dataclass(eq=False)
class Hole:
    id: int
    required_shape: ShapeId
    occupied: bool = False


@dataclass(eq=False)
class Piece:
    id: int
    shape: ShapeId
    state: PieceState = PieceState.TRAY

    @property
    def draggable(self) -> bool:
        return self.state is PieceState.TRAY

    @property
    def placed(self) -> bool:
        return self.state is PieceState.PLACED
