from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class ShapeId(str, Enum):
    RHOMBUS = "rhombus"
    PENTAGON = "pentagon"
    SQUARE = "square"
    CROSS = "cross"
    TRIANGLE = "triangle"
    CIRCLE = "circle"

    def __str__(self) -> str:
        return self.value


ALL_SHAPES: Tuple[ShapeId, ...] = tuple(ShapeId)

# Substituted when a configuration arrives with no active shapes
FALLBACK_SHAPES: Tuple[ShapeId, ...] = (ShapeId.CIRCLE, ShapeId.TRIANGLE, ShapeId.SQUARE)

SHAPE_LABELS: Dict[ShapeId, str] = {
    ShapeId.CIRCLE: "まる",
    ShapeId.TRIANGLE: "さんかく",
    ShapeId.SQUARE: "しかく",
    ShapeId.RHOMBUS: "ひしがた",
    ShapeId.PENTAGON: "ごかくけい",
    ShapeId.CROSS: "じゅうじ",
}

DEFAULT_COLORS: Dict[ShapeId, str] = {
    ShapeId.CIRCLE: "#e74c3c",
    ShapeId.TRIANGLE: "#3498db",
    ShapeId.SQUARE: "#2ecc71",
    ShapeId.RHOMBUS: "#9b59b6",
    ShapeId.PENTAGON: "#f1c40f",
    ShapeId.CROSS: "#e67e22",
}


def parse_shape(name: str) -> ShapeId:
    try:
        return ShapeId(str(name).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown shape {name!r}; expected one of {[s.value for s in ShapeId]}") from None


def shape_label(shape: ShapeId) -> str:
    return SHAPE_LABELS.get(shape, shape.value)


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Convert '#rrggbb' (or 'rrggbb') to an RGB tuple."""
    v = value.lstrip("#")
    if len(v) != 6:
        raise ValueError(f"Expected a #rrggbb colour, got {value!r}")
    return int(v[0:2], 16), int(v[2:4], 16), int(v[4:6], 16)
