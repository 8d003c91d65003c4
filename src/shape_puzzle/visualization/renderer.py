from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pygame

from shape_puzzle.game import Node, PointerDragSession, RoundController, ShapeId
from shape_puzzle.game.shapes import DEFAULT_COLORS, hex_to_rgb

Color = Tuple[int, int, int]

BACKGROUND = (245, 240, 230)
BOARD_BG = (222, 210, 190)
TRAY_BG = (232, 224, 210)
HOLE_FILL = (190, 176, 156)
HOLE_EDGE = (150, 136, 118)
TEXT = (60, 50, 40)
BUTTON_BG = (120, 90, 60)
BUTTON_TEXT = (250, 245, 235)

POP_SCALE = 1.15


def _regular_polygon(sides: int, radius: float = 45.0, center: float = 50.0) -> np.ndarray:
    angles = 2 * np.pi * np.arange(sides) / sides - np.pi / 2
    return np.stack([center + radius * np.cos(angles), center + radius * np.sin(angles)], axis=1)


# Outlines in a 100x100 view box; circles are drawn natively
SHAPE_POINTS: Dict[ShapeId, np.ndarray] = {
    ShapeId.TRIANGLE: np.array([[50, 6], [95, 90], [5, 90]], dtype=float),
    ShapeId.SQUARE: np.array([[10, 10], [90, 10], [90, 90], [10, 90]], dtype=float),
    ShapeId.RHOMBUS: np.array([[50, 4], [92, 50], [50, 96], [8, 50]], dtype=float),
    ShapeId.PENTAGON: _regular_polygon(5),
    ShapeId.CROSS: np.array(
        [[35, 5], [65, 5], [65, 35], [95, 35], [95, 65], [65, 65],
         [65, 95], [35, 95], [35, 65], [5, 65], [5, 35], [35, 35]],
        dtype=float,
    ),
}


def shape_points(shape: ShapeId, rect: pygame.Rect) -> List[Tuple[float, float]]:
    pts = SHAPE_POINTS[shape] / 100.0 * np.array([rect.width, rect.height]) + np.array([rect.x, rect.y])
    return [tuple(p) for p in pts.tolist()]


def draw_shape(surface: pygame.Surface, shape: ShapeId, rect: pygame.Rect, color: Color, width: int = 0) -> None:
    if shape is ShapeId.CIRCLE:
        radius = int(min(rect.width, rect.height) * 0.45)
        pygame.draw.circle(surface, color, rect.center, radius, width)
    else:
        pygame.draw.polygon(surface, color, shape_points(shape, rect), width)


class Renderer:
    def __init__(self, colors: Optional[Dict[ShapeId, str]] = None) -> None:
        colors = colors or DEFAULT_COLORS
        self.palette: Dict[ShapeId, Color] = {s: hex_to_rgb(colors.get(s, DEFAULT_COLORS[s])) for s in ShapeId}
        self._font: Optional[pygame.font.Font] = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 32)
        return self._font

    def _draw_hole(self, surface: pygame.Surface, node: Node) -> None:
        pygame.draw.rect(surface, BOARD_BG, node.rect)
        draw_shape(surface, node.model.required_shape, node.rect.inflate(-8, -8), HOLE_FILL)
        draw_shape(surface, node.model.required_shape, node.rect.inflate(-8, -8), HOLE_EDGE, width=3)

    def _draw_piece(self, surface: pygame.Surface, node: Node) -> None:
        rect = node.rect.inflate(-8, -8)
        if node.animating:
            rect = rect.inflate(int(rect.width * (POP_SCALE - 1)), int(rect.height * (POP_SCALE - 1)))
        draw_shape(surface, node.model.shape, rect, self.palette[node.model.shape])

    def _draw_nodes(self, surface: pygame.Surface, nodes: Iterable[Node]) -> None:
        for node in nodes:
            if not node.visible:
                continue
            if node.kind == "hole":
                self._draw_hole(surface, node)
            elif node.kind == "piece":
                self._draw_piece(surface, node)
            self._draw_nodes(surface, node.children)

    def _draw_drag_image(self, surface: pygame.Surface, session: PointerDragSession) -> None:
        if session.cursor is None or session.payload is None:
            return
        node = session.node
        image = pygame.Surface(node.rect.size, pygame.SRCALPHA)
        shape = ShapeId(session.payload)
        draw_shape(image, shape, image.get_rect().inflate(-8, -8), self.palette[shape])
        image.set_alpha(170)
        dx, dy = session.pointer_offset
        surface.blit(image, (session.cursor[0] - dx, session.cursor[1] - dy))

    def draw_button(self, surface: pygame.Surface, rect: pygame.Rect, label: str) -> None:
        pygame.draw.rect(surface, BUTTON_BG, rect, border_radius=10)
        text = self.font.render(label, True, BUTTON_TEXT)
        surface.blit(text, text.get_rect(center=rect.center))

    def draw_overlay(self, surface: pygame.Surface, message: str) -> None:
        shade = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 140))
        surface.blit(shade, (0, 0))
        big = pygame.font.SysFont(None, 72).render(message, True, (255, 255, 255))
        surface.blit(big, big.get_rect(center=(surface.get_width() // 2, surface.get_height() // 2 - 60)))

    def draw(self, surface: pygame.Surface, controller: RoundController) -> None:
        scene = controller.scene
        surface.fill(BACKGROUND)
        pygame.draw.rect(surface, BOARD_BG, scene.board.rect, border_radius=12)
        pygame.draw.rect(surface, TRAY_BG, scene.tray.rect, border_radius=12)
        for root in scene.roots:
            self._draw_nodes(surface, root.children)
        if isinstance(controller.active_session, PointerDragSession):
            self._draw_drag_image(surface, controller.active_session)
        progress = controller.progress
        status = self.font.render(f"{progress.placed_count} / {progress.target_count}", True, TEXT)
        surface.blit(status, (scene.board.rect.x, scene.layout_config.margin))
