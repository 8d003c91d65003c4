from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import pygame

from .board import Hole, Piece


Point = Tuple[int, int]


@dataclass
class SceneLayout:
    width: int = 760
    height: int = 640
    margin: int = 20
    header: int = 40
    board_height: int = 290
    cell_size: int = 100
    gap: int = 18


class Node:
    """Opaque presentation handle for a container, a hole or a piece.

    Nodes form a small tree (containers -> holes/pieces -> anchored piece).
    Drawing order follows the tree; hit testing walks it back to front.
    """

    def __init__(self, kind: str, model: Union[Hole, Piece, None] = None, hittable: bool = True) -> None:
        self.kind = kind
        self.model = model
        self.rect = pygame.Rect(0, 0, 0, 0)
        self.parent: Optional[Node] = None
        self.children: List[Node] = []
        self.visible = True
        self.floating = False
        self.animating = False
        self.hittable = hittable

    def index_in_parent(self) -> int:
        if self.parent is None:
            return -1
        return self.parent.children.index(self)

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def insert(self, child: "Node", index: Optional[int] = None) -> None:
        child.detach()
        if index is None or index >= len(self.children) or index < 0:
            self.children.append(child)
        else:
            self.children.insert(index, child)
        child.parent = self

    def __repr__(self) -> str:
        return f"Node({self.kind}, {self.model!r}, rect={tuple(self.rect)})"


class Scene:
    def __init__(self, layout: Optional[SceneLayout] = None) -> None:
        self.layout_config = layout or SceneLayout()
        cfg = self.layout_config
        inner_w = cfg.width - 2 * cfg.margin
        self.board = Node("board")
        self.board.rect = pygame.Rect(cfg.margin, cfg.margin + cfg.header, inner_w, cfg.board_height)
        tray_top = self.board.rect.bottom + cfg.margin
        self.tray = Node("tray")
        self.tray.rect = pygame.Rect(cfg.margin, tray_top, inner_w, cfg.height - tray_top - cfg.margin)
        # Free positioning layer above board and tray
        self.drag_layer = Node("drag_layer", hittable=False)
        self.drag_layer.rect = pygame.Rect(0, 0, cfg.width, cfg.height)
        self._nodes: Dict[Union[Hole, Piece], Node] = {}

    @property
    def roots(self) -> Tuple[Node, Node, Node]:
        # Paint order; hit testing uses the reverse
        return self.tray, self.board, self.drag_layer

    def clear(self) -> None:
        for root in self.roots:
            for child in list(root.children):
                child.detach()
        self._nodes.clear()

    def add_hole(self, hole: Hole) -> Node:
        node = Node("hole", hole)
        self.board.insert(node)
        self._nodes[hole] = node
        return node

    def add_piece(self, piece: Piece) -> Node:
        node = Node("piece", piece)
        self.tray.insert(node)
        self._nodes[piece] = node
        return node

    def node_for(self, model: Union[Hole, Piece]) -> Node:
        return self._nodes[model]

    def layout(self) -> None:
        """Flow holes and tray pieces into rows; anchored pieces fill their hole."""
        for container in (self.board, self.tray):
            self._flow(container)
        for hole_node in self.board.children:
            for child in hole_node.children:
                if not child.floating:
                    child.rect = hole_node.rect.copy()

    def _flow(self, container: Node) -> None:
        cfg = self.layout_config
        items = [c for c in container.children if not c.floating]
        if not items:
            return
        step = cfg.cell_size + cfg.gap
        per_row = max(1, (container.rect.width + cfg.gap) // step)
        for idx, node in enumerate(items):
            row, col = divmod(idx, per_row)
            in_row = min(per_row, len(items) - row * per_row)
            row_w = in_row * step - cfg.gap
            x0 = container.rect.x + (container.rect.width - row_w) // 2
            y0 = container.rect.y + cfg.gap // 2
            node.rect = pygame.Rect(x0 + col * step, y0 + row * step, cfg.cell_size, cfg.cell_size)

    def hit_test(self, x: float, y: float) -> Optional[Node]:
        point = (int(x), int(y))
        for root in reversed(self.roots):
            hit = self._hit(root, point)
            if hit is not None:
                return hit
        return None

    def _hit(self, node: Node, point: Point) -> Optional[Node]:
        if not node.visible:
            return None
        for child in reversed(node.children):
            hit = self._hit(child, point)
            if hit is not None:
                return hit
        if node.hittable and node.rect.collidepoint(point):
            return node
        return None

    def hole_at(self, x: float, y: float) -> Optional[Hole]:
        node = self.hit_test(x, y)
        while node is not None and node.kind != "hole":
            node = node.parent
        return node.model if node is not None else None  # type: ignore[return-value]

    def piece_at(self, x: float, y: float) -> Optional[Piece]:
        node = self.hit_test(x, y)
        if node is not None and node.kind == "piece":
            return node.model  # type: ignore[return-value]
        return None

    def float_node(self, node: Node, rect: pygame.Rect) -> None:
        self.drag_layer.insert(node)
        node.floating = True
        node.rect = pygame.Rect(rect)

    def restore(self, node: Node, parent: Node, index: int) -> None:
        node.floating = False
        node.visible = True
        parent.insert(node, index)
        self.layout()

    def anchor(self, piece: Piece, hole: Hole) -> Node:
        piece_node = self.node_for(piece)
        hole_node = self.node_for(hole)
        piece_node.floating = False
        piece_node.visible = True
        hole_node.insert(piece_node)
        self.layout()
        return piece_node

    def pieces_in(self, container: Node) -> List[Piece]:
        return [c.model for c in container.children if c.kind == "piece"]  # type: ignore[misc]
