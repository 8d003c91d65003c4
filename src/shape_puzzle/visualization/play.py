from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from shape_puzzle.audio import SAMPLE_RATE, AudioCues, NullCues, PygameCues
from shape_puzzle.game import Modality, RoundController, Scene, SceneLayout, Scheduler
from shape_puzzle.game.shapes import parse_shape
from shape_puzzle.settings import ShapeSettings, load_settings, save_settings
from .renderer import Renderer

logger = logging.getLogger(__name__)

WIN_OVERLAY_DELAY_MS = 500
MOUSE_POINTER_ID = -1


@dataclass
class Button:
    label: str
    rect: pygame.Rect

    def is_clicked(self, pos: Tuple[float, float]) -> bool:
        return self.rect.collidepoint(int(pos[0]), int(pos[1]))


class ShapePuzzleApp:
    """Translates pygame input into RoundController calls.

    Mouse events drive pointer drags and finger events drive touch drags;
    mouse events that SDL synthesises from touches are skipped so a finger
    is never seen twice.
    """

    def __init__(self, settings: ShapeSettings, cues: Optional[AudioCues] = None, seed: Optional[int] = None,
                 layout: Optional[SceneLayout] = None, scheduler: Optional[Scheduler] = None) -> None:
        self.settings = settings
        self.layout = layout or SceneLayout()
        self.scheduler = scheduler or Scheduler()
        self.controller = RoundController(
            cues=cues,
            scheduler=self.scheduler,
            rng=random.Random(seed),
            scene=Scene(self.layout),
        )
        self.controller.subscribe(self._on_round_complete)
        self.overlay_visible = False
        cfg = self.layout
        self.reset_button = Button("Reset", pygame.Rect(cfg.width - cfg.margin - 120, 8, 120, 40))
        self.play_again_button = Button(
            "Play Again", pygame.Rect(cfg.width // 2 - 110, cfg.height // 2 + 10, 220, 56)
        )

    def start(self) -> None:
        self.overlay_visible = False
        self.controller.start_round(self.settings.to_round_config())

    def restart(self) -> None:
        self.overlay_visible = False
        self.controller.reset()

    def _on_round_complete(self) -> None:
        self.scheduler.call_later(WIN_OVERLAY_DELAY_MS, self._show_overlay)

    def _show_overlay(self) -> None:
        self.overlay_visible = True

    def _press(self, modality: Modality, pos: Tuple[float, float], pointer_id: int) -> None:
        if self.overlay_visible:
            if self.play_again_button.is_clicked(pos):
                self.restart()
            return
        if self.reset_button.is_clicked(pos):
            self.restart()
            return
        piece = self.controller.piece_at(*pos)
        if piece is not None:
            self.controller.begin_drag(piece, modality, pos[0], pos[1], pointer_id=pointer_id)

    def handle_event(self, event: pygame.event.Event, size: Tuple[int, int]) -> bool:
        """Apply one event; returns False when the app should quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key in (pygame.K_r, pygame.K_n):
                self.restart()
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.controller.cancel_drag()
        elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION, pygame.MOUSEBUTTONUP):
            if getattr(event, "touch", False):
                return True
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._press(Modality.POINTER, event.pos, MOUSE_POINTER_ID)
            elif event.type == pygame.MOUSEMOTION:
                self.controller.move_drag(*event.pos, pointer_id=MOUSE_POINTER_ID)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.controller.end_drag(*event.pos, pointer_id=MOUSE_POINTER_ID)
        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            # Finger coordinates are normalised to the window
            pos = (event.x * size[0], event.y * size[1])
            if event.type == pygame.FINGERDOWN:
                self._press(Modality.TOUCH, pos, event.finger_id)
            elif event.type == pygame.FINGERMOTION:
                self.controller.move_drag(*pos, pointer_id=event.finger_id)
            else:
                self.controller.end_drag(*pos, pointer_id=event.finger_id)
        return True

    def tick(self) -> None:
        self.scheduler.run_due()

    def draw(self, screen: pygame.Surface, renderer: Renderer) -> None:
        renderer.draw(screen, self.controller)
        renderer.draw_button(screen, self.reset_button.rect, self.reset_button.label)
        if self.overlay_visible:
            renderer.draw_overlay(screen, "Well done!")
            renderer.draw_button(screen, self.play_again_button.rect, self.play_again_button.label)
        pygame.display.flip()


def run(settings: ShapeSettings, seed: Optional[int] = None, mute: bool = False, fps: int = 60) -> None:
    pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
    pygame.init()
    try:
        clock = pygame.time.Clock()
        cues = NullCues() if mute else PygameCues()
        app = ShapePuzzleApp(settings, cues=cues, seed=seed)
        renderer = Renderer(settings.colors)
        screen = pygame.display.set_mode((app.layout.width, app.layout.height))
        pygame.display.set_caption("Shape Puzzle")
        app.start()

        running = True
        while running:
            for event in pygame.event.get():
                if not app.handle_event(event, screen.get_size()):
                    running = False
            app.tick()
            app.draw(screen, renderer)
            clock.tick(fps)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Drag each piece into the hole of the same shape.")
    p.add_argument("--settings", type=str, default=None, help="Settings JSON path (default: ~/.shape_puzzle/settings.json)")
    p.add_argument("--count", type=int, default=None, help="Number of holes per round")
    p.add_argument("--shapes", type=str, default=None, help="Comma-separated active shapes, e.g. circle,square")
    p.add_argument("--save-settings", action="store_true", help="Write the effective settings back to disk")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--mute", action="store_true")
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def settings_from_args(args: argparse.Namespace) -> ShapeSettings:
    settings = load_settings(args.settings)
    if args.count is not None:
        settings.count = args.count
    if args.shapes:
        settings.active_shapes = [parse_shape(s) for s in args.shapes.split(",") if s.strip()]
    return settings


def main(argv: Optional[list] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        settings = settings_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    if args.save_settings:
        path = save_settings(settings, args.settings)
        logger.info("Saved settings to %s", path)
    run(settings, seed=args.seed, mute=args.mute, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
