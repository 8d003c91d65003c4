from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple

import pygame


Clock = Callable[[], int]


def _pygame_ticks() -> int:
    return pygame.time.get_ticks()


class Scheduler:
    """Fire-and-forget delayed callbacks, pumped from the event loop.

    Nothing runs on its own: the owner calls `run_due()` once per frame.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or _pygame_ticks
        self._queue: List[Tuple[int, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._queue)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        due = self.clock() + max(0, int(delay_ms))
        heapq.heappush(self._queue, (due, next(self._seq), callback))

    def run_due(self, now_ms: Optional[int] = None) -> int:
        now = self.clock() if now_ms is None else int(now_ms)
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, callback = heapq.heappop(self._queue)
            callback()
            ran += 1
        return ran

    def cancel_all(self) -> None:
        self._queue.clear()
