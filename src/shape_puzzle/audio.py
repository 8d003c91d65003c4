"""Audio cues for a successful placement and for winning a round.

Both cues are synthesised with numpy and played through ``pygame.mixer``.
Playback is fire-and-forget; if the mixer cannot be opened the cues are silent.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import numpy as np
import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050

# C5, E5, G5, C6
FANFARE_NOTES = (523.25, 659.25, 783.99, 1046.50)
FANFARE_OFFSETS = (0.0, 0.15, 0.3, 0.45)
FANFARE_DURATIONS = (0.1, 0.1, 0.1, 0.6)


class AudioCues(Protocol):
    def on_piece_matched(self) -> None: ...

    def on_round_won(self) -> None: ...


class NullCues:
    def on_piece_matched(self) -> None:
        pass

    def on_round_won(self) -> None:
        pass


def _exp_ramp(start: float, end: float, n: int) -> np.ndarray:
    if n <= 0:
        return np.zeros(0, dtype=np.float64)
    return start * (end / start) ** (np.arange(n) / n)


def _to_int16(wave: np.ndarray) -> np.ndarray:
    return (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)


def snap_wave(sample_rate: int = SAMPLE_RATE, duration: float = 0.05) -> np.ndarray:
    """Short square-wave 'snap': pitch sweeps 800 -> 100 Hz while gain decays."""
    n = int(sample_rate * duration)
    freq = _exp_ramp(800.0, 100.0, n)
    phase = 2.0 * np.pi * np.cumsum(freq) / sample_rate
    gain = _exp_ramp(0.3, 0.01, n)
    return _to_int16(np.sign(np.sin(phase)) * gain)


def fanfare_wave(sample_rate: int = SAMPLE_RATE, attack: float = 0.05) -> np.ndarray:
    """Rising C major arpeggio of triangle-wave notes."""
    total = max(o + d for o, d in zip(FANFARE_OFFSETS, FANFARE_DURATIONS))
    out = np.zeros(int(sample_rate * total) + 1, dtype=np.float64)
    for freq, offset, duration in zip(FANFARE_NOTES, FANFARE_OFFSETS, FANFARE_DURATIONS):
        n = int(sample_rate * duration)
        t = np.arange(n) / sample_rate
        tone = (2.0 / np.pi) * np.arcsin(np.sin(2.0 * np.pi * freq * t))
        n_attack = min(n, int(sample_rate * attack))
        env = np.empty(n, dtype=np.float64)
        env[:n_attack] = np.linspace(0.0, 0.3, n_attack, endpoint=False)
        env[n_attack:] = _exp_ramp(0.3, 0.01, n - n_attack)
        start = int(sample_rate * offset)
        out[start:start + n] += tone * env
    return _to_int16(out)


class PygameCues:
    def __init__(self, sample_rate: int = SAMPLE_RATE) -> None:
        self._snap = None
        self._fanfare = None
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
            freq, _, channels = pygame.mixer.get_init()
            self._snap = self._make_sound(snap_wave(freq), channels)
            self._fanfare = self._make_sound(fanfare_wave(freq), channels)
        except (pygame.error, ImportError) as exc:
            logger.warning("Audio disabled: %s", exc)

    @property
    def enabled(self) -> bool:
        return self._snap is not None

    @staticmethod
    def _make_sound(wave: np.ndarray, channels: int) -> pygame.mixer.Sound:
        # Interleave one copy of each sample per output channel
        if channels > 1:
            wave = np.repeat(wave, channels)
        return pygame.mixer.Sound(buffer=wave.tobytes())

    @staticmethod
    def _play(sound: Optional[object]) -> None:
        if sound is not None:
            sound.play()  # type: ignore[attr-defined]

    def on_piece_matched(self) -> None:
        self._play(self._snap)

    def on_round_won(self) -> None:
        self._play(self._fanfare)
