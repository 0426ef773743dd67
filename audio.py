# audio.py
"""
Audio playback and sampling for the audio-reactive mode.

The AudioPlayer plays a sound file through the Pygame mixer and, while it
plays, hands out one window of absolute sample amplitudes per frame. The
particle system uses those magnitudes to nudge particles along their
velocity.
"""
import logging
import os
import numpy as np
import pygame
from typing import Optional

from constants import PLACEHOLDER_SAMPLE_LEVEL

# --- Data Contracts ---
#
# normalized_amplitudes(raw: np.ndarray) -> np.ndarray:
#   - Inputs: raw samples from pygame.sndarray, shape (N,) or (N, channels),
#     signed or unsigned integers, or floats.
#   - Outputs: float64 array of shape (N,) with values in [0, 1]. Channels
#     are mixed down by averaging.
#
# class AudioPlayer:
#   - load(self) -> bool: decodes the file; False if it is unavailable.
#   - toggle(self) -> bool: starts or stops playback, returns the new state.
#   - advance(self, dt: float) -> None: moves the playback cursor.
#   - current_samples(self, count: int) -> Optional[np.ndarray]:
#     - Outputs: None when not playing, otherwise up to `count` magnitudes
#       at the playback cursor (the placeholder level when the sound has no
#       usable sample data). Once the cursor passes the end it returns an
#       empty window and playback switches off.


def normalized_amplitudes(raw: np.ndarray) -> np.ndarray:
    """Converts raw mixer samples to mono magnitudes in [0, 1]."""
    raw = np.asarray(raw)
    if np.issubdtype(raw.dtype, np.unsignedinteger):
        # Unsigned PCM is centered on the middle of its range.
        middle = (np.iinfo(raw.dtype).max + 1) / 2.0
        samples = (raw.astype(np.float64) - middle) / middle
    elif np.issubdtype(raw.dtype, np.signedinteger):
        samples = raw.astype(np.float64) / (np.iinfo(raw.dtype).max + 1)
    else:
        samples = raw.astype(np.float64)
    if samples.ndim == 2:
        samples = samples.mean(axis=1)
    return np.clip(np.abs(samples), 0.0, 1.0)


class AudioPlayer:
    """
    Plays a sound and exposes the amplitudes under the playback cursor.
    """
    def __init__(self, path: str, placeholder_level: float = PLACEHOLDER_SAMPLE_LEVEL):
        self.path = path
        self.placeholder_level = placeholder_level
        self.sound: Optional[pygame.mixer.Sound] = None
        self.amplitudes: Optional[np.ndarray] = None
        self.sample_rate = 0
        self.playing = False
        self.elapsed = 0.0

    @property
    def available(self) -> bool:
        return self.sound is not None

    def load(self) -> bool:
        """Decodes the sound file. Audio mode stays disabled on failure."""
        if not os.path.exists(self.path):
            logging.warning(f"Audio file not found at {self.path}. Audio mode disabled.")
            return False
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self.sound = pygame.mixer.Sound(self.path)
        except pygame.error as e:
            logging.warning(f"Could not load audio from {self.path}: {e}. Audio mode disabled.")
            self.sound = None
            return False

        self.sample_rate = pygame.mixer.get_init()[0]
        self.amplitudes = normalized_amplitudes(pygame.sndarray.array(self.sound))
        logging.info(
            f"Loaded audio {self.path}: {self.amplitudes.size} frames at {self.sample_rate} Hz."
        )
        return True

    def toggle(self) -> bool:
        if not self.available:
            logging.warning("Audio mode requested but no sound is loaded.")
            return False
        self.playing = not self.playing
        self.elapsed = 0.0
        if self.playing:
            self.sound.play()
        else:
            self.sound.stop()
        logging.info(f"Audio mode {'on' if self.playing else 'off'}.")
        return self.playing

    def advance(self, dt: float) -> None:
        if self.playing:
            self.elapsed += dt

    def current_samples(self, count: int) -> Optional[np.ndarray]:
        if not self.playing:
            return None
        if self.amplitudes is None or self.amplitudes.size == 0:
            return np.full(count, self.placeholder_level, dtype=np.float64)
        start = int(self.elapsed * self.sample_rate)
        if start >= self.amplitudes.size:
            self.playing = False
            logging.info("Audio finished playing. Audio mode off.")
            return np.zeros(0, dtype=np.float64)
        return self.amplitudes[start:start + count]

    def close(self) -> None:
        if self.sound is not None:
            self.sound.stop()
        if pygame.mixer.get_init():
            pygame.mixer.quit()
