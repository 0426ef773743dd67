# particle.py
"""
Manages the state and lifecycle of all particles in the simulation.

This module defines the Particle class, which integrates a single particle
under wind and gravity and bounces it off the window edges, and the
ParticleSystem class, which owns the ordered collection of particles and
drives the per-frame update, spawn and expiry cull.
"""
import enum
import logging
import numpy as np
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from config import PhysicsConfig
from constants import (
    LEFT_EDGE_COLOR, RIGHT_EDGE_COLOR, TOP_EDGE_COLOR, BOTTOM_EDGE_COLOR, MAX_ALPHA
)

# --- Data Contracts ---
#
# class Particle:
#   - update(self, dt: float, bounds: Tuple[float, float], wind, rng=None) -> None:
#     - Inputs:
#       - dt: float >= 0, seconds since the previous frame.
#       - bounds: (width, height) of the world. A non-positive extent
#         disables collision on that axis.
#       - wind: array-like of shape (2,), the composed ambient wind.
#       - rng: numpy.random.Generator, used by randomized restitution.
#     - Side Effects: Mutates position, velocity, collision_tag, lifespan
#       and size in place.
#     - Invariants:
#       - lifespan decreases by exactly dt; size never drops below 0.
#       - dt == 0 and dead particles leave every field untouched.
#       - Boundary checks run left, right, top, bottom; the last one that
#         fires sets the collision tag.
#
# class ParticleSystem:
#   - update(self, dt: float, width: float, height: float, wind) -> None:
#     - Side Effects: Updates every particle, then removes the dead ones.
#     - Invariants: Survivors keep their spawn order. Nothing is removed
#       until every particle has been updated.
#   - render(self, sink: Callable[[Tuple[float, float], float, Tuple[int, int, int, int]], None]) -> None:
#     - Side Effects: Calls sink(position, size, rgba) once per live particle.


class CollisionTag(enum.Enum):
    """The boundary a particle struck most recently."""
    NONE = 0
    LEFT = 1
    RIGHT = 2
    TOP = 3
    BOTTOM = 4


TAG_COLORS = {
    CollisionTag.LEFT: LEFT_EDGE_COLOR,
    CollisionTag.RIGHT: RIGHT_EDGE_COLOR,
    CollisionTag.TOP: TOP_EDGE_COLOR,
    CollisionTag.BOTTOM: BOTTOM_EDGE_COLOR,
}


class Particle:
    """
    A single particle with kinematic and visual state.
    """
    def __init__(self, position, velocity, config: PhysicsConfig):
        """
        Creates a particle with the spawn state given by `config`.

        Args:
            position: (x, y) spawn position in world coordinates.
            velocity: (vx, vy) initial velocity in units per second.
            config (PhysicsConfig): Shared physics parameters.
        """
        self.position = np.array(position, dtype=np.float64)
        self.velocity = np.array(velocity, dtype=np.float64)
        self.config = config
        self.base_color = tuple(config.spawn_color)
        self.collision_tag = CollisionTag.NONE
        self.lifespan = float(config.initial_lifespan)
        self.size = float(config.initial_size)

    @property
    def alpha(self) -> float:
        """Fade level in [0, 255], a pure function of the remaining lifespan."""
        level = self.lifespan / self.config.fade_window * MAX_ALPHA
        return min(max(level, 0.0), float(MAX_ALPHA))

    @property
    def color(self) -> Tuple[int, int, int]:
        return TAG_COLORS.get(self.collision_tag, self.base_color)

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        r, g, b = self.color
        return (r, g, b, int(self.alpha))

    def is_dead(self) -> bool:
        return self.lifespan <= 0

    def update(self, dt: float, bounds: Tuple[float, float], wind, rng: Optional[np.random.Generator] = None):
        """
        Advances the particle by one time step.
        """
        if dt < 0:
            raise ValueError(f"Time step must not be negative, got {dt}.")
        if dt == 0 or self.is_dead():
            return

        config = self.config

        # 1. Uniform external force
        self.velocity += np.asarray(wind, dtype=np.float64) * dt

        # 2. Gravity pulls towards +y (screen down)
        self.velocity[1] += config.gravity * dt

        # 3. Move
        self.position += self.velocity * dt

        # 4. Walls
        self._collide(bounds, rng)

        # 5. Age. Alpha follows from lifespan, see `alpha`.
        self.lifespan -= dt

        # 6. Shrink
        self.size = max(0.0, self.size - config.shrink_rate * dt)

    def _collide(self, bounds: Tuple[float, float], rng: Optional[np.random.Generator]):
        # The checks are deliberately independent: on a corner hit both
        # fire and the top/bottom tag overwrites the left/right one.
        width, height = bounds
        if width > 0:
            if self.position[0] <= 0:
                self._bounce(0, 0.0, CollisionTag.LEFT, rng)
            if self.position[0] + self.size >= width:
                self._bounce(0, width - self.size, CollisionTag.RIGHT, rng)
        if height > 0:
            if self.position[1] <= 0:
                self._bounce(1, 0.0, CollisionTag.TOP, rng)
            if self.position[1] + self.size >= height:
                self._bounce(1, height - self.size, CollisionTag.BOTTOM, rng)

    def _bounce(self, axis: int, limit: float, tag: CollisionTag, rng: Optional[np.random.Generator]):
        self.position[axis] = limit
        self.config.restitution.bounce(self.velocity, axis, rng)
        self.collision_tag = tag


RenderSink = Callable[[Tuple[float, float], float, Tuple[int, int, int, int]], None]


class ParticleSystem:
    """
    An ordered container of particles, in spawn order.
    """
    def __init__(self, config: PhysicsConfig, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        """
        Initializes an empty particle system.

        Args:
            config (PhysicsConfig): Physics parameters shared by all particles.
            rng (Optional[np.random.Generator]): Source of randomness for
                scattered spawns and randomized bounces.
            seed (Optional[int]): Seed for a new generator when `rng` is None.
        """
        self.config = config
        # All randomness goes through one injected generator.
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.particles: List[Particle] = []
        self.expired_count = 0

        logging.info(
            f"ParticleSystem initialized (lifespan {config.initial_lifespan}s, "
            f"size {config.initial_size}, gravity {config.gravity})."
        )

    @property
    def particle_count(self) -> int:
        return len(self.particles)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def add_particle(self, position, velocity) -> Particle:
        """Appends a particle with the configured spawn state."""
        particle = Particle(position, velocity, self.config)
        self.particles.append(particle)
        return particle

    def spawn_at(self, position) -> Particle:
        """Pointer spawn: a particle at rest at `position`."""
        return self.add_particle(position, (0.0, 0.0))

    def spawn_scattered(self) -> Particle:
        """Key spawn: random offset from the anchor and random velocity."""
        scatter = self.config.scatter
        offset = self.rng.uniform(low=scatter.offset_low, high=scatter.offset_high)
        velocity = self.rng.uniform(low=scatter.velocity_low, high=scatter.velocity_high)
        return self.add_particle(np.asarray(scatter.anchor, dtype=np.float64) + offset, velocity)

    def update(self, dt: float, width: float, height: float, wind) -> None:
        """
        Steps every particle, then culls the dead ones.

        Args:
            dt (float): Seconds since the previous frame. Not clamped.
            width (float): World width; <= 0 disables left/right walls.
            height (float): World height; <= 0 disables top/bottom walls.
            wind: The composed ambient wind vector.
        """
        if dt < 0:
            msg = f"ParticleSystem.update called with negative dt ({dt})."
            logging.error(msg)
            raise ValueError(msg)

        wind = np.asarray(wind, dtype=np.float64)
        bounds = (width, height)
        for particle in self.particles:
            particle.update(dt, bounds, wind, self.rng)

        # Stable cull, strictly after the whole frame has been integrated.
        survivors = [p for p in self.particles if not p.is_dead()]
        self.expired_count += len(self.particles) - len(survivors)
        self.particles = survivors

    def render(self, sink: RenderSink) -> None:
        """Emits (position, size, rgba) for every live particle."""
        for particle in self.particles:
            position = (float(particle.position[0]), float(particle.position[1]))
            sink(position, particle.size, particle.rgba)

    def positions(self) -> np.ndarray:
        """Returns the live positions as a float64 array of shape (N, 2)."""
        if not self.particles:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([p.position for p in self.particles], dtype=np.float64)

    def apply_audio(self, samples: Sequence[float]) -> None:
        """
        Nudges each particle along its velocity by an audio sample magnitude.

        Sample i drives particle i; the samples are reused cyclically when
        there are fewer samples than particles. No samples means no change.
        """
        magnitudes = np.abs(np.asarray(samples, dtype=np.float64)).ravel()
        if magnitudes.size == 0:
            return
        for i, particle in enumerate(self.particles):
            particle.position += particle.velocity * magnitudes[i % magnitudes.size]
