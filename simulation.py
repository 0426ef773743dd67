# simulation.py
"""
Handles the per-frame simulation logic.

This module defines the AmbientWind accumulator and the Simulation class,
which turns the player's controls for one frame into spawn requests and a
composed wind vector, then advances the particle system by one time step.
It has no dependency on the window or input library, so it can be driven
from tests with plain Controls snapshots.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from config import FieldConfig, WindConfig
from force_fields import vortex_field_batch, radial_deceleration_field_batch
from particle import ParticleSystem

# --- Data Contracts ---
#
# class AmbientWind:
#   - push(self, dx: float, dy: float) -> None: adds to the wind vector.
#   - add(self, force) -> None: adds an (x, y) force to the wind vector.
#   - decay(self) -> None: scales the wind vector by the decay factor.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, fields: FieldConfig, wind: WindConfig):
#   - step(self, dt: float, width: float, height: float, controls: Controls,
#          audio_samples: Optional[Sequence[float]] = None) -> None:
#     - Inputs:
#       - dt: float >= 0, seconds since the previous frame.
#       - width, height: current world size.
#       - controls: what the player holds down this frame.
#       - audio_samples: per-particle sample magnitudes, or None when
#         audio mode is off.
#     - Side Effects: Spawns particles, updates the ambient wind and
#       advances the ParticleSystem.
#     - Invariants: The order within a frame is spawn at pointer, arrow
#       push, scattered spawn, vortex into the wind, radial kick on each
#       particle's velocity, decay, update, audio.


class AmbientWind:
    """
    A single wind vector shared by all particles, faded a little every frame.
    """
    def __init__(self, config: WindConfig):
        self.config = config
        self.vector = np.zeros(2, dtype=np.float64)

    def push(self, dx: float, dy: float) -> None:
        self.vector[0] += dx
        self.vector[1] += dy

    def add(self, force) -> None:
        self.vector += np.asarray(force, dtype=np.float64)

    def decay(self) -> None:
        self.vector *= self.config.decay


@dataclass
class Controls:
    """A snapshot of the player's input for one frame."""
    wind_left: bool = False
    wind_right: bool = False
    wind_up: bool = False
    wind_down: bool = False
    # Pointer position while the left button is held, else None.
    spawn_at: Optional[Tuple[float, float]] = None
    scatter: bool = False
    vortex: bool = False
    radial: bool = False


class Simulation:
    """
    Composes the ambient wind and drives the particle system frame by frame.
    """
    def __init__(self, particles: ParticleSystem, fields: FieldConfig, wind: WindConfig):
        """
        Initializes the frame driver.

        Args:
            particles (ParticleSystem): The particle system to advance.
            fields (FieldConfig): Vortex and radial field parameters.
            wind (WindConfig): Arrow-key push and per-frame decay.
        """
        self.particles = particles
        self.fields = fields
        self.wind = AmbientWind(wind)
        self.step_count = 0
        logging.info(
            f"Simulation initialized: vortex at {fields.vortex_center} "
            f"(strength {fields.vortex_strength}), radial strength "
            f"{fields.radial_strength} (scale {fields.radial_scale})."
        )

    def _push_wind(self, controls: Controls) -> None:
        push = self.wind.config.push
        if controls.wind_left:
            self.wind.push(-push, 0.0)
        if controls.wind_right:
            self.wind.push(push, 0.0)
        if controls.wind_up:
            self.wind.push(0.0, -push)
        if controls.wind_down:
            self.wind.push(0.0, push)

    def _apply_fields(self, width: float, height: float, controls: Controls) -> None:
        if not (controls.vortex or controls.radial) or not self.particles.particle_count:
            return
        positions = self.particles.positions()
        if controls.vortex:
            forces = vortex_field_batch(
                positions, self.fields.vortex_center, self.fields.vortex_strength
            )
            self.wind.add(forces.sum(axis=0))
        if controls.radial:
            # The radial field is centered on the window, which may resize.
            center = (width / 2.0, height / 2.0)
            forces = radial_deceleration_field_batch(
                positions, center, self.fields.radial_strength, self.fields.radial_scale
            )
            # Each particle is kicked by its own force, not through the wind.
            for particle, force in zip(self.particles, forces):
                particle.velocity += force

    def step(
        self,
        dt: float,
        width: float,
        height: float,
        controls: Controls,
        audio_samples: Optional[Sequence[float]] = None,
    ) -> None:
        """
        Executes one frame of the simulation.
        """
        if controls.spawn_at is not None:
            self.particles.spawn_at(controls.spawn_at)

        self._push_wind(controls)

        if controls.scatter:
            self.particles.spawn_scattered()

        self._apply_fields(width, height, controls)

        self.wind.decay()

        self.particles.update(dt, width, height, self.wind.vector)

        if audio_samples is not None:
            self.particles.apply_audio(audio_samples)

        self.step_count += 1
