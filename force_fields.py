# force_fields.py
"""
Stateless force-field generators.

Each field maps a particle position and the field parameters to a force
vector. The scalar functions evaluate one position; the batch versions
evaluate an (N, 2) array of positions with Numba-jitted loops and are what
the frame driver uses when it folds a field into the ambient wind.
"""
import math
import numpy as np
from numba import jit

# --- Data Contracts ---
#
# vortex_field(particle_pos, center, strength) -> np.ndarray:
#   - Inputs: two (x, y) points and a float strength.
#   - Outputs: float64 array of shape (2,), tangential to the circle around
#     `center`, with magnitude |strength| at every distance.
#   - Invariants: particle_pos == center yields the zero vector.
#
# radial_deceleration_field(particle_pos, center, strength, scale) -> np.ndarray:
#   - Inputs: two (x, y) points, a float strength and a positive scale.
#   - Outputs: float64 array of shape (2,), pointing at `center`, with
#     magnitude |strength| * distance / scale. Far particles are pulled
#     hardest; the name is historical.
#   - Invariants: particle_pos == center yields the zero vector.
#
# *_batch(positions, center, strength[, scale]) -> np.ndarray:
#   - Inputs: positions, array-like of shape (N, 2).
#   - Outputs: float64 array of shape (N, 2), row i equal to the scalar
#     field at positions[i].

DEFAULT_RADIAL_SCALE = 20.0


def vortex_field(particle_pos, center, strength: float) -> np.ndarray:
    """Constant-magnitude swirl around `center`."""
    dx = float(particle_pos[0]) - float(center[0])
    dy = float(particle_pos[1]) - float(center[1])
    distance = math.sqrt(dx * dx + dy * dy)
    if distance == 0.0:
        return np.zeros(2, dtype=np.float64)
    # Rotate the unit radial vector by 90 degrees.
    return np.array([-dy / distance * strength, dx / distance * strength], dtype=np.float64)


def radial_deceleration_field(particle_pos, center, strength: float, scale: float = DEFAULT_RADIAL_SCALE) -> np.ndarray:
    """Pull towards `center` that grows linearly with distance."""
    dx = float(center[0]) - float(particle_pos[0])
    dy = float(center[1]) - float(particle_pos[1])
    distance = math.sqrt(dx * dx + dy * dy)
    if distance == 0.0:
        return np.zeros(2, dtype=np.float64)
    scaled_strength = strength * (distance / scale)
    return np.array([dx / distance * scaled_strength, dy / distance * scaled_strength], dtype=np.float64)


@jit(nopython=True)
def _vortex_field_numba(positions, center_x, center_y, strength):
    """
    Numba-jitted vortex field over all positions.
    """
    count = positions.shape[0]
    forces = np.zeros((count, 2), dtype=np.float64)
    for i in range(count):
        dx = positions[i, 0] - center_x
        dy = positions[i, 1] - center_y
        distance = math.sqrt(dx * dx + dy * dy)
        if distance == 0.0:
            continue
        forces[i, 0] = -dy / distance * strength
        forces[i, 1] = dx / distance * strength
    return forces


@jit(nopython=True)
def _radial_field_numba(positions, center_x, center_y, strength, scale):
    """
    Numba-jitted radial deceleration field over all positions.
    """
    count = positions.shape[0]
    forces = np.zeros((count, 2), dtype=np.float64)
    for i in range(count):
        dx = center_x - positions[i, 0]
        dy = center_y - positions[i, 1]
        distance = math.sqrt(dx * dx + dy * dy)
        if distance == 0.0:
            continue
        scaled_strength = strength * (distance / scale)
        forces[i, 0] = dx / distance * scaled_strength
        forces[i, 1] = dy / distance * scaled_strength
    return forces


def _as_positions(positions) -> np.ndarray:
    # Numba needs a contiguous float64 (N, 2) array.
    return np.ascontiguousarray(positions, dtype=np.float64).reshape(-1, 2)


def vortex_field_batch(positions, center, strength: float) -> np.ndarray:
    return _vortex_field_numba(
        _as_positions(positions), float(center[0]), float(center[1]), float(strength)
    )


def radial_deceleration_field_batch(positions, center, strength: float, scale: float = DEFAULT_RADIAL_SCALE) -> np.ndarray:
    return _radial_field_numba(
        _as_positions(positions), float(center[0]), float(center[1]), float(strength), float(scale)
    )
