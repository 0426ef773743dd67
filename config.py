# config.py
"""
Typed physics configuration.

This module turns the "simulation_parameters" section of config.json into
frozen dataclasses. Two presets reproduce the two historical tunings of the
simulation: "canonical" (damped gravity, amplifying fixed bounce) and "vivid"
(stronger gravity, randomized bounce, faster fade). Any value of a preset can
be overridden from the configuration file.
"""
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import numpy as np

from constants import MAGENTA, YELLOW, WINDOW_WIDTH, WINDOW_HEIGHT, MAX_ALPHA

# --- Data Contracts ---
#
# FixedElastic.bounce / RandomizedElastic.bounce(velocity, axis, rng) -> None:
#   - Inputs:
#     - velocity: float64 NumPy array of shape (2,), modified in place.
#     - axis: 0 for a left/right wall, 1 for a top/bottom wall.
#     - rng: numpy.random.Generator (required by RandomizedElastic only).
#   - Side Effects: Reverses (and rescales) the velocity after a wall hit.
#
# load_simulation_config(params: Dict[str, Any])
#     -> Tuple[PhysicsConfig, FieldConfig, WindConfig]:
#   - Inputs:
#     - params: The "simulation_parameters" dictionary from config.json.
#       - "preset": "canonical" | "vivid" (default "canonical")
#       - "physics", "restitution", "spawn", "fields", "wind": optional
#         override dictionaries.
#   - Outputs: The validated configuration objects.
#   - Invariants: fade_window > 0, initial_lifespan > 0, initial_size >= 0,
#     shrink_rate >= 0, radial_scale > 0, min_factor <= max_factor.
#     Violations raise ValueError.


@dataclass(frozen=True)
class FixedElastic:
    """Bounce that reverses the velocity on the struck axis and scales it."""
    coefficient: float = 1.5

    def bounce(self, velocity: np.ndarray, axis: int, rng: Optional[np.random.Generator] = None) -> None:
        velocity[axis] *= -self.coefficient


@dataclass(frozen=True)
class RandomizedElastic:
    """
    Bounce with a random factor drawn per hit.

    The factor is an integer in [min_factor, max_factor] plus `offset`, and
    it scales both velocity components, not just the struck axis.
    """
    min_factor: int = -3
    max_factor: int = -1
    offset: float = -0.2

    def __post_init__(self):
        if self.min_factor > self.max_factor:
            msg = (
                f"Configuration error: randomized restitution min_factor ({self.min_factor}) "
                f"is greater than max_factor ({self.max_factor})."
            )
            logging.critical(msg)
            raise ValueError(msg)

    def bounce(self, velocity: np.ndarray, axis: int, rng: Optional[np.random.Generator] = None) -> None:
        if rng is None:
            raise ValueError("RandomizedElastic restitution needs a random generator.")
        factor = int(rng.integers(self.min_factor, self.max_factor, endpoint=True)) + self.offset
        velocity *= factor


RestitutionPolicy = Union[FixedElastic, RandomizedElastic]

RESTITUTION_POLICIES = {
    "fixed": FixedElastic,
    "randomized": RandomizedElastic,
}


@dataclass(frozen=True)
class ScatterSpawn:
    """Bounds of the randomized (key-triggered) spawn policy."""
    anchor: Tuple[float, float] = (0.0, 0.0)
    offset_low: Tuple[float, float] = (0.0, 0.0)
    offset_high: Tuple[float, float] = (float(WINDOW_WIDTH), float(WINDOW_HEIGHT))
    velocity_low: Tuple[float, float] = (-5.0, -5.0)
    velocity_high: Tuple[float, float] = (5.0, 5.0)


@dataclass(frozen=True)
class PhysicsConfig:
    gravity: float = 50.0
    restitution: RestitutionPolicy = field(default_factory=FixedElastic)
    fade_window: float = 5.0
    shrink_rate: float = 0.4
    initial_lifespan: float = 11.0
    initial_size: float = 7.0
    spawn_color: Tuple[int, int, int] = MAGENTA
    scatter: ScatterSpawn = field(default_factory=ScatterSpawn)

    def __post_init__(self):
        problems = []
        if self.fade_window <= 0:
            problems.append(f"fade_window must be positive, got {self.fade_window}")
        if self.initial_lifespan <= 0:
            problems.append(f"initial_lifespan must be positive, got {self.initial_lifespan}")
        if self.initial_size < 0:
            problems.append(f"initial_size must not be negative, got {self.initial_size}")
        if self.shrink_rate < 0:
            problems.append(f"shrink_rate must not be negative, got {self.shrink_rate}")
        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)


@dataclass(frozen=True)
class FieldConfig:
    """Parameters of the two interactive force fields."""
    vortex_center: Tuple[float, float] = (WINDOW_WIDTH / 2.0, WINDOW_HEIGHT / 2.0)
    vortex_strength: float = 0.2
    radial_strength: float = 0.5
    radial_scale: float = 20.0

    def __post_init__(self):
        if self.radial_scale <= 0:
            msg = f"Configuration error: radial_scale must be positive, got {self.radial_scale}."
            logging.critical(msg)
            raise ValueError(msg)


@dataclass(frozen=True)
class WindConfig:
    """How the ambient wind reacts to the arrow keys and fades away."""
    push: float = 5.0
    decay: float = 0.99


# The vivid tuning pushed alpha with a 355 multiplier; expressed as a
# fade window that reaches full opacity at the same lifespan.
VIVID_FADE_WINDOW = 5.0 * MAX_ALPHA / 355.0

PRESETS: Dict[str, Tuple[PhysicsConfig, FieldConfig]] = {
    "canonical": (PhysicsConfig(), FieldConfig()),
    "vivid": (
        PhysicsConfig(
            gravity=60.0,
            restitution=RandomizedElastic(),
            fade_window=VIVID_FADE_WINDOW,
            spawn_color=YELLOW,
            scatter=ScatterSpawn(
                anchor=(WINDOW_WIDTH / 2.0, WINDOW_HEIGHT / 2.0),
                offset_low=(-WINDOW_WIDTH / 2.0, -WINDOW_HEIGHT / 2.0),
                offset_high=(0.0, 0.0),
                velocity_low=(-300.0, -300.0),
                velocity_high=(0.0, 0.0),
            ),
        ),
        FieldConfig(radial_scale=50.0),
    ),
}


def _apply_overrides(base, overrides: Dict[str, Any], section: str, exclude: Iterable[str] = ()):
    """Returns a copy of the dataclass `base` with `overrides` applied."""
    known = {f.name for f in fields(base)} - set(exclude)
    unknown = sorted(set(overrides) - known)
    if unknown:
        msg = f"Configuration error: unknown keys {unknown} in '{section}'. Valid keys: {sorted(known)}."
        logging.critical(msg)
        raise ValueError(msg)
    # JSON has no tuples, so vectors and colors arrive as lists.
    values = {k: tuple(v) if isinstance(v, list) else v for k, v in overrides.items()}
    return replace(base, **values)


def restitution_from_params(params: Dict[str, Any], default: RestitutionPolicy) -> RestitutionPolicy:
    """Builds a restitution policy from its config dictionary."""
    if not params:
        return default
    params = dict(params)
    name = params.pop("policy", None)
    if name is None:
        return _apply_overrides(default, params, "restitution")
    policy_cls = RESTITUTION_POLICIES.get(name)
    if policy_cls is None:
        msg = (
            f"Configuration error: unknown restitution policy '{name}'. "
            f"Valid policies: {sorted(RESTITUTION_POLICIES)}."
        )
        logging.critical(msg)
        raise ValueError(msg)
    base = default if isinstance(default, policy_cls) else policy_cls()
    return _apply_overrides(base, params, "restitution")


def load_simulation_config(params: Dict[str, Any]) -> Tuple[PhysicsConfig, FieldConfig, WindConfig]:
    """
    Resolves the preset named in `params` and applies its overrides.

    Args:
        params (Dict[str, Any]): The "simulation_parameters" config section.

    Returns:
        Tuple[PhysicsConfig, FieldConfig, WindConfig]: Validated settings.
    """
    preset_name = params.get("preset", "canonical")
    if preset_name not in PRESETS:
        msg = f"Configuration error: unknown preset '{preset_name}'. Valid presets: {sorted(PRESETS)}."
        logging.critical(msg)
        raise ValueError(msg)
    physics, field_config = PRESETS[preset_name]

    physics = _apply_overrides(
        physics, params.get("physics", {}), "physics", exclude=("restitution", "scatter")
    )
    restitution = restitution_from_params(params.get("restitution", {}), physics.restitution)
    scatter = _apply_overrides(physics.scatter, params.get("spawn", {}), "spawn")
    physics = replace(physics, restitution=restitution, scatter=scatter)

    field_config = _apply_overrides(field_config, params.get("fields", {}), "fields")
    wind_config = _apply_overrides(WindConfig(), params.get("wind", {}), "wind")

    logging.info(
        f"Physics preset '{preset_name}' loaded: gravity={physics.gravity}, "
        f"restitution={physics.restitution}, fade_window={physics.fade_window:.3f}."
    )
    logging.debug(f"Resolved physics configuration: {physics}")
    logging.debug(f"Resolved field configuration: {field_config}, wind: {wind_config}")
    return physics, field_config, wind_config
