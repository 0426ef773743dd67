import math

import numpy as np
import pytest

from force_fields import (
    radial_deceleration_field,
    radial_deceleration_field_batch,
    vortex_field,
    vortex_field_batch,
)

CENTER = (400.0, 300.0)


def test_vortex_swirls_perpendicular_to_the_radius():
    force = vortex_field((410.0, 300.0), CENTER, 0.2)
    assert force == pytest.approx([0.0, 0.2])


@pytest.mark.parametrize("point", [(401.0, 300.0), (0.0, 0.0), (1000.0, -250.0), (400.0, 299.5)])
@pytest.mark.parametrize("strength", [0.2, -3.0, 7.5])
def test_vortex_magnitude_does_not_depend_on_distance(point, strength):
    force = vortex_field(point, CENTER, strength)
    assert math.hypot(*force) == pytest.approx(abs(strength))
    radial = np.subtract(point, CENTER)
    assert np.dot(force, radial) == pytest.approx(0.0, abs=1e-9)


def test_vortex_is_zero_at_its_center():
    force = vortex_field(CENTER, CENTER, 0.2)
    assert np.array_equal(force, [0.0, 0.0])
    assert not np.any(np.isnan(force))


def test_radial_field_points_at_the_center_and_grows_with_distance():
    force = radial_deceleration_field((0.0, 0.0), (30.0, 40.0), 0.5, scale=20.0)
    # distance 50 -> magnitude 0.5 * 50 / 20 = 1.25 along (0.6, 0.8)
    assert force == pytest.approx([0.75, 1.0])

    near = radial_deceleration_field((29.0, 40.0), (30.0, 40.0), 0.5, scale=20.0)
    assert math.hypot(*near) == pytest.approx(0.025)


@pytest.mark.parametrize("scale", [20.0, 50.0])
def test_radial_field_magnitude(scale):
    point = (123.0, 456.0)
    distance = math.dist(point, CENTER)
    force = radial_deceleration_field(point, CENTER, 0.5, scale=scale)
    assert math.hypot(*force) == pytest.approx(0.5 * distance / scale)
    direction = np.subtract(CENTER, point) / distance
    assert force / np.linalg.norm(force) == pytest.approx(direction)


def test_radial_field_is_zero_at_its_center():
    force = radial_deceleration_field(CENTER, CENTER, 0.5)
    assert np.array_equal(force, [0.0, 0.0])


def test_batch_fields_match_the_scalar_fields():
    rng = np.random.default_rng(5)
    positions = rng.uniform(0.0, 800.0, size=(25, 2))
    positions[3] = CENTER

    vortex = vortex_field_batch(positions, CENTER, 0.2)
    radial = radial_deceleration_field_batch(positions, CENTER, 0.5, 50.0)

    assert vortex.shape == (25, 2)
    for i, point in enumerate(positions):
        assert vortex[i] == pytest.approx(vortex_field(point, CENTER, 0.2))
        assert radial[i] == pytest.approx(radial_deceleration_field(point, CENTER, 0.5, 50.0))
    assert np.array_equal(vortex[3], [0.0, 0.0])
    assert np.array_equal(radial[3], [0.0, 0.0])


def test_batch_fields_accept_no_positions():
    empty = np.empty((0, 2))
    assert vortex_field_batch(empty, CENTER, 0.2).shape == (0, 2)
    assert radial_deceleration_field_batch(empty, CENTER, 0.5).shape == (0, 2)
