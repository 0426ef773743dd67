import numpy as np
import pytest

from config import PhysicsConfig, RandomizedElastic
from particle import CollisionTag, Particle

BOUNDS = (800.0, 600.0)
NO_WIND = (0.0, 0.0)


def snapshot(p):
    return (p.position.copy(), p.velocity.copy(), p.collision_tag, p.lifespan, p.size)


def assert_unchanged(before, p):
    position, velocity, tag, lifespan, size = before
    assert np.array_equal(p.position, position)
    assert np.array_equal(p.velocity, velocity)
    assert p.collision_tag is tag
    assert p.lifespan == lifespan
    assert p.size == size


def test_spawn_state():
    p = Particle((10, 20), (1, 2), PhysicsConfig())
    assert p.lifespan == 11.0
    assert p.size == 7.0
    assert p.collision_tag is CollisionTag.NONE
    assert p.color == (255, 0, 255)
    assert p.rgba == (255, 0, 255, 255)
    assert not p.is_dead()


def test_one_second_from_top_left_corner():
    p = Particle((0, 0), (0, 0), PhysicsConfig())
    p.update(1.0, BOUNDS, NO_WIND)
    assert np.array_equal(p.velocity, [0.0, 50.0])
    assert np.array_equal(p.position, [0.0, 50.0])
    assert p.collision_tag is CollisionTag.LEFT
    assert p.color == (0, 0, 255)
    assert p.lifespan == 10.0
    assert p.size == pytest.approx(6.6)
    assert p.alpha == 255


def test_wind_then_gravity_then_move():
    p = Particle((400, 300), (10, 0), PhysicsConfig())
    p.update(0.5, BOUNDS, (4.0, -2.0))
    # v = (10 + 4*0.5, 0 - 2*0.5 + 50*0.5)
    assert p.velocity == pytest.approx([12.0, 24.0])
    assert p.position == pytest.approx([406.0, 312.0])


def test_gravity_comes_from_config():
    p = Particle((400, 300), (0, 0), PhysicsConfig(gravity=60.0))
    p.update(0.1, BOUNDS, NO_WIND)
    assert p.velocity[1] == pytest.approx(6.0)


def test_lifespan_drops_by_exactly_dt():
    p = Particle((400, 300), (0, 0), PhysicsConfig())
    for dt in (0.37, 0.016, 1.25):
        before = p.lifespan
        p.update(dt, BOUNDS, NO_WIND)
        assert p.lifespan == before - dt


def test_size_shrinks_to_zero_and_stays():
    p = Particle((400, 300), (0, 0), PhysicsConfig(gravity=0.0, initial_lifespan=30.0))
    sizes = []
    for _ in range(20):
        p.update(1.0, BOUNDS, NO_WIND)
        sizes.append(p.size)
    assert all(a >= b for a, b in zip(sizes, sizes[1:]))
    assert min(sizes) >= 0.0
    # 7.0 / 0.4 = 17.5 seconds to vanish.
    assert sizes[17:] == [0.0, 0.0, 0.0]


def test_dt_zero_is_a_no_op_even_against_a_wall():
    p = Particle((0, 0), (10, -3), PhysicsConfig())
    before = snapshot(p)
    p.update(0.0, BOUNDS, (5.0, 5.0))
    assert_unchanged(before, p)


def test_negative_dt_is_rejected():
    p = Particle((400, 300), (0, 0), PhysicsConfig())
    with pytest.raises(ValueError):
        p.update(-0.1, BOUNDS, NO_WIND)


def test_dead_particle_is_never_mutated():
    p = Particle((400, 300), (0, 0), PhysicsConfig(gravity=0.0))
    p.update(12.0, BOUNDS, NO_WIND)
    assert p.is_dead()
    before = snapshot(p)
    p.update(1.0, BOUNDS, (3.0, 3.0))
    assert_unchanged(before, p)


def test_is_dead_exactly_at_zero_lifespan():
    p = Particle((400, 300), (0, 0), PhysicsConfig(gravity=0.0))
    p.update(11.0, BOUNDS, NO_WIND)
    assert p.lifespan == 0.0
    assert p.is_dead()


def test_alpha_fades_before_the_particle_dies():
    config = PhysicsConfig(gravity=0.0)
    p = Particle((400, 300), (0, 0), config)
    p.update(6.0, BOUNDS, NO_WIND)
    assert p.alpha == 255
    p.update(2.5, BOUNDS, NO_WIND)
    assert p.alpha == pytest.approx(127.5)
    assert p.rgba[3] == 127
    p.update(2.5, BOUNDS, NO_WIND)
    assert p.lifespan == 0.0
    assert p.alpha == 0.0


def test_alpha_is_zero_long_before_expiry():
    p = Particle((400, 300), (0, 0), PhysicsConfig(gravity=0.0))
    p.update(7.0, BOUNDS, NO_WIND)
    p.update(3.0, BOUNDS, NO_WIND)
    assert p.alpha == 0.0
    assert not p.is_dead()


def test_right_wall_clamps_using_size():
    p = Particle((790, 300), (100, 0), PhysicsConfig(gravity=0.0))
    p.update(0.1, BOUNDS, NO_WIND)
    assert p.position[0] == pytest.approx(793.0)
    assert p.velocity[0] == pytest.approx(-150.0)
    assert p.collision_tag is CollisionTag.RIGHT
    assert p.color == (255, 0, 0)


def test_top_and_bottom_walls():
    top = Particle((400, 1), (0, -20), PhysicsConfig(gravity=0.0))
    top.update(0.1, BOUNDS, NO_WIND)
    assert top.position[1] == 0.0
    assert top.velocity[1] == pytest.approx(30.0)
    assert top.color == (0, 255, 0)

    bottom = Particle((400, 590), (0, 100), PhysicsConfig(gravity=0.0))
    bottom.update(0.1, BOUNDS, NO_WIND)
    assert bottom.position[1] == pytest.approx(593.0)
    assert bottom.velocity[1] == pytest.approx(-150.0)
    assert bottom.color == (255, 255, 255)


def test_corner_hit_shows_the_bottom_tag_not_the_right_tag():
    # Right and bottom both fire; bottom runs last so its tag wins.
    p = Particle((795, 595), (10, 10), PhysicsConfig(gravity=0.0))
    p.update(0.1, BOUNDS, NO_WIND)
    assert p.position == pytest.approx([793.0, 593.0])
    assert p.velocity == pytest.approx([-15.0, -15.0])
    assert p.collision_tag is CollisionTag.BOTTOM


def test_corner_hit_shows_the_top_tag_not_the_left_tag():
    p = Particle((1, 1), (-20, -20), PhysicsConfig(gravity=0.0))
    p.update(0.1, BOUNDS, NO_WIND)
    assert np.array_equal(p.position, [0.0, 0.0])
    assert p.collision_tag is CollisionTag.TOP


def test_non_positive_bounds_disable_collision_on_that_axis():
    p = Particle((-5, -5), (0, 0), PhysicsConfig(gravity=0.0))
    p.update(0.1, (0.0, -10.0), NO_WIND)
    assert np.array_equal(p.position, [-5.0, -5.0])
    assert p.collision_tag is CollisionTag.NONE

    q = Particle((-5, 300), (0, 0), PhysicsConfig(gravity=0.0))
    q.update(0.1, (0.0, 600.0), NO_WIND)
    assert q.position[0] == -5.0
    assert q.collision_tag is CollisionTag.NONE


def test_randomized_restitution_scales_both_components():
    config = PhysicsConfig(gravity=0.0, restitution=RandomizedElastic())
    rng = np.random.default_rng(1234)
    p = Particle((400, 0.5), (10, -10), config)
    p.update(0.1, BOUNDS, NO_WIND, rng)
    assert p.position[1] == 0.0
    factor = p.velocity[0] / 10.0
    assert any(factor == pytest.approx(f) for f in (-3.2, -2.2, -1.2))
    assert p.velocity[1] == pytest.approx(-10.0 * factor)


def test_randomized_restitution_is_reproducible_with_the_same_seed():
    config = PhysicsConfig(gravity=0.0, restitution=RandomizedElastic())
    results = []
    for _ in range(2):
        rng = np.random.default_rng(99)
        p = Particle((400, 0.5), (10, -10), config)
        for _ in range(5):
            p.update(0.1, BOUNDS, NO_WIND, rng)
        results.append(p.velocity.copy())
    assert np.array_equal(results[0], results[1])


def test_randomized_restitution_needs_a_generator():
    config = PhysicsConfig(gravity=0.0, restitution=RandomizedElastic())
    p = Particle((400, 0.5), (10, -10), config)
    with pytest.raises(ValueError):
        p.update(0.1, BOUNDS, NO_WIND)
