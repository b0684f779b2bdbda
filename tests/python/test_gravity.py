from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from moonshot.sim.core.body import Body
from moonshot.sim.core.config import GravityFieldConfig, SimulationConfig
from moonshot.sim.core.space import Space
from moonshot.sim.systems.gravity import GravityField, gravity_acceleration, gravity_force_at


def _source(mass: float, position=(0.0, 0.0)) -> Body:
    return Body(position=Vector2(position), mass=mass)


def test_gravity_follows_inverse_square_law():
    source = _source(1.0e20)
    g = 6.674e-14
    near = gravity_acceleration(source, Vector2(10_000.0, 0.0), g)
    far = gravity_acceleration(source, Vector2(20_000.0, 0.0), g)

    assert near.length() == approx(g * 1.0e20 / 10_000.0**2)
    assert near.length() / far.length() == approx(4.0)
    # pulls toward the source
    assert near.x < 0.0
    assert near.y == 0.0


def test_gravity_scales_with_source_mass():
    g = 6.674e-14
    light = gravity_acceleration(_source(1.0e19), Vector2(0.0, 5_000.0), g)
    heavy = gravity_acceleration(_source(3.0e19), Vector2(0.0, 5_000.0), g)
    assert heavy.length() == approx(3.0 * light.length())


def test_gravity_is_zero_at_source_position():
    source = _source(5.972e21, (12.0, -7.0))
    assert gravity_acceleration(source, Vector2(12.0, -7.0), 6.674e-14) == Vector2()


def test_force_at_sums_every_source():
    g = 6.674e-14
    a = _source(1.0e20, (-1_000.0, 0.0))
    b = _source(1.0e20, (1_000.0, 0.0))
    # symmetric pulls cancel at the midpoint
    assert gravity_force_at([a, b], Vector2(), g).length() == approx(0.0, abs=1e-12)


def test_surface_gravity_roughly_matches_full_thrust():
    config = SimulationConfig()
    space = Space.from_config(config)
    pull = gravity_force_at(space.gravity_sources, space.launch_position, config.gravitational_constant)
    hover = config.rocket.max_thrust / config.rocket.mass
    assert pull.y > 0.0
    assert 0.5 * hover < pull.length() < 1.5 * hover


def test_gravity_field_arrows_are_clamped_and_cached():
    config = SimulationConfig()
    space = Space.from_config(config)
    field_config = GravityFieldConfig(grid_size=4, square_size=50_000.0, min_arrow=1_000.0, max_arrow=10_000.0)
    field = GravityField(space.gravity_sources, field_config, 1e-8)

    arrows = field.arrows()
    assert len(arrows) == 5
    assert all(len(row) == 5 for row in arrows)
    # the center lattice point sits on the earth, where there is no pull to draw
    assert arrows[2][2][1] == Vector2()
    for y, row in enumerate(arrows):
        for x, (tail, vector) in enumerate(row):
            if (x, y) == (2, 2):
                continue
            assert 1_000.0 - 1e-6 <= vector.length() <= 10_000.0 + 1e-6
    assert field.arrows() is arrows

    # the arrow straddles its lattice point
    tail, vector = arrows[0][0]
    lattice_point = tail + vector * 0.5
    assert lattice_point.x == approx(-100_000.0)
    assert lattice_point.y == approx(-100_000.0)
