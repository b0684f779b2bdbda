from __future__ import annotations

import random

import pytest
from pygame.math import Vector2
from pytest import approx

from moonshot.sim.core.body import Body
from moonshot.sim.core.config import EvolutionConfig, SimulationConfig
from moonshot.sim.core.errors import ConfigurationError
from moonshot.sim.core.focus import FocusSelector
from moonshot.sim.core.world import SpaceSimulation


def _simulation(size: int = 5, generation_seconds: float = 0.1) -> SpaceSimulation:
    config = SimulationConfig(
        generation_seconds=generation_seconds,
        evolution=EvolutionConfig(population_size=size),
    )
    return SpaceSimulation(config, rng=random.Random(5))


def test_population_bootstraps_at_launch_point():
    simulation = _simulation()
    assert len(simulation.rockets) == 5
    assert simulation.generation == 0
    for rocket in simulation.rockets:
        assert rocket.position == Vector2(0.0, -6_771.0)
        assert rocket.score == 0.0


def test_starts_paused_and_frame_does_nothing():
    simulation = _simulation()
    assert simulation.paused
    assert simulation.frame() == 0
    assert simulation.ticks == 0


def test_frame_runs_one_tick_or_fast_forward_batch():
    simulation = _simulation(generation_seconds=20.0)
    simulation.set_paused(False)

    assert simulation.frame() == 1
    assert simulation.ticks == 1

    simulation.toggle_fast_forward()
    assert simulation.frame() == 4
    assert simulation.ticks == 5

    simulation.toggle_pause()
    assert simulation.frame() == 0
    assert simulation.ticks == 5


def test_generation_rolls_over_on_schedule():
    simulation = _simulation()
    assert simulation.clock.generation_ticks == 6

    for _ in range(5):
        simulation.tick_simulation()
    assert simulation.generation == 0

    simulation.tick_simulation()
    assert simulation.generation == 1
    assert len(simulation.rockets) == 5
    assert all(rocket.score == 0.0 for rocket in simulation.rockets)

    for _ in range(6):
        simulation.tick_simulation()
    assert simulation.generation == 2
    assert len(simulation.history) == 2


def test_tick_metrics_track_population():
    simulation = _simulation(generation_seconds=20.0)
    metrics = simulation.tick_simulation()
    assert metrics.tick == 1
    assert metrics.population == 5
    assert metrics.best_score > 0.0
    assert metrics.tick_duration_ms >= 0.0
    assert simulation.metrics is metrics


def test_requested_generation_runs_even_while_paused():
    simulation = _simulation()
    simulation.request_next_generation()
    assert simulation.generation_requested
    assert simulation.generation == 0

    assert simulation.frame() == 0

    assert simulation.generation == 1
    assert not simulation.generation_requested
    simulation.frame()
    assert simulation.generation == 1


def test_snapshot_hides_crashed_rockets():
    simulation = _simulation()
    simulation.rockets[0].crashed = True

    snapshot = simulation.snapshot()

    assert len(snapshot.rockets) == 4
    assert simulation.rockets[0].id not in {item["id"] for item in snapshot.rockets}
    assert snapshot.high_score is None
    assert snapshot.prev_best is None
    assert [body["name"] for body in snapshot.bodies] == ["earth", "moon"]
    assert snapshot.metadata.generation_ticks == 6
    assert snapshot.metadata.population_capacity == 5


def test_snapshot_best_only_mode_shows_previous_best():
    simulation = _simulation(size=30)
    simulation.toggle_render_all_rockets()
    assert simulation.snapshot().rockets == []

    for i, rocket in enumerate(simulation.rockets):
        rocket.score = float(i)
    best = simulation.rockets[-1]
    simulation.next_generation()

    snapshot = simulation.snapshot()
    assert [item["id"] for item in snapshot.rockets] == [best.id]
    assert snapshot.prev_best["id"] == best.id
    assert snapshot.high_score == approx(29.0)
    assert not snapshot.view.render_all_rockets


def test_focus_selects_numbered_body():
    simulation = _simulation()
    assert simulation.snapshot().view.focus is None

    simulation.focus(1)
    assert simulation.focus_selector.focused is simulation.moon
    assert simulation.snapshot().view.focus == "moon"

    simulation.focus(7)
    assert simulation.focus_selector.focused is simulation.moon
    assert simulation.focus_selector.focused_position() == simulation.moon.position

    simulation.focus(0)
    assert simulation.snapshot().view.focus == "earth"


def test_focus_selector_rejects_more_than_nine_targets():
    bodies = [Body(position=Vector2(i, 0)) for i in range(10)]
    with pytest.raises(ConfigurationError):
        FocusSelector(bodies)
    assert len(FocusSelector(bodies[:9]).targets) == 9


def test_view_bounds_follow_previous_best():
    simulation = _simulation()
    assert simulation.view_bounds() == approx((0.0, -6_771.0, 0.0, -6_771.0))

    simulation.next_generation()

    assert simulation.view_bounds() == approx((0.0, -384_400.0, 0.0, -6_771.0))
    assert simulation.snapshot().view.bounds == approx([0.0, -384_400.0, 0.0, -6_771.0])
    simulation.toggle_auto_cam()
    assert simulation.snapshot().view.bounds is None


def test_gravity_force_points_at_earth_from_launch():
    simulation = _simulation()
    pull = simulation.gravity_force_at(Vector2(0.0, -6_771.0))
    assert pull.x == approx(0.0, abs=1e-12)
    assert pull.y > 0.0


def test_view_toggles_flip_state():
    simulation = _simulation()
    before = (
        simulation.auto_cam,
        simulation.fast_forward,
        simulation.render_all_rockets,
        simulation.show_gravity_field,
        simulation.show_grid,
    )
    assert before == (True, False, True, False, True)

    simulation.toggle_auto_cam()
    simulation.toggle_fast_forward()
    simulation.toggle_render_all_rockets()
    simulation.toggle_gravity_field()
    simulation.toggle_grid()

    view = simulation.snapshot().view
    assert (
        view.auto_cam,
        view.fast_forward,
        view.render_all_rockets,
        view.show_gravity_field,
        view.show_grid,
    ) == (False, True, False, True, False)
