from __future__ import annotations

import logging
import random
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional, Tuple

from pygame.math import Vector2

from .body import Body
from .celestial import CelestialBody
from .clock import SimulationClock
from .config import SimulationConfig
from .controller import Controller, NeuralController
from .focus import FocusSelector
from .population import Population
from .rocket import Rocket, RocketAssets
from .space import Space
from ..systems import evolution, flight, metrics as metrics_system
from ..systems.gravity import GravityField
from ..types.metrics import GenerationMetrics, TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotView

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[], Controller]


class SpaceSimulation:
    """Owns the earth, the moon and the evolving rocket population.

    The simulation path calls :meth:`frame` (or :meth:`tick_simulation`) and is the
    only writer of the population. Render paths may call the read-only accessors and
    :meth:`snapshot` from another thread at any time.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        assets: Optional[RocketAssets] = None,
        controller_factory: Optional[ControllerFactory] = None,
        earth_texture: Any = None,
        moon_texture: Any = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config if config is not None else SimulationConfig()
        self._config.validate()
        self._assets = assets if assets is not None else RocketAssets()
        self._controller_factory = controller_factory or self._default_controller
        self._rng = rng
        self.space = Space.from_config(self._config, earth_texture, moon_texture)
        self.clock = SimulationClock.from_config(self._config)
        self.state = evolution.GenerationState()
        self.focus_selector = FocusSelector(self.space.gravity_sources)
        self.gravity_field = GravityField(
            self.space.gravity_sources, self._config.gravity_field, self._config.gravitational_constant
        )
        self.population = Population(self._config.evolution.population_size)
        self._metrics: TickMetrics | None = None

        self._paused = True
        self._auto_cam = True
        self._fast_forward = False
        self._render_all_rockets = True
        self._show_gravity_field = False
        self._show_grid = True
        self._generation_requested = False

        self._bootstrap_population()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def earth(self) -> CelestialBody:
        return self.space.earth

    @property
    def moon(self) -> CelestialBody:
        return self.space.moon

    @property
    def rockets(self) -> Tuple[Rocket, ...]:
        return self.population.snapshot()

    @property
    def generation(self) -> int:
        return self.state.generation

    @property
    def high_score(self) -> float:
        return self.state.high_score

    @property
    def prev_best(self) -> Optional[Rocket]:
        return self.state.prev_best

    @property
    def history(self) -> List[GenerationMetrics]:
        return self.state.history

    @property
    def ticks(self) -> int:
        return self.clock.ticks

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def auto_cam(self) -> bool:
        return self._auto_cam

    @property
    def fast_forward(self) -> bool:
        return self._fast_forward

    @property
    def render_all_rockets(self) -> bool:
        return self._render_all_rockets

    @property
    def show_gravity_field(self) -> bool:
        return self._show_gravity_field

    @property
    def show_grid(self) -> bool:
        return self._show_grid

    @property
    def generation_requested(self) -> bool:
        return self._generation_requested

    def frame(self) -> int:
        """Run one game-loop frame and return the number of ticks simulated."""
        if self._generation_requested:
            self._generation_requested = False
            self.next_generation()
        if self._paused:
            return 0
        steps = self.clock.steps_per_frame(self._fast_forward)
        for _ in range(steps):
            self.tick_simulation()
        return steps

    def tick_simulation(self) -> TickMetrics:
        start = perf_counter()
        self.space.integrate()
        rockets = self.population.snapshot()
        for rocket in rockets:
            flight.tick_rocket(self.space, rocket)
        rollover = self.clock.advance()
        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = metrics_system.create_tick_metrics(self.clock.ticks, self.state.generation, rockets, elapsed_ms)
        self._metrics = metrics
        if rollover:
            self.next_generation()
        return metrics

    def next_generation(self) -> GenerationMetrics:
        return evolution.next_generation(self.space, self.population, self.state, self._rng)

    def current_best(self) -> Optional[Rocket]:
        return self.population.current_best()

    def gravity_force_at(self, point: Vector2) -> Vector2:
        return self.gravity_field.force_at(Vector2(point))

    def view_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Rectangle the auto camera should frame: the moon and the previous best, or every rocket."""
        prev_best = self.state.prev_best
        if prev_best is not None:
            points = [self.moon.position, prev_best.position]
        else:
            points = [rocket.position for rocket in self.population.snapshot()]
        if not points:
            return None
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return (min(xs), min(ys), max(xs), max(ys))

    # Operator commands. Each only flips state; the simulation path acts on it.

    def focus(self, index: int) -> None:
        self.focus_selector.focus(index)

    def toggle_pause(self) -> None:
        self._paused = not self._paused

    def set_paused(self, paused: bool) -> None:
        self._paused = bool(paused)

    def toggle_auto_cam(self) -> None:
        self._auto_cam = not self._auto_cam

    def toggle_fast_forward(self) -> None:
        self._fast_forward = not self._fast_forward

    def toggle_render_all_rockets(self) -> None:
        self._render_all_rockets = not self._render_all_rockets

    def toggle_gravity_field(self) -> None:
        self._show_gravity_field = not self._show_gravity_field

    def toggle_grid(self) -> None:
        self._show_grid = not self._show_grid

    def request_next_generation(self) -> None:
        logger.debug("Next generation requested at tick %d", self.clock.ticks)
        self._generation_requested = True

    def snapshot(self) -> Snapshot:
        rockets = self.population.snapshot()
        metrics = self._metrics
        if metrics is None:
            metrics = metrics_system.create_tick_metrics(self.clock.ticks, self.state.generation, rockets, 0.0)
        prev_best = self.state.prev_best
        if self._render_all_rockets:
            visible = [self._rocket_snapshot(rocket) for rocket in rockets if not rocket.crashed]
        elif prev_best is not None and not prev_best.crashed:
            visible = [self._rocket_snapshot(prev_best)]
        else:
            visible = []
        best = self.population.current_best()
        focused = self.focus_selector.focused
        bounds = self.view_bounds() if self._auto_cam else None
        high_score = self.state.high_score if self.state.generation > 0 else None
        return Snapshot(
            tick=self.clock.ticks,
            generation=self.state.generation,
            high_score=high_score,
            metrics=metrics,
            rockets=visible,
            bodies=[self._body_snapshot(body) for body in self.space.gravity_sources],
            best=self._rocket_snapshot(best) if best is not None else None,
            prev_best=self._rocket_snapshot(prev_best) if prev_best is not None else None,
            view=SnapshotView(
                paused=self._paused,
                auto_cam=self._auto_cam,
                fast_forward=self._fast_forward,
                render_all_rockets=self._render_all_rockets,
                show_gravity_field=self._show_gravity_field,
                show_grid=self._show_grid,
                focus=getattr(focused, "name", None),
                bounds=list(bounds) if bounds is not None else None,
            ),
            metadata=SnapshotMetadata(
                tick_rate=float(self.clock.tick_rate),
                generation_ticks=self.clock.generation_ticks,
                population_capacity=self.population.capacity,
                config_version=self._config.config_version,
            ),
        )

    def _default_controller(self) -> Controller:
        return NeuralController(
            self._config.rocket.layer_sizes, init_range=self._config.evolution.weight_init_range
        )

    def _new_rocket(self) -> Rocket:
        rocket_config = self._config.rocket
        body = Body(
            position=Vector2(self.space.launch_position),
            mass=rocket_config.mass,
            size=Vector2(rocket_config.size),
        )
        return Rocket(body=body, controller=self._controller_factory(), assets=self._assets)

    def _bootstrap_population(self) -> None:
        rockets = [self._new_rocket() for _ in range(self.population.capacity)]
        self.population.publish(rockets)

    @staticmethod
    def _rocket_snapshot(rocket: Rocket) -> Dict[str, Any]:
        body = rocket.body
        return {
            "id": rocket.id,
            "x": body.position.x,
            "y": body.position.y,
            "vx": body.velocity.x,
            "vy": body.velocity.y,
            "rotation": body.rotation,
            "rotation_speed": body.rotation_speed,
            "thrust": rocket.thrust,
            "score": rocket.score,
            "landed": rocket.landed,
            "crashed": rocket.crashed,
        }

    @staticmethod
    def _body_snapshot(body: CelestialBody) -> Dict[str, Any]:
        return {
            "name": body.name,
            "x": body.position.x,
            "y": body.position.y,
            "radius": body.radius,
            "rotation": body.rotation,
        }
