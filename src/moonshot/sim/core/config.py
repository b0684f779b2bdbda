from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

SENSOR_COUNT = 8
ACTUATOR_COUNT = 4


@dataclass
class CelestialConfig:
    position: tuple[float, float] = (0.0, 0.0)
    diameter: float = 12_742.0
    mass: float = 5.972e21


def _default_moon() -> CelestialConfig:
    return CelestialConfig(position=(0.0, -384_400.0), diameter=3_474.2, mass=7.349e19)


@dataclass
class RocketConfig:
    size: tuple[float, float] = (400.0, 800.0)
    mass: float = 30.0
    max_thrust: float = 261.0
    max_rotation_force: float = 0.02
    layer_sizes: tuple[int, ...] = (SENSOR_COUNT, 6, ACTUATOR_COUNT)
    # height of the launch point above the earth's surface
    launch_altitude: float = 400.0


@dataclass
class EvolutionConfig:
    population_size: int = 1_000
    # a third of the population is culled every generation
    cull_divisor: int = 3
    cull_step_chance: float = 0.5
    max_mutation_rate: float = 0.1
    weight_init_range: float = 1.0


@dataclass
class ScoringConfig:
    distance_reward: float = 5.0
    distance_range: float = 300_000.0
    facing_reward: float = 20.0
    facing_radius: float = 20_000.0
    moving_reward: float = 40.0
    speed_reward: float = 80.0
    speed_range: float = 10_000.0
    speed_radius: float = 100_000.0
    rotation_reward: float = 40.0
    rotation_speed_range: float = 10.0
    crash_speed: float = 100.0
    landing_bonus: float = 150_000.0


@dataclass
class GravityFieldConfig:
    grid_size: int = 50
    square_size: float = 20_000.0
    min_arrow: float = 1_000.0
    max_arrow: float = 10_000.0


@dataclass
class SimulationConfig:
    tick_rate: int = 60
    generation_seconds: float = 20.0
    fast_forward_ticks: int = 4
    gravitational_constant: float = 6.674e-14
    config_version: str = "v1"
    earth: CelestialConfig = field(default_factory=CelestialConfig)
    moon: CelestialConfig = field(default_factory=_default_moon)
    rocket: RocketConfig = field(default_factory=RocketConfig)
    evolution: EvolutionConfig = field(default_factory=EvolutionConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    gravity_field: GravityFieldConfig = field(default_factory=GravityFieldConfig)

    @property
    def generation_ticks(self) -> int:
        return max(1, int(round(self.generation_seconds * self.tick_rate)))

    @property
    def launch_position(self) -> tuple[float, float]:
        earth_x, earth_y = self.earth.position
        return (earth_x, earth_y - 0.5 * self.earth.diameter - self.rocket.launch_altitude)

    def validate(self) -> None:
        layers = tuple(self.rocket.layer_sizes)
        if len(layers) < 2:
            raise ConfigurationError(f"Controller needs at least two layers, got {layers}")
        if layers[0] != SENSOR_COUNT or layers[-1] != ACTUATOR_COUNT:
            raise ConfigurationError(
                f"Controller must map {SENSOR_COUNT} sensors to {ACTUATOR_COUNT} actuators, got {layers}"
            )
        if any(size < 1 for size in layers):
            raise ConfigurationError(f"Layer sizes must be positive, got {layers}")
        if self.evolution.population_size < 1:
            raise ConfigurationError("Population size must be at least 1")
        if self.evolution.cull_divisor < 1:
            raise ConfigurationError("cull_divisor must be at least 1")
        if self.tick_rate < 1:
            raise ConfigurationError("tick_rate must be at least 1")

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def _pair(value: Any, default: tuple[float, float], name: str) -> tuple[float, float]:
    if value is None:
        return default
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    raise ConfigurationError(f"{name} must be a pair of numbers, got {value!r}")


def _section(raw: dict, key: str) -> dict:
    value = raw.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Config section '{key}' must be a mapping, got {type(value).__name__}")
    return value


def _celestial(raw: dict, default: CelestialConfig, name: str) -> CelestialConfig:
    values = dict(raw)
    position = _pair(values.pop("position", None), default.position, f"{name}.position")
    return CelestialConfig(
        position=position,
        diameter=float(values.pop("diameter", default.diameter)),
        mass=float(values.pop("mass", default.mass)),
        **values,
    )


def load_config(raw: dict) -> SimulationConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root must be a mapping, got {type(raw).__name__}")

    earth = _celestial(_section(raw, "earth"), CelestialConfig(), "earth")
    moon = _celestial(_section(raw, "moon"), _default_moon(), "moon")

    rocket_raw = dict(_section(raw, "rocket"))
    default_rocket = RocketConfig()
    size = _pair(rocket_raw.pop("size", None), default_rocket.size, "rocket.size")
    layers_raw = rocket_raw.pop("layer_sizes", None)
    layer_sizes = default_rocket.layer_sizes if layers_raw is None else tuple(int(v) for v in layers_raw)
    rocket = RocketConfig(size=size, layer_sizes=layer_sizes, **rocket_raw)

    evolution = EvolutionConfig(**_section(raw, "evolution"))
    scoring = ScoringConfig(**_section(raw, "scoring"))
    gravity_field = GravityFieldConfig(**_section(raw, "gravity_field"))

    sim_values = {
        k: v
        for k, v in raw.items()
        if k not in {"earth", "moon", "rocket", "evolution", "scoring", "gravity_field"}
    }
    config = SimulationConfig(
        earth=earth,
        moon=moon,
        rocket=rocket,
        evolution=evolution,
        scoring=scoring,
        gravity_field=gravity_field,
        **sim_values,
    )
    config.validate()
    return config
