from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pygame.math import Vector2

from .celestial import CelestialBody
from .config import SimulationConfig


@dataclass(slots=True)
class Space:
    """Shared, read-only (for rockets) surroundings every system function works against."""

    config: SimulationConfig
    earth: CelestialBody
    moon: CelestialBody
    launch_position: Vector2 = field(default_factory=Vector2)

    @classmethod
    def from_config(
        cls, config: SimulationConfig, earth_texture: Any = None, moon_texture: Any = None
    ) -> "Space":
        config.validate()
        return cls(
            config=config,
            earth=CelestialBody.from_config("earth", config.earth, earth_texture),
            moon=CelestialBody.from_config("moon", config.moon, moon_texture),
            launch_position=Vector2(config.launch_position),
        )

    @property
    def gravity_sources(self) -> tuple[CelestialBody, CelestialBody]:
        return (self.earth, self.moon)

    def integrate(self) -> None:
        self.earth.integrate()
        self.moon.integrate()
