from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pygame.math import Vector2

from .body import Body
from .config import CelestialConfig


@dataclass(slots=True)
class CelestialBody:
    name: str
    body: Body
    texture: Any = None

    @classmethod
    def from_config(cls, name: str, config: CelestialConfig, texture: Any = None) -> "CelestialBody":
        body = Body(
            position=Vector2(config.position),
            mass=config.mass,
            size=Vector2(config.diameter, config.diameter),
        )
        return cls(name=name, body=body, texture=texture)

    @property
    def position(self) -> Vector2:
        return self.body.position

    @property
    def velocity(self) -> Vector2:
        return self.body.velocity

    @property
    def rotation(self) -> float:
        return self.body.rotation

    @property
    def mass(self) -> float:
        return self.body.mass

    @property
    def radius(self) -> float:
        return self.body.size.x * 0.5

    def integrate(self) -> None:
        self.body.integrate()
