from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pygame.math import Vector2

from ..utils.math2d import wrap_angle


class MassBody(Protocol):
    """Anything that takes part in the physics step."""

    @property
    def position(self) -> Vector2: ...

    @property
    def velocity(self) -> Vector2: ...

    @property
    def rotation(self) -> float: ...

    @property
    def mass(self) -> float: ...

    def integrate(self) -> None: ...


@dataclass(slots=True)
class Body:
    position: Vector2
    velocity: Vector2 = field(default_factory=Vector2)
    rotation: float = 0.0
    rotation_speed: float = 0.0
    mass: float = 1.0
    size: Vector2 = field(default_factory=lambda: Vector2(1.0, 1.0))

    def integrate(self) -> None:
        self.position = self.position + self.velocity
        self.rotation = wrap_angle(self.rotation + self.rotation_speed)

    def speed(self) -> float:
        return self.velocity.length()
