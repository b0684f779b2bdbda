from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

from pygame.math import Vector2

from .body import Body
from .controller import Controller

_ROCKET_IDS = itertools.count()


@dataclass(frozen=True, slots=True)
class RocketAssets:
    body: Any = None
    flame: Any = None


@dataclass(slots=True)
class Rocket:
    body: Body
    controller: Controller
    assets: RocketAssets = field(default_factory=RocketAssets)
    thrust: float = 0.0
    rotation_force: float = 0.0
    score: float = 0.0
    landed: bool = False
    crashed: bool = False
    id: int = field(default_factory=lambda: next(_ROCKET_IDS))

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

    def integrate(self) -> None:
        self.body.integrate()

    def _launch_body(self, launch_position: Vector2) -> Body:
        return Body(
            position=Vector2(launch_position),
            mass=self.body.mass,
            size=Vector2(self.body.size),
        )

    def mutate(self, rate: float, launch_position: Vector2) -> "Rocket":
        return Rocket(
            body=self._launch_body(launch_position),
            controller=self.controller.mutate(rate),
            assets=self.assets,
        )

    def respawn(self, launch_position: Vector2) -> "Rocket":
        """Fresh rocket at the launch point flying this rocket's controller; ``self`` is left as is."""
        return Rocket(
            body=self._launch_body(launch_position),
            controller=self.controller,
            assets=self.assets,
            id=self.id,
        )
