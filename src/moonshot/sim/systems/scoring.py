from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pygame.math import Vector2

from ..utils.math2d import angle_between, map_range, rotated

if TYPE_CHECKING:
    from ..core.rocket import Rocket
    from ..core.space import Space

# the rocket's "down" axis; it should point at the moon when touching down
_BASE_AXIS = Vector2(0.0, 1.0)


@dataclass(slots=True)
class ScoreTerms:
    distance: float = 0.0
    facing: float = 0.0
    moving: float = 0.0
    speed: float = 0.0
    rotation: float = 0.0

    def total(self) -> float:
        return self.distance + self.facing + self.moving + self.speed + self.rotation


def score_terms(space: Space, rocket: Rocket) -> ScoreTerms:
    config = space.config.scoring
    body = rocket.body
    moon_offset = space.moon.position - body.position
    moon_distance = moon_offset.length()
    moon_radius = space.moon.radius

    terms = ScoreTerms()
    if moon_distance < moon_radius:
        return terms

    terms.distance = map_range(moon_distance, moon_radius, config.distance_range, config.distance_reward, 0.0)

    if body.velocity.length_squared() != 0.0:
        moving_error = abs(angle_between(moon_offset, body.velocity))
        terms.moving = map_range(moving_error, 0.0, math.pi, config.moving_reward, 0.0)

    terms.rotation = map_range(
        abs(body.rotation_speed), 0.0, config.rotation_speed_range, config.rotation_reward, 0.0
    )

    if moon_distance < config.speed_radius:
        terms.speed = map_range(body.velocity.length(), 0.0, config.speed_range, config.speed_reward, 0.0)

    if moon_distance < config.facing_radius:
        facing_error = abs(angle_between(moon_offset, rotated(_BASE_AXIS, body.rotation)))
        terms.facing = map_range(facing_error, 0.0, math.pi, config.facing_reward, 0.0)

    return terms


def apply_score(space: Space, rocket: Rocket) -> float:
    reward = score_terms(space, rocket).total()
    rocket.score += reward
    return reward
