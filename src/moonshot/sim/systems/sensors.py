from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from ..utils.math2d import TAU, heading, map_range

if TYPE_CHECKING:
    from ..core.rocket import Rocket
    from ..core.space import Space

MAX_SENSED_SPEED = 10_000.0
MAX_SENSED_ROTATION_SPEED = 10.0
MAX_SENSED_DISTANCE = 1_000_000.0


def _unit(value: float, low: float, high: float) -> float:
    return map_range(value, low, high, 0.0, 1.0)


def build_observation(space: Space, rocket: Rocket) -> List[float]:
    """Eight inputs in [0, 1]: own motion, own attitude, then moon and earth offsets."""
    velocity = rocket.body.velocity
    moon_offset = space.moon.position - rocket.body.position
    earth_offset = space.earth.position - rocket.body.position
    return [
        _unit(velocity.length(), 0.0, MAX_SENSED_SPEED),
        _unit(heading(velocity), -math.pi, math.pi),
        _unit(rocket.body.rotation, 0.0, TAU),
        _unit(rocket.body.rotation_speed, -MAX_SENSED_ROTATION_SPEED, MAX_SENSED_ROTATION_SPEED),
        _unit(moon_offset.length(), 0.0, MAX_SENSED_DISTANCE),
        _unit(heading(moon_offset), -math.pi, math.pi),
        _unit(earth_offset.length(), 0.0, MAX_SENSED_DISTANCE),
        _unit(heading(earth_offset), -math.pi, math.pi),
    ]
