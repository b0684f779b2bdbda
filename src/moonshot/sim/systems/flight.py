from __future__ import annotations

import math
from typing import TYPE_CHECKING

from . import actuation, collisions, gravity, scoring, sensors
from ..utils.math2d import from_angle

if TYPE_CHECKING:
    from ..core.rocket import Rocket
    from ..core.space import Space


def tick_rocket(space: Space, rocket: Rocket) -> collisions.Contact:
    """Advance one rocket by a single tick and return the contact it made, if any."""
    body = rocket.body
    config = space.config

    observation = sensors.build_observation(space, rocket)
    outputs = rocket.controller.evaluate(observation)
    rocket.thrust, rocket.rotation_force = actuation.actuate(
        outputs, body.rotation_speed, body.mass, config.rocket
    )

    body.velocity = body.velocity + gravity.gravity_force_at(
        space.gravity_sources, body.position, config.gravitational_constant
    )
    # thrust pushes along the nose, which points up at rotation 0
    body.velocity = body.velocity + from_angle(body.rotation - math.pi / 2.0, rocket.thrust / body.mass)
    body.rotation_speed += rocket.rotation_force / body.mass

    contact = collisions.resolve_collisions(space, rocket)

    body.integrate()

    scoring.apply_score(space, rocket)
    return contact
