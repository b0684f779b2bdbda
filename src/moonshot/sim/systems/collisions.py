from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from ..core.rocket import Rocket
    from ..core.space import Space


class Contact(str, Enum):
    NONE = "None"
    EARTH = "Earth"
    LANDED = "Landed"
    TOUCHDOWN = "Touchdown"
    CRASHED = "Crashed"


def landing_bonus(impact_speed: float, bonus: float) -> float:
    if impact_speed <= 0.0:
        return bonus
    return bonus / impact_speed


def resolve_collisions(space: Space, rocket: Rocket) -> Contact:
    body = rocket.body
    contact = Contact.NONE
    earth = space.earth
    if (earth.position - body.position).length_squared() < earth.radius * earth.radius:
        body.position = Vector2(space.launch_position)
        body.rotation = 0.0
        body.rotation_speed = 0.0
        body.velocity = Vector2()
        contact = Contact.EARTH

    moon = space.moon
    if (moon.position - body.position).length_squared() < moon.radius * moon.radius:
        scoring = space.config.scoring
        impact_speed = body.velocity.length()
        if impact_speed > scoring.crash_speed:
            rocket.crashed = True
            contact = Contact.CRASHED
        elif not rocket.landed:
            rocket.score += landing_bonus(impact_speed, scoring.landing_bonus)
            rocket.landed = True
            contact = Contact.LANDED
        else:
            contact = Contact.TOUCHDOWN

        body.velocity = Vector2()
        body.rotation_speed = 0.0
        rocket.thrust = 0.0
    return contact
