from __future__ import annotations

from typing import Sequence

from ..core.config import RocketConfig
from ..utils.math2d import map_range

THRUST_ON = 0.5
THRUST_CUTOFF = 0.75
BRAKE_ON = 0.5
BRAKE_ROTATION_SPEED = 10.0


def thrust_from_output(output: float, max_thrust: float) -> float:
    # full thrust in the middle band, fading back to zero above the cutoff
    if output < THRUST_ON:
        return 0.0
    if output < THRUST_CUTOFF:
        return max_thrust
    return map_range(output, THRUST_CUTOFF, 1.0, max_thrust, 0.0)


def rotation_force_from_outputs(
    outputs: Sequence[float], rotation_speed: float, mass: float, max_rotation_force: float
) -> float:
    turn_left = map_range(outputs[1], 0.0, 1.0, 0.0, 1.0)
    turn_right = map_range(outputs[2], 0.0, 1.0, 0.0, 1.0)
    brake = map_range(outputs[3], 0.0, 1.0, 0.0, 1.0)

    if brake > BRAKE_ON:
        return map_range(
            rotation_speed,
            -BRAKE_ROTATION_SPEED,
            BRAKE_ROTATION_SPEED,
            max_rotation_force / mass,
            -max_rotation_force / mass,
        )
    if turn_left > turn_right:
        return turn_left * max_rotation_force
    return turn_right * -max_rotation_force


def actuate(outputs: Sequence[float], rotation_speed: float, mass: float, config: RocketConfig) -> tuple[float, float]:
    thrust = thrust_from_output(outputs[0], config.max_thrust)
    rotation_force = rotation_force_from_outputs(outputs, rotation_speed, mass, config.max_rotation_force)
    return thrust, rotation_force
