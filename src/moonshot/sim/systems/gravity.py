from __future__ import annotations

from typing import Iterable, List, Tuple

from pygame.math import Vector2

from ..core.body import MassBody
from ..core.config import GravityFieldConfig
from ..utils.math2d import scale_to


def gravity_acceleration(source: MassBody, point: Vector2, gravitational_constant: float) -> Vector2:
    """Inverse-square pull of ``source`` on a unit mass at ``point``."""
    offset = source.position - point
    distance_sq = offset.length_squared()
    if distance_sq == 0.0:
        return Vector2()
    distance = distance_sq ** 0.5
    return offset * (gravitational_constant * source.mass / (distance_sq * distance))


def gravity_force_at(sources: Iterable[MassBody], point: Vector2, gravitational_constant: float) -> Vector2:
    total = Vector2()
    for source in sources:
        total = total + gravity_acceleration(source, point, gravitational_constant)
    return total


Arrow = Tuple[Vector2, Vector2]


class GravityField:
    """Lattice of gravity samples around a center point, computed once on first access.

    Each arrow is ``(tail, vector)``; the vector length is clamped into the configured
    arrow range and the tail is shifted back so the arrow straddles its lattice point.
    """

    def __init__(
        self,
        sources: Iterable[MassBody],
        config: GravityFieldConfig,
        gravitational_constant: float,
        center: Vector2 | None = None,
    ) -> None:
        self._sources = tuple(sources)
        self._config = config
        self._gravitational_constant = gravitational_constant
        self._center = Vector2(center) if center is not None else Vector2()
        self._arrows: List[List[Arrow]] | None = None

    def force_at(self, point: Vector2) -> Vector2:
        return gravity_force_at(self._sources, point, self._gravitational_constant)

    def arrows(self) -> List[List[Arrow]]:
        if self._arrows is None:
            self._arrows = self._build()
        return self._arrows

    def _build(self) -> List[List[Arrow]]:
        config = self._config
        span = config.grid_size * config.square_size
        upper_left = self._center - Vector2(span, span) * 0.5
        rows: List[List[Arrow]] = []
        for y in range(config.grid_size + 1):
            row: List[Arrow] = []
            for x in range(config.grid_size + 1):
                point = upper_left + Vector2(x * config.square_size, y * config.square_size)
                force = self.force_at(point)
                length = force.length()
                if length < config.min_arrow:
                    force = scale_to(force, config.min_arrow)
                elif length > config.max_arrow:
                    force = scale_to(force, config.max_arrow)
                row.append((point - force * 0.5, force))
            rows.append(row)
        return rows
