from __future__ import annotations

from typing import Sequence

from ..core.rocket import Rocket
from ..types.metrics import GenerationMetrics, TickMetrics


def create_tick_metrics(
    tick: int, generation: int, rockets: Sequence[Rocket], duration_ms: float
) -> TickMetrics:
    best_score = max((rocket.score for rocket in rockets), default=0.0)
    return TickMetrics(
        tick=tick,
        generation=generation,
        population=len(rockets),
        best_score=best_score,
        landed=sum(1 for rocket in rockets if rocket.landed),
        crashed=sum(1 for rocket in rockets if rocket.crashed),
        tick_duration_ms=duration_ms,
    )


def create_generation_metrics(
    generation: int, rockets: Sequence[Rocket], high_score: float, improved: bool
) -> GenerationMetrics:
    count = len(rockets)
    total = sum(rocket.score for rocket in rockets)
    return GenerationMetrics(
        generation=generation,
        best_score=max((rocket.score for rocket in rockets), default=0.0),
        mean_score=total / count if count else 0.0,
        landed=sum(1 for rocket in rockets if rocket.landed),
        crashed=sum(1 for rocket in rockets if rocket.crashed),
        high_score=high_score,
        improved=improved,
    )
