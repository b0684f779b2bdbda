from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    generation: int
    population: int
    best_score: float
    landed: int
    crashed: int
    tick_duration_ms: float = 0.0


@dataclass(slots=True)
class GenerationMetrics:
    generation: int
    best_score: float
    mean_score: float
    landed: int
    crashed: int
    high_score: float
    improved: bool
