from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.population import Population
from ..core.rocket import Rocket
from ..core.space import Space
from ..types.metrics import GenerationMetrics
from .metrics import create_generation_metrics

logger = logging.getLogger(__name__)


@dataclass
class GenerationState:
    generation: int = 0
    prev_best: Optional[Rocket] = None
    prev_best_score: float = float("-inf")
    high_score: float = float("-inf")
    history: List[GenerationMetrics] = field(default_factory=list)


def select(rockets: Sequence[Rocket]) -> List[Rocket]:
    # sorted() is stable, so equal scores keep their insertion order
    return sorted(rockets, key=lambda rocket: rocket.score, reverse=True)


def cull_index(size: int, step_chance: float, rng: random.Random | None = None) -> int:
    """Walk from the tail toward the head, one step per successful coin flip.

    Walking past the head wraps back to the tail.
    """
    rng = rng or random
    index = size - 1
    while rng.random() < step_chance:
        index -= 1
    if index < 0:
        index = size - 1
    return index


def cull(rockets: List[Rocket], count: int, step_chance: float, rng: random.Random | None = None) -> List[Rocket]:
    rng = rng or random
    removed: List[Rocket] = []
    # at least one rocket survives to seed the next generation
    count = min(count, len(rockets) - 1)
    for _ in range(count):
        removed.append(rockets.pop(cull_index(len(rockets), step_chance, rng)))
    return removed


def repopulate(
    rockets: List[Rocket],
    capacity: int,
    max_mutation_rate: float,
    space: Space,
    rng: random.Random | None = None,
) -> int:
    rng = rng or random
    added = 0
    parent = rockets[0]
    while len(rockets) < capacity:
        rockets.append(parent.mutate(rng.uniform(0.0, max_mutation_rate), space.launch_position))
        added += 1
    return added


def next_generation(
    space: Space,
    population: Population,
    state: GenerationState,
    rng: random.Random | None = None,
) -> GenerationMetrics:
    """Sort, cull and refill the population, then publish it as one snapshot.

    Rockets reachable from the published tuple are never modified: survivors are
    respawned as new rockets that take over their controllers.
    """
    evolution = space.config.evolution
    with population.write_lock:
        state.generation += 1
        ranked = select(population.snapshot())
        if not ranked:
            raise RuntimeError("Cannot start a new generation from an empty population")

        metrics_source = tuple(ranked)
        best_score = ranked[0].score
        cull(ranked, population.capacity // evolution.cull_divisor, evolution.cull_step_chance, rng)

        rockets = [rocket.respawn(space.launch_position) for rocket in ranked]
        repopulate(rockets, population.capacity, evolution.max_mutation_rate, space, rng)

        improved = best_score > state.high_score
        state.prev_best = rockets[0]
        state.prev_best_score = best_score
        if improved:
            state.high_score = best_score
            logger.info("Generation %d: %s", state.generation, state.high_score)

        metrics = create_generation_metrics(state.generation, metrics_source, state.high_score, improved)
        state.history.append(metrics)
        logger.debug(
            "Generation %d rolled over: best=%.3f mean=%.3f landed=%d crashed=%d",
            metrics.generation,
            metrics.best_score,
            metrics.mean_score,
            metrics.landed,
            metrics.crashed,
        )

        population.publish(rockets)
    return metrics
