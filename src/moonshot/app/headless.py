from __future__ import annotations

import argparse
import csv
import dataclasses
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.world import SpaceSimulation
from ..sim.types.metrics import GenerationMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "generation",
    "best_score",
    "mean_score",
    "landed",
    "crashed",
    "high_score",
    "improved",
]


def _format_row(metrics: GenerationMetrics) -> list[object]:
    return [
        metrics.generation,
        f"{metrics.best_score:.4f}",
        f"{metrics.mean_score:.4f}",
        metrics.landed,
        metrics.crashed,
        f"{metrics.high_score:.4f}",
        int(metrics.improved),
    ]


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0}
    return {
        "min": float(min(values)),
        "max": float(max(values)),
        "avg": float(sum(values) / len(values)),
    }


def run_headless(
    generations: int,
    config: Optional[SimulationConfig] = None,
    population: Optional[int] = None,
    log_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> SpaceSimulation:
    config = config if config is not None else SimulationConfig()
    if population is not None:
        config = dataclasses.replace(
            config, evolution=dataclasses.replace(config.evolution, population_size=population)
        )
    simulation = SpaceSimulation(config)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    try:
        for _ in range(generations):
            target = simulation.generation + 1
            while simulation.generation < target:
                metrics = simulation.tick_simulation()
                tick_ms_series.append(metrics.tick_duration_ms)
            if writer:
                writer.writerow(_format_row(simulation.history[-1]))
    finally:
        if csv_file:
            csv_file.close()

    history = simulation.history
    high_score = simulation.high_score if history else None
    logger.info(
        "Finished %d generations (%d ticks), high score %s",
        simulation.generation,
        simulation.ticks,
        high_score,
    )

    if summary_path:
        summary = {
            "generations": simulation.generation,
            "ticks": simulation.ticks,
            "population": simulation.population.capacity,
            "config_version": config.config_version,
            "high_score": high_score if high_score is None or math.isfinite(high_score) else None,
            "best_score": _summary_stats([m.best_score for m in history]),
            "mean_score": _summary_stats([m.mean_score for m in history]),
            "landed": _summary_stats([float(m.landed) for m in history]),
            "crashed": _summary_stats([float(m.crashed) for m in history]),
            "tick_ms": _summary_stats(tick_ms_series),
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return simulation


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless moon-landing evolution")
    parser.add_argument("--generations", type=int, default=10)
    parser.add_argument("--population", type=int, default=None, help="Override the population size")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-generation metrics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    run_headless(
        args.generations,
        config=config,
        population=args.population,
        log_path=args.log,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
