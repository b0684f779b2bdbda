from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    generation: int
    high_score: Optional[float]
    metrics: TickMetrics
    rockets: List[Dict[str, Any]]
    bodies: List[Dict[str, Any]]
    best: Optional[Dict[str, Any]]
    prev_best: Optional[Dict[str, Any]]
    view: "SnapshotView"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotView:
    paused: bool
    auto_cam: bool
    fast_forward: bool
    render_all_rockets: bool
    show_gravity_field: bool
    show_grid: bool
    focus: Optional[str]
    bounds: Optional[List[float]]


@dataclass(slots=True)
class SnapshotMetadata:
    tick_rate: float
    generation_ticks: int
    population_capacity: int
    config_version: str
