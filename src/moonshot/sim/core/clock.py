from __future__ import annotations

from .config import SimulationConfig


class SimulationClock:
    def __init__(self, tick_rate: int, generation_ticks: int, fast_forward_ticks: int = 4) -> None:
        self.tick_rate = max(1, int(tick_rate))
        self.generation_ticks = max(1, int(generation_ticks))
        self.fast_forward_ticks = max(1, int(fast_forward_ticks))
        self.ticks = 0

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "SimulationClock":
        return cls(config.tick_rate, config.generation_ticks, config.fast_forward_ticks)

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.tick_rate

    def steps_per_frame(self, fast_forward: bool) -> int:
        return self.fast_forward_ticks if fast_forward else 1

    def advance(self) -> bool:
        """Count one tick; True when that tick closes a generation."""
        self.ticks += 1
        return self.ticks % self.generation_ticks == 0

    def reset(self) -> None:
        self.ticks = 0
