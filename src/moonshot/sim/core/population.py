"""Snapshot-published rocket population.

The simulation path is the only writer: it assembles a new sequence privately and
publishes it as an immutable tuple in one assignment. Readers (renderers, servers,
camera logic) never lock; they iterate whichever complete tuple was current when
they started.
"""
from __future__ import annotations

import threading
from typing import Iterable, Iterator, Optional, Tuple

from .errors import ConfigurationError
from .rocket import Rocket


class Population:
    def __init__(self, capacity: int, rockets: Iterable[Rocket] = ()) -> None:
        if capacity < 1:
            raise ConfigurationError(f"Population capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._write_lock = threading.RLock()
        self._rockets: Tuple[Rocket, ...] = tuple(rockets)
        self._version = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def version(self) -> int:
        return self._version

    @property
    def write_lock(self) -> threading.RLock:
        return self._write_lock

    def snapshot(self) -> Tuple[Rocket, ...]:
        return self._rockets

    def publish(self, rockets: Iterable[Rocket]) -> None:
        published = tuple(rockets)
        with self._write_lock:
            self._rockets = published
            self._version += 1

    def __iter__(self) -> Iterator[Rocket]:
        return iter(self._rockets)

    def __len__(self) -> int:
        return len(self._rockets)

    def __getitem__(self, index: int) -> Rocket:
        return self._rockets[index]

    def current_best(self) -> Optional[Rocket]:
        best: Optional[Rocket] = None
        best_score = float("-inf")
        for rocket in self._rockets:
            if rocket.score > best_score:
                best_score = rocket.score
                best = rocket
        return best
