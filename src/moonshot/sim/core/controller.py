"""Feed-forward neural controller driving a rocket.

The topology is fixed when the controller is created; mutation produces a fresh
controller with perturbed copies of every weight matrix and bias vector.
"""
from __future__ import annotations

from typing import List, Protocol, Sequence

import numpy as np

from .errors import ConfigurationError


class Controller(Protocol):
    def evaluate(self, inputs: Sequence[float]) -> List[float]: ...

    def mutate(self, rate: float) -> "Controller": ...


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 0.5 * (np.tanh(0.5 * x) + 1.0)


class NeuralController:
    """Sigmoid network with one weight matrix and bias vector per layer transition."""

    def __init__(
        self,
        layer_sizes: Sequence[int],
        weights: Sequence[np.ndarray] | None = None,
        biases: Sequence[np.ndarray] | None = None,
        init_range: float = 1.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        sizes = tuple(int(size) for size in layer_sizes)
        if len(sizes) < 2 or any(size < 1 for size in sizes):
            raise ConfigurationError(f"Invalid layer sizes: {sizes}")
        self._layer_sizes = sizes
        self._rng = rng if rng is not None else np.random.default_rng()
        shapes = list(zip(sizes[1:], sizes[:-1]))

        if weights is None:
            weights = [self._rng.uniform(-init_range, init_range, size=shape) for shape in shapes]
        if biases is None:
            biases = [self._rng.uniform(-init_range, init_range, size=shape[0]) for shape in shapes]
        self._weights = [np.array(w, dtype=float) for w in weights]
        self._biases = [np.array(b, dtype=float) for b in biases]

        for (rows, cols), w, b in zip(shapes, self._weights, self._biases):
            if w.shape != (rows, cols) or b.shape != (rows,):
                raise ConfigurationError(
                    f"Parameter shapes {w.shape}/{b.shape} do not match layer {cols}->{rows}"
                )
        if len(self._weights) != len(shapes) or len(self._biases) != len(shapes):
            raise ConfigurationError("Parameter count does not match layer sizes")

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return self._layer_sizes

    @property
    def weights(self) -> tuple[np.ndarray, ...]:
        return tuple(w.copy() for w in self._weights)

    @property
    def biases(self) -> tuple[np.ndarray, ...]:
        return tuple(b.copy() for b in self._biases)

    def evaluate(self, inputs: Sequence[float]) -> List[float]:
        values = np.asarray(inputs, dtype=float)
        if values.shape != (self._layer_sizes[0],):
            raise ValueError(f"Expected {self._layer_sizes[0]} inputs, received {values.size}")
        for w, b in zip(self._weights, self._biases):
            values = _sigmoid(w @ values + b)
        return values.tolist()

    def mutate(self, rate: float) -> "NeuralController":
        weights = [w + self._rng.standard_normal(w.shape) * rate for w in self._weights]
        biases = [b + self._rng.standard_normal(b.shape) * rate for b in self._biases]
        child_rng = np.random.default_rng(self._rng.integers(0, 2**62))
        return NeuralController(self._layer_sizes, weights=weights, biases=biases, rng=child_rng)
