from __future__ import annotations

import numpy as np
import pytest
from pytest import approx

from moonshot.sim.core.controller import NeuralController
from moonshot.sim.core.errors import ConfigurationError

LAYERS = (8, 6, 4)


def _inputs() -> list[float]:
    return [0.1, 0.9, 0.5, 0.5, 0.3, 0.25, 0.01, 0.75]


def test_evaluate_maps_eight_inputs_to_four_unit_outputs():
    net = NeuralController(LAYERS, rng=np.random.default_rng(3))
    outputs = net.evaluate(_inputs())

    assert len(outputs) == 4
    assert all(0.0 < value < 1.0 for value in outputs)


def test_evaluate_is_deterministic_and_pure():
    net = NeuralController(LAYERS, rng=np.random.default_rng(4))
    before = [w.copy() for w in net.weights]

    first = net.evaluate(_inputs())
    second = net.evaluate(_inputs())

    assert first == second
    for old, new in zip(before, net.weights):
        assert np.array_equal(old, new)


def test_zero_parameters_produce_neutral_outputs():
    weights = [np.zeros((6, 8)), np.zeros((4, 6))]
    biases = [np.zeros(6), np.zeros(4)]
    net = NeuralController(LAYERS, weights=weights, biases=biases)
    assert net.evaluate(_inputs()) == approx([0.5, 0.5, 0.5, 0.5])


def test_evaluate_rejects_wrong_input_count():
    net = NeuralController(LAYERS)
    with pytest.raises(ValueError):
        net.evaluate([0.0] * 7)


def test_mutate_leaves_parent_untouched_and_shares_no_arrays():
    parent = NeuralController(LAYERS, rng=np.random.default_rng(5))
    parent_weights = [w.copy() for w in parent._weights]
    parent_outputs = parent.evaluate(_inputs())

    child = parent.mutate(0.05)

    assert child is not parent
    assert child.layer_sizes == parent.layer_sizes
    for before, kept in zip(parent_weights, parent._weights):
        assert np.array_equal(before, kept)
    for mine, theirs in zip(parent._weights + parent._biases, child._weights + child._biases):
        assert not np.shares_memory(mine, theirs)
    assert any(not np.array_equal(a, b) for a, b in zip(parent._weights, child._weights))
    assert parent.evaluate(_inputs()) == parent_outputs

    child._weights[0][0, 0] += 100.0
    assert parent.evaluate(_inputs()) == parent_outputs


def test_zero_rate_mutation_copies_behaviour():
    parent = NeuralController(LAYERS, rng=np.random.default_rng(6))
    child = parent.mutate(0.0)
    assert child is not parent
    assert child.evaluate(_inputs()) == approx(parent.evaluate(_inputs()))


def test_mutation_noise_scales_with_rate():
    parent = NeuralController(LAYERS, rng=np.random.default_rng(7))
    small = parent.mutate(0.001)
    large = parent.mutate(1.0)

    def distance(other: NeuralController) -> float:
        return float(sum(np.abs(a - b).sum() for a, b in zip(parent._weights, other._weights)))

    assert distance(small) < distance(large)


def test_invalid_topology_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        NeuralController((8,))
    with pytest.raises(ConfigurationError):
        NeuralController(LAYERS, weights=[np.zeros((6, 8))], biases=[np.zeros(6)])
    with pytest.raises(ConfigurationError):
        NeuralController(LAYERS, weights=[np.zeros((6, 7)), np.zeros((4, 6))], biases=[np.zeros(6), np.zeros(4)])
