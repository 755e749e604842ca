import numpy as np
import pytest

from dl4mt.activations import get_activation, log, sigmoid, tanh


def test_sigmoid_matches_definition():
    x = np.linspace(-8, 8, 33)
    np.testing.assert_allclose(sigmoid(x), 1.0 / (1.0 + np.exp(-x)), rtol=1e-12)


def test_sigmoid_extremes_do_not_overflow():
    x = np.array([-1000.0, 0.0, 1000.0], dtype=np.float32)
    with np.errstate(over="raise"):
        y = sigmoid(x)
    assert y.dtype == np.float32
    np.testing.assert_array_equal(y, [0.0, 0.5, 1.0])


def test_registry():
    assert get_activation("tanh") is tanh
    assert get_activation("log") is log
    with pytest.raises(KeyError):
        get_activation("relu")
