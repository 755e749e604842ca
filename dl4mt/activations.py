"""
Element-wise activation functions used by the decoder.

Currently implemented:
- sigmoid: Logistic function for GRU reset/update gates
- tanh: Hyperbolic tangent for candidate states, attention and readout
- log: Natural logarithm, turns softmax output into log-probabilities
"""

import numpy as np


def sigmoid(x: np.ndarray) -> np.ndarray:
    """
    Logistic function: 1 / (1 + exp(-x)).

    Evaluated as exp(x) / (1 + exp(x)) for negative x so neither branch
    overflows.

    Args:
        x: Input array of any shape.

    Returns:
        Sigmoid applied element-wise, same dtype as x.
    """
    x = np.asarray(x)
    out = np.empty_like(x)
    pos = x >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
    ex = np.exp(x[~pos])
    out[~pos] = ex / (1.0 + ex)
    return out


def tanh(x: np.ndarray) -> np.ndarray:
    """
    Hyperbolic tangent.

    Args:
        x: Input array of any shape.

    Returns:
        tanh(x) element-wise.
    """
    return np.tanh(x)


def log(x: np.ndarray) -> np.ndarray:
    """Natural logarithm, element-wise."""
    return np.log(x)


# Registry for easy lookup by name
ACTIVATIONS = {
    "sigmoid": sigmoid,
    "tanh": tanh,
    "log": log,
}


def get_activation(name: str):
    """
    Get an activation function by name.

    Args:
        name: One of 'sigmoid', 'tanh', 'log'.

    Returns:
        The element-wise function.

    Raises:
        KeyError: If activation name is not recognized.
    """
    if name not in ACTIVATIONS:
        raise KeyError(f"Unknown activation: {name}. Available: {list(ACTIVATIONS.keys())}")
    return ACTIVATIONS[name]
