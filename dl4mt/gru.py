"""
Gated recurrent unit, inference only.

For hidden size H, input x and previous state h:
    [r, u] = sigmoid(x @ W + h @ U + B)
    c      = tanh(x @ Wx + Bx1 + r * (h @ Ux + Bx2))
    h'     = (1 - u) * c + u * h
"""

import numpy as np

from mblas import add_bias_by_row, check_rows

from .activations import sigmoid, tanh
from .weights import GRUWeights


class GRU:
    """One GRU update over a batch of rows."""

    def __init__(self, weights: GRUWeights) -> None:
        """
        Args:
            weights: Gate and candidate parameters.
        """
        self.w = weights
        self.H = weights.hidden_size

    def get_next_state(self, state: np.ndarray, context: np.ndarray) -> np.ndarray:
        """
        Advance every row of `state` by one step.

        Args:
            state: Previous hidden states (B, H).
            context: Inputs for this step (B, input_size).

        Returns:
            next_state: (B, H), a new array.

        Raises:
            ValueError: If state and context disagree on the batch size.
        """
        w, H = self.w, self.H
        check_rows("context", context, state.shape[0])

        RU = add_bias_by_row(context @ w.W + state @ w.U, w.B)
        RU = sigmoid(RU)
        R, U = RU[:, :H], RU[:, H:]

        Hc = add_bias_by_row(context @ w.Wx, w.Bx1)
        Hs = add_bias_by_row(state @ w.Ux, w.Bx2)
        Hc = tanh(Hc + R * Hs)

        return (1.0 - U) * Hc + U * state
