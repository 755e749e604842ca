"""
Additive (Bahdanau-style) attention over the source annotations.

For hidden states h (B, H) and source context S (T, C):
    e[b, t] = V . tanh(S[t] @ U + h[b] @ W + B) + C
    A       = softmax_rows(e)            (B, T)
    pooled  = A @ S                      (B, C)
"""

import logging
from typing import Optional

import numpy as np

from mblas import add_bias_by_row, broadcast, reshape, softmax_rows

from .activations import tanh
from .weights import AttentionWeights

logger = logging.getLogger(__name__)


class Attention:
    """
    Attention pooling with a cached alignment matrix.

    The alignment matrix of the most recent call is kept for introspection
    (get_attention) and is only valid until the next call on this instance.
    """

    def __init__(self, weights: AttentionWeights) -> None:
        """
        Args:
            weights: U, W, B, V and the scalar bias C.
        """
        self.w = weights
        self._bias = float(weights.C.reshape(-1)[0])
        self._A: Optional[np.ndarray] = None

    def get_aligned_source_context(
        self, hidden_state: np.ndarray, source_context: np.ndarray
    ) -> np.ndarray:
        """
        Pool the source context once per hypothesis row.

        Args:
            hidden_state: Layer-1 hidden states (B, H).
            source_context: Source annotations (T, C), shared by every row.

        Returns:
            aligned: (B, C), row b is the attention-weighted sum of source rows.

        Raises:
            ValueError: If the source context has no positions.
        """
        words = source_context.shape[0]
        if words == 0:
            raise ValueError("Cannot attend over an empty source context")
        batch_size = hidden_state.shape[0]

        T1 = source_context @ self.w.U  # (T, A)
        T2 = add_bias_by_row(hidden_state @ self.w.W, self.w.B)  # (B, A)
        T1 = broadcast(tanh, T1, T2)  # (B*T, A), grouped by hypothesis

        scores = reshape(T1 @ self.w.V, batch_size, words) + self._bias
        self._A = softmax_rows(scores)
        logger.debug("attention: batch %d over %d source positions", batch_size, words)
        return self._A @ source_context

    def get_attention(self) -> np.ndarray:
        """
        Alignment weights (B, T) from the last pooling call.

        Raises:
            RuntimeError: If no pooling has been computed yet.
        """
        if self._A is None:
            raise RuntimeError("No attention computed yet; call get_aligned_source_context first")
        return self._A.copy()
