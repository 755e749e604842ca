"""
The two recurrent layers of the decoder.

- RNNHidden: layer 1, owns sentence-initial state and consumes the previous
  output embedding.
- RNNFinal: layer 2, consumes the attention-pooled source context.
"""

import logging

import numpy as np

from mblas import add_bias_by_row, mean_rows

from .activations import tanh
from .gru import GRU
from .weights import DecInitWeights, GRUWeights

logger = logging.getLogger(__name__)


class RNNHidden:
    """First recurrent layer plus the initial-state transform."""

    def __init__(self, init_weights: DecInitWeights, gru_weights: GRUWeights) -> None:
        self.w = init_weights
        self.gru = GRU(gru_weights)

    def initialize_state(self, source_context: np.ndarray, batch_size: int = 1) -> np.ndarray:
        """
        Sentence-initial hidden state.

        The source annotations are mean-pooled over positions, mapped through
        tanh(. @ Wi + Bi) and replicated to batch_size identical rows.

        Args:
            source_context: Source annotations (src_len, dim_ctx).
            batch_size: Number of rows to produce.

        Returns:
            state: (batch_size, dim_rnn).

        Raises:
            ValueError: On an empty source or a batch size below one.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if source_context.shape[0] == 0:
            raise ValueError("Cannot initialise a decoder state from an empty source context")

        summary = mean_rows(source_context)
        state = tanh(add_bias_by_row(summary @ self.w.Wi, self.w.Bi))
        logger.debug("initial state for %d source positions, batch %d", source_context.shape[0], batch_size)
        return np.repeat(state, batch_size, axis=0)

    def get_next_state(self, state: np.ndarray, embedding: np.ndarray) -> np.ndarray:
        return self.gru.get_next_state(state, embedding)


class RNNFinal:
    """Second recurrent layer. Same gate mechanics, independent parameters."""

    def __init__(self, gru_weights: GRUWeights) -> None:
        self.gru = GRU(gru_weights)

    def get_next_state(self, state: np.ndarray, aligned_context: np.ndarray) -> np.ndarray:
        return self.gru.get_next_state(state, aligned_context)
