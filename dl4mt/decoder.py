"""
One decode step of the dl4mt attentional GRU decoder.

Pipeline per step, for B live hypotheses:
    hidden   = RNNHidden(state, prev_embedding)        (B, H)
    aligned  = Attention(hidden, source_context)       (B, C)
    next     = RNNFinal(hidden, aligned)               (B, H)
    logprobs = Softmax(next, prev_embedding, aligned)  (B, V)
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from mblas import DTYPE, as_matrix, check_rows

from .attention import Attention
from .embeddings import Embeddings
from .rnn import RNNFinal, RNNHidden
from .softmax import Softmax
from .weights import Weights

logger = logging.getLogger(__name__)


class Decoder:
    """
    Orchestrates the decoder sub-components.

    Every method is a deterministic function of its inputs and the shared,
    read-only Weights. The only instance state is the attention cache and the
    output filter.
    """

    def __init__(self, weights: Weights) -> None:
        """
        Args:
            weights: Full parameter set, shared and never mutated.
        """
        self.weights = weights
        self.embeddings = Embeddings(weights.embeddings)
        self.rnn1 = RNNHidden(weights.dec_init, weights.gru1)
        self.rnn2 = RNNFinal(weights.gru2)
        self.attention = Attention(weights.attention)
        self.softmax = Softmax(weights.softmax)

    def make_step(
        self,
        state: np.ndarray,
        embedding: np.ndarray,
        source_context: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advance all hypotheses by one target word.

        Args:
            state: Decoder states from the previous step (B, H).
            embedding: Embeddings of the previously emitted words (B, dim_emb).
            source_context: Source annotations (T, C).

        Returns:
            next_state: (B, H).
            logprobs: (B, V), or (B, len(filter)) when filtered.

        Raises:
            ValueError: On a batch-size mismatch or an empty source context.
        """
        state = as_matrix(state)
        embedding = as_matrix(embedding)
        source_context = as_matrix(source_context)
        check_rows("embedding", embedding, state.shape[0])

        hidden = self.rnn1.get_next_state(state, embedding)
        aligned = self.attention.get_aligned_source_context(hidden, source_context)
        next_state = self.rnn2.get_next_state(hidden, aligned)
        logprobs = self.softmax.get_probs(next_state, embedding, aligned)

        logger.debug(
            "step: batch %d, source %d, output %d",
            state.shape[0], source_context.shape[0], logprobs.shape[1],
        )
        return next_state, logprobs

    def empty_state(self, source_context: np.ndarray, batch_size: int = 1) -> np.ndarray:
        return self.rnn1.initialize_state(as_matrix(source_context), batch_size)

    def empty_embedding(self, batch_size: int = 1) -> np.ndarray:
        """All-zero embeddings standing in for the missing previous word."""
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        return np.zeros((batch_size, self.embeddings.get_cols()), dtype=DTYPE)

    def lookup(self, ids: Sequence[int]) -> np.ndarray:
        return self.embeddings.lookup(ids)

    def filter(self, ids: Sequence[int]) -> None:
        self.softmax.filter(ids)

    def get_attention(self) -> np.ndarray:
        return self.attention.get_attention()

    def get_vocab_size(self) -> int:
        return self.embeddings.get_rows()

    def get_output_size(self) -> int:
        return self.softmax.get_output_size()
