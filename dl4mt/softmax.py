"""
Deep-output readout and vocabulary projection.

    t        = tanh(s @ W1 + B1 + e @ W2 + B2 + c @ W3 + B3)
    logprobs = log(softmax_rows(t @ W4 + B4))

With a filter active, W4/B4 are replaced by their columns for the filtered
ids and the output has one column per filtered id, in filter order.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from mblas import add_bias_by_row, assemble_cols, check_rows, softmax_rows
from mblas.utils import check_ids

from .activations import log, tanh
from .weights import SoftmaxWeights

logger = logging.getLogger(__name__)


class Softmax:
    """Output distribution over the (optionally filtered) vocabulary."""

    def __init__(self, weights: SoftmaxWeights) -> None:
        self.w = weights
        self._filtered_ids: Optional[np.ndarray] = None
        self._W4 = weights.W4
        self._B4 = weights.B4
        self._column_of: dict = {}

    @property
    def is_filtered(self) -> bool:
        return self._filtered_ids is not None

    @property
    def filtered_ids(self) -> Optional[np.ndarray]:
        """Active filter ids in column order, or None when unfiltered."""
        return None if self._filtered_ids is None else self._filtered_ids.copy()

    def get_output_size(self) -> int:
        """Number of columns get_probs returns."""
        return self._W4.shape[1]

    def get_probs(
        self, state: np.ndarray, embedding: np.ndarray, aligned_context: np.ndarray
    ) -> np.ndarray:
        """
        Log-probabilities of the next word.

        Args:
            state: Decoder state after layer 2 (B, H).
            embedding: Previous output embedding (B, dim_emb).
            aligned_context: Attention-pooled context (B, C).

        Returns:
            logprobs: (B, V) or (B, len(filter)).
        """
        w = self.w
        B = state.shape[0]
        check_rows("embedding", embedding, B)
        check_rows("aligned_context", aligned_context, B)

        T1 = add_bias_by_row(state @ w.W1, w.B1)
        T2 = add_bias_by_row(embedding @ w.W2, w.B2)
        T3 = add_bias_by_row(aligned_context @ w.W3, w.B3)
        t = tanh(T1 + T2 + T3)

        probs = softmax_rows(add_bias_by_row(t @ self._W4, self._B4))
        return log(probs)

    def filter(self, ids: Sequence[int]) -> None:
        """
        Restrict the output projection to `ids`, replacing any earlier filter.

        Raises:
            ValueError: If ids is empty.
            IndexError: If an id is outside the vocabulary.
        """
        vocab = self.w.W4.shape[1]
        idx = check_ids(ids, vocab, what="filter id")
        if idx.size == 0:
            raise ValueError("Cannot filter the output vocabulary to an empty set")
        if np.unique(idx).size != idx.size:
            logger.warning("filter ids contain %d duplicates", idx.size - np.unique(idx).size)

        self._W4 = assemble_cols(self.w.W4, idx)
        self._B4 = assemble_cols(self.w.B4, idx)
        self._filtered_ids = idx
        # first occurrence wins for duplicated ids
        self._column_of = {}
        for col, word in enumerate(idx.tolist()):
            self._column_of.setdefault(word, col)
        logger.info("output projection filtered to %d of %d words", idx.size, vocab)

    def to_vocab_ids(self, columns: Sequence[int]) -> np.ndarray:
        """
        Map output columns of get_probs back to vocabulary ids.

        Unfiltered, columns already are vocabulary ids.
        """
        idx = check_ids(columns, self.get_output_size(), what="output column")
        if self._filtered_ids is None:
            return idx
        return self._filtered_ids[idx]

    def to_filtered_columns(self, ids: Sequence[int]) -> np.ndarray:
        """
        Map vocabulary ids to output columns of get_probs.

        Raises:
            KeyError: If an id lies outside the active filter.
        """
        if self._filtered_ids is None:
            return check_ids(ids, self.get_output_size(), what="vocabulary id")
        cols = []
        for word in np.asarray(ids, dtype=np.int64).reshape(-1).tolist():
            if word not in self._column_of:
                raise KeyError(f"Word id {word} is not in the active vocabulary filter")
            cols.append(self._column_of[word])
        return np.asarray(cols, dtype=np.int64)
