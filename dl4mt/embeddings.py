"""
Target word embeddings.
"""

from typing import Sequence

import numpy as np

from mblas import assemble_rows

from .weights import EmbeddingsWeights


class Embeddings:
    """Embedding table lookup: E[ids] -> (len(ids), dim_emb)."""

    def __init__(self, weights: EmbeddingsWeights) -> None:
        self.w = weights

    def lookup(self, ids: Sequence[int]) -> np.ndarray:
        """
        One embedding row per id, in order.

        Raises:
            IndexError: If any id is outside [0, vocab_size).
        """
        return assemble_rows(self.w.E, ids)

    def get_rows(self) -> int:
        """Vocabulary size."""
        return self.w.E.shape[0]

    def get_cols(self) -> int:
        """Embedding dimension."""
        return self.w.E.shape[1]
