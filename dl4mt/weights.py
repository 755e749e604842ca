"""
Immutable parameter bundles for the decoder components.

Each component depends only on its own bundle of named matrices. Arrays are
cast to float32 and frozen (write-protected) on construction, so the same
Weights object can be shared by every sentence and every decode step.
"""

from dataclasses import dataclass, fields
from typing import Optional

import numpy as np

from mblas import DTYPE

from .config import ModelConfig


def _freeze(obj) -> None:
    """Cast every ndarray field of a frozen dataclass to DTYPE and lock it."""
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, (np.ndarray, np.generic, list, tuple, float, int)):
            arr = np.array(value, dtype=DTYPE)
            arr.setflags(write=False)
            object.__setattr__(obj, f.name, arr)


def _expect(name: str, arr: np.ndarray, shape) -> None:
    if arr.shape != tuple(shape):
        raise ValueError(f"{name} has shape {arr.shape}, expected {tuple(shape)}")


@dataclass(frozen=True)
class EmbeddingsWeights:
    """Target embedding table E: (vocab_size, dim_emb)."""

    E: np.ndarray

    def __post_init__(self) -> None:
        _freeze(self)
        if self.E.ndim != 2:
            raise ValueError(f"E must be a matrix, got shape {self.E.shape}")


@dataclass(frozen=True)
class DecInitWeights:
    """Initial-state transform: tanh(mean(ctx) @ Wi + Bi)."""

    Wi: np.ndarray
    Bi: np.ndarray

    def __post_init__(self) -> None:
        _freeze(self)
        _expect("Bi", self.Bi, (self.Wi.shape[1],))


@dataclass(frozen=True)
class GRUWeights:
    """
    Gated recurrent unit parameters.

    W/U/B produce both gates at once: the first H columns are the reset
    gate, the last H the update gate. Wx/Ux/Bx1/Bx2 produce the candidate.
    """

    W: np.ndarray  # (in, 2H)
    B: np.ndarray  # (2H,)
    U: np.ndarray  # (H, 2H)
    Wx: np.ndarray  # (in, H)
    Bx1: np.ndarray  # (H,)
    Bx2: np.ndarray  # (H,)
    Ux: np.ndarray  # (H, H)

    def __post_init__(self) -> None:
        _freeze(self)
        d_in, H = self.Wx.shape
        _expect("W", self.W, (d_in, 2 * H))
        _expect("B", self.B, (2 * H,))
        _expect("U", self.U, (H, 2 * H))
        _expect("Bx1", self.Bx1, (H,))
        _expect("Bx2", self.Bx2, (H,))
        _expect("Ux", self.Ux, (H, H))

    @property
    def hidden_size(self) -> int:
        return self.Ux.shape[0]

    @property
    def input_size(self) -> int:
        return self.Wx.shape[0]


@dataclass(frozen=True)
class AttentionWeights:
    """Additive attention: V . tanh(ctx @ U + h @ W + B) + C."""

    U: np.ndarray  # (dim_ctx, dim_att)
    W: np.ndarray  # (dim_rnn, dim_att)
    B: np.ndarray  # (dim_att,)
    V: np.ndarray  # (dim_att,)
    C: np.ndarray  # scalar

    def __post_init__(self) -> None:
        _freeze(self)
        A = self.U.shape[1]
        _expect("W", self.W, (self.W.shape[0], A))
        _expect("B", self.B, (A,))
        _expect("V", self.V, (A,))
        if self.C.size != 1:
            raise ValueError(f"C must be a scalar, got shape {self.C.shape}")


@dataclass(frozen=True)
class SoftmaxWeights:
    """Deep-output readout (W1..W3, B1..B3) and vocabulary projection (W4, B4)."""

    W1: np.ndarray  # (dim_rnn, dim_readout)
    B1: np.ndarray
    W2: np.ndarray  # (dim_emb, dim_readout)
    B2: np.ndarray
    W3: np.ndarray  # (dim_ctx, dim_readout)
    B3: np.ndarray
    W4: np.ndarray  # (dim_readout, vocab_size)
    B4: np.ndarray  # (vocab_size,)

    def __post_init__(self) -> None:
        _freeze(self)
        R, V = self.W4.shape
        for name in ("W1", "W2", "W3"):
            W = getattr(self, name)
            _expect(name, W, (W.shape[0], R))
        for name in ("B1", "B2", "B3"):
            _expect(name, getattr(self, name), (R,))
        _expect("B4", self.B4, (V,))


@dataclass(frozen=True)
class Weights:
    """
    Full decoder parameter set.

    Attributes:
        embeddings: Target word embeddings.
        dec_init: Sentence-initial state transform.
        gru1: First recurrent layer (input = previous output embedding).
        gru2: Second recurrent layer (input = attention-pooled context).
        attention: Additive attention parameters.
        softmax: Readout and output projection.
        config: The dimensions these weights were built for, if known.
    """

    embeddings: EmbeddingsWeights
    dec_init: DecInitWeights
    gru1: GRUWeights
    gru2: GRUWeights
    attention: AttentionWeights
    softmax: SoftmaxWeights
    config: Optional[ModelConfig] = None

    def __post_init__(self) -> None:
        H = self.gru1.hidden_size
        if self.gru2.hidden_size != H or self.dec_init.Wi.shape[1] != H:
            raise ValueError("Recurrent layers and initial state disagree on hidden size")
        if self.gru1.input_size != self.embeddings.E.shape[1]:
            raise ValueError("gru1 input width must equal the embedding width")
        if self.gru2.input_size != self.attention.U.shape[0]:
            raise ValueError("gru2 input width must equal the source context width")
        if self.attention.W.shape[0] != H:
            raise ValueError("Attention W rows must equal the hidden size")
        sm = self.softmax
        if (sm.W1.shape[0], sm.W2.shape[0], sm.W3.shape[0]) != (
            H, self.gru1.input_size, self.gru2.input_size
        ):
            raise ValueError("Readout projections do not match state/embedding/context widths")
        if sm.W4.shape[1] != self.embeddings.E.shape[0]:
            raise ValueError("Output projection and embeddings disagree on vocabulary size")

    @classmethod
    def random(cls, config: ModelConfig, seed: int = 0) -> "Weights":
        """
        Gaussian initialisation N(0, config.init_std) for every matrix and
        bias, reproducible from `seed`.

        Args:
            config: Model dimensions.
            seed: RNG seed for reproducible init.

        Returns:
            Weights instance.
        """
        rng = np.random.default_rng(seed)
        std = config.init_std

        def g(*shape):
            return rng.normal(0.0, std, size=shape).astype(DTYPE)

        V, E, H = config.vocab_size, config.dim_emb, config.dim_rnn
        C, A, R = config.dim_ctx, config.dim_att, config.dim_readout

        def gru(d_in):
            return GRUWeights(
                W=g(d_in, 2 * H), B=g(2 * H), U=g(H, 2 * H),
                Wx=g(d_in, H), Bx1=g(H), Bx2=g(H), Ux=g(H, H),
            )

        return cls(
            embeddings=EmbeddingsWeights(E=g(V, E)),
            dec_init=DecInitWeights(Wi=g(C, H), Bi=g(H)),
            gru1=gru(E),
            gru2=gru(C),
            attention=AttentionWeights(U=g(C, A), W=g(H, A), B=g(A), V=g(A), C=g(1)[0]),
            softmax=SoftmaxWeights(
                W1=g(H, R), B1=g(R), W2=g(E, R), B2=g(R),
                W3=g(C, R), B3=g(R), W4=g(R, V), B4=g(V),
            ),
            config=config,
        )
