"""
Model dimensions for the attentional GRU decoder.
"""

from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional


@dataclass
class ModelConfig:
    """
    Sizes of every parameter matrix in the decoder.

    Attributes:
        vocab_size: Target vocabulary size V.
        dim_emb: Target word embedding width.
        dim_rnn: Decoder hidden state width H.
        dim_ctx: Width of one source annotation (2*H for a bidirectional encoder).
        dim_att: Hidden width of the attention MLP (defaults to dim_ctx).
        dim_readout: Width of the tanh readout layer before the vocabulary
            projection (defaults to dim_emb).
        init_std: Standard deviation used by Weights.random.
    """

    vocab_size: int = 32
    dim_emb: int = 16
    dim_rnn: int = 32
    dim_ctx: Optional[int] = None
    dim_att: Optional[int] = None
    dim_readout: Optional[int] = None
    init_std: float = 0.02

    def __post_init__(self) -> None:
        if self.dim_ctx is None:
            self.dim_ctx = 2 * self.dim_rnn
        if self.dim_att is None:
            self.dim_att = self.dim_ctx
        if self.dim_readout is None:
            self.dim_readout = self.dim_emb

        for name in ("vocab_size", "dim_emb", "dim_rnn", "dim_ctx", "dim_att", "dim_readout"):
            value = getattr(self, name)
            if int(value) != value or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.init_std <= 0.0:
            raise ValueError(f"init_std must be positive, got {self.init_std!r}")

    @classmethod
    def from_dict(cls, data: Dict) -> "ModelConfig":
        """
        Build a config from a plain mapping (e.g. a parsed JSON/YAML file).

        Raises:
            KeyError: If the mapping holds keys that are not config fields.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise KeyError(f"Unknown config keys: {unknown}. Available: {sorted(known)}")
        return cls(**data)

    def to_dict(self) -> Dict:
        return asdict(self)
