"""
dl4mt - Inference-time decoder step for an attentional GRU translation model.

This package provides the per-step transition of a dl4mt-style
encoder-decoder in pure NumPy, plus the state bookkeeping a beam search
needs to run it over many hypotheses at once.

Modules:
- activations: Element-wise functions (sigmoid, tanh, log)
- config: Model dimensions (ModelConfig)
- weights: Immutable per-component parameter bundles
- embeddings: Target word embedding lookup
- gru: Gated recurrent unit update
- rnn: First (RNNHidden) and second (RNNFinal) recurrent layers
- attention: Additive attention pooling over the source
- softmax: Readout, vocabulary projection and output filtering
- decoder: One decode step (Decoder.make_step)
- scorer: Beam-state adapter (EncoderDecoder)
"""

import logging as _logging

# Activations
from .activations import (
    sigmoid,
    tanh,
    log,
    get_activation,
    ACTIVATIONS,
)

# Configuration and parameters
from .config import ModelConfig
from .weights import (
    EmbeddingsWeights,
    DecInitWeights,
    GRUWeights,
    AttentionWeights,
    SoftmaxWeights,
    Weights,
)

# Components
from .embeddings import Embeddings
from .gru import GRU
from .rnn import RNNHidden, RNNFinal
from .attention import Attention
from .softmax import Softmax
from .decoder import Decoder

# Beam-search adapter
from .scorer import (
    ContextEncoder,
    Hypothesis,
    Scorer,
    EncoderDecoderState,
    EncoderDecoder,
)

__all__ = [
    # Activations
    "sigmoid",
    "tanh",
    "log",
    "get_activation",
    "ACTIVATIONS",
    # Configuration
    "ModelConfig",
    "EmbeddingsWeights",
    "DecInitWeights",
    "GRUWeights",
    "AttentionWeights",
    "SoftmaxWeights",
    "Weights",
    # Components
    "Embeddings",
    "GRU",
    "RNNHidden",
    "RNNFinal",
    "Attention",
    "Softmax",
    "Decoder",
    # Scorer
    "ContextEncoder",
    "Hypothesis",
    "Scorer",
    "EncoderDecoderState",
    "EncoderDecoder",
]

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
