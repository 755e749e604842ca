"""
Beam-search scorer interface and the encoder-decoder scorer.

A beam-search driver holds opaque per-scorer state handles. Only the scorer
that created a handle reads or writes it; every other scorer rejects it.
Row i of a state after assemble_beam_state belongs to beam[i].
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, Protocol, Sequence, TypeVar

import numpy as np

from mblas import as_matrix, assemble_rows

from .decoder import Decoder
from .weights import Weights

logger = logging.getLogger(__name__)


class ContextEncoder(Protocol):
    """Anything that turns source token ids into a (src_len, dim_ctx) matrix."""

    def get_context(self, source: Sequence[int]) -> np.ndarray:
        ...


@dataclass
class Hypothesis:
    """
    One beam entry.

    Attributes:
        word: Token id emitted by this hypothesis at the last step.
        prev_state_index: Row of the previous step's state it extends.
        cost: Cumulative log-probability.
    """

    word: int
    prev_state_index: int
    cost: float = 0.0


StateT = TypeVar("StateT")


class Scorer(ABC, Generic[StateT]):
    """Abstract base class for beam-search scorers."""

    @abstractmethod
    def new_state(self) -> StateT:
        """Allocate an empty state handle owned by this scorer."""
        pass

    @abstractmethod
    def set_source(self, source: Sequence[int]) -> None:
        """Prepare for a new source sentence."""
        pass

    @abstractmethod
    def begin_sentence_state(self, state: StateT) -> None:
        """Fill `state` with the sentence-initial state for one hypothesis."""
        pass

    @abstractmethod
    def score(self, state_in: StateT, state_out: StateT) -> np.ndarray:
        """Score every row of `state_in`, writing the successor into `state_out`."""
        pass

    @abstractmethod
    def assemble_beam_state(
        self, state_in: StateT, beam: Sequence[Hypothesis], state_out: StateT
    ) -> None:
        """Reorder `state_in` rows to follow `beam` and feed back its words."""
        pass

    @abstractmethod
    def get_vocab_size(self) -> int:
        pass


class EncoderDecoderState:
    """
    Decoder state for a batch of hypotheses.

    Attributes:
        states: Hidden states (B, H), one row per hypothesis.
        embeddings: Embeddings of each hypothesis' last word (B, dim_emb).
    """

    def __init__(self, owner: "EncoderDecoder") -> None:
        self.owner = owner
        self.states: Optional[np.ndarray] = None
        self.embeddings: Optional[np.ndarray] = None
        self.generation: Optional[int] = None

    @property
    def batch_size(self) -> int:
        return 0 if self.states is None else self.states.shape[0]

    def __repr__(self) -> str:
        return f"EncoderDecoderState(batch_size={self.batch_size}, generation={self.generation})"


class EncoderDecoder(Scorer[EncoderDecoderState]):
    """
    Scorer backed by one Decoder and the context of the current source.

    Args:
        weights: Decoder parameters.
        encoder: Produces the source context for set_source.
    """

    def __init__(self, weights: Weights, encoder: ContextEncoder) -> None:
        self.weights = weights
        self.encoder = encoder
        self.decoder = Decoder(weights)
        self._source_context: Optional[np.ndarray] = None
        self._generation = 0

    @property
    def source_context(self) -> np.ndarray:
        if self._source_context is None:
            raise RuntimeError("No source sentence set; call set_source first")
        return self._source_context

    def new_state(self) -> EncoderDecoderState:
        return EncoderDecoderState(self)

    def set_source(self, source: Sequence[int]) -> None:
        """
        Encode a new source sentence.

        States computed for the previous sentence are invalid afterwards.

        Raises:
            ValueError: If the encoder returns an empty context.
        """
        context = as_matrix(self.encoder.get_context(source)).copy()
        if context.shape[0] == 0:
            raise ValueError("Encoder returned an empty source context")
        context.setflags(write=False)
        self._source_context = context
        self._generation += 1
        logger.info("source set: %d positions, context width %d", *context.shape)

    def begin_sentence_state(self, state: EncoderDecoderState) -> None:
        self._check_owner(state)
        state.states = self.decoder.empty_state(self.source_context, 1)
        state.embeddings = self.decoder.empty_embedding(1)
        state.generation = self._generation

    def score(self, state_in: EncoderDecoderState, state_out: EncoderDecoderState) -> np.ndarray:
        """
        Run one decoder step for every row of state_in.

        state_in and state_out may be the same handle; the step reads all of
        state_in before assigning fresh arrays to state_out.

        Returns:
            logprobs: (B, V), or (B, len(filter)) when filtered.
        """
        self._check_current(state_in)
        self._check_owner(state_out)
        next_state, logprobs = self.decoder.make_step(
            state_in.states, state_in.embeddings, self.source_context
        )
        state_out.states = next_state
        state_out.embeddings = state_in.embeddings
        state_out.generation = self._generation
        return logprobs

    def assemble_beam_state(
        self,
        state_in: EncoderDecoderState,
        beam: Sequence[Hypothesis],
        state_out: EncoderDecoderState,
    ) -> None:
        """
        Gather surviving hypotheses into state_out.

        Row i of state_out.states is a copy of row beam[i].prev_state_index of
        state_in.states; row i of state_out.embeddings is the embedding of
        beam[i].word.

        Raises:
            IndexError: If a back-reference or word id is out of range.
        """
        self._check_current(state_in)
        self._check_owner(state_out)
        words = [h.word for h in beam]
        prev_ids = [h.prev_state_index for h in beam]

        states = assemble_rows(state_in.states, prev_ids)
        embeddings = self.decoder.lookup(words)
        state_out.states = states
        state_out.embeddings = embeddings
        state_out.generation = self._generation

    def filter(self, ids: Sequence[int]) -> None:
        self.decoder.filter(ids)

    def get_attention(self) -> np.ndarray:
        return self.decoder.get_attention()

    def get_vocab_size(self) -> int:
        return self.decoder.get_vocab_size()

    def _check_owner(self, state) -> None:
        if not isinstance(state, EncoderDecoderState):
            raise TypeError(f"Expected EncoderDecoderState, got {type(state).__name__}")
        if state.owner is not self:
            raise TypeError("State handle belongs to a different scorer")

    def _check_current(self, state: EncoderDecoderState) -> None:
        self._check_owner(state)
        if state.states is None:
            raise RuntimeError("State is empty; call begin_sentence_state first")
        if state.generation != self._generation:
            raise RuntimeError("State was computed for a previous source sentence")
