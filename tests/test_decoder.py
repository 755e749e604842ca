import numpy as np
import pytest

from dl4mt.attention import Attention
from dl4mt.decoder import Decoder
from dl4mt.gru import GRU
from dl4mt.softmax import Softmax


def test_make_step_follows_layer_pipeline(weights, config, rng, source_context):
    dec = Decoder(weights)
    state = dec.empty_state(source_context, batch_size=2)
    emb = dec.lookup([4, 11])

    next_state, logprobs = dec.make_step(state, emb, source_context)

    hidden = GRU(weights.gru1).get_next_state(state, emb)
    att = Attention(weights.attention)
    aligned = att.get_aligned_source_context(hidden, source_context)
    expected_state = GRU(weights.gru2).get_next_state(hidden, aligned)
    expected_probs = Softmax(weights.softmax).get_probs(expected_state, emb, aligned)

    assert next_state.shape == (2, config.dim_rnn)
    assert logprobs.shape == (2, config.vocab_size)
    np.testing.assert_allclose(next_state, expected_state, rtol=1e-6, atol=1e-7)
    np.testing.assert_allclose(logprobs, expected_probs, rtol=1e-6, atol=1e-6)
    np.testing.assert_allclose(dec.get_attention(), att.get_attention(), rtol=1e-6, atol=1e-7)


def test_make_step_is_deterministic(weights, config, rng, source_context):
    state = rng.normal(size=(3, config.dim_rnn)).astype(np.float32)
    emb = rng.normal(size=(3, config.dim_emb)).astype(np.float32)

    s1, p1 = Decoder(weights).make_step(state, emb, source_context)
    s2, p2 = Decoder(weights).make_step(state, emb, source_context)
    assert np.array_equal(s1, s2)
    assert np.array_equal(p1, p2)


def test_make_step_does_not_modify_inputs(weights, config, rng, source_context):
    state = rng.normal(size=(2, config.dim_rnn)).astype(np.float32)
    emb = rng.normal(size=(2, config.dim_emb)).astype(np.float32)
    before = (state.copy(), emb.copy(), source_context.copy())
    Decoder(weights).make_step(state, emb, source_context)
    for a, b in zip(before, (state, emb, source_context)):
        assert np.array_equal(a, b)


def test_empty_embedding_is_zero(weights, config):
    emb = Decoder(weights).empty_embedding(batch_size=3)
    assert emb.shape == (3, config.dim_emb)
    assert not emb.any()


def test_empty_state_replicates_rows(weights, source_context):
    state = Decoder(weights).empty_state(source_context, batch_size=4)
    assert all(np.array_equal(state[0], row) for row in state)


def test_first_step_from_empty_state(weights, config, source_context):
    dec = Decoder(weights)
    _, logprobs = dec.make_step(dec.empty_state(source_context), dec.empty_embedding(), source_context)
    assert logprobs.shape == (1, config.vocab_size)
    np.testing.assert_allclose(np.exp(logprobs).sum(), 1.0, atol=1e-5)


def test_filtered_step(weights, source_context):
    dec = Decoder(weights)
    dec.filter([3, 7, 9])
    _, logprobs = dec.make_step(dec.empty_state(source_context), dec.empty_embedding(), source_context)
    assert logprobs.shape == (1, 3)
    assert dec.get_output_size() == 3
    assert dec.get_vocab_size() == weights.embeddings.E.shape[0]


def test_batch_mismatch_raises(weights, config, source_context):
    dec = Decoder(weights)
    with pytest.raises(ValueError):
        dec.make_step(dec.empty_state(source_context, 2), dec.empty_embedding(3), source_context)


def test_empty_source_raises(weights, config):
    dec = Decoder(weights)
    empty = np.zeros((0, config.dim_ctx), dtype=np.float32)
    with pytest.raises(ValueError):
        dec.empty_state(empty)
    with pytest.raises(ValueError):
        dec.make_step(
            np.zeros((1, config.dim_rnn), dtype=np.float32), dec.empty_embedding(), empty
        )


def test_lookup(weights, config):
    dec = Decoder(weights)
    emb = dec.lookup([0, 5, 5])
    assert emb.shape == (3, config.dim_emb)
    assert np.array_equal(emb[1], weights.embeddings.E[5])
    with pytest.raises(IndexError):
        dec.lookup([config.vocab_size])
    with pytest.raises(ValueError):
        dec.empty_embedding(0)
