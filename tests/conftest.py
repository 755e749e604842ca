# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from dl4mt.config import ModelConfig
from dl4mt.weights import Weights


class TableEncoder:
    """Deterministic stand-in encoder: one fixed annotation row per source token."""

    def __init__(self, vocab_size: int, dim_ctx: int, seed: int = 7):
        rng = np.random.default_rng(seed)
        self.table = rng.normal(size=(vocab_size, dim_ctx)).astype(np.float32)
        self.calls = 0

    def get_context(self, source):
        self.calls += 1
        return self.table[np.asarray(source, dtype=np.int64)]


@pytest.fixture
def config():
    # larger init_std than the default so gates and attention are not all ~0.5/uniform
    return ModelConfig(vocab_size=20, dim_emb=6, dim_rnn=8, init_std=0.5)


@pytest.fixture
def weights(config):
    return Weights.random(config, seed=3)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def source_context(config, rng):
    return rng.normal(size=(5, config.dim_ctx)).astype(np.float32)


@pytest.fixture
def encoder(config):
    return TableEncoder(vocab_size=11, dim_ctx=config.dim_ctx)
