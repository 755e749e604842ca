# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Gather operations
"""

import logging
from typing import Sequence

import numpy as np

from .utils import check_ids

logger = logging.getLogger(__name__)


def assemble_rows(A: np.ndarray, ids: Sequence[int]) -> np.ndarray:
    """
    Select rows of A by index into a fresh buffer.

    Row i of the result is a bitwise copy of row ids[i] of A. Indices may
    repeat (a hypothesis that survives with several continuations).

    Returns
    -------
    out : (len(ids), A.shape[1]) ndarray
    """
    if A.ndim != 2:
        raise ValueError(f"assemble_rows needs a matrix, got shape {A.shape}")
    idx = check_ids(ids, A.shape[0], what="row index")
    logger.debug("assemble_rows: %d of %d rows", idx.size, A.shape[0])
    return A[idx].copy()


def assemble_cols(A: np.ndarray, ids: Sequence[int]) -> np.ndarray:
    """
    Select columns of A by index into a fresh buffer.

    A 1-D A (a bias vector) is treated as a single row and the result
    stays 1-D.
    """
    if A.ndim == 1:
        idx = check_ids(ids, A.shape[0], what="column index")
        return A[idx].copy()
    if A.ndim != 2:
        raise ValueError(f"assemble_cols needs a matrix, got shape {A.shape}")
    idx = check_ids(ids, A.shape[1], what="column index")
    return A[:, idx].copy()
