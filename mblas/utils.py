# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

DTYPE = np.float32


def as_matrix(A, dtype=DTYPE) -> np.ndarray:
    """
    Return A as a 2-D array of `dtype`. A 1-D input becomes a single row.

    Raises
    ------
    ValueError
        If A has more than two dimensions.
    """
    A = np.asarray(A, dtype=dtype)
    if A.ndim == 1:
        A = A[None, :]
    if A.ndim != 2:
        raise ValueError(f"Expected a matrix, got an array of shape {A.shape}")
    return A


def check_rows(name: str, A: np.ndarray, rows: int) -> None:
    """Raise ValueError unless A has exactly `rows` rows."""
    if A.shape[0] != rows:
        raise ValueError(
            f"{name} has {A.shape[0]} rows, expected {rows} (one per hypothesis)"
        )


def check_ids(ids, limit: int, what: str = "id") -> np.ndarray:
    """
    Validate integer indices against [0, limit) and return them as an
    int64 array.

    Negative ids are rejected rather than wrapped around the end.
    """
    idx = np.asarray(ids, dtype=np.int64).reshape(-1)
    if idx.size:
        lo, hi = int(idx.min()), int(idx.max())
        if lo < 0 or hi >= limit:
            bad = lo if lo < 0 else hi
            raise IndexError(f"{what} {bad} out of range [0, {limit})")
    return idx
