# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Callable

import numpy as np

from .utils import as_matrix


def add_bias_by_row(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Add the bias vector b to every row of A.

    b may be shaped (n,) or (1, n) where n = A.shape[1].
    """
    A = np.asarray(A)
    A = as_matrix(A, dtype=A.dtype)
    b = np.asarray(b).reshape(-1)
    if b.shape[0] != A.shape[1]:
        raise ValueError(
            f"Bias of length {b.shape[0]} does not match {A.shape[1]} columns"
        )
    return A + b[None, :]


def broadcast(fn: Callable[[np.ndarray], np.ndarray], A: np.ndarray, B: np.ndarray):
    """
    Pairwise row combination: fn(A[i] + B[j]) for every row j of B and
    every row i of A.

    Returns
    -------
    out : (rows(B) * rows(A), n) ndarray
        Row j * rows(A) + i holds fn(A[i] + B[j]), so a later
        row-major reshape to (rows(B), rows(A)) keeps one row per B entry.
    """
    if A.shape[1] != B.shape[1]:
        raise ValueError(
            f"Cannot broadcast {A.shape} against {B.shape}: column mismatch"
        )
    S = B[:, None, :] + A[None, :, :]  # (rows(B), rows(A), n)
    return fn(S).reshape(B.shape[0] * A.shape[0], A.shape[1])


def reshape(A: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Row-major reshape that refuses to change the element count."""
    if A.size != rows * cols:
        raise ValueError(f"Cannot reshape {A.shape} into ({rows}, {cols})")
    return np.ascontiguousarray(A).reshape(rows, cols).copy()


def softmax_rows(Z: np.ndarray) -> np.ndarray:
    """
    Softmax along each row with max-subtraction for stability.

    Every row of the result sums to one; after the shift the largest
    exponent is exactly 1, so the denominator never vanishes.
    """
    Z = np.asarray(Z)
    Z = as_matrix(Z, dtype=Z.dtype)
    z = Z - Z.max(axis=1, keepdims=True)
    e = np.exp(z)
    return e / e.sum(axis=1, keepdims=True)


def mean_rows(A: np.ndarray) -> np.ndarray:
    """
    Column-wise mean over the rows of A, as a (1, n) matrix.

    An empty A has no mean; this is reported rather than returning NaN.
    """
    A = np.asarray(A)
    A = as_matrix(A, dtype=A.dtype)
    if A.shape[0] == 0:
        raise ValueError("Cannot take the mean of a matrix with zero rows")
    return A.mean(axis=0, keepdims=True).astype(A.dtype)
