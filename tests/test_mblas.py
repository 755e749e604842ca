# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from mblas import (
    add_bias_by_row,
    as_matrix,
    assemble_cols,
    assemble_rows,
    broadcast,
    check_rows,
    mean_rows,
    reshape,
    softmax_rows,
)


def test_add_bias_by_row():
    A = np.arange(6, dtype=np.float32).reshape(2, 3)
    b = np.array([10, 20, 30], dtype=np.float32)
    np.testing.assert_array_equal(add_bias_by_row(A, b), [[10, 21, 32], [13, 24, 35]])
    np.testing.assert_array_equal(add_bias_by_row(A, b[None, :]), add_bias_by_row(A, b))


def test_add_bias_by_row_column_mismatch():
    with pytest.raises(ValueError):
        add_bias_by_row(np.zeros((2, 3)), np.zeros(4))


def test_broadcast_groups_rows_by_second_argument():
    A = np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])  # 3 "source" rows
    B = np.array([[0.0, 10.0], [0.0, 20.0]])  # 2 "batch" rows
    out = broadcast(lambda x: x, A, B)
    assert out.shape == (6, 2)
    for j in range(2):
        for i in range(3):
            np.testing.assert_array_equal(out[j * 3 + i], A[i] + B[j])


def test_broadcast_column_mismatch():
    with pytest.raises(ValueError):
        broadcast(np.tanh, np.zeros((2, 3)), np.zeros((2, 4)))


def test_reshape():
    A = np.arange(6.0)
    np.testing.assert_array_equal(reshape(A, 2, 3), [[0, 1, 2], [3, 4, 5]])
    with pytest.raises(ValueError):
        reshape(A, 4, 2)


@pytest.mark.parametrize("m,n", [(1, 1), (3, 7), (10, 50)])
def test_softmax_rows_sum_to_one(m, n):
    rng = np.random.default_rng(m * n)
    Z = rng.normal(scale=10.0, size=(m, n))
    P = softmax_rows(Z)
    assert P.shape == (m, n)
    assert np.all(P >= 0.0)
    np.testing.assert_allclose(P.sum(axis=1), np.ones(m), atol=1e-12)


def test_softmax_single_column_is_exactly_one():
    P = softmax_rows(np.array([[3.7], [-1e6]], dtype=np.float32))
    assert P.dtype == np.float32
    assert np.all(P == 1.0)


def test_softmax_large_logits_do_not_overflow():
    with np.errstate(over="raise"):
        P = softmax_rows(np.array([[1e4, 1e4 - 1.0, -1e4]]))
    assert np.isfinite(P).all()


def test_mean_rows():
    A = np.array([[1.0, 2.0], [3.0, 6.0]])
    np.testing.assert_array_equal(mean_rows(A), [[2.0, 4.0]])
    with pytest.raises(ValueError):
        mean_rows(np.zeros((0, 2)))


def test_assemble_rows_is_a_bitwise_copy():
    rng = np.random.default_rng(1)
    A = rng.normal(size=(4, 5)).astype(np.float32)
    ids = [3, 0, 0, 2]
    out = assemble_rows(A, ids)
    assert out.shape == (4, 5)
    for i, k in enumerate(ids):
        assert np.array_equal(out[i], A[k])
    # fresh buffer, not a view
    out[0, 0] = 123.0
    assert A[3, 0] != 123.0


@pytest.mark.parametrize("ids", [[4], [-1], [0, 7]])
def test_assemble_rows_rejects_out_of_range(ids):
    with pytest.raises(IndexError):
        assemble_rows(np.zeros((4, 2)), ids)


def test_assemble_rows_empty_selection():
    assert assemble_rows(np.zeros((4, 2)), []).shape == (0, 2)


def test_assemble_cols():
    A = np.arange(12.0).reshape(3, 4)
    np.testing.assert_array_equal(assemble_cols(A, [3, 1]), A[:, [3, 1]])
    b = np.arange(4.0)
    np.testing.assert_array_equal(assemble_cols(b, [2, 0]), [2.0, 0.0])
    with pytest.raises(IndexError):
        assemble_cols(A, [4])
    with pytest.raises(IndexError):
        assemble_cols(b, [-1])


def test_as_matrix_and_check_rows():
    M = as_matrix([1, 2, 3])
    assert M.shape == (1, 3) and M.dtype == np.float32
    with pytest.raises(ValueError):
        as_matrix(np.zeros((2, 2, 2)))
    check_rows("M", M, 1)
    with pytest.raises(ValueError):
        check_rows("M", M, 2)
