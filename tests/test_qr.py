# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from csrlinalg.matrix import ColumnValuePair, SparseMatrix
from csrlinalg.qr import sparse_qr
from csrlinalg.utils import EPS, random_full_column_rank, random_sparse

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_identity_decomposes_to_identity():
    A = SparseMatrix([[ColumnValuePair(1.0, 0)], [ColumnValuePair(1.0, 1)]])
    d = A.get_decomposition()

    assert d.rank == 2
    assert d.unitary.get_pairs() == A.get_pairs()
    assert d.unitary.get_row_offsets() == (0, 1, 2)
    assert d.triangular.get_pairs() == A.get_pairs()
    assert d.triangular.get_row_offsets() == (0, 1, 2)


def test_empty_matrix_gives_empty_factors():
    Q, R = sparse_qr(SparseMatrix())
    assert Q.shape == (0, 0) and Q.nnz == 0
    assert R.shape == (0, 0) and R.nnz == 0
    assert SparseMatrix().get_rank() == 0


def test_reconstruction_full_column_rank(check_invariants):
    for seed in range(TEST_ITERATIONS):
        A = random_full_column_rank(30, 10, 40, seed=seed)
        d = sparse_qr(A)
        check_invariants(d.unitary)
        check_invariants(d.triangular)

        Q = d.unitary.to_numpy()
        R = d.triangular.to_numpy()
        dense = A.to_numpy()
        assert d.rank == np.linalg.matrix_rank(dense)
        assert Q.shape == (30, d.rank)
        assert R.shape == (d.rank, 10)
        np.testing.assert_allclose(Q @ R, dense, atol=1e-10)


def test_orthogonality_sparse_qr():
    A = random_full_column_rank(100, 10, 150, seed=7)
    Q, _ = sparse_qr(A)
    Qd = Q.to_numpy()
    identity = Qd.T @ Qd
    assert np.allclose(identity, np.eye(Qd.shape[1]), atol=1e-10)


def test_triangular_is_upper_and_matches_numpy_diagonal():
    A = random_full_column_rank(12, 6, 20, seed=11)
    dense = A.to_numpy()
    _, R = sparse_qr(A)
    Rd = R.to_numpy()

    assert np.allclose(np.tril(Rd, -1), 0.0)
    assert np.all(np.diag(Rd) > 0)
    _, R_np = np.linalg.qr(dense)
    np.testing.assert_allclose(np.abs(np.diag(Rd)), np.abs(np.diag(R_np)), rtol=1e-8)


def test_dependent_column_keeps_coefficients():
    dense = np.array([[1.0, 2.0, 0.0], [2.0, 4.0, 0.0], [0.0, 0.0, 3.0]])
    A = SparseMatrix.from_dense(dense)
    Q, R = A.get_decomposition()
    logger.debug(f"\nQ:\n{Q.to_numpy()}\nR:\n{R.to_numpy()}")

    assert A.get_rank() == 2
    assert Q.shape == (3, 2)
    assert R.shape == (2, 3)
    assert R.get_value(0, 1) != 0.0
    np.testing.assert_allclose(Q.to_numpy() @ R.to_numpy(), dense, atol=EPS)


def test_zero_column_and_trailing_empty_rows():
    A = SparseMatrix.from_dense([[1.0, 0.0, 2.0], [0.0, 0.0, 3.0], [0.0, 0.0, 0.0]])
    Q, R = sparse_qr(A)

    assert Q.shape == (3, 2)
    assert R.shape == (2, 3)
    np.testing.assert_array_equal(R.to_numpy()[:, 1], [0.0, 0.0])
    np.testing.assert_allclose(Q.to_numpy() @ R.to_numpy(), A.to_numpy(), atol=EPS)


def test_short_vector_counts_as_zero():
    A = SparseMatrix.from_dense([[1e-4]])
    d = sparse_qr(A)
    assert d.rank == 0
    assert d.unitary.shape == (1, 0)
    assert d.triangular.shape == (0, 1)


def test_wide_matrix_rank():
    for seed in range(10):
        A = random_sparse(4, 9, 20, seed=seed)
        dense = A.to_numpy()
        d = sparse_qr(A)
        assert d.rank == np.linalg.matrix_rank(dense)
        np.testing.assert_allclose(
            d.unitary.to_numpy() @ d.triangular.to_numpy(), dense, atol=1e-8
        )


def test_coefficients_project_the_input_columns():
    for seed in range(10):
        A = random_full_column_rank(15, 5, 25, seed=seed)
        dense = A.to_numpy()
        Q, R = sparse_qr(A)
        Qd, Rd = Q.to_numpy(), R.to_numpy()

        # R[k, j] = q_k . a_j for every k <= j
        projections = np.triu(Qd.T @ dense)
        np.testing.assert_allclose(Rd, projections, atol=1e-10)
