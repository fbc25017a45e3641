# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from csrlinalg.describe import csr_arrays_string, dimension_string, entries_string, summary
from csrlinalg.matrix import SparseMatrix


def _example():
    A = SparseMatrix()
    A.set_value(0, 0, 1.5)
    A.set_value(1, 2, -2.0)
    return A


def test_entries_and_arrays():
    A = _example()
    assert entries_string(A) == "a(0, 0) = 1.5\na(1, 2) = -2\n"
    assert csr_arrays_string(A) == ("[ 0 1 2 ]", "[ 0 2 ]", "[ 1.5 -2 ]")
    assert dimension_string(A) == "2x3"


def test_summary_labels():
    A = _example()
    labels = summary(A)
    assert labels == {
        "nnz": "Non-Zero Values (2)",
        "rank": "-",
        "density": "Density 33.33%",
        "sparsity": "Sparsity 66.67%",
    }
    assert summary(A, A.get_decomposition())["rank"] == "Rank 2"


def test_summary_of_empty_matrix():
    A = SparseMatrix()
    assert entries_string(A) == ""
    assert csr_arrays_string(A) == ("[ 0 ]", "[ ]", "[ ]")
    assert summary(A) == {
        "nnz": "Non-Zero Values (0)",
        "rank": "Rank 0",
        "density": "-",
        "sparsity": "-",
    }
