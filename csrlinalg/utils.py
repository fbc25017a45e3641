# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

from .matrix import SparseMatrix
from .sampling import RandomSampler

EPS: float = 1e-12

# Residuals shorter than this are treated as the zero vector.
ZERO_NORM_TOL: float = 1e-3


def random_sparse(rows: int, cols: int, nnz: int, seed=None) -> SparseMatrix:
    """
    Build a rows-by-cols matrix holding ``nnz`` entries at random cells.

    Cells are picked with ``insert_one`` and then given a random
    non-zero value in [-10, -0.5] U [0.5, 10].

    Returns
    -------
    SparseMatrix with capacity (rows, cols)
    """
    sampler = RandomSampler(seed)
    rng = np.random.default_rng(seed)

    A = SparseMatrix([[] for _ in range(rows)], number_of_columns=cols)
    for _ in range(min(nnz, rows * cols)):
        A.insert_one(sampler)

    offsets = A.get_row_offsets()
    pairs = A.get_pairs()
    for row in range(rows):
        for pair in pairs[offsets[row] : offsets[row + 1]]:
            magnitude = rng.uniform(0.5, 10.0)
            A.set_value(row, pair.column, magnitude if rng.random() < 0.5 else -magnitude)
    return A


def random_full_column_rank(rows: int, cols: int, nnz: int, seed=None) -> SparseMatrix:
    """
    Random sparse matrix whose columns are linearly independent (rows >= cols).

    The diagonal of the top square block is overwritten with values in
    [20, 40]; for modest ``nnz`` that block is diagonally dominant and
    therefore nonsingular.
    """
    if rows < cols:
        raise ValueError("full column rank needs rows >= cols")

    A = random_sparse(rows, cols, nnz, seed)
    rng = np.random.default_rng(None if seed is None else seed + 1)
    for j in range(cols):
        # Dominant diagonal keeps the matrix well conditioned
        A.set_value(j, j, float(rng.uniform(20.0, 40.0)))
    return A
