# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .matrix import ColumnValuePair, SparseMatrix
from .utils import ZERO_NORM_TOL

logger = logging.getLogger(__name__)


@dataclass
class Decomposition:
    """
    Reduced QR factors, A = unitary @ triangular.

    unitary    : (m, rank) orthonormal columns
    triangular : (rank, n) upper-triangular coefficients
    rank       : number of columns accepted into the basis

    Unpacks like the dense ``qr``: ``Q, R = sparse_qr(A)``.
    """

    unitary: SparseMatrix = field(default_factory=SparseMatrix)
    triangular: SparseMatrix = field(default_factory=SparseMatrix)
    rank: int = 0

    def __iter__(self):
        return iter((self.unitary, self.triangular))


def _sparse_dot(u: Sequence[ColumnValuePair], v: Sequence[ColumnValuePair]) -> float:
    """Merge both sorted column lists once, O(len(u) + len(v))."""
    if not u or not v:
        return 0.0

    result = 0.0
    j = 0
    n = len(v)
    for a in u:
        while j < n and v[j].column < a.column:
            j += 1
        if j == n:
            break
        if v[j].column == a.column:
            result += a.value * v[j].value
    return result


def _sparse_axpy(
    y: List[ColumnValuePair], x: Sequence[ColumnValuePair], coeff: float
) -> List[ColumnValuePair]:
    """y + coeff * x as a new sorted sparse vector, exact zeros dropped."""
    if not x or coeff == 0.0:
        return y

    out: List[ColumnValuePair] = []
    i = 0
    m = len(y)
    for b in x:
        while i < m and y[i].column < b.column:
            out.append(y[i])
            i += 1
        if i < m and y[i].column == b.column:
            value = y[i].value + coeff * b.value
            i += 1
        else:
            value = coeff * b.value
        if value != 0.0:
            out.append(ColumnValuePair(value, b.column))

    out.extend(y[i:])
    return out


def _normalise(v: List[ColumnValuePair], tol: float) -> Tuple[float, List[ColumnValuePair]]:
    """
    Return the norm of v and v scaled to unit length.

    Short vectors (norm < tol) count as zero: (0.0, []) is returned.
    """
    norm = math.sqrt(sum(p.value * p.value for p in v))
    if norm < tol:
        return 0.0, []
    return norm, [ColumnValuePair(p.value / norm, p.column) for p in v]


def sparse_qr(A: SparseMatrix, tol: float = ZERO_NORM_TOL) -> Decomposition:
    """
    Gram-Schmidt orthogonalization of the columns of a sparse matrix.

    Every coefficient is the dot product of a basis vector with the
    unmodified column; the projections are then subtracted one basis
    vector at a time.

    Parameters:
    A : SparseMatrix
        Any shape, rank deficiency allowed.
    tol : float
        Residual norms below this mark a column as linearly dependent.
        The fixed 1e-3 default can misjudge ill-conditioned inputs.
    Returns:
    Decomposition
        unitary (m, rank), triangular (rank, n) and rank. Dependent columns
        add no basis vector but keep their coefficients in triangular.
    """
    if not A.get_pairs():
        return Decomposition()

    m = A.get_number_of_rows()

    # Rows of the transpose are the columns of A
    T = A.transposed()
    pairs = T.get_pairs()
    offsets = T.get_row_offsets()

    basis: List[List[ColumnValuePair]] = []
    coeffs: List[List[ColumnValuePair]] = []

    for j in range(T.get_number_of_rows()):
        row_coeffs: List[ColumnValuePair] = []
        column = pairs[offsets[j] : offsets[j + 1]]

        if column:
            dots = [_sparse_dot(q, column) for q in basis]

            v = list(column)
            for k, (q, r_kj) in enumerate(zip(basis, dots)):
                if r_kj == 0.0:
                    continue
                row_coeffs.append(ColumnValuePair(r_kj, k))
                v = _sparse_axpy(v, q, -r_kj)

            norm, unit = _normalise(v, tol)
            if norm == 0.0:
                logger.debug(f"column {j} depends on the first {len(basis)} basis vector(s)")
            else:
                row_coeffs.append(ColumnValuePair(norm, len(basis)))
                basis.append(unit)

        coeffs.append(row_coeffs)

    rank = len(basis)
    # One bulk build for each factor instead of growing them per column
    Q = SparseMatrix(basis, number_of_columns=m).transposed()
    R = SparseMatrix(coeffs, number_of_columns=rank).transposed()
    return Decomposition(Q, R, rank)
