# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Plain-text views of a matrix for whatever front end displays it
"""

from typing import Dict, Optional, Tuple

from .matrix import SparseMatrix
from .qr import Decomposition


def _number(value) -> str:
    return f"{value:g}"


def dimension_string(A: SparseMatrix) -> str:
    rows, cols = A.shape
    return f"{rows}x{cols}"


def entries_string(A: SparseMatrix) -> str:
    """One ``a(row, column) = value`` line per stored entry."""
    offsets = A.get_row_offsets()
    pairs = A.get_pairs()
    lines = []
    for row in range(A.get_number_of_rows()):
        for pair in pairs[offsets[row] : offsets[row + 1]]:
            lines.append(f"a({row}, {pair.column}) = {_number(pair.value)}")
    return "".join(line + "\n" for line in lines)


def csr_arrays_string(A: SparseMatrix) -> Tuple[str, str, str]:
    """Row offsets, column indices and values, each as ``[ a b c ]``."""

    def bracket(items) -> str:
        return "[" + "".join(f" {item}" for item in items) + " ]"

    pairs = A.get_pairs()
    return (
        bracket(A.get_row_offsets()),
        bracket(p.column for p in pairs),
        bracket(_number(p.value) for p in pairs),
    )


def summary(A: SparseMatrix, decomposition: Optional[Decomposition] = None) -> Dict[str, str]:
    """
    Short labels for nnz, rank, density and sparsity.

    An empty matrix reads "Rank 0" and "-" for the ratios, which are not
    finite there. Without a decomposition the rank of a non-empty matrix
    is unknown and shown as "-".
    """
    empty = A.get_nnz() == 0

    if decomposition is not None:
        rank = f"Rank {decomposition.rank}"
    elif empty:
        rank = "Rank 0"
    else:
        rank = "-"

    return {
        "nnz": f"Non-Zero Values ({A.get_nnz()})",
        "rank": rank,
        "density": "-" if empty else f"Density {A.get_density() * 100.0:.2f}%",
        "sparsity": "-" if empty else f"Sparsity {A.get_sparsity() * 100.0:.2f}%",
    }
