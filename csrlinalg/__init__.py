# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
csrlinalg
=========

An in-memory compressed sparse row (CSR) matrix that can be edited in
place and factored without ever building the dense array.

Public API
~~~~~~~~~~
- Storage
    - `SparseMatrix`, `ColumnValuePair`
- Decompositions
    - `sparse_qr`, `Decomposition`
- Randomness
    - `RandomSampler`
- Text views
    - `entries_string`, `csr_arrays_string`, `dimension_string`, `summary`

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import csrlinalg as cl
>>> A = cl.SparseMatrix()
>>> A.set_value(0, 0, 3.0)
>>> A.set_value(1, 1, 4.0)
>>> Q, R = cl.sparse_qr(A)
>>> A.get_decomposition().rank
2
"""

from importlib.metadata import version as _pkg_version

from .describe import csr_arrays_string, dimension_string, entries_string, summary
from .matrix import ColumnValuePair, SparseMatrix

# ---------------------------------------------------------------------
# Re-export the high-level names users are expected to call.
# Each of these names is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .qr import Decomposition, sparse_qr
from .sampling import RandomSampler
from .utils import ZERO_NORM_TOL, random_full_column_rank, random_sparse

__all__ = [
    "SparseMatrix",
    "ColumnValuePair",
    "Decomposition",
    "sparse_qr",
    "RandomSampler",
    "entries_string",
    "csr_arrays_string",
    "dimension_string",
    "summary",
    "random_sparse",
    "random_full_column_rank",
    "ZERO_NORM_TOL",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show csrlinalg”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
