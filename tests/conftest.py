# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import pytest


def assert_csr_invariants(A):
    """Offsets start at 0, one per row plus one, rows sorted, no zeros."""
    rows, cols = A.shape
    offsets = A.get_row_offsets()
    pairs = A.get_pairs()

    assert offsets[0] == 0
    assert len(offsets) == rows + 1
    assert offsets[-1] == len(pairs)
    assert all(a <= b for a, b in zip(offsets, offsets[1:]))

    for r in range(rows):
        columns = [p.column for p in pairs[offsets[r] : offsets[r + 1]]]
        assert all(a < b for a, b in zip(columns, columns[1:])), f"row {r}: {columns}"
        assert all(0 <= c < cols for c in columns), f"row {r}: {columns}"

    assert all(p.value != 0 for p in pairs)


@pytest.fixture
def check_invariants():
    return assert_csr_invariants
