# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Compressed sparse row (CSR) matrix with in-place structural edits.

Storage is one flat list of ``ColumnValuePair`` plus a row offset table:
row ``r`` lives in ``pairs[row_offsets[r]:row_offsets[r + 1]]`` with
strictly ascending columns and no stored zeros.

``number_of_rows`` / ``number_of_columns`` are capacities. Writes past them
grow the matrix, removals never shrink it; call ``downsize`` for tight
bounds.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    from .qr import Decomposition
    from .sampling import RandomSampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnValuePair:
    """One stored non-zero entry of a row. Edits replace the entry."""

    value: float = 0.0
    column: int = 0


class SparseMatrix:
    """
    CSR sparse matrix.

    Parameters
    ----------
    rows : sequence of sequences of ColumnValuePair | None
        One entry list per row, columns strictly ascending, values non-zero.
        Empty rows are kept, so the row count is ``len(rows)``.
    number_of_columns : int | None
        Column capacity. Defaults to one past the highest column present.

    Raises
    ------
    ValueError : if a row is unsorted, repeats a column, holds a negative
        column or a zero value, or if ``number_of_columns`` is too small.
    """

    def __init__(
        self,
        rows: Optional[Sequence[Sequence[ColumnValuePair]]] = None,
        number_of_columns: Optional[int] = None,
    ):
        self._pairs: List[ColumnValuePair] = []
        self._row_offsets: List[int] = [0]
        self._number_of_rows = 0
        self._number_of_columns = 0

        highest = -1
        for r, row in enumerate(rows or []):
            last = -1
            for pair in row:
                if pair.column <= last:
                    raise ValueError(
                        f"row {r}: columns must be non-negative and strictly ascending"
                    )
                if pair.value == 0:
                    raise ValueError(f"row {r}: zero value stored at column {pair.column}")
                self._pairs.append(ColumnValuePair(float(pair.value), int(pair.column)))
                last = pair.column
            highest = max(highest, last)
            self._row_offsets.append(len(self._pairs))

        self._number_of_rows = len(self._row_offsets) - 1

        if number_of_columns is None:
            number_of_columns = highest + 1
        elif number_of_columns < 0:
            raise ValueError(
                f"number_of_columns must be non-negative, got {number_of_columns}"
            )
        elif number_of_columns <= highest:
            raise ValueError(
                f"number_of_columns={number_of_columns} but column {highest} is used"
            )
        self._number_of_columns = int(number_of_columns)

    @classmethod
    def from_dense(cls, A) -> "SparseMatrix":
        """Build a matrix from a 2-D array-like, capacity = A.shape."""
        A = np.asarray(A, dtype=float)
        if A.ndim != 2:
            raise ValueError(f"expected a 2-D array, got {A.ndim} dimension(s)")
        rows = [
            [ColumnValuePair(float(A[i, j]), int(j)) for j in np.flatnonzero(A[i])]
            for i in range(A.shape[0])
        ]
        return cls(rows, number_of_columns=A.shape[1])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, nnz={self.nnz})"

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Tuple[int, int]:
        return self._number_of_rows, self._number_of_columns

    @property
    def nnz(self) -> int:
        return len(self._pairs)

    def get_pairs(self) -> Tuple[ColumnValuePair, ...]:
        return tuple(self._pairs)

    def get_row_offsets(self) -> Tuple[int, ...]:
        return tuple(self._row_offsets)

    def get_number_of_rows(self) -> int:
        return self._number_of_rows

    def get_number_of_columns(self) -> int:
        return self._number_of_columns

    def get_nnz(self) -> int:
        return len(self._pairs)

    def get_highest_column(self) -> int:
        """Highest column holding an entry, -1 for an empty matrix."""
        return max((p.column for p in self._pairs), default=-1)

    def get_value(self, row: int, column: int) -> float:
        if not (0 <= row < self._number_of_rows and 0 <= column < self._number_of_columns):
            return 0.0
        for pair in self._pairs[self._row_offsets[row] : self._row_offsets[row + 1]]:
            if pair.column == column:
                return pair.value
            if pair.column > column:
                break
        return 0.0

    def get_dense_matrix(self) -> np.ndarray:
        """Row-major flat array of length rows * cols."""
        rows, cols = self.shape
        dense = np.zeros(rows * cols, dtype=float)
        if not self._pairs:
            return dense

        row_idx = np.repeat(np.arange(rows), np.diff(self._row_offsets))
        col_idx = np.fromiter((p.column for p in self._pairs), dtype=np.int64)
        values = np.fromiter((p.value for p in self._pairs), dtype=float)
        dense[row_idx * cols + col_idx] = values
        return dense

    def to_numpy(self) -> np.ndarray:
        return self.get_dense_matrix().reshape(self.shape)

    def get_density(self) -> float:
        """
        nnz / (rows * cols).

        A zero dimension gives nan, numpy division is used on purpose so no
        ZeroDivisionError is raised.
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            cells = np.float64(self._number_of_rows * self._number_of_columns)
            return float(np.float64(len(self._pairs)) / cells)

    def get_sparsity(self) -> float:
        return 1.0 - self.get_density()

    # ------------------------------------------------------------------
    # Point updates
    # ------------------------------------------------------------------
    def set_value(self, row: int, column: int, value: float) -> None:
        """
        Store ``value`` at (row, column), removing the entry when value == 0.

        Negative indices are ignored. Writing past the current capacity
        grows it, intermediate rows are created empty.
        """
        if row < 0 or column < 0:
            return
        if value == 0:
            self.remove_value(row, column)
            return
        self._add_value(row, column, float(value))

    def _add_value(self, row: int, column: int, value: float) -> None:
        offsets = self._row_offsets

        if column >= self._number_of_columns:
            self._number_of_columns = column + 1

        if row >= self._number_of_rows:
            # New row: pad skipped empty rows with the current end offset
            end = offsets[-1]
            offsets.extend([end] * (row - self._number_of_rows))
            offsets.append(end + 1)
            self._pairs.append(ColumnValuePair(value, column))
            self._number_of_rows = row + 1
            return

        index, found = self._locate(offsets[row], offsets[row + 1], column)
        if found:
            self._pairs[index] = ColumnValuePair(value, column)
            return

        self._pairs.insert(index, ColumnValuePair(value, column))
        if row == self._number_of_rows - 1:
            offsets[-1] += 1
        else:
            self._shift_offsets(row + 1, 1)

    def _locate(self, start: int, stop: int, column: int) -> Tuple[int, bool]:
        """
        Reverse scan of pairs[start:stop] for ``column``.

        Returns (index, True) when the column is stored at index, otherwise
        (insertion index, False). Rows are expected to be narrow.
        """
        index = stop
        while index > start and self._pairs[index - 1].column > column:
            index -= 1
        if index > start and self._pairs[index - 1].column == column:
            return index - 1, True
        return index, False

    def _shift_offsets(self, first_row: int, delta: int) -> None:
        offsets = self._row_offsets
        for k in range(first_row, len(offsets)):
            offsets[k] += delta

    def remove_value(self, row: int, column: int) -> None:
        """
        Erase the entry at (row, column) if there is one.

        Capacity is left alone, see ``downsize``.
        """
        if not (0 <= row < self._number_of_rows and 0 <= column < self._number_of_columns):
            return

        start, stop = self._row_offsets[row], self._row_offsets[row + 1]
        for index in range(start, stop):
            c = self._pairs[index].column
            if c < column:
                continue
            if c > column:
                # Passed the target, nothing stored there
                return
            del self._pairs[index]
            self._shift_offsets(row + 1, -1)
            return

    def downsize(self) -> None:
        """
        Tighten capacity to the stored data.

        Trailing empty rows are dropped (interior ones are kept) and the
        column count becomes one past the highest used column.
        """
        if not self._pairs:
            self._pairs = []
            self._row_offsets = [0]
            self._number_of_rows = 0
            self._number_of_columns = 0
            return

        offsets = self._row_offsets
        last = offsets[-1]
        while offsets[-1] == last:
            offsets.pop()
        self._number_of_rows = len(offsets)
        offsets.append(last)

        highest = -1
        for pair in self._pairs:
            if pair.column + 1 == self._number_of_columns:
                break
            highest = max(highest, pair.column)
        else:
            self._number_of_columns = highest + 1

        logger.debug(f"downsized to {self._number_of_rows}x{self._number_of_columns}")

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------
    def swap_rows(self, row1: int, row2: int) -> None:
        """Exchange two rows. Out-of-range or equal rows are a no-op."""
        rows = self._number_of_rows
        if row1 == row2 or not (0 <= row1 < rows and 0 <= row2 < rows):
            return
        if row1 > row2:
            row1, row2 = row2, row1

        offsets = self._row_offsets
        start1, stop1 = offsets[row1], offsets[row1 + 1]
        start2, stop2 = offsets[row2], offsets[row2 + 1]
        n1 = stop1 - start1
        n2 = stop2 - start2
        if n1 == 0 and n2 == 0:
            return

        # Only the span from row1 to row2 moves: [row2][gap][row1]
        pairs = self._pairs
        pairs[start1:stop2] = pairs[start2:stop2] + pairs[stop1:start2] + pairs[start1:stop1]

        diff = n2 - n1
        if diff:
            for k in range(row1 + 1, row2 + 1):
                offsets[k] += diff

    def swap_columns(self, column1: int, column2: int) -> None:
        """
        Exchange two columns row by row.

        When only one of the two cells is stored, that entry slides along
        its row to its sorted position under the other column.
        """
        cols = self._number_of_columns
        if column1 == column2 or not (0 <= column1 < cols and 0 <= column2 < cols):
            return
        if not self._pairs:
            return
        if column1 > column2:
            column1, column2 = column2, column1

        pairs = self._pairs
        offsets = self._row_offsets
        for row in range(self._number_of_rows):
            start, stop = offsets[row], offsets[row + 1]
            index1 = index2 = -1
            # first positions holding a column past column1 / column2
            after1 = after2 = -1

            for index in range(start, stop):
                c = pairs[index].column
                if c < column1:
                    continue
                if c == column1:
                    index1 = index
                elif after1 < 0:
                    after1 = index
                if c == column2:
                    index2 = index
                elif c > column2:
                    after2 = index
                    break

            if index1 >= 0 and index2 >= 0:
                first, second = pairs[index1], pairs[index2]
                pairs[index1] = ColumnValuePair(second.value, column1)
                pairs[index2] = ColumnValuePair(first.value, column2)
            elif index1 >= 0:
                target = (after2 if after2 >= 0 else stop) - 1
                value = pairs[index1].value
                pairs[index1:target] = pairs[index1 + 1 : target + 1]
                pairs[target] = ColumnValuePair(value, column2)
            elif index2 >= 0:
                target = after1
                value = pairs[index2].value
                pairs[target + 1 : index2 + 1] = pairs[target:index2]
                pairs[target] = ColumnValuePair(value, column1)

    def transposed(self) -> "SparseMatrix":
        """
        Return the transpose as a new matrix.

        Column counts become row sizes, their prefix sums the new offsets,
        and every entry is scattered through a per-row write cursor so
        entries of one column stay in original row order.
        """
        rows, cols = self.shape
        columns = np.fromiter((p.column for p in self._pairs), dtype=np.int64)
        counts = np.bincount(columns, minlength=cols)

        T = SparseMatrix()
        T._row_offsets = [0] + np.cumsum(counts).tolist()
        T._number_of_rows = cols
        T._number_of_columns = rows

        cursor = T._row_offsets[:-1]
        new_pairs: List[Optional[ColumnValuePair]] = [None] * len(self._pairs)
        for row in range(rows):
            for pair in self._pairs[self._row_offsets[row] : self._row_offsets[row + 1]]:
                k = cursor[pair.column]
                new_pairs[k] = ColumnValuePair(pair.value, row)
                cursor[pair.column] = k + 1

        T._pairs = new_pairs
        return T

    def transpose(self) -> None:
        T = self.transposed()
        self._pairs = T._pairs
        self._row_offsets = T._row_offsets
        self._number_of_rows, self._number_of_columns = (
            self._number_of_columns,
            self._number_of_rows,
        )

    # ------------------------------------------------------------------
    # Randomized edits
    # ------------------------------------------------------------------
    def insert_one(self, sampler: "RandomSampler") -> bool:
        """
        Put a 1.0 in a random empty cell.

        Returns False when every cell within capacity is already stored.
        """
        rows, cols = self.shape
        cells = rows * cols
        if len(self._pairs) == cells:
            return False

        draws = 0
        while True:
            draws += 1
            row, column = divmod(sampler.get_number_within_range(cells), cols)
            index, found = self._locate(
                self._row_offsets[row], self._row_offsets[row + 1], column
            )
            if not found:
                break

        self._pairs.insert(index, ColumnValuePair(1.0, column))
        self._shift_offsets(row + 1, 1)
        logger.debug(f"insert_one: ({row}, {column}) after {draws} draw(s)")
        return True

    def shuffle(self, sampler: "RandomSampler") -> bool:
        """
        Scatter the stored values over random cells, keeping capacity.

        Returns False when there is nothing to shuffle.
        """
        if not self._pairs:
            return False

        rows, cols = self.shape

        # New row sizes, a row holds at most `cols` entries
        counts = [0] * rows
        for _ in range(len(self._pairs)):
            row = sampler.get_number_within_range(rows)
            while counts[row] >= cols:
                row = sampler.get_number_within_range(rows)
            counts[row] += 1

        sampler.shuffle(self._pairs)

        offsets = [0]
        for count in counts:
            offsets.append(offsets[-1] + count)

        for row, count in enumerate(counts):
            if count == 0:
                continue
            if count == cols:
                columns = range(cols)
            else:
                columns = sampler.get_numbers_within_range(count, cols)
            for index, column in zip(range(offsets[row], offsets[row + 1]), columns):
                self._pairs[index] = ColumnValuePair(self._pairs[index].value, column)

        self._row_offsets = offsets
        logger.debug(f"shuffle: new row sizes {counts}")
        return True

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------
    def get_decomposition(self) -> "Decomposition":
        """Reduced QR of this matrix, see ``csrlinalg.qr.sparse_qr``."""
        from .qr import sparse_qr

        return sparse_qr(self)

    def get_rank(self) -> int:
        return self.get_decomposition().rank
