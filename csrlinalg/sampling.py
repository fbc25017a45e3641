# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Random integers, distinct subsets and permutations.

Not safe for concurrent use, give each thread its own sampler.
"""

import logging
from typing import List, MutableSequence, Optional

import numpy as np

logger = logging.getLogger(__name__)

# Over-generation factor for subset sampling (11/10)
OVERSAMPLE_NUMERATOR = 11
OVERSAMPLE_DENOMINATOR = 10

_SOURCE_RANGE = 2**32


class RandomSampler:
    """
    Entropy source for the randomized matrix operations.

    Parameters
    ----------
    seed : int | None
        Forwarded to ``np.random.default_rng``; fix it for reproducible runs.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def get_number_within_range(self, max_value: int) -> int:
        """
        Integer in [0, max_value), 0 if max_value < 2.

        Uses modulo reduction of a 32-bit draw, so there is a small bias
        whenever 2**32 is not a multiple of max_value.
        """
        if max_value < 2:
            return 0
        raw = int(self._rng.integers(_SOURCE_RANGE, dtype=np.uint64))
        return raw % max_value

    def get_numbers_within_range(self, quantity: int, max_value: int) -> List[int]:
        """
        Ascending list of ``quantity`` distinct integers in [0, max_value).

        Returns [] for quantity < 1, max_value < 2 or quantity > max_value.
        """
        if quantity < 1 or max_value < 2 or quantity > max_value:
            return []

        if quantity == max_value:
            return list(range(quantity))

        if quantity > max_value // 2:
            # Cheaper to draw the numbers we will NOT return
            excluded = self._sample_distinct(max_value - quantity, max_value)
            numbers = []
            k = 0
            for n in range(max_value):
                if k < len(excluded) and excluded[k] == n:
                    k += 1
                else:
                    numbers.append(n)
            return numbers

        return self._sample_distinct(quantity, max_value)

    def _sample_distinct(self, quantity: int, max_value: int) -> List[int]:
        """
        Over-generate, sort and deduplicate until exactly ``quantity`` remain.

        Requires 1 <= quantity <= max_value // 2.
        """
        numbers: List[int] = []
        to_produce = quantity * OVERSAMPLE_NUMERATOR // OVERSAMPLE_DENOMINATOR
        rounds = 0

        while to_produce != 0:
            rounds += 1
            numbers.extend(
                self.get_number_within_range(max_value) for _ in range(to_produce)
            )
            numbers.sort()

            unique: List[int] = []
            for n in numbers:
                if not unique or unique[-1] != n:
                    unique.append(n)
            numbers = unique

            # Surplus: demote random survivors
            while len(numbers) > quantity:
                del numbers[self.get_number_within_range(len(numbers))]

            shortfall = quantity - len(numbers)
            to_produce = shortfall * OVERSAMPLE_NUMERATOR // OVERSAMPLE_DENOMINATOR

        logger.debug(f"sampled {quantity} of {max_value} in {rounds} round(s)")
        return numbers

    def shuffle(self, sequence: MutableSequence) -> None:
        """Uniform in-place permutation (Fisher-Yates)."""
        n = len(sequence)
        if n <= 1:
            return
        for i in range(n - 1, 0, -1):
            j = int(self._rng.integers(i + 1))
            sequence[i], sequence[j] = sequence[j], sequence[i]
