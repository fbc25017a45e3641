#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import platform
import time

import numpy as np
import pandas as pd

from .qr import sparse_qr
from .utils import random_full_column_rank

REPEATS = 5  # best of 5 runs leads to stable numbers
SIZES = [(50, 50), (200, 100), (400, 200)]
DENSITY = 0.02


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def run_benchmark(sizes=SIZES, density=DENSITY, repeats=REPEATS, seed=0) -> pd.DataFrame:
    """
    Time the sparse MGS QR against ``np.linalg.qr`` on random sparse inputs.

    Returns
    -------
    DataFrame with one row per size: timings, the timing ratio, the
    reconstruction residual ‖QR - A‖∞ and the orthogonality error
    ‖QᵀQ - I‖∞.
    """
    records = []
    for m, n in sizes:
        A = random_full_column_rank(m, n, int(density * m * n), seed=seed)
        dense = A.to_numpy()

        t_np = min(wall(np.linalg.qr, dense) for _ in range(repeats))
        t_mgs = min(wall(sparse_qr, A) for _ in range(repeats))

        Q, R = sparse_qr(A)
        Qd = Q.to_numpy()
        residual = np.linalg.norm(Qd @ R.to_numpy() - dense, np.inf)
        ortho = np.linalg.norm(Qd.T @ Qd - np.eye(Qd.shape[1]), np.inf)
        records.append(
            ("sparse-MGS-QR", f"{m}×{n}", A.nnz, t_mgs, t_mgs / t_np, residual, ortho)
        )

    return pd.DataFrame(
        records,
        columns=["kernel", "size", "nnz", "sec", "sec/NumPy", "residual", "orth_err"],
    )


def main():
    df = run_benchmark()
    print(f"python {platform.python_version()} / numpy {np.__version__}")
    print(df.to_markdown(index=False))
    df.to_csv("bench_results.csv", index=False)


if __name__ == "__main__":
    main()
