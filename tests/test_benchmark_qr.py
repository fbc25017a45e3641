# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from csrlinalg.benchmark_qr import run_benchmark


def test_run_benchmark_small():
    df = run_benchmark(sizes=[(12, 6), (20, 8)], density=0.1, repeats=1, seed=3)
    assert list(df.columns) == [
        "kernel",
        "size",
        "nnz",
        "sec",
        "sec/NumPy",
        "residual",
        "orth_err",
    ]
    assert len(df) == 2
    assert (df["residual"] < 1e-8).all()
    assert (df["orth_err"] < 1e-8).all()
