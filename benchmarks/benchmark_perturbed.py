#!/usr/bin/env python3
"""
inferopt Perturbed Maximizer Benchmark: sequential vs threaded replicates
"""

import sys
sys.path.insert(0, '../python')

import time
import numpy as np
from scipy.optimize import linprog

import inferopt
from inferopt import (
    PerturbedAdditive,
    RegularizedFrankWolfe,
    SoftArgmax,
    SparseArgmax,
    half_square_norm,
    one_hot_argmax,
)

print(f"inferopt version: {inferopt.__version__}")
print()


def make_knapsack_maximizer(n, capacity_ratio=0.3, seed=42):
    """
    LP relaxation of a knapsack, solved with HiGHS:
    max θᵀy s.t. wᵀy <= C, 0 <= y <= 1.
    """
    rng = np.random.default_rng(seed)
    weights = rng.uniform(1.0, 10.0, size=n)
    capacity = capacity_ratio * weights.sum()

    def maximizer(theta):
        result = linprog(
            -theta, A_ub=weights[None, :], b_ub=[capacity],
            bounds=[(0.0, 1.0)] * n, method='highs',
        )
        return result.x

    return maximizer


def time_call(fn, *args, repeats=3, **kwargs):
    """Best wall time of a few calls."""
    best = float('inf')
    for _ in range(repeats):
        start = time.perf_counter()
        fn(*args, **kwargs)
        best = min(best, time.perf_counter() - start)
    return best


def benchmark_threads():
    """Benchmark perturbed forward + backward for several n_jobs."""
    print("=" * 70)
    print("Perturbed Knapsack: forward + backward")
    print("=" * 70)

    sizes = [50, 200, 1000]
    nb_samples = 32
    jobs = [1, 2, 4, 8]

    print(f"{'n':>8} " + " ".join(f"{'n_jobs=' + str(j) + ' (ms)':>16}" for j in jobs))
    print("-" * 70)

    for n in sizes:
        maximizer = make_knapsack_maximizer(n)
        theta = np.random.default_rng(0).normal(size=n)
        dy = np.ones(n)
        row = []
        for n_jobs in jobs:
            perturbed = PerturbedAdditive(
                maximizer, epsilon=0.5, nb_samples=nb_samples, seed=0, n_jobs=n_jobs
            )

            def step():
                _, backward = perturbed.forward(theta)
                backward(dy)

            row.append(time_call(step) * 1000)
        print(f"{n:>8} " + " ".join(f"{t:>16.1f}" for t in row))


def benchmark_simplex():
    """Benchmark closed-form predictors against Frank-Wolfe on the simplex."""
    print("\n" + "=" * 70)
    print("Regularized Prediction on the Simplex")
    print("=" * 70)

    fw = RegularizedFrankWolfe(one_hot_argmax, half_square_norm, lambda y: y, max_iteration=200)
    predictors = [
        ("SoftArgmax", SoftArgmax()),
        ("SparseArgmax", SparseArgmax()),
        ("FrankWolfe", fw),
    ]

    for d in [10, 100, 1000]:
        theta = np.random.default_rng(d).normal(size=d) / np.sqrt(d)
        print(f"\nDimension: {d}")
        for name, predictor in predictors:
            t = time_call(predictor, theta)
            print(f"  {name:<14} {t*1000:8.3f} ms")


if __name__ == "__main__":
    benchmark_threads()
    benchmark_simplex()
