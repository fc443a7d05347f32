"""Parity check between KD-tree and brute-force nearest-neighbor answers.

Builds a tree over random points, answers the same random targets both ways
and reports how many answers disagree by distance (expected: zero) and how
many return a different point at the same distance (exact ties).
"""

from __future__ import annotations

import argparse
import math

import jax
import jax.numpy as jnp
import numpy as np

from kdspatial import brute_force_many, build_kdtree, euclidean_distance


def _make_problem(n: int, n_queries: int, dim: int, seed: int) -> tuple[jax.Array, jax.Array]:
    key = jax.random.PRNGKey(seed)
    k1, k2 = jax.random.split(key)
    points = jax.random.uniform(k1, (n, dim), dtype=jnp.float64)
    targets = jax.random.uniform(k2, (n_queries, dim), dtype=jnp.float64)
    return points, targets


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--n-points", type=int, default=1000)
    parser.add_argument("--n-queries", type=int, default=1000)
    parser.add_argument("--dim", type=int, default=5)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    points, targets = _make_problem(args.n_points, args.n_queries, args.dim, args.seed)
    tree = build_kdtree(points)
    brute_points = brute_force_many(points, targets)

    distance_mismatches = 0
    point_mismatches = 0
    max_gap = 0.0
    for target, brute_point in zip(np.asarray(targets).tolist(), brute_points):
        match = tree.nearest_with_distance(target)
        brute_distance = euclidean_distance(tuple(target), brute_point)
        gap = abs(match.distance - brute_distance)
        max_gap = max(max_gap, gap)
        if not math.isclose(match.distance, brute_distance, rel_tol=1e-12):
            distance_mismatches += 1
        elif match.point != brute_point:
            point_mismatches += 1

    print("jax:", jax.__version__)
    print("config:", vars(args))
    print("tree:", {"num_points": tree.num_points, "height": tree.height})
    print(
        "parity:",
        {
            "distance_mismatches": distance_mismatches,
            "tie_point_mismatches": point_mismatches,
            "max_abs_distance_gap": max_gap,
        },
    )


if __name__ == "__main__":
    main()
