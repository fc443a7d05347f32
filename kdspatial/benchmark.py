"""Timing harness comparing KD-tree queries against brute-force search.

Each experiment draws uniform random reference points in ``[0, 1)^k``, builds
a tree, then answers the same batch of random targets once through the tree
and once by exhaustive scan. Optionally the two answers are cross-checked by
distance, which is how pruning mistakes show up.
"""

from __future__ import annotations

import argparse
import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple, Optional

import jax

from .brute_force import brute_force_with_distance
from .dtypes import COORD_DTYPE
from .kdtree import build_kdtree
from .points import Point

logger = logging.getLogger(__name__)

# Relative tolerance when comparing tree and brute-force distances.
DISTANCE_RTOL = 1e-9


class ExperimentResult(NamedTuple):
    """Timings (in seconds) for one dimensionality / dataset-size pair."""

    dimension: int
    num_points: int
    num_queries: int
    build_seconds: float
    tree_query_seconds: float
    brute_force_seconds: float
    mismatches: Optional[int] = None


@dataclass(frozen=True)
class BenchmarkConfig:
    """Grid of experiments run by :func:`run_benchmarks`."""

    dimensions: tuple[int, ...] = (2, 5, 10, 20)
    dataset_sizes: tuple[int, ...] = (10, 100, 1000, 10000)
    num_queries: int = 1000
    seed: int = 0
    verify: bool = False


def random_points(key: jax.Array, num_points: int, dimension: int) -> jax.Array:
    """Draw ``num_points`` uniform points in ``[0, 1)^dimension``."""

    return jax.random.uniform(key, (num_points, dimension), dtype=COORD_DTYPE)


def _rows(points: jax.Array) -> list[Point]:
    return [tuple(row) for row in points.tolist()]


def run_experiment(
    dimension: int,
    num_points: int,
    *,
    num_queries: int = 1000,
    seed: int = 0,
    verify: bool = False,
) -> ExperimentResult:
    """Time tree build, tree queries and brute-force queries on random data."""

    if dimension < 1:
        raise ValueError(f"dimension must be >= 1, received {dimension}")
    if num_points < 1:
        raise ValueError(f"num_points must be >= 1, received {num_points}")
    if num_queries < 1:
        raise ValueError(f"num_queries must be >= 1, received {num_queries}")

    key_points, key_queries = jax.random.split(jax.random.PRNGKey(seed))
    points_arr = random_points(key_points, num_points, dimension)
    queries_arr = random_points(key_queries, num_queries, dimension)
    training = _rows(points_arr)
    queries = _rows(queries_arr)

    start = time.perf_counter()
    tree = build_kdtree(training)
    build_seconds = time.perf_counter() - start

    start = time.perf_counter()
    tree_matches = [tree.nearest_with_distance(q) for q in queries]
    tree_query_seconds = time.perf_counter() - start

    start = time.perf_counter()
    brute_matches = [brute_force_with_distance(points_arr, q) for q in queries]
    brute_force_seconds = time.perf_counter() - start

    mismatches = None
    if verify:
        mismatches = sum(
            not math.isclose(t.distance, b.distance, rel_tol=DISTANCE_RTOL, abs_tol=0.0)
            for t, b in zip(tree_matches, brute_matches)
        )
        if mismatches:
            logger.warning(
                "%d of %d queries disagree with brute force (k=%d, n=%d)",
                mismatches,
                num_queries,
                dimension,
                num_points,
            )

    return ExperimentResult(
        dimension=dimension,
        num_points=num_points,
        num_queries=num_queries,
        build_seconds=build_seconds,
        tree_query_seconds=tree_query_seconds,
        brute_force_seconds=brute_force_seconds,
        mismatches=mismatches,
    )


def run_benchmarks(config: Optional[BenchmarkConfig] = None) -> list[ExperimentResult]:
    """Run every (dimension, dataset size) pair of ``config``."""

    cfg = config or BenchmarkConfig()
    results = []
    for dimension in cfg.dimensions:
        for num_points in cfg.dataset_sizes:
            result = run_experiment(
                dimension,
                num_points,
                num_queries=cfg.num_queries,
                seed=cfg.seed,
                verify=cfg.verify,
            )
            log_experiment(result)
            results.append(result)
    return results


def format_experiment(result: ExperimentResult) -> str:
    """Render one experiment as the multi-line report printed by the CLI."""

    lines = [
        "-" * 48,
        f"Experiment: k = {result.dimension} dimensions, "
        f"numPoints = {result.num_points}",
        f"Tree Build Time:            {result.build_seconds * 1e3:.3f} ms",
        f"KDTree Query Time ({result.num_queries}):   "
        f"{result.tree_query_seconds * 1e3:.3f} ms",
        f"Brute Force Time ({result.num_queries}):    "
        f"{result.brute_force_seconds * 1e3:.3f} ms",
    ]
    if result.mismatches is not None:
        lines.append(f"Distance mismatches:        {result.mismatches}")
    return "\n".join(lines)


def log_experiment(
    result: ExperimentResult,
    *,
    level: int = logging.INFO,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Log an experiment using the provided (or module) logger."""

    target_logger = logger or logging.getLogger(__name__)
    target_logger.log(
        level,
        "k=%d n=%d queries=%d: build=%.6fs tree=%.6fs brute=%.6fs",
        result.dimension,
        result.num_points,
        result.num_queries,
        result.build_seconds,
        result.tree_query_seconds,
        result.brute_force_seconds,
    )


def _int_tuple(text: str) -> tuple[int, ...]:
    try:
        values = tuple(int(part) for part in text.split(",") if part.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers: {text!r}") from exc
    if not values:
        raise argparse.ArgumentTypeError("expected at least one integer")
    return values


def main(argv: Optional[Sequence[str]] = None) -> None:
    defaults = BenchmarkConfig()
    parser = argparse.ArgumentParser(
        description="Benchmark KD-tree nearest-neighbor queries against brute force."
    )
    parser.add_argument(
        "--dimensions",
        type=_int_tuple,
        default=defaults.dimensions,
        help="comma-separated dimensionalities (default: 2,5,10,20)",
    )
    parser.add_argument(
        "--sizes",
        type=_int_tuple,
        default=defaults.dataset_sizes,
        help="comma-separated reference set sizes (default: 10,100,1000,10000)",
    )
    parser.add_argument("--num-queries", type=int, default=defaults.num_queries)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--verify", action="store_true")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())
    config = BenchmarkConfig(
        dimensions=args.dimensions,
        dataset_sizes=args.sizes,
        num_queries=args.num_queries,
        seed=args.seed,
        verify=args.verify,
    )

    print("jax:", jax.__version__)
    print("device:", jax.devices()[0])
    for result in run_benchmarks(config):
        print(format_experiment(result))
        print()


__all__ = [
    "BenchmarkConfig",
    "ExperimentResult",
    "format_experiment",
    "log_experiment",
    "main",
    "random_points",
    "run_benchmarks",
    "run_experiment",
]


if __name__ == "__main__":
    main()
