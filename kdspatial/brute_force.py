"""Linear-scan nearest-neighbor search used as the KD-tree oracle."""

from __future__ import annotations

from typing import Optional

import jax
import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, jaxtyped

from .distance import pairwise_distances
from .dtypes import as_coords
from .kdtree import NearestNeighbor
from .points import Point, PointLike, PointsLike, as_point_matrix, as_points, check_target


@jax.jit
def _first_nearest(queries: Array, points: Array) -> tuple[Array, Array]:
    """Return, per query, the lowest index reaching the minimal distance."""

    distances = pairwise_distances(queries, points)
    # argmin keeps the first minimum, matching a strict ``<`` scan in order.
    best = jnp.argmin(distances, axis=1)
    best_distance = jnp.take_along_axis(distances, best[:, None], axis=1)[:, 0]
    return best, best_distance


@jaxtyped(typechecker=beartype)
def brute_force_with_distance(
    points: PointsLike,
    target: PointLike,
) -> Optional[NearestNeighbor]:
    """Scan every point and return the closest one with its distance."""

    points_arr, dimension = as_point_matrix(points)
    if dimension is None:
        return None
    target_pt = check_target(target, dimension)
    queries = as_coords([target_pt])
    best, best_distance = _first_nearest(queries, points_arr)
    index = int(best[0])
    return NearestNeighbor(
        point=tuple(points_arr[index].tolist()),
        distance=float(best_distance[0]),
    )


@jaxtyped(typechecker=beartype)
def brute_force(points: PointsLike, target: PointLike) -> Optional[Point]:
    """Return the point closest to ``target`` by exhaustive scan.

    On exact distance ties the earliest point in ``points`` wins. Returns
    ``None`` when ``points`` is empty.

    Raises:
        DimensionMismatch: If the points are ragged or ``target`` has another
            dimensionality.
    """

    match = brute_force_with_distance(points, target)
    return None if match is None else match.point


@jaxtyped(typechecker=beartype)
def brute_force_many(points: PointsLike, targets: PointsLike) -> list[Optional[Point]]:
    """Vectorized :func:`brute_force` over several targets."""

    points_arr, dimension = as_point_matrix(points)
    target_rows, _ = as_points(targets)
    if dimension is None:
        return [None for _ in target_rows]
    if not target_rows:
        return []
    queries = as_coords([check_target(t, dimension) for t in target_rows])
    best, _ = _first_nearest(queries, points_arr)
    rows = points_arr.tolist()
    return [tuple(rows[i]) for i in best.tolist()]


__all__ = ["brute_force", "brute_force_many", "brute_force_with_distance"]
