"""Euclidean distance helpers shared by the tree and brute-force paths."""

from __future__ import annotations

import math

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from .errors import DimensionMismatch
from .points import Point


def _distance(a: Point, b: Point) -> float:
    total = 0.0
    for x, y in zip(a, b):
        delta = x - y
        total += delta * delta
    return math.sqrt(total)


def euclidean_distance(a: Point, b: Point) -> float:
    """Return the Euclidean distance between two points of equal length."""

    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))
    return _distance(a, b)


@jaxtyped(typechecker=beartype)
def pairwise_distances(
    queries: Float[Array, "q k"],
    points: Float[Array, "n k"],
) -> Float[Array, "q n"]:
    """Return Euclidean distances with shape ``(n_queries, n_points)``."""

    deltas = queries[:, None, :] - points[None, :, :]
    return jnp.sqrt(jnp.sum(deltas * deltas, axis=-1))


__all__ = ["euclidean_distance", "pairwise_distances"]
