"""Point snapshots and dimensionality validation."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Optional, Union

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array

from .dtypes import COORD_DTYPE, as_coords
from .errors import DimensionMismatch

Point = tuple[float, ...]
PointLike = Union[Sequence[Any], Array, np.ndarray]
PointsLike = Union[Sequence[Any], Array, np.ndarray]


def _is_array(value: object) -> bool:
    return isinstance(value, (jax.Array, np.ndarray))


def _require_finite(coords: Array) -> None:
    if not bool(jnp.all(jnp.isfinite(coords))):
        raise ValueError(f"points must be finite; received {coords.tolist()}")


def as_point(point: PointLike) -> Point:
    """Return ``point`` as a tuple of finite Python floats."""

    if _is_array(point):
        point_arr = as_coords(point)
        if point_arr.ndim != 1:
            raise ValueError(
                f"point must have shape (dim,); received ndim={point_arr.ndim}"
            )
        _require_finite(point_arr)
        return tuple(point_arr.tolist())
    coords = tuple(float(c) for c in point)
    if not all(math.isfinite(c) for c in coords):
        raise ValueError(f"points must be finite; received {coords}")
    return coords


def as_points(points: PointsLike) -> tuple[list[Point], Optional[int]]:
    """Snapshot ``points`` and return them with their shared dimensionality.

    The dimensionality is taken from the first point. Every other point must
    match it, otherwise :class:`DimensionMismatch` names the first offender.
    Non-finite coordinates raise ``ValueError``. An empty input yields
    ``([], None)``.
    """

    if _is_array(points):
        points_arr = as_coords(points)
        if points_arr.size == 0 and points_arr.ndim == 1:
            return [], None
        if points_arr.ndim != 2:
            raise ValueError(
                "points must have shape (n_points, dim); "
                f"received ndim={points_arr.ndim}"
            )
        _require_finite(points_arr)
        rows = [tuple(row) for row in points_arr.tolist()]
    else:
        rows = [as_point(p) for p in points]

    if not rows:
        return rows, None
    dimension = len(rows[0])
    if dimension < 1:
        raise ValueError("points must have dim >= 1")
    for index, row in enumerate(rows):
        if len(row) != dimension:
            raise DimensionMismatch(dimension, len(row), index=index)
    return rows, dimension


def check_target(target: PointLike, dimension: int) -> Point:
    """Snapshot a query target and check it against ``dimension``."""

    target_pt = as_point(target)
    if len(target_pt) != dimension:
        raise DimensionMismatch(dimension, len(target_pt))
    return target_pt


def as_point_matrix(points: PointsLike) -> tuple[Array, Optional[int]]:
    """Return validated points as a ``(n_points, dim)`` coordinate array."""

    if _is_array(points):
        points_arr = as_coords(points)
        # A rectangular array cannot be ragged; skip the per-row snapshot.
        if points_arr.ndim == 2 and points_arr.shape[0] > 0:
            if points_arr.shape[1] < 1:
                raise ValueError("points must have dim >= 1")
            _require_finite(points_arr)
            return points_arr, int(points_arr.shape[1])

    rows, dimension = as_points(points)
    if dimension is None:
        return jnp.zeros((0, 0), dtype=COORD_DTYPE), None
    return as_coords(rows), dimension


__all__ = [
    "Point",
    "PointLike",
    "PointsLike",
    "as_point",
    "as_point_matrix",
    "as_points",
    "check_target",
]
