"""kdspatial: median-split KD-tree with exact nearest-neighbor search."""

from jax import config as _jax_config

# Coordinates and distances are compared in float64.
_jax_config.update("jax_enable_x64", True)

from .brute_force import brute_force, brute_force_many, brute_force_with_distance
from .distance import euclidean_distance, pairwise_distances
from .dtypes import COORD_DTYPE, as_coords
from .errors import DimensionMismatch
from .kdtree import (
    KDNode,
    KDTree,
    NearestNeighbor,
    build_and_query,
    build_kdtree,
    query_nearest,
)
from .points import Point, as_point, as_points

__all__ = [
    "COORD_DTYPE",
    "DimensionMismatch",
    "KDNode",
    "KDTree",
    "NearestNeighbor",
    "Point",
    "as_coords",
    "as_point",
    "as_points",
    "brute_force",
    "brute_force_many",
    "brute_force_with_distance",
    "build_and_query",
    "build_kdtree",
    "euclidean_distance",
    "pairwise_distances",
    "query_nearest",
]
