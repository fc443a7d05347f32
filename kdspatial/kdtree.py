"""KD-tree built by recursive median splits, with exact nearest-neighbor search."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from operator import itemgetter
from typing import Iterator, NamedTuple, Optional

from beartype import beartype
from jaxtyping import jaxtyped

from .distance import _distance
from .points import Point, PointLike, PointsLike, as_points, check_target

logger = logging.getLogger(__name__)


class NearestNeighbor(NamedTuple):
    """Closest stored point to a query target and its Euclidean distance."""

    point: Point
    distance: float


@dataclass(frozen=True)
class KDNode:
    """One stored point, the axis it splits on, and its owned subtrees."""

    point: Point
    axis: int
    left: Optional["KDNode"] = None
    right: Optional["KDNode"] = None


def _build_subtree(points: list[Point], depth: int, dimension: int) -> Optional[KDNode]:
    """Split ``points`` at the median of axis ``depth % dimension``.

    ``sorted`` is stable, so points sharing the split coordinate keep their
    input order and identical inputs always produce identical trees.
    """

    if not points:
        return None

    axis = depth % dimension
    ordered = sorted(points, key=itemgetter(axis))
    # Odd sizes take the true middle, even sizes the first point of the upper half.
    median = len(ordered) // 2
    return KDNode(
        point=ordered[median],
        axis=axis,
        left=_build_subtree(ordered[:median], depth + 1, dimension),
        right=_build_subtree(ordered[median + 1 :], depth + 1, dimension),
    )


def _nearest_in_subtree(
    node: Optional[KDNode],
    target: Point,
    best_point: Optional[Point],
    best_distance: float,
) -> tuple[Optional[Point], float]:
    if node is None:
        return best_point, best_distance

    distance = _distance(target, node.point)
    if distance < best_distance:
        best_point, best_distance = node.point, distance

    axis = node.axis
    if target[axis] < node.point[axis]:
        primary, secondary = node.left, node.right
    else:
        primary, secondary = node.right, node.left

    best_point, best_distance = _nearest_in_subtree(
        primary, target, best_point, best_distance
    )
    # The far side can only hold a closer point if the split plane is closer.
    if abs(target[axis] - node.point[axis]) < best_distance:
        best_point, best_distance = _nearest_in_subtree(
            secondary, target, best_point, best_distance
        )
    return best_point, best_distance


@dataclass(frozen=True)
class KDTree:
    """Immutable KD-tree over a snapshot of k-dimensional points."""

    root: Optional[KDNode]
    dimension: Optional[int]
    num_points: int

    def __len__(self) -> int:
        return self.num_points

    @property
    def is_empty(self) -> bool:
        """Whether the tree was built from an empty point set."""

        return self.root is None

    @property
    def height(self) -> int:
        """Return the number of nodes on the longest root-to-leaf path."""

        if self.root is None:
            return 0
        tallest = 0
        stack: list[tuple[KDNode, int]] = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            tallest = max(tallest, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return tallest

    def iter_points(self) -> Iterator[Point]:
        """Yield stored points in pre-order (node, left subtree, right subtree)."""

        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            yield node.point
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    @classmethod
    def from_points(cls, points: PointsLike) -> "KDTree":
        """Build a tree from ``points``; see :func:`build_kdtree`."""

        return build_kdtree(points)

    @jaxtyped(typechecker=beartype)
    def nearest_with_distance(self, target: PointLike) -> Optional[NearestNeighbor]:
        """Return the closest stored point and its distance, or ``None`` if empty.

        Among equidistant points the first one reached wins: the current node
        is checked before its children and the child on the target's side of
        the split plane before the other.
        """

        if self.root is None:
            return None
        target_pt = check_target(target, self.dimension)
        point, distance = _nearest_in_subtree(self.root, target_pt, None, math.inf)
        return NearestNeighbor(point=point, distance=distance)

    @jaxtyped(typechecker=beartype)
    def nearest(self, target: PointLike) -> Optional[Point]:
        """Return the stored point closest to ``target``, or ``None`` if empty.

        Raises:
            DimensionMismatch: If ``target`` does not have ``dimension`` coordinates.
        """

        match = self.nearest_with_distance(target)
        return None if match is None else match.point


@jaxtyped(typechecker=beartype)
def build_kdtree(points: PointsLike) -> KDTree:
    """Build a balanced KD-tree by median splits on cycling axes.

    Args:
        points: Sequence of points (or an array of shape ``(n_points, dim)``).
            The first point fixes the tree dimensionality.

    Returns:
        The built tree; empty when ``points`` is empty.

    Raises:
        DimensionMismatch: If any point's length differs from the first point's.
        ValueError: If the points have zero coordinates.
    """

    rows, dimension = as_points(points)
    if dimension is None:
        return KDTree(root=None, dimension=None, num_points=0)

    tree = KDTree(
        root=_build_subtree(rows, 0, dimension),
        dimension=dimension,
        num_points=len(rows),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Built KD-tree with %d points in %d dimensions (height=%d)",
            tree.num_points,
            dimension,
            tree.height,
        )
    return tree


@jaxtyped(typechecker=beartype)
def query_nearest(tree: KDTree, targets: PointsLike) -> list[Optional[Point]]:
    """Return ``tree.nearest(target)`` for each target, in order."""

    target_rows, _ = as_points(targets)
    return [tree.nearest(target) for target in target_rows]


@jaxtyped(typechecker=beartype)
def build_and_query(points: PointsLike, targets: PointsLike) -> list[Optional[Point]]:
    """Convenience function to build a tree and run nearest-neighbor queries."""

    tree = build_kdtree(points)
    return query_nearest(tree, targets)


__all__ = [
    "KDNode",
    "KDTree",
    "NearestNeighbor",
    "build_and_query",
    "build_kdtree",
    "query_nearest",
]
