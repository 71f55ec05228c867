"""
kd-tree accelerated nearest-centroid assignment.

Implements the "simple" filtering algorithm of Pelleg & Moore:

    Pelleg, D., & Moore, A. (1999). Accelerating exact k-means algorithms
    with geometric reasoning. Proceedings of the Fifth ACM SIGKDD
    International Conference on Knowledge Discovery and Data Mining, 277-281.

The points are organised once into a kd-tree whose nodes carry the
bounding hyper-rectangle of their points. During assignment a node whose
rectangle is *owned* by a single centroid (that centroid is strictly
closer than every other centroid to every location of the rectangle) is
labelled wholesale; otherwise the search descends into the children, and
leaves are labelled point by point.

The labelling is identical to the brute-force scan, including the
lowest-index tie-break: a rectangle is only owned when its closest
centroid is unique and dominates by more than the rounding error of the
distance computation, so every tie or near-tie is resolved at the
leaves by ``np.argmin``.
"""

from typing import List, Optional, Tuple

import numpy as np

from .validation import check_int


def squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Squared Euclidean distances, shape (len(X), len(centroids))."""
    diff = X[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum('nkd,nkd->nk', diff, diff)


def lower_median(values: np.ndarray) -> float:
    """Element ``(m - 1) // 2`` of the sorted values (no averaging)."""
    k = (len(values) - 1) // 2
    return float(np.partition(values, k)[k])


class HyperRectangle:
    """Axis-aligned box ``[lo, hi]``.

    Args:
        lo: Lower corner, shape (n_features,)
        hi: Upper corner, shape (n_features,)
    """

    __slots__ = ('lo', 'hi')

    def __init__(self, lo: np.ndarray, hi: np.ndarray) -> None:
        self.lo = np.asarray(lo, dtype=np.float64)
        self.hi = np.asarray(hi, dtype=np.float64)

    @classmethod
    def from_points(cls, X: np.ndarray) -> 'HyperRectangle':
        """Tightest box containing every row of ``X``."""
        return cls(X.min(axis=0), X.max(axis=0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HyperRectangle):
            return NotImplemented
        return np.array_equal(self.lo, other.lo) and np.array_equal(self.hi, other.hi)

    def __repr__(self) -> str:
        return f"HyperRectangle(lo={self.lo.tolist()}, hi={self.hi.tolist()})"

    def closest(self, point: np.ndarray) -> np.ndarray:
        """Location inside the box closest to ``point``."""
        return np.clip(point, self.lo, self.hi)

    def distance(self, point: np.ndarray) -> float:
        """Squared distance from ``point`` to the box (0 inside)."""
        diff = self.closest(point) - point
        return float(np.dot(diff, diff))

    def width(self) -> np.ndarray:
        return self.hi - self.lo

    def owner(self, centroids: np.ndarray) -> Optional[int]:
        """Index of the centroid owning this box, or ``None``.

        The owner is the unique centroid closest to the box that also
        dominates every other centroid: for each rival ``c2`` the box
        vertex furthest in the direction ``c2 - c1`` is still strictly
        closer to ``c1``. The squared-distance difference is linear in
        the location, so checking that vertex covers the whole box.

        The margin at that vertex must exceed the rounding error of a
        squared distance anywhere in the box, so no point inside can
        compute as a tie (or flip order) in ``squared_distances``. Boxes
        too close to call are left to the per-point ``np.argmin``.
        """
        clipped = np.clip(centroids, self.lo, self.hi)
        box_dist = np.sum((clipped - centroids) ** 2, axis=1)
        c1 = int(np.argmin(box_dist))
        if np.count_nonzero(box_dist == box_dist[c1]) > 1:
            return None

        best = centroids[c1]
        vertices = np.where(best < centroids, self.hi, self.lo)
        to_best = np.sum((vertices - best) ** 2, axis=1)
        to_rival = np.sum((vertices - centroids) ** 2, axis=1)

        # Largest squared distance from each centroid to any location of the box
        reach = np.sum(np.maximum(np.abs(centroids - self.lo), np.abs(centroids - self.hi)) ** 2, axis=1)
        margin = 4 * (len(best) + 2) * np.finfo(np.float64).eps * (reach[c1] + reach)
        dominated = to_rival - to_best > margin
        dominated[c1] = True
        if dominated.all():
            return c1
        return None


class _Node:
    __slots__ = ('indices', 'rect', 'split_dim', 'split_value', 'left', 'right')

    def __init__(self, indices: np.ndarray, rect: HyperRectangle) -> None:
        self.indices = indices
        self.rect = rect
        self.split_dim = None
        self.split_value = None
        self.left = None
        self.right = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None


class KDTree:
    """kd-tree over a fixed point store, used to label points in bulk.

    Nodes are split at the lower median of their widest dimension; points
    with a coordinate ``<=`` the median go left. A node with at most
    ``leaf_size`` points, or whose split would leave one side empty, is a
    leaf.

    Args:
        X: Point store of shape (n_samples, n_features)
        leaf_size: Maximum number of points kept in a leaf
    """

    def __init__(self, X: np.ndarray, leaf_size: int = 16) -> None:
        self.X = X
        self.leaf_size = check_int('leaf_size', leaf_size)
        self.n_nodes = 0
        self.n_leaves = 0
        self.root = self._build(np.arange(X.shape[0]))

    def _build(self, indices: np.ndarray) -> _Node:
        root = _Node(indices, HyperRectangle.from_points(self.X[indices]))
        stack = [root]
        while stack:
            node = stack.pop()
            self.n_nodes += 1
            children = self._split(node)
            if children is None:
                self.n_leaves += 1
                continue
            node.left, node.right = children
            stack.append(node.right)
            stack.append(node.left)
        return root

    def _split(self, node: _Node) -> Optional[Tuple[_Node, _Node]]:
        if len(node.indices) <= self.leaf_size:
            return None
        d = int(np.argmax(node.rect.width()))
        values = self.X[node.indices, d]
        v = lower_median(values)
        mask = values <= v
        if mask.all():
            return None
        node.split_dim = d
        node.split_value = v
        left_idx = node.indices[mask]
        right_idx = node.indices[~mask]
        return (
            _Node(left_idx, HyperRectangle.from_points(self.X[left_idx])),
            _Node(right_idx, HyperRectangle.from_points(self.X[right_idx])),
        )

    def leaves(self) -> List[_Node]:
        """All leaf nodes, left to right."""
        result = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                result.append(node)
            else:
                stack.append(node.right)
                stack.append(node.left)
        return result

    def assign(self, centroids: np.ndarray) -> np.ndarray:
        """Label every point with the index of its nearest centroid.

        Args:
            centroids: Centroid set of shape (n_clusters, n_features)

        Returns:
            Labels of shape (n_samples,)
        """
        labels = np.empty(self.X.shape[0], dtype=np.int64)
        stack = [self.root]
        while stack:
            node = stack.pop()
            owner = node.rect.owner(centroids)
            if owner is not None:
                labels[node.indices] = owner
            elif node.is_leaf:
                dist = squared_distances(self.X[node.indices], centroids)
                labels[node.indices] = np.argmin(dist, axis=1)
            else:
                stack.append(node.right)
                stack.append(node.left)
        return labels
