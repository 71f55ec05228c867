"""
K-means clustering algorithm implementation.

Lloyd-style iterative refinement with squared Euclidean distance:
random (or pluggable) initialization, nearest-centroid assignment,
mean update, and convergence when no point changes cluster.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple, Union

import numpy as np

from .exceptions import InvalidParameter, MalformedInput, NotFittedError
from .init import InitPolicy, init_centroids
from .kdtree import KDTree, squared_distances
from .validation import check_int, check_random_state

ALGORITHMS = ('lloyd', 'filtering')


def check_points(X) -> np.ndarray:
    """Validate a point store and return it as a new float64 array.

    Raises:
        InvalidParameter: the point store is empty
        MalformedInput: rows are ragged, non-numeric, non-finite, or the
            input is not two-dimensional
    """
    try:
        points = np.array(X, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Points must be a rectangular array of numbers: {e}") from e

    if points.size == 0:
        raise InvalidParameter("Point store is empty")
    if points.ndim != 2:
        raise MalformedInput(f"Points must be two-dimensional, got shape {points.shape}")
    if not np.all(np.isfinite(points)):
        raise MalformedInput("Points must not contain NaN or infinite values")
    return points


def assign_labels(
    X: np.ndarray,
    centroids: np.ndarray,
    chunk_size: int = 4096,
    n_jobs: int = 1,
) -> np.ndarray:
    """Label each point with the index of its nearest centroid.

    Ties go to the lowest centroid index. Points are processed in chunks
    of ``chunk_size`` rows to bound the (chunk, k, d) intermediate; with
    ``n_jobs > 1`` the chunks are spread over a thread pool, each worker
    filling a disjoint slice of the result.
    """
    n_samples = X.shape[0]
    labels = np.empty(n_samples, dtype=np.int64)
    bounds = [(start, min(start + chunk_size, n_samples)) for start in range(0, n_samples, chunk_size)]

    def label_chunk(bound: Tuple[int, int]) -> None:
        start, stop = bound
        labels[start:stop] = np.argmin(squared_distances(X[start:stop], centroids), axis=1)

    if n_jobs == 1 or len(bounds) == 1:
        for bound in bounds:
            label_chunk(bound)
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            # Draining the iterator re-raises worker exceptions
            list(executor.map(label_chunk, bounds))

    return labels


def update_centroids(X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Return a new centroid set: the mean of each cluster's points.

    A centroid with no points keeps its previous coordinates.
    """
    n_clusters, n_features = centroids.shape
    counts = np.bincount(labels, minlength=n_clusters)
    sums = np.empty((n_clusters, n_features), dtype=np.float64)
    for j in range(n_features):
        sums[:, j] = np.bincount(labels, weights=X[:, j], minlength=n_clusters)

    new_centroids = centroids.copy()
    nonempty = counts > 0
    new_centroids[nonempty] = sums[nonempty] / counts[nonempty, np.newaxis]
    return new_centroids


def compute_inertia(X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> float:
    """Within-cluster sum of squared distances."""
    diff = X - centroids[labels]
    return float(np.einsum('nd,nd->', diff, diff))


class KMeans:
    """
    K-means clustering with a fixed number of clusters.

    Features:
    - Seeded random initialization (or k-means++, an explicit array, or
      any callable policy)
    - Brute-force or kd-tree filtering assignment with identical results
    - Convergence when the labelling stops changing, bounded by max_iters
    - Empty clusters keep their previous centroid
    - Optional multi-threaded assignment for large datasets
    """

    def __init__(
        self,
        n_clusters: int,
        max_iters: int = 300,
        init: Union[str, np.ndarray, InitPolicy] = 'random',
        algorithm: str = 'lloyd',
        random_state: Optional[Union[int, np.random.Generator]] = None,
        leaf_size: int = 16,
        chunk_size: int = 4096,
        n_jobs: int = 1,
        verbose: bool = False
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            max_iters: Maximum number of iterations (assignment steps)
            init: Initialization method ('random' or 'k-means++'), an array
                of shape (n_clusters, n_features), or a callable
                ``init(X, n_clusters, rng)``
            algorithm: Assignment algorithm ('lloyd' or 'filtering')
            random_state: Random seed or generator for reproducibility
            leaf_size: Points per kd-tree leaf ('filtering' only)
            chunk_size: Rows per distance block ('lloyd' only)
            n_jobs: Worker threads for assignment, -1 for all CPUs ('lloyd' only)
            verbose: Whether to print progress information

        Raises:
            InvalidParameter: if any parameter is out of range
        """
        self.n_clusters = check_int('n_clusters', n_clusters)
        self.max_iters = check_int('max_iters', max_iters)
        if algorithm not in ALGORITHMS:
            raise InvalidParameter(f"Unknown algorithm: {algorithm!r} (expected one of {ALGORITHMS})")
        self.algorithm = algorithm
        self.init = init
        self.random_state = check_random_state(random_state)
        self.leaf_size = check_int('leaf_size', leaf_size)
        self.chunk_size = check_int('chunk_size', chunk_size)
        if n_jobs == -1:
            n_jobs = os.cpu_count() or 1
        self.n_jobs = check_int('n_jobs', n_jobs)
        self.verbose = verbose

        # Results
        self.cluster_centers_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = None
        self.converged_ = None

    def _assign_clusters(self, X: np.ndarray, centroids: np.ndarray, tree: Optional[KDTree] = None) -> np.ndarray:
        if tree is not None:
            return tree.assign(centroids)
        return assign_labels(X, centroids, chunk_size=self.chunk_size, n_jobs=self.n_jobs)

    def _fit_single(self, X: np.ndarray, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray, int, bool]:
        """Single k-means run."""
        centroids = init_centroids(X, self.n_clusters, self.init, rng)

        tree = None
        if self.algorithm == 'filtering':
            tree = KDTree(X, leaf_size=self.leaf_size)
            if self.verbose:
                print(f"Built kd-tree with {tree.n_nodes} nodes ({tree.n_leaves} leaves)")

        labels = None
        converged = False
        for iteration in range(1, self.max_iters + 1):
            new_labels = self._assign_clusters(X, centroids, tree)

            # Identical labels would reproduce the current centroids
            if labels is not None and np.array_equal(new_labels, labels):
                converged = True
                if self.verbose:
                    print(f"Converged after {iteration} iterations")
                break

            labels = new_labels
            centroids = update_centroids(X, labels, centroids)

            if self.verbose and iteration % 50 == 0:
                print(f"Iteration {iteration}, Inertia: {compute_inertia(X, labels, centroids):.2f}")

        if self.verbose and not converged:
            print(f"Stopped at max_iters={self.max_iters} without convergence")

        return centroids, labels, iteration, converged

    def fit(self, X) -> 'KMeans':
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            self

        Raises:
            InvalidParameter: empty input or more clusters than points
            MalformedInput: ragged, non-numeric or non-finite input
        """
        X = check_points(X)
        n_samples = X.shape[0]
        if self.n_clusters > n_samples:
            raise InvalidParameter(
                f"n_clusters={self.n_clusters} exceeds the number of points ({n_samples})"
            )

        rng = np.random.default_rng(self.random_state)

        if self.verbose:
            print(f"Fitting K-means with {self.n_clusters} clusters on {n_samples} samples "
                  f"({self.algorithm})...")

        centroids, labels, n_iter, converged = self._fit_single(X, rng)

        self.cluster_centers_ = centroids
        self.labels_ = labels
        self.inertia_ = compute_inertia(X, labels, centroids)
        self.n_iter_ = n_iter
        self.converged_ = converged

        if self.verbose:
            print(f"Final inertia: {self.inertia_:.2f}")

        return self

    def _check_fitted(self) -> None:
        if self.cluster_centers_ is None:
            raise NotFittedError("Model must be fitted first")

    def predict(self, X) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        self._check_fitted()
        X = check_points(X)
        if X.shape[1] != self.cluster_centers_.shape[1]:
            raise InvalidParameter(
                f"X has {X.shape[1]} features, model was fitted with {self.cluster_centers_.shape[1]}"
            )
        return assign_labels(X, self.cluster_centers_, chunk_size=self.chunk_size, n_jobs=self.n_jobs)

    def fit_predict(self, X) -> np.ndarray:
        """
        Fit the model and predict cluster labels.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        return self.fit(X).labels_

    def get_cluster_info(self) -> dict:
        """Get information about the clustering results."""
        self._check_fitted()

        cluster_sizes = np.bincount(self.labels_, minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'algorithm': self.algorithm,
            'inertia': self.inertia_,
            'n_iterations': self.n_iter_,
            'converged': self.converged_,
            'cluster_sizes': dict(enumerate(cluster_sizes.tolist())),
            'empty_clusters': int(np.count_nonzero(cluster_sizes == 0)),
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'std_cluster_size': float(np.std(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes))
        }
