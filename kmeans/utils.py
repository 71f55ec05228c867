"""
Helpers for generating data, evaluating and benchmarking clusterings.
"""

import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics import silhouette_score

from .kmeans import KMeans, check_points, compute_inertia


def create_sample_dataset(
    n_samples: int = 1000,
    n_features: int = 2,
    n_centers: int = 4,
    cluster_std: float = 0.5,
    center_box: Tuple[float, float] = (-10.0, 10.0),
    random_state: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Create isotropic Gaussian blobs.

    Returns:
        (X, true_labels, true_centers)
    """
    rng = np.random.default_rng(random_state)
    centers = rng.uniform(center_box[0], center_box[1], size=(n_centers, n_features))
    true_labels = rng.integers(n_centers, size=n_samples)
    X = centers[true_labels] + rng.normal(scale=cluster_std, size=(n_samples, n_features))
    return X, true_labels, centers


def evaluate_clustering(
    X,
    labels: np.ndarray,
    centers: np.ndarray,
    silhouette_sample_size: Optional[int] = 10000,
    random_state: Optional[int] = None
) -> Dict[str, float]:
    """
    Summarise a clustering.

    The silhouette score is computed on a random subsample of at most
    ``silhouette_sample_size`` points. It needs at least two clusters
    present in that subsample and fewer clusters than sampled points;
    it is reported as NaN otherwise.
    """
    X = check_points(X)
    labels = np.asarray(labels)
    sizes = np.bincount(labels, minlength=len(centers))
    n_nonempty = int(np.count_nonzero(sizes))

    sample_X, sample_labels = X, labels
    if silhouette_sample_size is not None and len(X) > silhouette_sample_size:
        rng = np.random.default_rng(random_state)
        picked = rng.choice(len(X), size=silhouette_sample_size, replace=False)
        sample_X, sample_labels = X[picked], labels[picked]

    silhouette = float('nan')
    if 2 <= len(np.unique(sample_labels)) < len(sample_X):
        silhouette = float(silhouette_score(sample_X, sample_labels))

    return {
        'inertia': compute_inertia(X, labels, np.asarray(centers, dtype=np.float64)),
        'silhouette': silhouette,
        'n_nonempty_clusters': n_nonempty,
        'min_cluster_size': int(sizes.min()),
        'max_cluster_size': int(sizes.max()),
    }


def benchmark_kmeans(
    X,
    n_clusters: int,
    algorithms: Sequence[str] = ('lloyd', 'filtering'),
    random_state: int = 42,
    **kmeans_params
) -> List[Dict]:
    """Fit once per algorithm with the same seed and time each fit."""
    results = []
    for algorithm in algorithms:
        model = KMeans(n_clusters=n_clusters, algorithm=algorithm,
                       random_state=random_state, **kmeans_params)
        start_time = time.time()
        model.fit(X)
        elapsed_time = time.time() - start_time
        results.append({
            'algorithm': algorithm,
            'fit_time': elapsed_time,
            'n_iter': model.n_iter_,
            'converged': model.converged_,
            'inertia': model.inertia_,
        })
    return results


def find_optimal_k(
    X,
    k_values: Iterable[int],
    random_state: int = 42,
    **kmeans_params
) -> Dict[int, float]:
    """Inertia for each candidate k (elbow method)."""
    X = check_points(X)
    inertias = {}
    for k in k_values:
        model = KMeans(n_clusters=k, random_state=random_state, **kmeans_params).fit(X)
        inertias[k] = model.inertia_
    return inertias
