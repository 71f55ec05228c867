"""
Centroid initialization policies.

Every policy has the signature ``policy(X, n_clusters, rng) -> centroids``
where ``X`` is the validated point store of shape (n_samples, n_features),
``rng`` is a ``numpy.random.Generator`` and the result has shape
(n_clusters, n_features). Policies only consume entropy from ``rng``;
they never modify ``X``.
"""

from typing import Callable, Dict, Union

import numpy as np

from .exceptions import InvalidParameter

InitPolicy = Callable[[np.ndarray, int, np.random.Generator], np.ndarray]


def random_init(X: np.ndarray, n_clusters: int, rng: np.random.Generator) -> np.ndarray:
    """Pick ``n_clusters`` points uniformly at random without replacement."""
    indices = rng.choice(X.shape[0], size=n_clusters, replace=False)
    return X[indices].copy()


def kmeans_plus_plus_init(X: np.ndarray, n_clusters: int, rng: np.random.Generator) -> np.ndarray:
    """K-means++ seeding: each next centroid is drawn with probability
    proportional to its squared distance from the nearest chosen one."""
    n_samples, n_features = X.shape
    centroids = np.empty((n_clusters, n_features), dtype=X.dtype)
    chosen = np.zeros(n_samples, dtype=bool)

    first = rng.integers(n_samples)
    centroids[0] = X[first]
    chosen[first] = True

    # Running minimum of squared distances to the centroids picked so far
    min_sq_dist = np.sum((X - centroids[0]) ** 2, axis=1)

    for c_id in range(1, n_clusters):
        weights = np.where(chosen, 0.0, min_sq_dist)
        total = weights.sum()
        if total > 0:
            next_idx = rng.choice(n_samples, p=weights / total)
        else:
            # Every remaining point coincides with a centroid
            next_idx = rng.choice(np.flatnonzero(~chosen))
        centroids[c_id] = X[next_idx]
        chosen[next_idx] = True
        min_sq_dist = np.minimum(min_sq_dist, np.sum((X - centroids[c_id]) ** 2, axis=1))

    return centroids


INIT_METHODS: Dict[str, InitPolicy] = {
    'random': random_init,
    'k-means++': kmeans_plus_plus_init,
}


def init_centroids(
    X: np.ndarray,
    n_clusters: int,
    init: Union[str, np.ndarray, InitPolicy],
    rng: np.random.Generator,
) -> np.ndarray:
    """Resolve ``init`` and return the starting centroid set.

    Args:
        X: Point store of shape (n_samples, n_features)
        n_clusters: Number of centroids to produce
        init: Policy name from ``INIT_METHODS``, an explicit array of
            starting centroids, or a callable policy
        rng: Random generator for the policy

    Returns:
        A new float64 array of shape (n_clusters, n_features)
    """
    if isinstance(init, str):
        try:
            policy = INIT_METHODS[init]
        except KeyError:
            raise InvalidParameter(
                f"Unknown initialization method: {init!r} "
                f"(expected one of {sorted(INIT_METHODS)})"
            ) from None
        centroids = policy(X, n_clusters, rng)
    elif callable(init):
        centroids = init(X, n_clusters, rng)
    else:
        centroids = init

    centroids = np.array(centroids, dtype=np.float64)
    expected = (n_clusters, X.shape[1])
    if centroids.shape != expected:
        raise InvalidParameter(
            f"Initial centroids have shape {centroids.shape}, expected {expected}"
        )
    if not np.all(np.isfinite(centroids)):
        raise InvalidParameter("Initial centroids must be finite")
    return centroids
