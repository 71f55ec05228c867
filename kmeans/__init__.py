"""
K-means clustering for fixed-dimension numeric points.
"""

from .exceptions import KMeansError, InvalidParameter, MalformedInput, NotFittedError
from .init import INIT_METHODS, kmeans_plus_plus_init, random_init
from .io import read_points, write_centers
from .kdtree import HyperRectangle, KDTree
from .kmeans import KMeans, assign_labels, check_points, update_centroids
from .utils import benchmark_kmeans, create_sample_dataset, evaluate_clustering, find_optimal_k
from .version import __version__

__all__ = [
    "KMeans", "KDTree", "HyperRectangle",
    "assign_labels", "update_centroids", "check_points",
    "random_init", "kmeans_plus_plus_init", "INIT_METHODS",
    "read_points", "write_centers",
    "KMeansError", "InvalidParameter", "MalformedInput", "NotFittedError",
    "create_sample_dataset", "evaluate_clustering", "benchmark_kmeans", "find_optimal_k",
]
