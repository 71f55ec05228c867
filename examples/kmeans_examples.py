"""Example usage of the k-means clusterer on synthetic blobs.

Shows a plain fit, the kd-tree filtering algorithm, prediction on new
points, and reading/writing a delimited table.
"""

import io

import numpy as np

from kmeans import KMeans, create_sample_dataset, evaluate_clustering, read_points, write_centers


def simple_example():
    """Simple example demonstrating K-means usage."""
    print("🎯 Simple K-means Example")
    print("=" * 50)

    X, true_labels, true_centers = create_sample_dataset(
        n_samples=2000, n_features=2, n_centers=5, cluster_std=0.8, random_state=42
    )
    print(f"Using {X.shape[0]} samples with {X.shape[1]} features")

    print("\nCreating K-means model with k=5...")
    kmeans = KMeans(n_clusters=5, max_iters=200, init='k-means++', random_state=42, verbose=True)

    print("\nFitting K-means...")
    kmeans.fit(X)

    print(f"\nResults:")
    print(f"  Final inertia: {kmeans.inertia_:.2f}")
    print(f"  Iterations: {kmeans.n_iter_} (converged: {kmeans.converged_})")
    print(f"  Cluster centers shape: {kmeans.cluster_centers_.shape}")

    info = kmeans.get_cluster_info()
    print(f"\nCluster distribution:")
    print(f"  Average cluster size: {info['avg_cluster_size']:.1f}")
    print(f"  Largest cluster: {info['max_cluster_size']}")
    print(f"  Smallest cluster: {info['min_cluster_size']}")

    report = evaluate_clustering(X, kmeans.labels_, kmeans.cluster_centers_, random_state=42)
    print(f"  Silhouette: {report['silhouette']:.3f}")

    print(f"\nTesting prediction on new points...")
    queries = true_centers + np.random.default_rng(0).normal(scale=0.1, size=true_centers.shape)
    predicted_labels = kmeans.predict(queries)
    print(f"Predicted labels for the true centers: {predicted_labels}")


def filtering_example():
    """The kd-tree filtering algorithm gives the same clustering."""
    print("\n🌲 Filtering (kd-tree) vs Lloyd")
    print("=" * 50)

    X, _, _ = create_sample_dataset(n_samples=20000, n_features=3, n_centers=8, random_state=7)
    lloyd = KMeans(n_clusters=8, algorithm='lloyd', random_state=1).fit(X)
    filtering = KMeans(n_clusters=8, algorithm='filtering', random_state=1).fit(X)

    print(f"  Same labels: {np.array_equal(lloyd.labels_, filtering.labels_)}")
    print(f"  Max center difference: {np.abs(lloyd.cluster_centers_ - filtering.cluster_centers_).max():.2e}")


def table_example():
    """Round trip through the delimited-text collaborators."""
    print("\n📄 Table input/output")
    print("=" * 50)

    table = "id,x,y\n0,0,0\n1,0,1\n2,10,0\n3,10,1\n"
    X = read_points(io.StringIO(table))
    kmeans = KMeans(n_clusters=2, init=X[[0, 3]]).fit(X)

    out = io.StringIO()
    write_centers(kmeans.cluster_centers_, out)
    print(out.getvalue(), end='')


if __name__ == "__main__":
    simple_example()
    filtering_example()
    table_example()
    print("\n✅ Examples completed successfully!")
