#!/usr/bin/env python3
"""
Speed test for the Lloyd and kd-tree filtering assignment algorithms.
"""

import argparse
import csv

from kmeans import benchmark_kmeans, create_sample_dataset


def parse_args():
    ap = argparse.ArgumentParser()
    ap.add_argument('--n-jobs', type=int, default=1, help='assignment threads for lloyd')
    ap.add_argument('--seed', type=int, default=42)
    ap.add_argument('--out', default=None, help='optional CSV file for the results')
    return ap.parse_args()


def speed_test_kmeans(n_jobs=1, seed=42):
    """Test K-means speed with different dataset sizes."""
    print("🚀 K-means Speed Test - Lloyd vs Filtering")
    print("=" * 60)

    # Filtering pays off for low dimensions and many points
    test_configs = [
        {'n_samples': 10000, 'n_features': 2, 'n_clusters': 4},
        {'n_samples': 50000, 'n_features': 2, 'n_clusters': 4},
        {'n_samples': 50000, 'n_features': 3, 'n_clusters': 16},
        {'n_samples': 20000, 'n_features': 16, 'n_clusters': 16},
    ]

    rows = []
    for config in test_configs:
        print(f"\nTest: {config['n_samples']} samples, {config['n_features']} features, {config['n_clusters']} clusters")
        print("-" * 50)

        X, _, _ = create_sample_dataset(
            n_samples=config['n_samples'],
            n_features=config['n_features'],
            n_centers=config['n_clusters'],
            random_state=seed
        )

        results = benchmark_kmeans(X, n_clusters=config['n_clusters'], random_state=seed, n_jobs=n_jobs)
        for result in results:
            samples_per_second = config['n_samples'] * result['n_iter'] / max(result['fit_time'], 1e-9)
            print(f"  {result['algorithm']:<10} {result['fit_time']:.3f}s  "
                  f"iters={result['n_iter']}  inertia={result['inertia']:.2f}  "
                  f"({samples_per_second:.0f} point-assignments/second)")
            rows.append({**config, **result})

    return rows


def main():
    args = parse_args()
    rows = speed_test_kmeans(n_jobs=args.n_jobs, seed=args.seed)
    if args.out:
        with open(args.out, 'w', newline='') as f:
            w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            w.writeheader()
            w.writerows(rows)
        print(f"\nSaved {len(rows)} rows to {args.out}")
    print("\n🎉 Speed test completed!")


if __name__ == "__main__":
    main()
