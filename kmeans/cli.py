"""
Command line entry point: cluster the rows of a delimited table.

Reads points from a file (or stdin), runs one k-means fit, writes the
cluster centers to stdout in the same delimited format, and reports the
elapsed clustering time on stderr.

Example:
    kmeans data.csv -k 4 --seed 0 > centers.csv
"""

import argparse
import sys
import time
from typing import List, Optional

from .exceptions import KMeansError
from .init import INIT_METHODS
from .io import read_points, write_centers
from .kmeans import ALGORITHMS, KMeans
from .version import __version__


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog='kmeans', description='K-means clustering of delimited numeric rows')
    ap.add_argument('input', nargs='?', default='-', help='input file (default: stdin)')
    ap.add_argument('-k', '--clusters', type=int, default=4, help='number of clusters')
    ap.add_argument('--max-iters', type=int, default=300, help='iteration cap')
    ap.add_argument('--seed', type=int, default=0, help='random seed for initialization')
    ap.add_argument('--init', choices=sorted(INIT_METHODS), default='random')
    ap.add_argument('--algorithm', choices=ALGORITHMS, default='lloyd')
    ap.add_argument('--leaf-size', type=int, default=16, help='kd-tree leaf size (filtering)')
    ap.add_argument('--n-jobs', type=int, default=1, help='assignment threads, -1 for all CPUs')
    ap.add_argument('--delimiter', default=',')
    ap.add_argument('--no-header', action='store_true', help='first line is data, not a header')
    ap.add_argument('--skip-columns', type=int, default=1, help='leading id columns to ignore')
    ap.add_argument('--output', '-o', default='-', help='output file (default: stdout)')
    ap.add_argument('--verbose', '-v', action='store_true')
    ap.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return ap.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    if args.input == '-':
        X = read_points(sys.stdin, delimiter=args.delimiter,
                        skip_header=not args.no_header, skip_columns=args.skip_columns)
    else:
        with open(args.input, newline='') as f:
            X = read_points(f, delimiter=args.delimiter,
                            skip_header=not args.no_header, skip_columns=args.skip_columns)

    model = KMeans(
        n_clusters=args.clusters,
        max_iters=args.max_iters,
        init=args.init,
        algorithm=args.algorithm,
        random_state=args.seed,
        leaf_size=args.leaf_size,
        n_jobs=args.n_jobs,
        verbose=args.verbose,
    )

    start_time = time.time()
    model.fit(X)
    elapsed_time = time.time() - start_time
    print(f"total: {elapsed_time:.6f}s", file=sys.stderr)
    if args.verbose:
        print(f"iterations: {model.n_iter_}, converged: {model.converged_}, "
              f"inertia: {model.inertia_:.4f}", file=sys.stderr)

    if args.output == '-':
        write_centers(model.cluster_centers_, sys.stdout, delimiter=args.delimiter)
    else:
        with open(args.output, 'w', newline='') as f:
            write_centers(model.cluster_centers_, f, delimiter=args.delimiter)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except KMeansError as e:
        print(f"kmeans: error: {e}", file=sys.stderr)
        return 2
    return 0
