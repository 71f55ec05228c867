import unittest

import numpy as np

from kmeans import HyperRectangle, InvalidParameter, KDTree, assign_labels
from kmeans.kdtree import lower_median, squared_distances


class TestLowerMedian(unittest.TestCase):
    def test_even(self):
        values = np.array([1.0, 2.0, 5.0, 8.0, 9.0, 6.0, 4.0, 10.0, 7.0, 3.0])
        self.assertEqual(lower_median(values), 5.0)

    def test_odd(self):
        values = np.array([1.0, 2.0, 5.0, 8.0, 9.0, 6.0, 4.0, 7.0, 3.0])
        self.assertEqual(lower_median(values), 5.0)

    def test_input_untouched(self):
        values = np.array([3.0, 1.0, 2.0])
        lower_median(values)
        np.testing.assert_array_equal(values, [3.0, 1.0, 2.0])


class TestHyperRectangle(unittest.TestCase):
    def setUp(self):
        self.h = HyperRectangle(np.array([0.0, 0.0]), np.array([2.0, 2.0]))

    def test_from_points(self):
        X = np.array([[1.0, 5.0], [-1.0, 2.0], [0.5, 3.0]])
        self.assertEqual(HyperRectangle.from_points(X), HyperRectangle([-1.0, 2.0], [1.0, 5.0]))

    def test_closest(self):
        np.testing.assert_array_equal(self.h.closest(np.array([-2.0, 3.0])), [0.0, 2.0])
        np.testing.assert_array_equal(self.h.closest(np.array([1.0, 1.5])), [1.0, 1.5])

    def test_distance(self):
        self.assertEqual(self.h.distance(np.array([-2.0, 3.0])), 5.0)
        self.assertEqual(self.h.distance(np.array([1.0, 1.0])), 0.0)

    def test_width(self):
        h = HyperRectangle(np.array([1.0, 0.0]), np.array([2.0, 2.0]))
        np.testing.assert_array_equal(h.width(), [1.0, 2.0])

    def test_owner(self):
        centroids = np.array([[-2.5, -2.5], [3.0, 1.0]])
        self.assertEqual(self.h.owner(centroids), 1)

    def test_no_owner_when_rival_not_dominated(self):
        # (1, 2.5) is closest to the box, but (3, 1) wins near the (2, 0) corner
        centroids = np.array([[3.0, 1.0], [1.0, 2.5]])
        self.assertIsNone(self.h.owner(centroids))

    def test_no_owner_on_tie(self):
        centroids = np.array([[1.0, 1.0], [1.5, 1.5]])
        self.assertIsNone(self.h.owner(centroids))

    def test_single_centroid_owns_everything(self):
        self.assertEqual(self.h.owner(np.array([[50.0, -7.0]])), 0)

    def test_no_owner_within_rounding_error(self):
        # (1, 0) is closer at every location, but by less than the rounding
        # error of a squared distance near y = 1e9
        h = HyperRectangle(np.array([0.52, 0.0]), np.array([0.6, 1e9]))
        centroids = np.array([[0.0, 0.0], [1.0, 0.0]])
        self.assertIsNone(h.owner(centroids))
        small = HyperRectangle(np.array([0.52, 0.0]), np.array([0.6, 1.0]))
        self.assertEqual(small.owner(centroids), 1)


class TestKDTree(unittest.TestCase):
    def test_structure(self):
        X = np.array([[0.5, 0.5], [1.5, 0.5], [0.5, 1.5], [1.5, 1.5]])
        tree = KDTree(X, leaf_size=1)

        self.assertEqual(tree.n_nodes, 7)
        self.assertEqual(tree.n_leaves, 4)
        self.assertEqual(tree.root.split_dim, 0)
        self.assertEqual(tree.root.split_value, 0.5)
        self.assertEqual(tree.root.rect, HyperRectangle([0.5, 0.5], [1.5, 1.5]))
        self.assertEqual(tree.root.left.rect, HyperRectangle([0.5, 0.5], [0.5, 1.5]))
        self.assertEqual(tree.root.left.split_dim, 1)
        self.assertEqual([leaf.indices.tolist() for leaf in tree.leaves()], [[0], [2], [1], [3]])

    def test_duplicate_points_make_one_leaf(self):
        X = np.ones((10, 3))
        tree = KDTree(X, leaf_size=1)
        self.assertEqual(tree.n_nodes, 1)
        self.assertTrue(tree.root.is_leaf)
        labels = tree.assign(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]))
        np.testing.assert_array_equal(labels, np.ones(10))

    def test_leaves_partition_points(self):
        rng = np.random.default_rng(0)
        X = rng.normal(size=(257, 4))
        tree = KDTree(X, leaf_size=8)
        indices = np.concatenate([leaf.indices for leaf in tree.leaves()])
        self.assertEqual(sorted(indices.tolist()), list(range(257)))
        for leaf in tree.leaves():
            self.assertLessEqual(len(leaf.indices), 8)

    def test_assign_matches_brute_force(self):
        rng = np.random.default_rng(1)
        X = np.vstack([
            rng.normal(loc=0.0, scale=0.5, size=(200, 3)),
            rng.normal(loc=4.0, scale=0.5, size=(200, 3)),
            rng.uniform(-6.0, 10.0, size=(100, 3)),
        ])
        for leaf_size in (1, 4, 32):
            tree = KDTree(X, leaf_size=leaf_size)
            for _ in range(5):
                centroids = rng.uniform(-6.0, 10.0, size=(7, 3))
                np.testing.assert_array_equal(tree.assign(centroids), assign_labels(X, centroids))

    def test_assign_ties_go_to_lowest_index(self):
        X = np.array([[0.0, 0.0], [0.0, 1.0], [0.0, -1.0], [0.0, 5.0]])
        tree = KDTree(X, leaf_size=1)
        centroids = np.array([[1.0, 0.0], [-1.0, 0.0]])
        np.testing.assert_array_equal(tree.assign(centroids), [0, 0, 0, 0])

    def test_assign_large_magnitude_near_tie(self):
        # Far from the centroids both distances round to the same value,
        # so the scan labels those points 0
        X = np.array([[0.6, 0.0], [0.55, 1e9], [0.52, 1e9]])
        centroids = np.array([[0.0, 0.0], [1.0, 0.0]])
        expected = assign_labels(X, centroids)
        np.testing.assert_array_equal(expected, [1, 0, 0])
        for leaf_size in (1, 16):
            tree = KDTree(X, leaf_size=leaf_size)
            np.testing.assert_array_equal(tree.assign(centroids), expected)

    def test_assign_near_bisector_matches_brute_force(self):
        rng = np.random.default_rng(2)
        x = 0.5 + rng.uniform(-0.05, 0.05, size=400)
        y = np.concatenate([rng.uniform(-1e9, 1e9, size=200), rng.uniform(-1.0, 1.0, size=200)])
        X = np.column_stack([x, y])
        centroids = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 3.0]])
        for leaf_size in (1, 8, 64):
            tree = KDTree(X, leaf_size=leaf_size)
            np.testing.assert_array_equal(tree.assign(centroids), assign_labels(X, centroids))
            np.testing.assert_array_equal(tree.assign(centroids[:2]), assign_labels(X, centroids[:2]))

    def test_invalid_leaf_size(self):
        with self.assertRaises(InvalidParameter):
            KDTree(np.zeros((3, 2)), leaf_size=0)
        for leaf_size in (True, 2.0, '16'):
            with self.assertRaises(InvalidParameter):
                KDTree(np.zeros((3, 2)), leaf_size=leaf_size)


def test_squared_distances():
    X = np.array([[1.0, 2.0, 3.0]])
    C = np.array([[4.0, 5.0, 6.0], [1.0, 2.0, 3.0]])
    np.testing.assert_array_equal(squared_distances(X, C), [[27.0, 0.0]])
