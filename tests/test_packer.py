import unittest
import numpy as np
from diskrelax.config import PackingAlgorithm
from diskrelax.geometry import BoundingBox
from diskrelax.packer import CirclePacker


def place(packer, centers):
    """Move the packer's circles (in current order) onto the given centers."""
    for circle, target in zip(packer.circles, centers):
        target = np.array([target[0], target[1], circle.center[2]])
        circle.translate(target - circle.center)


class TestPackerConstruction(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.packer = CirclePacker((10.0, -5.0), 50, 0.5, 2.0, rng=self.rng)

    def test_circle_count(self):
        self.assertEqual(len(self.packer), 50)
        self.assertEqual(len(self.packer.to_circles()), 50)

    def test_radii_within_bounds(self):
        radii = np.array([c.radius for c in self.packer.circles])
        self.assertTrue(np.all(radii >= 0.5))
        self.assertTrue(np.all(radii <= 2.0))

    def test_initial_offsets_within_min_radius(self):
        centers = np.array([c.center for c in self.packer.circles])
        offsets = centers - np.array([10.0, -5.0, 0.0])
        self.assertTrue(np.all(offsets[:, :2] >= 0.0))
        self.assertTrue(np.all(offsets[:, :2] < 0.5))
        np.testing.assert_allclose(offsets[:, 2], 0.0)

    def test_seeded_generators_reproduce(self):
        first = CirclePacker((0, 0), 10, 0.1, 1.0, rng=np.random.default_rng(7))
        second = CirclePacker((0, 0), 10, 0.1, 1.0, rng=np.random.default_rng(7))
        self.assertEqual(first.to_circles(), second.to_circles())
        for _ in range(5):
            first.pack(PackingAlgorithm.RANDOM, 0.1, 0.001)
            second.pack(PackingAlgorithm.RANDOM, 0.1, 0.001)
        self.assertEqual(first.to_circles(), second.to_circles())

    def test_invalid_arguments_rejected(self):
        with self.assertRaises(ValueError):
            CirclePacker((0, 0), 1, 0.1, 1.0)
        with self.assertRaises(ValueError):
            CirclePacker((0, 0), 5, 0.0, 1.0)
        with self.assertRaises(ValueError):
            CirclePacker((0, 0), 5, 1.0, 0.5)
        with self.assertRaises(ValueError):
            CirclePacker((0, 0), 5, 0.1, float("nan"))

    def test_equal_radius_bounds(self):
        packer = CirclePacker((0, 0), 3, 1.0, 1.0)
        self.assertEqual([c.radius for c in packer.circles], [1.0, 1.0, 1.0])


class TestPackPass(unittest.TestCase):
    def setUp(self):
        self.packer = CirclePacker((0.0, 0.0), 2, 0.5, 0.5, rng=np.random.default_rng(0))

    # --- Contraction ---

    def test_contraction_scenario(self):
        """(2, 0) pulled 5% of the way to the origin lands at (1.9, 0)."""
        place(self.packer, [(2.0, 0.0), (-5.0, 0.0)])
        self.assertFalse(self.packer.pack(PackingAlgorithm.FAST, 0.05, 0.0))
        centers = sorted(c.center[0] for c in self.packer.circles)
        np.testing.assert_allclose(centers, [-4.75, 1.9])

    def test_contraction_skipped_below_threshold(self):
        place(self.packer, [(2.0, 0.0), (-5.0, 0.0)])
        for damping in (0.0, 0.005, 0.0099):
            for algorithm in (PackingAlgorithm.FAST, PackingAlgorithm.DOUBLE, PackingAlgorithm.RANDOM):
                self.packer.pack(algorithm, damping, 0.0)
        centers = sorted(c.center[0] for c in self.packer.circles)
        np.testing.assert_allclose(centers, [-5.0, 2.0])

    def test_simple_never_contracts(self):
        place(self.packer, [(2.0, 0.0), (-5.0, 0.0)])
        self.packer.pack(PackingAlgorithm.SIMPLE, 0.5, 0.0)
        centers = sorted(c.center[0] for c in self.packer.circles)
        np.testing.assert_allclose(centers, [-5.0, 2.0])

    # --- Ordering and resolution ---

    def test_sort_farthest_first(self):
        packer = CirclePacker((0.0, 0.0), 4, 0.1, 0.1, rng=np.random.default_rng(3))
        place(packer, [(1.0, 0.0), (0.0, -4.0), (3.0, 0.0), (0.0, 2.0)])
        packer.pack(PackingAlgorithm.SIMPLE, 0.0, 0.0)
        distances = [np.linalg.norm(c.center[:2]) for c in packer.circles]
        np.testing.assert_allclose(distances, [4.0, 3.0, 2.0, 1.0])

    def test_shuffle_keeps_membership(self):
        packer = CirclePacker((0.0, 0.0), 12, 0.1, 1.0, rng=np.random.default_rng(5))
        before = {id(c) for c in packer.circles}
        packer.pack(PackingAlgorithm.RANDOM, 0.1, 0.001)
        self.assertEqual({id(c) for c in packer.circles}, before)

    def test_single_resolution_moves_outer_circle(self):
        """Unit circles at (0,0) and (1,0); the one farther from (-10,0) moves."""
        packer = CirclePacker((-10.0, 0.0), 2, 1.0, 1.0, rng=np.random.default_rng(1))
        place(packer, [(0.0, 0.0), (1.0, 0.0)])
        self.assertTrue(packer.pack(PackingAlgorithm.SIMPLE, 0.0, 0.0))
        centers = sorted(c.center[0] for c in packer.circles)
        np.testing.assert_allclose(centers, [0.0, 2.0])
        self.assertEqual(packer.moving_count(), 1)

    def test_double_resolution_moves_both(self):
        packer = CirclePacker((-10.0, 0.0), 2, 1.0, 1.0, rng=np.random.default_rng(1))
        place(packer, [(0.0, 0.0), (1.0, 0.0)])
        self.assertTrue(packer.pack(PackingAlgorithm.DOUBLE, 0.0, 0.0))
        centers = sorted(c.center[0] for c in packer.circles)
        np.testing.assert_allclose(centers, [-0.5, 1.5])
        self.assertEqual(packer.moving_count(), 2)

    def test_motion_flags_reset_each_pass(self):
        packer = CirclePacker((-10.0, 0.0), 2, 1.0, 1.0, rng=np.random.default_rng(1))
        place(packer, [(0.0, 0.0), (1.0, 0.0)])
        packer.pack(PackingAlgorithm.SIMPLE, 0.0, 0.0)
        self.assertFalse(packer.pack(PackingAlgorithm.SIMPLE, 0.0, 0.001))
        self.assertEqual(packer.moving_count(), 0)

    def test_no_collision_left_when_pass_reports_none(self):
        for algorithm in (PackingAlgorithm.SIMPLE, PackingAlgorithm.FAST, PackingAlgorithm.DOUBLE):
            packer = CirclePacker((0.0, 0.0), 15, 0.2, 1.0, rng=np.random.default_rng(11))
            for _ in range(2000):
                if not packer.pack(algorithm, 0.0, 0.001):
                    self.assertFalse(packer.collisions(0.001))
                    break
            else:
                self.fail(f"{algorithm} did not converge")

    def test_overlap_shrinks(self):
        for algorithm in PackingAlgorithm:
            packer = CirclePacker((0.0, 0.0), 20, 0.2, 1.0, rng=np.random.default_rng(13))
            initial = packer.total_overlap()
            self.assertGreater(initial, 0.0)
            for _ in range(300):
                packer.pack(algorithm, 0.0, 0.001)
            self.assertLess(packer.total_overlap(), initial)

    def test_invalid_pack_arguments(self):
        with self.assertRaises(ValueError):
            self.packer.pack("sideways", 0.1, 0.001)
        with self.assertRaises(ValueError):
            self.packer.pack(PackingAlgorithm.FAST, -0.1, 0.001)
        with self.assertRaises(ValueError):
            self.packer.pack(PackingAlgorithm.FAST, 0.1, -1.0)
        for damping, tolerance in ((float("nan"), 0.001), (float("inf"), 0.001), (0.1, float("nan"))):
            with self.assertRaises(ValueError):
                self.packer.pack(PackingAlgorithm.FAST, damping, tolerance)
        self.assertFalse(np.any(np.isnan([c.center for c in self.packer.circles])))

    def test_algorithm_names_accepted(self):
        self.assertIsInstance(self.packer.pack("Fast", 0.1, 0.001), bool)

    # --- Bounding box cache ---

    def test_bounding_box_matches_union(self):
        packer = CirclePacker((1.0, 1.0), 10, 0.1, 1.0, rng=np.random.default_rng(2))
        expected = BoundingBox.union_of(c.bounding_box() for c in packer.circles)
        self.assertEqual(packer.bounding_box(), expected)
        self.assertIs(packer.bounding_box(), packer.bounding_box())

    def test_bounding_box_recomputed_after_pack(self):
        packer = CirclePacker((1.0, 1.0), 10, 0.1, 1.0, rng=np.random.default_rng(2))
        before = packer.bounding_box()
        packer.pack(PackingAlgorithm.FAST, 0.1, 0.001)
        after = packer.bounding_box()
        self.assertIsNot(before, after)
        expected = BoundingBox.union_of(c.bounding_box() for c in packer.circles)
        self.assertEqual(after, expected)


if __name__ == '__main__':
    unittest.main()
