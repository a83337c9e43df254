"""
Unit tests for the two sensor likelihood strategies
"""

import math
import unittest

from arena_mcl.core import (Arena, World, SensorSettings, BoundedLikelihood,
                            UnboundedLikelihood, build_likelihood, prob_normal)


class TestBoundedNormal(unittest.TestCase):
    """Test the bounded-probability model with Gaussian noise"""

    def setUp(self):
        self.world = World(Arena(100, 100))
        self.model = BoundedLikelihood(self.world, SensorSettings(noise=BoundedLikelihood.default_noise))

    def test_exact_reading_scores_peak(self):
        self.assertAlmostEqual(self.model.score(50.0, 50.0, 50.0, 0.0), 0.5)

    def test_near_reading(self):
        stdev = self.model.settings.noise.predict_stdev(50.0)
        self.assertAlmostEqual(self.model.score(51.0, 50.0, 50.0, 0.0), prob_normal(51.0, 50.0, stdev))

    def test_far_reading_is_floored(self):
        """Disagreeing readings keep a small non-zero weight"""
        self.assertEqual(self.model.score(80.0, 50.0, 50.0, 0.0), 0.001)

    def test_out_of_range_agrees(self):
        model = BoundedLikelihood(self.world, SensorSettings(distance_max=40.0))
        self.assertEqual(model.score(math.inf, 50.0, 50.0, 0.0), 1.0)

    def test_out_of_range_disagrees(self):
        self.assertEqual(self.model.score(math.inf, 50.0, 50.0, 0.0), 0.001)

    def test_sensor_outside_arena(self):
        self.assertEqual(self.model.score(50.0, -1.0, 50.0, 0.0), 0.0)
        self.assertEqual(self.model.score(50.0, 50.0, 101.0, 0.0), 0.0)

    def test_bounded_by_one(self):
        for actual in (0.0, 10.0, 49.0, 50.0, 51.0, 99.0, math.inf):
            p = self.model.score(actual, 50.0, 50.0, 0.0)
            self.assertGreaterEqual(p, 0.0)
            self.assertLessEqual(p, 1.0)


class TestBoundedRatio(unittest.TestCase):
    """Test the bounded-probability model with ratio noise"""

    def setUp(self):
        self.world = World(Arena(100, 100))
        self.model = BoundedLikelihood(self.world, SensorSettings(use_normal_dist=False))

    def test_within_five_percent(self):
        self.assertEqual(self.model.score(51.0, 50.0, 50.0, 0.0), 1.0)

    def test_outside_five_percent(self):
        self.assertAlmostEqual(self.model.score(60.0, 50.0, 50.0, 0.0), 0.5 / 11.0)

    def test_out_of_range_agrees(self):
        model = BoundedLikelihood(self.world, SensorSettings(use_normal_dist=False, distance_max=40.0))
        self.assertEqual(model.score(math.inf, 50.0, 50.0, 0.0), 1.0)

    def test_out_of_range_disagrees(self):
        self.assertEqual(self.model.score(math.inf, 50.0, 50.0, 0.0), 0.0)


class TestUnbounded(unittest.TestCase):
    """Test the unbounded-weight model"""

    def setUp(self):
        self.world = World(Arena(100, 100))
        self.model = UnboundedLikelihood(self.world, SensorSettings(noise=UnboundedLikelihood.default_noise))

    def test_exact_reading_exceeds_one(self):
        self.assertAlmostEqual(self.model.score(50.0, 50.0, 50.0, 0.0), 1000.0)

    def test_reciprocal_residual(self):
        self.assertAlmostEqual(self.model.score(52.0, 50.0, 50.0, 0.0), 1.0 / 2.001)

    def test_ratio_mode_uses_relative_residual(self):
        model = UnboundedLikelihood(self.world, SensorSettings(use_normal_dist=False))
        self.assertAlmostEqual(model.score(40.0, 50.0, 50.0, 0.0), 1.0 / 0.251)

    def test_out_of_range_uses_wrap_distance(self):
        """The theta + 2*pi cast lands on the same wall as theta"""
        model = UnboundedLikelihood(self.world, SensorSettings(distance_max=40.0))
        self.assertAlmostEqual(model.score(math.inf, 50.0, 50.0, 0.0), 1.0 / 50.0)

    def test_out_of_range_disagrees(self):
        self.assertEqual(self.model.score(math.inf, 50.0, 50.0, 0.0), 0.001)

    def test_sensor_outside_arena(self):
        self.assertEqual(self.model.score(50.0, 150.0, 50.0, 0.0), 0.0)

    def test_weights_are_non_negative(self):
        for actual in (0.0, 10.0, 50.0, 99.0, math.inf):
            self.assertGreaterEqual(self.model.score(actual, 30.0, 70.0, 1.0), 0.0)


class TestBuildLikelihood(unittest.TestCase):
    """Test strategy selection by name"""

    def setUp(self):
        self.world = World(Arena(100, 100))

    def test_known_names(self):
        self.assertIsInstance(build_likelihood('bounded', self.world, SensorSettings()), BoundedLikelihood)
        self.assertIsInstance(build_likelihood('unbounded', self.world, SensorSettings()), UnboundedLikelihood)

    def test_unknown_name_is_fatal(self):
        with self.assertRaises(ValueError):
            build_likelihood('gaussian', self.world, SensorSettings())

    def test_default_noise_differs(self):
        self.assertEqual(BoundedLikelihood.default_noise.scale, 0.5)
        self.assertEqual(UnboundedLikelihood.default_noise.scale, 1.0)

    def test_expected_distance_ignores_obstacles_by_default(self):
        world = self.world.with_obstacle(70, 50, 5)
        model = build_likelihood('bounded', world, SensorSettings())
        self.assertAlmostEqual(model.expected_distance(50.0, 50.0, 0.0), 50.0)
        model = build_likelihood('bounded', world, SensorSettings(predict_obstacles=True))
        self.assertAlmostEqual(model.expected_distance(50.0, 50.0, 0.0), 15.0)


if __name__ == '__main__':
    unittest.main()
