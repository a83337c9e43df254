"""
Unit tests for ray casting against walls and obstacles
"""

import math
import unittest

from arena_mcl.core import (Arena, CircleObstacle, World, distance_to_segment,
                            distance_to_circle, predict_distance)


class TestWallDistance(unittest.TestCase):
    """Test rays cast inside an open arena"""

    def setUp(self):
        self.world = World(Arena(100, 100))

    def test_straight_at_right_wall(self):
        """Ray facing +x from the centre hits the right wall at 50"""
        self.assertAlmostEqual(predict_distance(self.world, 50, 50, 0.0), 50.0)

    def test_straight_at_left_wall(self):
        self.assertAlmostEqual(predict_distance(self.world, 50, 50, math.pi), 50.0)

    def test_straight_at_top_wall(self):
        """Vertical ray is solved without an infinite slope"""
        self.assertAlmostEqual(predict_distance(self.world, 50, 20, math.pi / 2), 80.0)

    def test_straight_at_bottom_wall(self):
        self.assertAlmostEqual(predict_distance(self.world, 50, 20, -math.pi / 2), 20.0)

    def test_diagonal_into_corner(self):
        self.assertAlmostEqual(predict_distance(self.world, 50, 50, math.pi / 4), 50 * math.sqrt(2))

    def test_unwrapped_heading(self):
        """Heading is not wrapped; 2*pi + 0 behaves like 0"""
        self.assertAlmostEqual(predict_distance(self.world, 30, 50, 4 * math.pi), 70.0)

    def test_corner_origin_hits_far_wall(self):
        """Ray from (0,0) along +x reaches the far wall, not the side walls"""
        world = World(Arena(100, 60))
        self.assertAlmostEqual(predict_distance(world, 0, 0, 0.0), 100.0)

    def test_distance_is_non_negative(self):
        for k in range(16):
            theta = k * math.pi / 8
            d = predict_distance(self.world, 20, 70, theta)
            self.assertGreaterEqual(d, 0)
            self.assertTrue(math.isfinite(d))


class TestSegment(unittest.TestCase):
    """Test the single segment intersection"""

    def test_parallel_to_horizontal_wall(self):
        """Ray parallel to a wall never hits it"""
        self.assertEqual(distance_to_segment(50, 10, 0.0, (0, 0), (100, 0)), math.inf)

    def test_parallel_to_vertical_wall(self):
        self.assertEqual(distance_to_segment(10, 50, math.pi / 2, (0, 0), (0, 100)), math.inf)

    def test_segment_behind_ray(self):
        """Hits behind the origin are rejected"""
        self.assertEqual(distance_to_segment(50, 50, 0.0, (0, 0), (0, 100)), math.inf)

    def test_endpoint_order_does_not_matter(self):
        a = distance_to_segment(10, 10, 0.3, (80, 0), (80, 100))
        b = distance_to_segment(10, 10, 0.3, (80, 100), (80, 0))
        self.assertAlmostEqual(a, b)
        self.assertAlmostEqual(a, 70 / math.cos(0.3))

    def test_miss_past_segment_end(self):
        self.assertEqual(distance_to_segment(10, 10, 0.0, (80, 20), (80, 100)), math.inf)

    def test_oblique_segment(self):
        """Ray along +x meets the line y = x - 40 at x = 60"""
        d = distance_to_segment(0, 20, 0.0, (40, 0), (100, 60))
        self.assertAlmostEqual(d, 60.0)


class TestCircle(unittest.TestCase):
    """Test ray-circle intersection"""

    def test_near_side_of_circle(self):
        self.assertAlmostEqual(distance_to_circle(0, 50, 0.0, 50, 50, 10), 40.0)

    def test_miss_is_infinite(self):
        """Negative discriminant reports inf instead of failing on sqrt"""
        self.assertEqual(distance_to_circle(0, 50, 0.0, 50, 80, 10), math.inf)

    def test_origin_inside_circle_uses_far_root(self):
        self.assertAlmostEqual(distance_to_circle(50, 50, 0.0, 50, 50, 10), 10.0)

    def test_circle_behind_ray(self):
        self.assertEqual(distance_to_circle(0, 50, 0.0, -20, 50, 5), math.inf)


class TestObstacles(unittest.TestCase):
    """Test obstacle handling of the full ray cast"""

    def setUp(self):
        self.world = World(Arena(100, 100)).with_obstacle(50, 50, 10)

    def test_obstacles_only_when_requested(self):
        self.assertAlmostEqual(predict_distance(self.world, 10, 50, 0.0, include_obstacles=True), 30.0)
        self.assertAlmostEqual(predict_distance(self.world, 10, 50, 0.0, include_obstacles=False), 90.0)

    def test_with_obstacle_returns_new_world(self):
        """Worlds are immutable; adding an obstacle leaves the original untouched"""
        base = World(Arena(100, 100))
        extended = base.with_obstacle(20, 20, 2)
        self.assertEqual(base.obstacles, ())
        self.assertEqual(extended.obstacles, (CircleObstacle(20, 20, 2),))


if __name__ == '__main__':
    unittest.main()
