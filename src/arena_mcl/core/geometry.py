# Ray casting against a known, static map
# - The map is a rectangular arena [0,width] x [0,height] plus circular obstacles
# - A ray is an origin (x, y) and a heading theta in radians
# - Misses are reported as math.inf, never as an exception

import math
from dataclasses import dataclass, field
from typing import Tuple

# direction components smaller than this are treated as exactly zero
AXIS_EPS = 1e-12


@dataclass(frozen=True)
class Arena:
    width: float
    height: float

    def walls(self):
        """Boundary segments in the order they are checked: bottom, right, top, left."""
        w, h = self.width, self.height
        return (
            ((0.0, 0.0), (w, 0.0)),
            ((w, 0.0), (w, h)),
            ((w, h), (0.0, h)),
            ((0.0, h), (0.0, 0.0)),
        )

    def contains(self, x, y):
        return 0 <= x <= self.width and 0 <= y <= self.height


@dataclass(frozen=True)
class CircleObstacle:
    x: float
    y: float
    r: float


@dataclass(frozen=True)
class World:
    """Read-only map shared by every geometry query of a simulation."""
    arena: Arena
    obstacles: Tuple[CircleObstacle, ...] = field(default_factory=tuple)

    def with_obstacle(self, x, y, r):
        return World(self.arena, self.obstacles + (CircleObstacle(x, y, r),))


# ---------- helper functions ----------

def is_bounded(value, a, b):
    if b < a:
        a, b = b, a
    return a <= value <= b


def _points_forward(delta, direction):
    # an axis the ray does not travel along places no constraint on the hit
    if abs(direction) < AXIS_EPS:
        return True
    return (delta > 0) == (direction > 0)


def distance_to_segment(x, y, theta, point_a, point_b):
    """
    Distance along the ray (x, y, theta) to the segment point_a-point_b.
    Returns math.inf when the ray misses or runs parallel to the segment.
    """
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    vertical_segment = point_b[0] - point_a[0] == 0
    vertical_ray = abs(cos_t) < AXIS_EPS

    if vertical_segment and vertical_ray:
        return math.inf

    if vertical_segment:
        m2 = sin_t / cos_t
        hit_x = point_a[0]
        hit_y = m2 * (hit_x - x) + y
    elif vertical_ray:
        m1 = (point_b[1] - point_a[1]) / (point_b[0] - point_a[0])
        hit_x = x
        hit_y = m1 * (hit_x - point_a[0]) + point_a[1]
    else:
        m1 = (point_b[1] - point_a[1]) / (point_b[0] - point_a[0])
        m2 = sin_t / cos_t
        if m1 == m2:
            return math.inf
        b1 = -m1 * point_a[0] + point_a[1]
        b2 = -m2 * x + y
        hit_x = (b2 - b1) / (m1 - m2)
        hit_y = m1 * hit_x + b1

    if not (is_bounded(hit_x, point_a[0], point_b[0]) and is_bounded(hit_y, point_a[1], point_b[1])):
        return math.inf

    delta_x = hit_x - x
    delta_y = hit_y - y
    if not (_points_forward(delta_x, cos_t) and _points_forward(delta_y, sin_t)):
        return math.inf

    return math.hypot(delta_x, delta_y)


def distance_to_circle(ray_x, ray_y, theta, center_x, center_y, r):
    """Nearest positive intersection of the ray with a circle, math.inf if none."""
    x = ray_x - center_x
    y = ray_y - center_y

    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    a = -x * cos_t - y * sin_t
    discriminant = (2 * x * y * sin_t * cos_t
                    + (r * r - y * y) * cos_t * cos_t
                    + (r * r - x * x) * sin_t * sin_t)
    if discriminant < 0:
        return math.inf
    b = math.sqrt(discriminant)

    if a - b > 0:
        return a - b
    if a + b > 0:
        return a + b
    return math.inf


def predict_distance(world, x, y, theta, include_obstacles=False):
    """
    Distance from (x, y) along heading theta to the first wall or obstacle.

    Args:
        world: World holding the arena and obstacles
        x, y: ray origin in arena coordinates
        theta: heading in radians (not wrapped)
        include_obstacles: also cast against the obstacle circles

    Returns:
        Smallest hit distance, or math.inf if nothing is hit
    """
    best = math.inf
    for point_a, point_b in world.arena.walls():
        best = min(best, distance_to_segment(x, y, theta, point_a, point_b))

    if include_obstacles:
        for obstacle in world.obstacles:
            best = min(best, distance_to_circle(x, y, theta, obstacle.x, obstacle.y, obstacle.r))

    return best
