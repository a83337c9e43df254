# Monte Carlo localization in a known arena
# - Particles store a position hypothesis (x, y) and a weight; heading comes from the robot
# - Each tick: 1) resample by weight, re-seeding a fraction uniformly at random
#              2) motion update with noisy odometry
#              3) sensor update: product of per-sensor likelihoods
#              4) weighted mean estimate and confidence

import logging
from typing import NamedTuple, Optional

import numpy as np

from .particle import Particle, clean_weights, max_weight
from .sensor import prob_normal

logger = logging.getLogger(__name__)


class Estimate(NamedTuple):
    x: Optional[float]
    y: Optional[float]
    confidence: float

    @property
    def valid(self):
        return self.x is not None and self.y is not None


def weighted_estimate(particles, count=None):
    """
    Weighted mean position and average weight of a population.
    With no weight mass left the position is None rather than NaN.
    """
    count = len(particles) if count is None else count
    weights = clean_weights(particles)
    total_weight = float(np.sum(weights))
    if count == 0 or total_weight <= 0:
        return Estimate(None, None, 0.0)

    xs = np.array([p.x for p in particles], dtype=float)
    ys = np.array([p.y for p in particles], dtype=float)
    return Estimate(float(np.dot(xs, weights) / total_weight),
                    float(np.dot(ys, weights) / total_weight),
                    total_weight / count)


# ---------- resampling ----------

def resampling_wheel(weights, n, rng):
    """
    Draw n indexes proportional to weights by walking a wheel from a random
    start, stepping forward by U * 2 * max(weights) each draw.
    """
    N = len(weights)
    step = 2 * np.max(weights)
    indexes = np.zeros(n, dtype=int)
    index = int(rng.integers(N))
    beta = 0.0
    for i in range(n):
        beta += rng.random() * step
        while beta >= weights[index]:
            beta -= weights[index]
            index = (index + 1) % N
        indexes[i] = index
    return indexes


# systematic resampling
def systematic_resample(weights, n, rng):
    positions = (np.arange(n) + rng.random()) / n
    cumulative_sum = np.cumsum(weights)
    # side='right' never lands on a zero-weight particle, the cumulative sum is flat there
    indexes = np.searchsorted(cumulative_sum, positions * cumulative_sum[-1], side='right')
    return np.minimum(indexes, np.flatnonzero(weights)[-1])


RESAMPLERS = {
    'wheel': resampling_wheel,
    'systematic': systematic_resample,
}


# ---------- Particle Filter Class ----------
class MonteCarloLocalizer:
    def __init__(self, world, sensors, likelihood, odom_stdev=0.1, percent_random=0.05,
                 resample_method='wheel', rng=None):
        if resample_method not in RESAMPLERS:
            raise ValueError(
                f"Unknown resample method: {resample_method!r} (expected one of {sorted(RESAMPLERS)})"
            )
        if not 0.0 <= percent_random <= 1.0:
            raise ValueError(f"percent_random must lie in [0, 1], got {percent_random}")

        self.world = world
        self.sensors = list(sensors)
        self.likelihood = likelihood
        self.odom_stdev = odom_stdev
        self.percent_random = percent_random
        self.resample_method = resample_method
        self.rng = rng if rng is not None else np.random.default_rng()

        self._particles = []
        self.margin = 0.0
        self.last_readings = ()

    @property
    def particles(self):
        """Snapshot of the live population, for visualization only."""
        return tuple(self._particles)

    @property
    def count(self):
        return len(self._particles)

    def initialize(self, start_x, start_y, count, robot, initial_stdev=0.5, spread=None):
        """
        Spawn `count` particles weighted by a normal prior around the start.

        Args:
            start_x, start_y: believed start position
            count: population size, constant from now on
            robot: supplies the body size that sets the wall margin
            initial_stdev: stdev of the prior on each axis
            spread: if given, draw within +-spread of the start instead of the whole arena

        Raises:
            ValueError: If count is not positive
        """
        if count <= 0:
            raise ValueError(f"Particle count must be positive, got {count}")

        arena = self.world.arena
        self.margin = 0.5 * min(robot.width, robot.length)

        particles = []
        for _ in range(count):
            if spread is None:
                p = Particle.uniform(arena, self.margin, self.rng)
            else:
                p = Particle(
                    float(self.rng.uniform(max(self.margin, start_x - spread),
                                           min(arena.width - self.margin, start_x + spread))),
                    float(self.rng.uniform(max(self.margin, start_y - spread),
                                           min(arena.height - self.margin, start_y + spread))),
                )
            p.weight = (prob_normal(p.x, start_x, initial_stdev)
                        * prob_normal(p.y, start_y, initial_stdev))
            particles.append(p)

        self._particles = particles
        logger.info(
            f"Initialized {count} particles around ({start_x:.2f}, {start_y:.2f}), "
            f"margin {self.margin:.2f}, resampling '{self.resample_method}', "
            f"likelihood '{self.likelihood.name}'"
        )

    def _random_count(self, top_weight):
        N = len(self._particles)
        if top_weight == 0:
            return N
        return int(round(N * self.percent_random))

    def resample(self):
        N = len(self._particles)
        top_weight = max_weight(self._particles)
        n_random = self._random_count(top_weight)
        if n_random == N:
            logger.warning("All particle weights are zero, restarting the whole population at random")

        new_particles = []
        n_drawn = N - n_random
        if n_drawn > 0:
            weights = clean_weights(self._particles)
            indexes = RESAMPLERS[self.resample_method](weights, n_drawn, self.rng)
            new_particles.extend(self._particles[i].copy(weight=1.0) for i in indexes)

        for _ in range(n_random):
            new_particles.append(Particle.uniform(self.world.arena, self.margin, self.rng))

        self._particles = new_particles

    def motion_update(self, delta_x, delta_y):
        for p in self._particles:
            p.move(delta_x, delta_y, self.odom_stdev, self.rng)

    def read_sensors(self, robot):
        """One reading per sensor from the real robot, shared by all particles this tick."""
        return tuple(sensor.get_distance(robot) for sensor in self.sensors)

    def pose_likelihood(self, x, y, robot_theta, readings):
        weight = 1.0
        for sensor, actual in zip(self.sensors, readings):
            sx, sy, stheta = sensor.get_position(x, y, robot_theta)
            weight *= self.likelihood.score(actual, sx, sy, stheta)
            if weight == 0:
                return 0.0
        return weight

    def sensor_update(self, robot):
        readings = self.read_sensors(robot)
        self.last_readings = readings

        arena = self.world.arena
        for p in self._particles:
            if not p.inside(arena, self.margin):
                p.weight = 0.0
                continue
            p.weight = self.pose_likelihood(p.x, p.y, robot.theta, readings)

    def tick(self, delta_x_local, delta_y_local, robot):
        """
        Advance the filter by one step.

        Args:
            delta_x_local: commanded strafe (perpendicular to the heading)
            delta_y_local: commanded forward motion (along the heading)
            robot: real robot, already moved; supplies heading and sensor readings

        Returns:
            Estimate(x, y, confidence); x and y are None when no particle carries weight
        """
        if not self._particles:
            raise RuntimeError("initialize() must be called before tick()")

        delta_x, delta_y = robot.to_global(delta_y_local, delta_x_local)

        self.resample()
        self.motion_update(delta_x, delta_y)
        self.sensor_update(robot)

        estimate = weighted_estimate(self._particles)
        if not estimate.valid:
            logger.warning("No particle carries weight after the sensor update, no estimate this tick")
        else:
            logger.debug(
                f"tick: readings={self.last_readings} "
                f"estimate=({estimate.x:.2f}, {estimate.y:.2f}) confidence={estimate.confidence:.4f}"
            )
        return estimate

    def sensor_rays(self, robot):
        return [sensor.predicted_ray(robot) for sensor in self.sensors]
