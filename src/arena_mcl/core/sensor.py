"""
Range sensor model: rigid mount, noisy readings and the distance-dependent noise model
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
from scipy.special import erf

from .geometry import predict_distance


# ---------- helper functions ----------

def cdf_normal(x, mean, stdev):
    return (1 - erf((mean - x) / (math.sqrt(2) * stdev))) / 2


def prob_normal(x, mean, stdev):
    """Normal tail mass beyond x, mirrored about the mean (0.5 when x == mean)."""
    if x < mean:
        return float(cdf_normal(x, mean, stdev))
    return float(cdf_normal(mean - (x - mean), mean, stdev))


def gaussian_from_uniforms(mean, stdev, u1, u2):
    """Box-Muller transform of two uniforms; u1 must lie in (0, 1]."""
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mean + stdev * z


@dataclass(frozen=True)
class NoiseModel:
    """Reading stdev: constant below `threshold`, proportional to distance above it."""
    threshold: float = 7.874015748
    floor: float = 0.5905511811
    ratio: float = 0.05
    scale: float = 0.5

    def predict_stdev(self, predicted_distance):
        if predicted_distance > self.threshold:
            return self.scale * (self.ratio * predicted_distance)
        return self.scale * self.floor


@dataclass(frozen=True)
class SensorSettings:
    distance_max: float = 200.0
    use_normal_dist: bool = True
    noise: NoiseModel = field(default_factory=NoiseModel)
    epsilon: float = 0.001
    predict_obstacles: bool = False
    redraw_noise: bool = False


@dataclass(frozen=True)
class SensorCalibration:
    """
    Persistent bias of one physical sensor, stored as the two uniforms
    that parameterize its reading error for its whole lifetime.
    """
    rand_1: float
    rand_2: float

    @classmethod
    def random(cls, rng):
        # 1 - U keeps rand_1 in (0, 1] for the log in Box-Muller
        return cls(rand_1=1.0 - float(rng.random()), rand_2=float(rng.random()))

    @classmethod
    def neutral(cls):
        """Calibration with (numerically) zero bias in both noise modes."""
        return cls(rand_1=0.5, rand_2=0.25)

    def biased_reading(self, exact, stdev):
        return gaussian_from_uniforms(exact, stdev, self.rand_1, self.rand_2)

    def ratio_reading(self, exact):
        return 0.95 * exact + 0.1 * exact * self.rand_1


class RangeSensor:
    def __init__(self, world, settings: SensorSettings,
                 x_offset=0.0, y_offset=0.0, theta_offset=0.0,
                 calibration: Optional[SensorCalibration] = None,
                 rng: Optional[np.random.Generator] = None):
        self.world = world
        self.settings = settings
        # y_offset points along the robot heading, x_offset to its side
        self.x_offset = x_offset
        self.y_offset = y_offset
        self.theta_offset = theta_offset
        self.rng = rng if rng is not None else np.random.default_rng()
        self.calibration = calibration if calibration is not None else SensorCalibration.random(self.rng)

    def __repr__(self):
        return (f"RangeSensor(x_offset={self.x_offset}, y_offset={self.y_offset}, "
                f"theta_offset={self.theta_offset}, calibration={self.calibration})")

    def predict_stdev(self, predicted_distance):
        return self.settings.noise.predict_stdev(predicted_distance)

    def get_position(self, robot_x, robot_y, robot_theta) -> Tuple[float, float, float]:
        theta = robot_theta + self.theta_offset

        x = (robot_x
             + self.y_offset * math.cos(robot_theta)
             + self.x_offset * math.cos(robot_theta + math.pi / 2))
        y = (robot_y
             + self.y_offset * math.sin(robot_theta)
             + self.x_offset * math.sin(robot_theta + math.pi / 2))

        return x, y, theta

    def get_distance(self, robot):
        """Noisy reading taken from the real robot pose; math.inf when out of range."""
        x, y, theta = self.get_position(robot.x, robot.y, robot.theta)
        exact_distance = predict_distance(self.world, x, y, theta, include_obstacles=True)

        if exact_distance > self.settings.distance_max:
            return math.inf

        if not self.settings.use_normal_dist:
            return self.calibration.ratio_reading(exact_distance)

        stdev = self.predict_stdev(exact_distance)
        reading = self.calibration.biased_reading(exact_distance, stdev)
        if self.settings.redraw_noise:
            reading += float(self.rng.normal(0.0, stdev))
        return reading

    def predicted_ray(self, robot):
        """(x, y, theta, true distance) of the ray this sensor casts from the robot."""
        x, y, theta = self.get_position(robot.x, robot.y, robot.theta)
        return x, y, theta, predict_distance(self.world, x, y, theta, include_obstacles=True)
