"""
Sensor likelihood strategies

Both strategies score a reading against the distance predicted from a
hypothesized sensor pose. `bounded` returns probabilities in [0, 1];
`unbounded` returns multiplicative weights that may exceed 1, so the two
must not be mixed within one filter.
"""

import math
from abc import ABC, abstractmethod

from .geometry import predict_distance
from .sensor import NoiseModel, SensorSettings, prob_normal


class LikelihoodModel(ABC):
    name = None
    # noise model the strategy was tuned with
    default_noise = NoiseModel()

    def __init__(self, world, settings: SensorSettings):
        self.world = world
        self.settings = settings

    def __repr__(self):
        return f"{type(self).__name__}(settings={self.settings})"

    def expected_distance(self, x, y, theta):
        return predict_distance(self.world, x, y, theta,
                                include_obstacles=self.settings.predict_obstacles)

    def score(self, actual, x, y, theta):
        """Weight of a sensor at (x, y, theta) that reported `actual`."""
        if not self.world.arena.contains(x, y):
            return 0.0
        expected = self.expected_distance(x, y, theta)
        return self.sensor_probability(expected, actual, x, y, theta)

    @abstractmethod
    def sensor_probability(self, expected, actual, x, y, theta):
        raise NotImplementedError


class BoundedLikelihood(LikelihoodModel):
    name = 'bounded'
    default_noise = NoiseModel(scale=0.5)

    def sensor_probability(self, expected, actual, x, y, theta):
        s = self.settings

        if s.use_normal_dist:
            if math.isfinite(actual):
                return max(prob_normal(actual, expected, s.noise.predict_stdev(expected)), s.epsilon)
            if expected > s.distance_max:
                return 1.0
            return s.epsilon

        if math.isfinite(actual) and 0.95 * actual < expected < 1.05 * actual:
            return 1.0
        if not math.isfinite(actual) and expected > s.distance_max:
            return 1.0
        return 0.5 / (abs(actual - expected) + 1)


class UnboundedLikelihood(LikelihoodModel):
    name = 'unbounded'
    default_noise = NoiseModel(scale=1.0)

    def sensor_probability(self, expected, actual, x, y, theta):
        s = self.settings

        if math.isfinite(actual):
            residual = abs(actual - expected)
            if not s.use_normal_dist:
                residual /= actual if actual > 0 else s.epsilon
            return 1.0 / (residual + s.epsilon)

        if expected > s.distance_max:
            # NOTE: theta + 2*pi casts the same ray as theta; kept as found, intent unverified
            wrap_distance = self.expected_distance(x, y, theta + 2 * math.pi)
            if wrap_distance == 0:
                return 1.0 / s.epsilon
            return 1.0 / wrap_distance

        return s.epsilon


LIKELIHOOD_MODELS = {
    BoundedLikelihood.name: BoundedLikelihood,
    UnboundedLikelihood.name: UnboundedLikelihood,
}


def build_likelihood(name, world, settings: SensorSettings) -> LikelihoodModel:
    """
    Create the likelihood strategy registered under `name`

    Raises:
        ValueError: If no strategy is registered under `name`
    """
    try:
        model_cls = LIKELIHOOD_MODELS[name]
    except KeyError:
        raise ValueError(
            f"Unknown likelihood model: {name!r} (expected one of {sorted(LIKELIHOOD_MODELS)})"
        ) from None
    return model_cls(world, settings)
