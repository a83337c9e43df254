"""
Core Monte Carlo localization components
"""

from .geometry import Arena, CircleObstacle, World, distance_to_segment, distance_to_circle, predict_distance
from .sensor import NoiseModel, SensorCalibration, SensorSettings, RangeSensor, prob_normal
from .robot import Pose, Robot
from .likelihood import LikelihoodModel, BoundedLikelihood, UnboundedLikelihood, build_likelihood
from .particle import Particle
from .particle_filter import (MonteCarloLocalizer, Estimate, weighted_estimate,
                              resampling_wheel, systematic_resample)

__all__ = [
    'Arena',
    'CircleObstacle',
    'World',
    'distance_to_segment',
    'distance_to_circle',
    'predict_distance',
    'NoiseModel',
    'SensorCalibration',
    'SensorSettings',
    'RangeSensor',
    'prob_normal',
    'Pose',
    'Robot',
    'LikelihoodModel',
    'BoundedLikelihood',
    'UnboundedLikelihood',
    'build_likelihood',
    'Particle',
    'MonteCarloLocalizer',
    'Estimate',
    'weighted_estimate',
    'resampling_wheel',
    'systematic_resample',
]
