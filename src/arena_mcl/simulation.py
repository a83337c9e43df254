# coding: utf-8

'''
Headless simulation context: owns the world, drives the real robot with
noisy odometry and feeds the commanded motion to the localizer.
'''

import logging
import math
from typing import List, NamedTuple, Optional

import numpy as np

from .core import Estimate

logger = logging.getLogger(__name__)


class SimulationStep(NamedTuple):
    tick: int
    true_x: float
    true_y: float
    true_theta: float
    estimate: Estimate
    error: Optional[float]


class LocalizationSimulation:
    '''
    Moves the robot by the commanded deltas plus Gaussian slip
    (sigma_forward, sigma_strafe, sigma_theta) and ticks the filter
    with the commanded, noise-free deltas.
    '''
    def __init__(self, world, robot, localizer, rng=None,
                 sigma_forward=0.0, sigma_strafe=0.0, sigma_theta=0.0):
        self.world = world
        self.robot = robot
        self.localizer = localizer
        self.rng = rng if rng is not None else np.random.default_rng()
        self.sigma_forward = sigma_forward
        self.sigma_strafe = sigma_strafe
        self.sigma_theta = sigma_theta
        self.history: List[SimulationStep] = []

    def _noisy(self, value, sigma):
        if sigma <= 0:
            return value
        return value + float(self.rng.normal(scale=sigma))

    def step(self, forward, strafe=0.0, turn=0.0):
        self.robot.move(self._noisy(forward, self.sigma_forward),
                        self._noisy(strafe, self.sigma_strafe),
                        self._noisy(turn, self.sigma_theta))

        if not self.world.arena.contains(self.robot.x, self.robot.y):
            logger.warning(f"Robot left the arena at ({self.robot.x:.2f}, {self.robot.y:.2f})")

        estimate = self.localizer.tick(strafe, forward, self.robot)

        error = None
        if estimate.valid:
            error = math.hypot(estimate.x - self.robot.x, estimate.y - self.robot.y)

        record = SimulationStep(len(self.history), self.robot.x, self.robot.y, self.robot.theta,
                                estimate, error)
        self.history.append(record)
        return record

    def run(self, ticks, forward=0.0, strafe=0.0, turn=0.0):
        for _ in range(ticks):
            record = self.step(forward, strafe, turn)
            if record.estimate.valid:
                logger.info(
                    f"tick {record.tick}: true=({record.true_x:.2f}, {record.true_y:.2f}) "
                    f"est=({record.estimate.x:.2f}, {record.estimate.y:.2f}) "
                    f"error={record.error:.2f} confidence={record.estimate.confidence:.4f}"
                )
            else:
                logger.info(f"tick {record.tick}: no estimate")
        return self.history
