import math
from typing import NamedTuple


class Pose(NamedTuple):
    x: float
    y: float
    theta: float


class Robot:
    '''
    Pose integrator for a rectangular robot.
    theta is in radians and is never wrapped.
    '''
    def __init__(self, width, length, x=50.0, y=50.0, theta=-math.pi / 2 + 1e-9):
        self.width = width
        self.length = length
        self.x = x
        self.y = y
        self.theta = theta

    def __repr__(self):
        return f"Robot(x={self.x:.3f}, y={self.y:.3f}, theta={self.theta:.3f})"

    @property
    def pose(self):
        return Pose(self.x, self.y, self.theta)

    def to_global(self, delta_forward, delta_strafe):
        # forward runs along theta, strafe along theta + 90 degrees
        dx = (delta_forward * math.cos(self.theta)
              + delta_strafe * math.cos(self.theta + math.pi / 2))
        dy = (delta_forward * math.sin(self.theta)
              + delta_strafe * math.sin(self.theta + math.pi / 2))
        return dx, dy

    def move(self, delta_forward, delta_strafe, delta_theta):
        self.theta += delta_theta
        dx, dy = self.to_global(delta_forward, delta_strafe)
        self.x += dx
        self.y += dy
        return self.pose
