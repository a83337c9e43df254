
import math

import numpy as np

# ---------- helper functions ----------

def clean_weights(particles):
    """Weights as an array with NaN read as 0; the particles are left untouched."""
    weights = np.array([p.weight for p in particles], dtype=float)
    return np.where(np.isnan(weights), 0.0, weights)


def max_weight(particles):
    best = 0.0
    for p in particles:
        if not math.isnan(p.weight) and p.weight > best:
            best = p.weight
    return best


# ---------- Particle class ----------
class Particle:
    """Position hypothesis; heading is taken from the robot, not filtered."""

    def __init__(self, x, y, weight=1.0):
        self.x = x
        self.y = y
        self.weight = weight

    def __repr__(self):
        return f"Particle(x={self.x:.3f}, y={self.y:.3f}, weight={self.weight:.4g})"

    def copy(self, weight=None):
        return Particle(self.x, self.y, self.weight if weight is None else weight)

    def move(self, delta_x, delta_y, odom_stdev, rng):
        # noise floor keeps a zero command from collapsing the cloud
        self.x += float(rng.normal(delta_x, max(0.1, abs(delta_x) * odom_stdev)))
        self.y += float(rng.normal(delta_y, max(0.1, abs(delta_y) * odom_stdev)))

    def inside(self, arena, margin):
        if margin >= self.x or arena.width - margin <= self.x:
            return False
        if margin >= self.y or arena.height - margin <= self.y:
            return False
        return True

    @classmethod
    def uniform(cls, arena, margin, rng, weight=1.0):
        """Particle drawn uniformly over the arena inset by `margin`."""
        x = margin + rng.random() * (arena.width - 2 * margin)
        y = margin + rng.random() * (arena.height - 2 * margin)
        return cls(float(x), float(y), weight)
