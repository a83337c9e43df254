"""
Particle filter localization of a robot in a known rectangular arena
"""

__version__ = "0.1.0"
