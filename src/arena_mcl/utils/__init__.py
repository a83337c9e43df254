"""
Utility functions for configuration parsing and wiring
"""

from .config_parser import (load_config, parse_config, make_rng, get_world, get_sensor_settings,
                            get_robot, get_sensors, get_particle_filter_params, build_localizer,
                            print_config, Config)

__all__ = [
    'load_config',
    'parse_config',
    'make_rng',
    'get_world',
    'get_sensor_settings',
    'get_robot',
    'get_sensors',
    'get_particle_filter_params',
    'build_localizer',
    'print_config',
    'Config'
]
