"""
Configuration file parser for localization parameters
"""

import yaml
import os
from dataclasses import asdict
from typing import Dict, Any, List, Optional

import numpy as np

from ..core import (Arena, CircleObstacle, World, NoiseModel, SensorCalibration, SensorSettings,
                    RangeSensor, Robot, MonteCarloLocalizer, build_likelihood)
from ..core.likelihood import LIKELIHOOD_MODELS
from ..core.particle_filter import RESAMPLERS

REQUIRED_SECTIONS = ['arena', 'robot', 'sensors', 'sensor_model', 'particle_filter']

REQUIRED_KEYS = {
    'arena': ['width', 'height'],
    'robot': ['width', 'length', 'initial_x', 'initial_y', 'initial_theta'],
    'sensor_model': ['likelihood'],
    'particle_filter': ['num_particles'],
}

NOISE_FIELDS = set(NoiseModel.__dataclass_fields__)


class Config:
    """Configuration container with dot notation access"""

    def __init__(self, config_dict: Dict[str, Any]):
        for key, value in config_dict.items():
            if isinstance(value, dict):
                setattr(self, key, Config(value))
            elif isinstance(value, list):
                setattr(self, key, [Config(v) if isinstance(v, dict) else v for v in value])
            else:
                setattr(self, key, value)

    def __repr__(self):
        return f"Config({self.__dict__})"

    def get(self, key: str, default: Any = None) -> Any:
        return self.__dict__.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config back to dictionary"""
        result = {}
        for key, value in self.__dict__.items():
            if isinstance(value, Config):
                result[key] = value.to_dict()
            elif isinstance(value, list):
                result[key] = [v.to_dict() if isinstance(v, Config) else v for v in value]
            else:
                result[key] = value
        return result


def load_config(config_path: str = "config.yaml") -> Config:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to configuration file

    Returns:
        Config object with dot notation access

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
        ValueError: If the configuration fails validation (see parse_config)
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return parse_config(config_dict)


def parse_config(config_dict: Dict[str, Any]) -> Config:
    """
    Validate a configuration mapping and wrap it in a Config

    Raises:
        ValueError: If a section or required key is missing, a section is not
            a mapping, or an enumerated value is unknown
    """
    if not isinstance(config_dict, dict):
        raise ValueError("Configuration must be a mapping")

    # Validate required sections
    for section in REQUIRED_SECTIONS:
        if section not in config_dict:
            raise ValueError(f"Missing required configuration section: {section}")
        if section == 'sensors':
            if not isinstance(config_dict[section], list) or not all(
                    isinstance(entry, dict) for entry in config_dict[section]):
                raise ValueError("Configuration section 'sensors' must be a list of mappings")
        elif not isinstance(config_dict[section], dict):
            raise ValueError(f"Configuration section '{section}' must be a mapping")

    # Validate required keys
    for section, keys in REQUIRED_KEYS.items():
        for key in keys:
            if config_dict[section].get(key) is None:
                raise ValueError(f"Missing required configuration key: {section}.{key}")

    num_particles = config_dict['particle_filter']['num_particles']
    if not isinstance(num_particles, int) or isinstance(num_particles, bool) or num_particles <= 0:
        raise ValueError(f"particle_filter.num_particles must be a positive integer, got {num_particles!r}")

    sm = config_dict['sensor_model']
    if sm['likelihood'] not in LIKELIHOOD_MODELS:
        raise ValueError(
            f"Unknown likelihood model in sensor_model.likelihood: {sm['likelihood']!r} "
            f"(expected one of {sorted(LIKELIHOOD_MODELS)})"
        )

    noise = sm.get('noise')
    if noise is not None:
        if not isinstance(noise, dict):
            raise ValueError("Configuration key 'sensor_model.noise' must be a mapping")
        unknown = sorted(set(noise) - NOISE_FIELDS)
        if unknown:
            raise ValueError(
                f"Unknown keys in sensor_model.noise: {unknown} (expected any of {sorted(NOISE_FIELDS)})"
            )

    method = config_dict['particle_filter'].get('resample_method', 'wheel')
    if method not in RESAMPLERS:
        raise ValueError(
            f"Unknown resample method in particle_filter.resample_method: {method!r} "
            f"(expected one of {sorted(RESAMPLERS)})"
        )

    return Config(config_dict)


def make_rng(config: Config) -> np.random.Generator:
    """Generator seeded from `random_seed`, or from OS entropy when unset"""
    return np.random.default_rng(config.get('random_seed'))


def get_world(config: Config) -> World:
    """
    Build the read-only world descriptor from the `arena` section

    Obstacles are listed as [x, y, r] triples.
    """
    arena = config.arena
    obstacles = tuple(CircleObstacle(float(x), float(y), float(r))
                      for x, y, r in (arena.get('obstacles') or []))
    return World(Arena(float(arena.width), float(arena.height)), obstacles)


def get_sensor_settings(config: Config) -> SensorSettings:
    """
    Extract sensor model settings from config

    Noise model constants default to the ones the selected likelihood
    model was tuned with; `sensor_model.noise` overrides them key by key.
    """
    sm = config.sensor_model
    noise_params = asdict(LIKELIHOOD_MODELS[sm.likelihood].default_noise)
    if sm.get('noise') is not None:
        noise_params.update(sm.noise.to_dict())

    return SensorSettings(
        distance_max=float(sm.get('distance_max', 200.0)),
        use_normal_dist=bool(sm.get('use_normal_dist', True)),
        noise=NoiseModel(**noise_params),
        epsilon=float(sm.get('epsilon', 0.001)),
        predict_obstacles=bool(sm.get('predict_obstacles', False)),
        redraw_noise=bool(sm.get('redraw_noise', False)),
    )


def get_robot(config: Config) -> Robot:
    """Robot placed at its configured start pose (theta in radians)"""
    r = config.robot
    return Robot(
        width=r.width,
        length=r.length,
        x=r.initial_x,
        y=r.initial_y,
        theta=r.initial_theta,
    )


def get_sensors(config: Config, world: World, settings: SensorSettings,
                rng: np.random.Generator) -> List[RangeSensor]:
    """
    Build one range sensor per entry of the `sensors` section

    An entry may pin its calibration with `rand_1`/`rand_2`; otherwise the
    calibration is drawn once from `rng`.
    """
    sensors = []
    for entry in config.sensors:
        calibration = None
        if entry.get('rand_1') is not None and entry.get('rand_2') is not None:
            calibration = SensorCalibration(float(entry.rand_1), float(entry.rand_2))
        sensors.append(RangeSensor(
            world, settings,
            x_offset=entry.get('x_offset', 0.0),
            y_offset=entry.get('y_offset', 0.0),
            theta_offset=entry.get('theta_offset', 0.0),
            calibration=calibration,
            rng=rng,
        ))
    return sensors


def get_particle_filter_params(config: Config) -> Dict[str, Any]:
    """
    Extract particle filter parameters from config

    Args:
        config: Configuration object

    Returns:
        Dictionary of particle filter parameters
    """
    pf = config.particle_filter

    return {
        'N': pf.num_particles,
        'x_initial': config.robot.initial_x,
        'y_initial': config.robot.initial_y,
        'initial_stdev': pf.get('initial_stdev', 0.5),
        'spread': pf.get('spread'),
        'odom_stdev': pf.get('odom_stdev', 0.1),
        'percent_random': pf.get('percent_random', 0.05),
        'resample_method': pf.get('resample_method', 'wheel'),
    }


def build_localizer(config: Config, world: Optional[World] = None,
                    rng: Optional[np.random.Generator] = None) -> MonteCarloLocalizer:
    """
    Wire world, sensors and likelihood into an (uninitialized) localizer

    Raises:
        ValueError: On an unknown likelihood model or resample method
    """
    world = world if world is not None else get_world(config)
    rng = rng if rng is not None else make_rng(config)
    settings = get_sensor_settings(config)
    sensors = get_sensors(config, world, settings, rng)
    likelihood = build_likelihood(config.sensor_model.likelihood, world, settings)
    params = get_particle_filter_params(config)

    return MonteCarloLocalizer(
        world, sensors, likelihood,
        odom_stdev=params['odom_stdev'],
        percent_random=params['percent_random'],
        resample_method=params['resample_method'],
        rng=rng,
    )


def print_config(config: Config, indent: int = 0):
    """
    Pretty print configuration

    Args:
        config: Configuration object
        indent: Indentation level
    """
    for key, value in config.__dict__.items():
        if isinstance(value, Config):
            print("  " * indent + f"{key}:")
            print_config(value, indent + 1)
        elif isinstance(value, list) and any(isinstance(v, Config) for v in value):
            print("  " * indent + f"{key}:")
            for item in value:
                if isinstance(item, Config):
                    print("  " * (indent + 1) + "-")
                    print_config(item, indent + 2)
                else:
                    print("  " * (indent + 1) + f"- {item}")
        else:
            print("  " * indent + f"{key}: {value}")
