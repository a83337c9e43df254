#! /usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sys
import yaml

# configuration
from arena_mcl.utils import (load_config, make_rng, get_world, get_robot, get_particle_filter_params,
                             build_localizer, print_config)
# headless driver
from arena_mcl.simulation import LocalizationSimulation

logger = logging.getLogger("arena_mcl")


def main(config_path="config.yaml"):
    # Load configuration
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}")
        return 1

    log_cfg = config.get('logging')
    level = log_cfg.get('level', 'INFO') if log_cfg is not None else 'INFO'
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("=== Configuration Loaded ===")
    print_config(config)
    print("=" * 30 + "\n")

    rng = make_rng(config)
    world = get_world(config)
    robot = get_robot(config)

    try:
        localizer = build_localizer(config, world=world, rng=rng)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    pf = get_particle_filter_params(config)
    localizer.initialize(pf['x_initial'], pf['y_initial'], pf['N'], robot,
                         initial_stdev=pf['initial_stdev'], spread=pf['spread'])

    sim_cfg = config.get('simulation')
    ticks = sim_cfg.get('ticks', 100) if sim_cfg is not None else 100
    control = sim_cfg.get('control') if sim_cfg is not None else None
    odom = sim_cfg.get('odometry_noise') if sim_cfg is not None else None

    sim = LocalizationSimulation(
        world, robot, localizer, rng=rng,
        sigma_forward=odom.get('forward', 0.0) if odom is not None else 0.0,
        sigma_strafe=odom.get('strafe', 0.0) if odom is not None else 0.0,
        sigma_theta=odom.get('theta', 0.0) if odom is not None else 0.0,
    )
    history = sim.run(
        ticks,
        forward=control.get('forward', 0.0) if control is not None else 0.0,
        strafe=control.get('strafe', 0.0) if control is not None else 0.0,
        turn=control.get('turn', 0.0) if control is not None else 0.0,
    )

    errors = [step.error for step in history if step.error is not None]
    if errors:
        print(f"\nTicks with estimate: {len(errors)}/{len(history)}")
        print(f"Mean position error: {sum(errors) / len(errors):.3f}")
        print(f"Final position error: {errors[-1]:.3f}")
    else:
        print("\nNo estimate produced")
    return 0


# = MAIN PROGRAM =

if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "config.yaml"))
