#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Configuration and Logging Utilities
================================================================================

Project:        Particle Life
Module:         utils.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

Helpers shared by the command line interface and the Streamlit app: loading
the JSON configuration file, turning its sections into simulation objects and
setting up logging.

Configuration file layout:

    {
        "simulation":     {SimulationConfig fields},
        "initialization": {"particle_n": int, "specie_n": int,
                           "seed": int or null, "attractions": [[...]]},
        "run_control":    {"frames": int, "frame_dt": float,
                           "log_throttle_steps": int},
        "logging":        {"level": str, "format": str, "log_file": str}
    }
"""

import json
import logging
import logging.handlers
import os
from dataclasses import fields
from typing import Any, Dict, List

from .simulation import ParticleLifeSimulation, SimulationConfig

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/particle_life.log'
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 5


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Route all log records to the console and, unless the "log_file" entry of
    the "logging" section is null, to a size-rotated log file.

    Replaces any handlers already attached to the root logger.
    """
    settings = config.get('logging', {})
    level = settings.get('level', 'INFO').upper()
    formatter = logging.Formatter(settings.get('format', DEFAULT_LOG_FORMAT))
    log_file = settings.get('log_file', DEFAULT_LOG_FILE)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        ))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logger.info(f"Logging at {level} to console"
                + (f" and {log_file}" if log_file else ""))


def load_config(path: str) -> Dict[str, Any]:
    """
    Read the JSON configuration at path.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logger.error(f"No configuration at {path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Malformed configuration {path}: {e}")
        raise

    logger.info(f"Configuration read from {path}")
    return config


def config_from_dict(section: Dict[str, Any]) -> SimulationConfig:
    """
    Build a SimulationConfig from the "simulation" section.

    Raises:
        ValueError: For unknown keys or invalid values
    """
    known = {f.name for f in fields(SimulationConfig)}
    unknown = set(section) - known
    if unknown:
        msg = f"Unknown simulation settings: {sorted(unknown)}"
        logger.critical(msg)
        raise ValueError(msg)
    return SimulationConfig(**section)


def build_simulation(config: Dict[str, Any]) -> ParticleLifeSimulation:
    """
    Create and initialize a simulation from a full configuration dictionary.

    Missing sections fall back to the application defaults:
    6 species and 5000 particles.
    """
    sim = ParticleLifeSimulation(config_from_dict(config.get('simulation', {})))

    init = config.get('initialization', {})
    sim.initialize_random(
        specie_n=init.get('specie_n', 6),
        particle_n=init.get('particle_n', 5000),
        seed=init.get('seed')
    )
    if init.get('attractions') is not None:
        sim.set_attractions(init['attractions'])

    return sim
