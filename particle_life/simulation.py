#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life Simulation Engine
================================================================================

Project:        Particle Life
Module:         simulation.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

Core particle life engine. Each frame the elapsed wall-clock time is clamped
and split into fixed substeps; every substep computes all forces from one
snapshot, applies half-life friction, integrates with semi-implicit Euler and
wraps positions around the unit torus.
"""

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import numpy as np

from .physics import (
    WRAP_MODES,
    apply_periodic_boundaries,
    compute_forces,
    compute_forces_serial,
    friction_factor,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for the particle life simulation."""
    # Time integration
    substep_n: int = 8
    max_frame_dt: float = 0.1     # Longer frames are clamped to this
    time_scale: float = 1.0

    # Interaction
    local_radius: float = 0.1
    force_multiplier: float = 1.0

    # Friction
    friction_half_life: float = 0.04

    # Boundaries and performance
    wrap_mode: str = "reset"
    use_parallel: bool = True

    def __post_init__(self):
        if int(self.substep_n) != self.substep_n or self.substep_n < 1:
            raise ValueError(f"substep_n must be an integer >= 1, got {self.substep_n}")
        self.substep_n = int(self.substep_n)
        if self.local_radius < 0:
            raise ValueError(f"local_radius must be >= 0, got {self.local_radius}")
        if self.friction_half_life <= 0:
            raise ValueError(
                f"friction_half_life must be > 0, got {self.friction_half_life}"
            )
        if self.max_frame_dt < 0:
            raise ValueError(f"max_frame_dt must be >= 0, got {self.max_frame_dt}")
        if self.time_scale < 0:
            raise ValueError(f"time_scale must be >= 0, got {self.time_scale}")
        if self.wrap_mode not in WRAP_MODES:
            raise ValueError(
                f"wrap_mode must be one of {WRAP_MODES}, got {self.wrap_mode!r}"
            )


@dataclass
class SimulationState:
    """
    Authoritative particle arrays and the attraction matrix.

    Particle count and species assignment are fixed for the lifetime of the
    state; only positions, velocities and the attraction matrix change.
    """
    positions: np.ndarray
    velocities: np.ndarray
    species: np.ndarray
    attractions: np.ndarray
    time: float = 0.0
    frame_count: int = 0

    def __post_init__(self):
        self.positions = np.array(self.positions, dtype=np.float64)
        self.velocities = np.array(self.velocities, dtype=np.float64)
        self.species = np.array(self.species, dtype=np.int64)
        self.attractions = np.array(self.attractions, dtype=np.float64)
        self.validate()

    @property
    def n_particles(self) -> int:
        return self.positions.shape[0]

    @property
    def n_species(self) -> int:
        return self.attractions.shape[0]

    @classmethod
    def random(
        cls,
        specie_n: int,
        particle_n: int,
        rng: Optional[np.random.Generator] = None
    ) -> "SimulationState":
        """
        Create a state with uniformly random particles and attractions.

        Args:
            specie_n: Number of species (>= 1)
            particle_n: Number of particles (>= 0)
            rng: Random generator (a fresh unseeded one if omitted)

        Returns:
            New simulation state
        """
        if specie_n < 1:
            raise ValueError(f"specie_n must be >= 1, got {specie_n}")
        if particle_n < 0:
            raise ValueError(f"particle_n must be >= 0, got {particle_n}")
        if rng is None:
            rng = np.random.default_rng()

        positions = rng.uniform(0.0, 1.0, size=(particle_n, 2))
        velocities = rng.uniform(-0.1, 0.1, size=(particle_n, 2))
        species = rng.integers(0, specie_n, size=particle_n, dtype=np.int64)
        attractions = random_attractions(specie_n, rng)

        return cls(
            positions=positions,
            velocities=velocities,
            species=species,
            attractions=attractions
        )

    def validate(self) -> None:
        """
        Check that the arrays describe one consistent particle set.

        Raises:
            ValueError: If array lengths differ, the attraction matrix is not
                square, or a species index has no row in the matrix
        """
        n = self.positions.shape[0]
        problems = []
        if self.positions.ndim != 2 or self.positions.shape[1] != 2:
            problems.append(f"positions shape {self.positions.shape} is not (N, 2)")
        if self.velocities.shape != (n, 2):
            problems.append(
                f"velocities shape {self.velocities.shape} does not match positions ({n}, 2)"
            )
        if self.species.shape != (n,):
            problems.append(
                f"species shape {self.species.shape} does not match particle count {n}"
            )
        if self.attractions.ndim != 2 or self.attractions.shape[0] != self.attractions.shape[1]:
            problems.append(f"attraction matrix shape {self.attractions.shape} is not square")
        elif self.attractions.shape[0] < 1:
            problems.append("attraction matrix must cover at least one species")
        elif n > 0 and (self.species.min() < 0 or self.species.max() >= self.attractions.shape[0]):
            problems.append(
                f"species indices must be in [0, {self.attractions.shape[0]}), "
                f"got range [{self.species.min()}, {self.species.max()}]"
            )

        if problems:
            msg = "Configuration error: " + "; ".join(problems)
            logger.critical(msg)
            raise ValueError(msg)

    def copy(self) -> "SimulationState":
        """Deep copy of the state."""
        return SimulationState(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            species=self.species.copy(),
            attractions=self.attractions.copy(),
            time=self.time,
            frame_count=self.frame_count
        )

    def step(self, frame_dt: float, config: SimulationConfig) -> "SimulationState":
        """
        Advance the simulation by one frame.

        The frame time is clamped to [0, max_frame_dt] (NaN counts as 0) and
        divided into config.substep_n equal substeps. Each substep:
        1. Computes all forces from the current positions
        2. Applies friction: v *= 0.5^(dt / friction_half_life)
        3. v += F * dt, then x += v * dt
        4. Wraps positions back into the unit square

        The configuration and attraction matrix are read once on entry, so
        edits made while the frame runs only affect the next call.

        Args:
            frame_dt: Elapsed wall-clock seconds since the previous frame
            config: Simulation parameters

        Returns:
            This state, advanced in place
        """
        self.validate()

        attractions = self.attractions.copy()
        local_radius = float(config.local_radius)
        force_multiplier = float(config.force_multiplier)
        wrap_mode = config.wrap_mode
        substep_n = config.substep_n
        kernel = compute_forces if config.use_parallel else compute_forces_serial

        frame_dt = float(frame_dt)
        if np.isnan(frame_dt):
            frame_dt = 0.0
        frame_time = min(max(frame_dt, 0.0), config.max_frame_dt) * config.time_scale
        dt = frame_time / substep_n
        friction = friction_factor(dt, config.friction_half_life)

        for _ in range(substep_n):
            # Every force of this substep sees the same positions
            forces = kernel(self.positions, self.species, attractions, local_radius)
            if force_multiplier != 1.0:
                forces *= force_multiplier

            self.velocities *= friction
            self.velocities += forces * dt
            self.positions += self.velocities * dt

            apply_periodic_boundaries(self.positions, wrap_mode)

        self.time += frame_time
        self.frame_count += 1
        return self


def random_attractions(
    specie_n: int,
    rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """Attraction matrix with entries uniform in [-1, 1]."""
    if rng is None:
        rng = np.random.default_rng()
    return rng.uniform(-1.0, 1.0, size=(specie_n, specie_n))


class ParticleLifeSimulation:
    """
    Particle life simulation engine.

    Owns the configuration and the simulation state. Stepping and every
    configuration edit share one lock, so an edit coming from a UI thread is
    applied either before a frame starts or after it finishes, never during.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.state: Optional[SimulationState] = None
        self._lock = threading.Lock()

        # Performance tracking
        self.steps_per_second = 0.0
        self._last_time = time.time()
        self._step_count = 0

    def initialize_random(
        self,
        specie_n: int = 6,
        particle_n: int = 5000,
        seed: Optional[int] = None
    ) -> SimulationState:
        """
        Initialize particles, species and attractions at random.

        Args:
            specie_n: Number of species
            particle_n: Number of particles
            seed: Seed for reproducible initial conditions

        Returns:
            Initial simulation state
        """
        rng = np.random.default_rng(seed)
        with self._lock:
            self.state = SimulationState.random(specie_n, particle_n, rng)

        logger.info(
            f"Simulation initialized with {particle_n} particles "
            f"of {specie_n} species (seed={seed})."
        )
        logger.debug(
            f"Positions shape: {self.state.positions.shape}, "
            f"Velocities shape: {self.state.velocities.shape}, "
            f"Species shape: {self.state.species.shape}"
        )
        return self.state

    def initialize_from_arrays(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        species: np.ndarray,
        attractions: np.ndarray
    ) -> SimulationState:
        """
        Initialize from explicit arrays.

        Raises:
            ValueError: If the arrays are inconsistent
        """
        state = SimulationState(
            positions=positions,
            velocities=velocities,
            species=species,
            attractions=attractions
        )
        with self._lock:
            self.state = state

        logger.info(
            f"Simulation initialized from arrays: {state.n_particles} particles "
            f"of {state.n_species} species."
        )
        return self.state

    def _require_state(self) -> SimulationState:
        if self.state is None:
            raise RuntimeError("Simulation not initialized")
        return self.state

    def step(self, frame_dt: float) -> SimulationState:
        """
        Advance the simulation by one frame of frame_dt seconds.

        Returns:
            Updated simulation state
        """
        with self._lock:
            state = self._require_state()
            state.step(frame_dt, self.config)

            # Track performance
            self._step_count += 1
            if self._step_count % 100 == 0:
                current_time = time.time()
                elapsed = current_time - self._last_time
                if elapsed > 0:
                    self.steps_per_second = 100.0 / elapsed
                self._last_time = current_time
                logger.debug(
                    f"Frame {state.frame_count}: {self.steps_per_second:.1f} frames/s"
                )

        return state

    def run(self, n_frames: int, frame_dt: float) -> SimulationState:
        """Run simulation for n_frames frames of frame_dt seconds each."""
        for _ in range(n_frames):
            self.step(frame_dt)
        return self._require_state()

    def set_attraction(self, row: int, col: int, value: float) -> None:
        """
        Set how species `row` responds to species `col`.

        Values outside [-1, 1] are accepted.
        """
        with self._lock:
            state = self._require_state()
            n = state.n_species
            if not (0 <= row < n and 0 <= col < n):
                raise IndexError(f"Species pair ({row}, {col}) out of range for {n} species")
            state.attractions[row, col] = float(value)

    def set_attractions(self, matrix: Sequence[Sequence[float]]) -> None:
        """Replace the whole attraction matrix."""
        matrix = np.array(matrix, dtype=np.float64)
        with self._lock:
            state = self._require_state()
            expected = (state.n_species, state.n_species)
            if matrix.shape != expected:
                msg = (
                    f"Configuration error: attraction matrix shape {matrix.shape} "
                    f"does not match {state.n_species} species {expected}."
                )
                logger.critical(msg)
                raise ValueError(msg)
            state.attractions = matrix

    def randomize_attractions(self, seed: Optional[int] = None) -> np.ndarray:
        """Replace the attraction matrix with values uniform in [-1, 1]."""
        rng = np.random.default_rng(seed)
        with self._lock:
            state = self._require_state()
            state.attractions = random_attractions(state.n_species, rng)
            matrix = state.attractions.copy()
        logger.info("Attraction matrix randomized.")
        return matrix

    def update_config(self, **changes) -> SimulationConfig:
        """
        Replace configuration values, validated as a whole.

        Raises:
            TypeError: If a key is not a configuration field
            ValueError: If a value is invalid
        """
        with self._lock:
            self.config = replace(self.config, **changes)
        logger.info(f"Configuration updated: {changes}")
        return self.config


def create_random_simulation(
    particle_n: int = 5000,
    specie_n: int = 6,
    seed: Optional[int] = None,
    **config_overrides
) -> ParticleLifeSimulation:
    """
    Create a simulation with random particles and attractions.

    Args:
        particle_n: Number of particles
        specie_n: Number of species
        seed: Seed for reproducible initial conditions
        **config_overrides: SimulationConfig fields to override

    Returns:
        Initialized ParticleLifeSimulation
    """
    config = SimulationConfig(**config_overrides)
    sim = ParticleLifeSimulation(config)
    sim.initialize_random(specie_n=specie_n, particle_n=particle_n, seed=seed)
    return sim
