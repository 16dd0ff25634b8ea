#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life Force Kernel
================================================================================

Project:        Particle Life
Module:         physics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

This module implements the interaction kernel of the particle life model.
Every particle feels a force from every other particle closer than the
interaction radius. The signed magnitude of that force follows a piecewise
linear response curve of the normalized distance r = d / R:

    F(r) = r / β - 1                              for r < β
    F(r) = a · (1 - |2r - 1 - β| / (1 - β))       for β <= r <= 1

Where:
    - β (BETA): Normalized distance below which every pair repels
    - a: Attraction coefficient for (own species, other species)
    - R: Interaction radius (local_radius)

The domain is the unit torus [0, 1) x [0, 1), so every displacement is taken
along the shortest wrap-around path.
"""

import numpy as np
from numba import jit, prange
from typing import Tuple

BETA = 0.3

# Largest float below 1.0, where the low-edge hard reset lands
UPPER_EDGE = float(np.nextafter(1.0, 0.0))

WRAP_MODES = ("reset", "modulo")


@jit(nopython=True, cache=True)
def attraction_force(normalized_distance: float, attraction: float) -> float:
    """
    Evaluate the attraction response curve.

    Below BETA the result is negative whatever the attraction coefficient,
    which keeps particles from collapsing onto each other. Above BETA it is
    a tent function that is zero at BETA and at the cutoff and reaches the
    attraction coefficient half way between them.

    Args:
        normalized_distance: Distance divided by the interaction radius
        attraction: Attraction coefficient of the species pair

    Returns:
        Signed force magnitude (negative = repulsive, positive = attractive)
    """
    if normalized_distance < BETA:
        return normalized_distance / BETA - 1.0
    return attraction * (
        1.0 - abs(2.0 * normalized_distance - 1.0 - BETA) / (1.0 - BETA)
    )


@jit(nopython=True, cache=True)
def minimum_image(delta: float) -> float:
    """Fold a single-axis displacement onto the shortest path of the unit torus."""
    if delta > 0.5:
        return delta - 1.0
    elif delta < -0.5:
        return delta + 1.0
    return delta


@jit(nopython=True, cache=True)
def compute_force(
    i: int,
    positions: np.ndarray,
    species: np.ndarray,
    attractions: np.ndarray,
    local_radius: float
) -> Tuple[float, float]:
    """
    Compute the net force on particle i from every other particle.

    Coincident particles and particles beyond the interaction radius
    contribute nothing, so there is never a division by zero.

    Args:
        i: Index of the particle
        positions: Nx2 array of positions in the unit torus
        species: N array of species indices
        attractions: SxS attraction matrix (row = own species)
        local_radius: Interaction cutoff distance

    Returns:
        (fx, fy): Components of the net force
    """
    n_particles = positions.shape[0]
    radius_sq = local_radius * local_radius

    px = positions[i, 0]
    py = positions[i, 1]
    own_species = species[i]

    fx = 0.0
    fy = 0.0

    for j in range(n_particles):
        if j == i:
            continue

        dx = minimum_image(positions[j, 0] - px)
        dy = minimum_image(positions[j, 1] - py)

        distance_sq = dx * dx + dy * dy
        if distance_sq > radius_sq or distance_sq == 0.0:
            continue

        distance = np.sqrt(distance_sq)
        magnitude = attraction_force(
            distance / local_radius,
            attractions[own_species, species[j]]
        )

        fx += dx / distance * magnitude
        fy += dy / distance * magnitude

    return fx, fy


@jit(nopython=True, parallel=True, cache=True)
def compute_forces(
    positions: np.ndarray,
    species: np.ndarray,
    attractions: np.ndarray,
    local_radius: float
) -> np.ndarray:
    """
    Compute the net force on every particle.

    Each particle is independent of the others within one evaluation, so the
    outer loop runs in parallel with Numba. Every iteration only writes its
    own row of the output, and contributions are summed in the same order as
    the serial kernel, so both produce identical results.

    Args:
        positions: Nx2 array of positions
        species: N array of species indices
        attractions: SxS attraction matrix
        local_radius: Interaction cutoff distance

    Returns:
        Nx2 array of forces
    """
    n_particles = positions.shape[0]
    forces = np.zeros((n_particles, 2))

    for i in prange(n_particles):
        fx, fy = compute_force(i, positions, species, attractions, local_radius)
        forces[i, 0] = fx
        forces[i, 1] = fy

    return forces


@jit(nopython=True, cache=True)
def compute_forces_serial(
    positions: np.ndarray,
    species: np.ndarray,
    attractions: np.ndarray,
    local_radius: float
) -> np.ndarray:
    """Single-threaded version of compute_forces."""
    n_particles = positions.shape[0]
    forces = np.zeros((n_particles, 2))

    for i in range(n_particles):
        fx, fy = compute_force(i, positions, species, attractions, local_radius)
        forces[i, 0] = fx
        forces[i, 1] = fy

    return forces


def friction_factor(dt: float, friction_half_life: float) -> float:
    """
    Velocity scale factor for one time step of length dt.

    Applying it repeatedly halves the speed every friction_half_life,
    independent of how the elapsed time is divided into steps.
    """
    return 0.5 ** (dt / friction_half_life)


def wrap_positions_reset(positions: np.ndarray) -> np.ndarray:
    """
    Hard-reset particles that left the unit square to the opposite edge.

    A coordinate past the high edge becomes 0.0 and one below 0.0 becomes
    the largest float below 1.0, regardless of the overshoot.

    Args:
        positions: Nx2 array of positions (modified in place)

    Returns:
        Wrapped positions
    """
    positions[positions >= 1.0] = 0.0
    positions[positions < 0.0] = UPPER_EDGE
    return positions


def wrap_positions_modulo(positions: np.ndarray) -> np.ndarray:
    """
    Wrap positions into the unit square keeping the overshoot.

    Args:
        positions: Nx2 array of positions (modified in place)

    Returns:
        Wrapped positions
    """
    np.mod(positions, 1.0, out=positions)
    # -1e-17 % 1.0 rounds to exactly 1.0
    positions[positions >= 1.0] = 0.0
    return positions


def apply_periodic_boundaries(positions: np.ndarray, mode: str = "reset") -> np.ndarray:
    """
    Apply the toroidal boundary to positions.

    Args:
        positions: Nx2 array of positions (modified in place)
        mode: "reset" (hard reset to the opposite edge) or "modulo"

    Returns:
        Wrapped positions
    """
    if mode == "reset":
        return wrap_positions_reset(positions)
    elif mode == "modulo":
        return wrap_positions_modulo(positions)
    raise ValueError(f"Unknown wrap mode {mode!r}, expected one of {WRAP_MODES}")


def default_force_multiplier(particle_n: int) -> float:
    """
    Force scale that keeps the look of the system stable as particle_n changes.

    Equal to 1.0 for 1024 particles.
    """
    if particle_n <= 0:
        return 1.0
    return 32.0 / np.sqrt(particle_n)
