#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life Diagnostics
================================================================================

Project:        Particle Life
Module:         diagnostics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

This module measures what the particle system is doing, including:
- Kinetic energy and mean speed
- Species population counts
- Neighbor counts as a clustering indicator
- Density on a grid over the unit torus
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from numba import jit, prange

from .physics import minimum_image


@dataclass
class SimulationStats:
    """Snapshot of aggregate measurements."""
    time: float
    frame_count: int
    kinetic_energy: float
    mean_speed: float
    clustering: float
    species_counts: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))


def calculate_kinetic_energy(velocities: np.ndarray) -> float:
    """
    Calculate total kinetic energy.

    KE = Σ (1/2) |v|², with unit mass for every particle.
    """
    return 0.5 * float(np.sum(velocities ** 2))


def calculate_mean_speed(velocities: np.ndarray) -> float:
    """Mean particle speed, 0.0 for an empty system."""
    if velocities.shape[0] == 0:
        return 0.0
    return float(np.mean(np.linalg.norm(velocities, axis=1)))


def species_counts(species: np.ndarray, specie_n: int) -> np.ndarray:
    """Number of particles of each species."""
    return np.bincount(species, minlength=specie_n)[:specie_n]


@jit(nopython=True, parallel=True, cache=True)
def calculate_neighbor_counts(positions: np.ndarray, radius: float) -> np.ndarray:
    """
    Count the neighbors of each particle on the unit torus.

    Args:
        positions: Nx2 array of positions
        radius: Neighbor cutoff distance

    Returns:
        Array of neighbor counts for each particle
    """
    n_particles = positions.shape[0]
    counts = np.zeros(n_particles, dtype=np.int64)
    radius_sq = radius * radius

    for i in prange(n_particles):
        n_neighbors = 0
        for j in range(n_particles):
            if i == j:
                continue
            dx = minimum_image(positions[j, 0] - positions[i, 0])
            dy = minimum_image(positions[j, 1] - positions[i, 1])
            if dx * dx + dy * dy <= radius_sq:
                n_neighbors += 1
        counts[i] = n_neighbors

    return counts


def calculate_clustering(positions: np.ndarray, radius: float) -> float:
    """
    Mean neighbor count within radius.

    A uniform random layout gives about (N - 1)·π·radius²; clustered
    layouts give more.
    """
    if positions.shape[0] == 0:
        return 0.0
    return float(np.mean(calculate_neighbor_counts(positions, radius)))


def calculate_density_field(
    positions: np.ndarray,
    grid_size: Tuple[int, int] = (20, 20),
    species: Optional[np.ndarray] = None,
    specie: Optional[int] = None
) -> np.ndarray:
    """
    Calculate local density on a grid over the unit square.

    Args:
        positions: Nx2 array of positions
        grid_size: (nx, ny) grid dimensions
        species: Optional species of each particle
        specie: If given together with species, only count that species

    Returns:
        2D array of local densities (particles per unit area)
    """
    nx, ny = grid_size

    if species is not None and specie is not None:
        positions = positions[species == specie]

    ix = np.floor(positions[:, 0] * nx).astype(np.int64) % nx
    iy = np.floor(positions[:, 1] * ny).astype(np.int64) % ny

    counts = np.zeros((nx, ny))
    np.add.at(counts, (ix, iy), 1)

    cell_area = 1.0 / (nx * ny)
    return counts / cell_area


def collect_stats(state, radius: float = 0.1) -> SimulationStats:
    """
    Gather aggregate measurements from a simulation state.

    Args:
        state: SimulationState to measure
        radius: Neighbor radius for the clustering indicator

    Returns:
        SimulationStats snapshot
    """
    return SimulationStats(
        time=state.time,
        frame_count=state.frame_count,
        kinetic_energy=calculate_kinetic_energy(state.velocities),
        mean_speed=calculate_mean_speed(state.velocities),
        clustering=calculate_clustering(state.positions, radius),
        species_counts=species_counts(state.species, state.n_species)
    )


class StatsTracker:
    """Bounded history of SimulationStats samples."""

    def __init__(self, history_length: int = 500):
        self.history_length = history_length
        self.history: List[SimulationStats] = []

    def update(self, stats: SimulationStats) -> SimulationStats:
        """Record a new sample, dropping the oldest past history_length."""
        self.history.append(stats)
        if len(self.history) > self.history_length:
            self.history.pop(0)
        return stats

    def series(self, name: str) -> np.ndarray:
        """Values of one scalar field across the history."""
        return np.array([getattr(sample, name) for sample in self.history])

    def clear(self):
        """Clear history."""
        self.history = []
