#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Diagnostics Module Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
License:        MIT License
================================================================================
"""

import numpy as np
import pytest
from particle_life.diagnostics import (
    SimulationStats,
    StatsTracker,
    calculate_clustering,
    calculate_density_field,
    calculate_kinetic_energy,
    calculate_mean_speed,
    calculate_neighbor_counts,
    collect_stats,
    species_counts
)
from particle_life.simulation import SimulationState


class TestKineticEnergy:
    """Tests for kinetic energy and speed."""

    def test_stationary_particles(self):
        velocities = np.zeros((10, 2))
        assert calculate_kinetic_energy(velocities) == 0.0
        assert calculate_mean_speed(velocities) == 0.0

    def test_kinetic_energy_formula(self):
        """KE = 0.5 * sum(v^2) for unit mass."""
        velocities = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        assert calculate_kinetic_energy(velocities) == pytest.approx(2.0)

    def test_mean_speed(self):
        velocities = np.array([[3.0, 4.0], [0.0, 1.0]])
        assert calculate_mean_speed(velocities) == pytest.approx(3.0)

    def test_empty_system(self):
        assert calculate_mean_speed(np.zeros((0, 2))) == 0.0


class TestSpeciesCounts:
    """Tests for species populations."""

    def test_counts(self):
        species = np.array([0, 2, 2, 1, 2])
        assert species_counts(species, 4).tolist() == [1, 1, 3, 0]

    def test_empty(self):
        assert species_counts(np.zeros(0, dtype=np.int64), 3).tolist() == [0, 0, 0]


class TestClustering:
    """Tests for neighbor counting."""

    def test_neighbors_across_boundary(self):
        """Particles on opposite edges are neighbors on the torus."""
        positions = np.array([[0.01, 0.5], [0.99, 0.5], [0.5, 0.5]])

        counts = calculate_neighbor_counts(positions, 0.05)

        assert counts.tolist() == [1, 1, 0]

    def test_clustered_beats_spread(self):
        rng = np.random.default_rng(0)
        spread = rng.uniform(0, 1, (200, 2))
        clustered = 0.5 + rng.normal(0, 0.02, (200, 2))

        assert calculate_clustering(clustered, 0.05) > calculate_clustering(spread, 0.05)

    def test_empty(self):
        assert calculate_clustering(np.zeros((0, 2)), 0.1) == 0.0


class TestDensityField:
    """Tests for the density grid."""

    def test_total_count(self):
        rng = np.random.default_rng(1)
        positions = rng.uniform(0, 1, (500, 2))

        density = calculate_density_field(positions, grid_size=(10, 5))

        assert density.shape == (10, 5)
        cell_area = 1.0 / 50
        assert np.sum(density) * cell_area == pytest.approx(500)

    def test_cell_assignment(self):
        positions = np.array([[0.05, 0.05], [0.95, 0.95], [0.96, 0.99]])

        density = calculate_density_field(positions, grid_size=(10, 10))

        assert density[0, 0] == pytest.approx(100.0)
        assert density[9, 9] == pytest.approx(200.0)

    def test_species_filter(self):
        positions = np.array([[0.05, 0.05], [0.95, 0.95]])
        species = np.array([0, 1])

        density = calculate_density_field(positions, (10, 10), species, specie=1)

        assert density[0, 0] == 0.0
        assert density[9, 9] == pytest.approx(100.0)


class TestStats:
    """Tests for collected statistics and the tracker."""

    def test_collect_stats(self):
        state = SimulationState.random(3, 120, np.random.default_rng(2))

        stats = collect_stats(state, radius=0.1)

        assert stats.frame_count == 0
        assert stats.kinetic_energy == pytest.approx(calculate_kinetic_energy(state.velocities))
        assert stats.species_counts.sum() == 120
        assert len(stats.species_counts) == 3

    def test_tracker_trims_history(self):
        tracker = StatsTracker(history_length=3)

        for i in range(5):
            tracker.update(SimulationStats(
                time=float(i), frame_count=i, kinetic_energy=i * 0.5,
                mean_speed=0.0, clustering=0.0
            ))

        assert len(tracker.history) == 3
        assert tracker.series('time').tolist() == [2.0, 3.0, 4.0]
        assert tracker.series('kinetic_energy').tolist() == [1.0, 1.5, 2.0]

        tracker.clear()
        assert tracker.history == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
