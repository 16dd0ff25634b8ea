#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Simulation Module Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
License:        MIT License
================================================================================
"""

import math
import threading

import numpy as np
import pytest
from particle_life.physics import BETA
import particle_life.simulation as simulation_module
from particle_life.simulation import (
    ParticleLifeSimulation, SimulationConfig, SimulationState,
    create_random_simulation
)


def two_particle_state():
    """Two particles of different species, mutually attracting at 0.4 radii."""
    return SimulationState(
        positions=np.array([[0.4, 0.5], [0.6, 0.5]]),
        velocities=np.zeros((2, 2)),
        species=np.array([0, 1]),
        attractions=np.array([[0.0, 1.0], [1.0, 0.0]])
    )


class TestSimulationConfig:
    """Tests for simulation configuration."""

    def test_default_config(self):
        """Defaults match the interactive application settings."""
        config = SimulationConfig()
        assert config.substep_n == 8
        assert config.local_radius == 0.1
        assert config.friction_half_life == 0.04
        assert config.max_frame_dt == 0.1
        assert config.time_scale == 1.0
        assert config.wrap_mode == "reset"

    def test_custom_config(self):
        config = SimulationConfig(substep_n=4, local_radius=0.05, wrap_mode="modulo")
        assert config.substep_n == 4
        assert config.local_radius == 0.05
        assert config.wrap_mode == "modulo"

    @pytest.mark.parametrize("changes", [
        {"substep_n": 0},
        {"substep_n": 2.5},
        {"friction_half_life": 0.0},
        {"local_radius": -0.1},
        {"max_frame_dt": -1.0},
        {"time_scale": -1.0},
        {"wrap_mode": "clamp"},
    ])
    def test_invalid_config(self, changes):
        with pytest.raises(ValueError):
            SimulationConfig(**changes)

    def test_zero_radius_is_valid(self):
        assert SimulationConfig(local_radius=0.0).local_radius == 0.0


class TestSimulationState:
    """Tests for state creation and validation."""

    def test_random_initialization(self):
        state = SimulationState.random(specie_n=5, particle_n=400,
                                       rng=np.random.default_rng(0))

        assert state.n_particles == 400
        assert state.n_species == 5
        assert state.positions.shape == (400, 2)
        assert state.velocities.shape == (400, 2)
        assert state.species.shape == (400,)
        assert state.attractions.shape == (5, 5)

        assert np.all(state.positions >= 0.0)
        assert np.all(state.positions < 1.0)
        assert np.all(np.abs(state.velocities) <= 0.1)
        assert np.all((state.species >= 0) & (state.species < 5))
        assert np.all(np.abs(state.attractions) <= 1.0)

    def test_empty_system(self):
        state = SimulationState.random(specie_n=1, particle_n=0)
        state.step(0.05, SimulationConfig())
        assert state.n_particles == 0

    def test_invalid_counts(self):
        with pytest.raises(ValueError):
            SimulationState.random(specie_n=0, particle_n=10)
        with pytest.raises(ValueError):
            SimulationState.random(specie_n=2, particle_n=-1)

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            SimulationState(
                positions=np.zeros((3, 2)),
                velocities=np.zeros((2, 2)),
                species=np.zeros(3, dtype=np.int64),
                attractions=np.zeros((1, 1))
            )
        with pytest.raises(ValueError):
            SimulationState(
                positions=np.zeros((3, 2)),
                velocities=np.zeros((3, 2)),
                species=np.zeros(4, dtype=np.int64),
                attractions=np.zeros((1, 1))
            )

    def test_non_square_attractions(self):
        with pytest.raises(ValueError):
            SimulationState(
                positions=np.zeros((2, 2)),
                velocities=np.zeros((2, 2)),
                species=np.array([0, 1]),
                attractions=np.zeros((2, 3))
            )

    def test_species_out_of_range(self):
        with pytest.raises(ValueError):
            SimulationState(
                positions=np.zeros((2, 2)),
                velocities=np.zeros((2, 2)),
                species=np.array([0, 2]),
                attractions=np.zeros((2, 2))
            )

    def test_step_rejects_corrupted_arrays(self):
        """Arrays replaced after construction are checked at step entry."""
        state = two_particle_state()
        state.velocities = np.zeros((3, 2))

        with pytest.raises(ValueError):
            state.step(0.01, SimulationConfig())

    def test_copy_is_independent(self):
        state = two_particle_state()
        clone = state.copy()
        clone.positions[0, 0] = 0.9
        assert state.positions[0, 0] == 0.4


class TestStep:
    """Tests for the substep integrator."""

    def test_conservation_of_count(self):
        state = SimulationState.random(3, 200, np.random.default_rng(1))
        species_before = state.species.copy()
        config = SimulationConfig(substep_n=2)

        for _ in range(10):
            state.step(1 / 60, config)

        assert len(state.positions) == len(state.velocities) == len(state.species) == 200
        assert np.array_equal(state.species, species_before)

    @pytest.mark.parametrize("wrap_mode", ["reset", "modulo"])
    def test_boundary_invariant(self, wrap_mode):
        """Fast particles crossing edges stay inside [0, 1)."""
        rng = np.random.default_rng(2)
        state = SimulationState.random(4, 300, rng)
        state.velocities = rng.uniform(-5.0, 5.0, (300, 2))
        config = SimulationConfig(substep_n=3, friction_half_life=10.0,
                                  wrap_mode=wrap_mode)

        for _ in range(20):
            state.step(0.1, config)
            assert np.all(state.positions >= 0.0)
            assert np.all(state.positions < 1.0)

    def test_reset_wrap_discards_overshoot(self):
        state = SimulationState(
            positions=np.array([[0.95, 0.5]]),
            velocities=np.array([[3.0, 0.0]]),
            species=np.array([0]),
            attractions=np.array([[0.0]])
        )
        state.step(0.1, SimulationConfig(substep_n=1, friction_half_life=1e9))
        assert state.positions[0, 0] == 0.0

    def test_modulo_wrap_keeps_overshoot(self):
        state = SimulationState(
            positions=np.array([[0.95, 0.5]]),
            velocities=np.array([[3.0, 0.0]]),
            species=np.array([0]),
            attractions=np.array([[0.0]])
        )
        state.step(0.1, SimulationConfig(substep_n=1, friction_half_life=1e9,
                                         wrap_mode="modulo"))
        assert state.positions[0, 0] == pytest.approx(0.25)

    @pytest.mark.parametrize("substep_n", [1, 4, 16])
    def test_friction_half_life(self, substep_n):
        """Speed halves after one half-life regardless of substep count."""
        state = SimulationState(
            positions=np.array([[0.5, 0.5]]),
            velocities=np.array([[0.3, -0.4]]),
            species=np.array([0]),
            attractions=np.array([[1.0]])
        )
        config = SimulationConfig(substep_n=substep_n, local_radius=0.0,
                                  friction_half_life=0.05)

        state.step(0.05, config)

        speed = np.linalg.norm(state.velocities[0])
        assert speed == pytest.approx(0.25, rel=1e-12)

    def test_long_frames_are_clamped(self):
        """A 5 second hitch advances the same as a 0.1 second frame."""
        base = SimulationState.random(3, 100, np.random.default_rng(4))
        stalled = base.copy()
        config = SimulationConfig(substep_n=2)

        base.step(0.1, config)
        stalled.step(5.0, config)

        assert np.array_equal(base.positions, stalled.positions)
        assert np.array_equal(base.velocities, stalled.velocities)
        assert stalled.time == pytest.approx(0.1)

    def test_zero_dt_changes_nothing(self):
        state = SimulationState.random(3, 100, np.random.default_rng(5))
        before = state.copy()

        state.step(0.0, SimulationConfig())

        assert np.array_equal(state.positions, before.positions)
        assert np.array_equal(state.velocities, before.velocities)
        assert state.frame_count == 1

    def test_negative_dt_treated_as_zero(self):
        state = SimulationState.random(3, 50, np.random.default_rng(6))
        before = state.copy()
        state.step(-1.0, SimulationConfig())
        assert np.array_equal(state.positions, before.positions)

    def test_nan_dt_treated_as_zero(self):
        """A bad clock reading leaves the state finite and unchanged."""
        state = SimulationState.random(3, 50, np.random.default_rng(6))
        before = state.copy()

        state.step(float("nan"), SimulationConfig())

        assert np.array_equal(state.positions, before.positions)
        assert np.array_equal(state.velocities, before.velocities)
        assert state.time == 0.0
        assert state.frame_count == 1

    def test_infinite_dt_is_clamped(self):
        base = SimulationState.random(3, 50, np.random.default_rng(7))
        stalled = base.copy()
        config = SimulationConfig(substep_n=2)

        base.step(0.1, config)
        stalled.step(float("inf"), config)

        assert np.array_equal(base.positions, stalled.positions)
        assert np.all(np.isfinite(stalled.positions))

    def test_time_scale_zero_freezes(self):
        state = SimulationState.random(3, 50, np.random.default_rng(6))
        before = state.copy()
        state.step(0.05, SimulationConfig(time_scale=0.0))
        assert np.array_equal(state.positions, before.positions)

    def test_force_multiplier_scales_velocity_change(self):
        single = two_particle_state()
        double = two_particle_state()

        single.step(0.01, SimulationConfig(substep_n=1, local_radius=0.5))
        double.step(0.01, SimulationConfig(substep_n=1, local_radius=0.5,
                                           force_multiplier=2.0))

        assert np.allclose(double.velocities, 2.0 * single.velocities)

    def test_step_does_not_modify_attractions(self):
        state = SimulationState.random(3, 50, np.random.default_rng(8))
        attractions = state.attractions.copy()
        state.step(0.05, SimulationConfig())
        assert np.array_equal(state.attractions, attractions)


class TestDeterminism:
    """Tests for reproducibility."""

    def test_same_seed_same_trajectory(self):
        a = create_random_simulation(particle_n=300, specie_n=4, seed=11)
        b = create_random_simulation(particle_n=300, specie_n=4, seed=11)

        for dt in (0.016, 0.02, 0.5, 0.0, 0.033):
            a.step(dt)
            b.step(dt)

        assert np.array_equal(a.state.positions, b.state.positions)
        assert np.array_equal(a.state.velocities, b.state.velocities)

    def test_parallel_and_serial_agree(self):
        parallel = create_random_simulation(particle_n=300, specie_n=4, seed=12)
        serial = create_random_simulation(particle_n=300, specie_n=4, seed=12,
                                          use_parallel=False)

        for _ in range(5):
            parallel.step(1 / 60)
            serial.step(1 / 60)

        assert np.array_equal(parallel.state.positions, serial.state.positions)
        assert np.array_equal(parallel.state.velocities, serial.state.velocities)


class TestEndToEnd:
    """Two-particle scenario checked against the closed form."""

    def test_two_particle_displacement(self):
        state = two_particle_state()
        config = SimulationConfig(substep_n=1, local_radius=0.5,
                                  friction_half_life=1.0)

        state.step(1.0, config)

        # dt = 1.0 is clamped to 0.1; one substep
        dt = 0.1
        dx = 0.6 - 0.4
        distance = math.sqrt(dx * dx)
        normalized = distance / 0.5
        magnitude = 1.0 * (1.0 - abs(2.0 * normalized - 1.0 - BETA) / (1.0 - BETA))
        force = dx / distance * magnitude

        velocity = 0.0 * 0.5 ** (dt / 1.0) + force * dt
        expected_x0 = 0.4 + velocity * dt
        expected_x1 = 0.6 - velocity * dt

        np.testing.assert_allclose(state.velocities[:, 0], [velocity, -velocity],
                                   rtol=1e-12, atol=0)
        np.testing.assert_allclose(state.positions[:, 0], [expected_x0, expected_x1],
                                   rtol=1e-12, atol=0)
        assert np.all(state.positions[:, 1] == 0.5)
        assert np.all(state.velocities[:, 1] == 0.0)

        # normalized distance 0.4 puts the tent at 2/7 of the attraction
        assert magnitude == pytest.approx(2.0 / 7.0)
        assert state.positions[0, 0] - 0.4 == pytest.approx(0.01 * 2.0 / 7.0, rel=1e-9)


class TestParticleLifeSimulation:
    """Tests for the simulation facade."""

    def test_initialization(self):
        config = SimulationConfig(substep_n=2)
        sim = ParticleLifeSimulation(config)

        assert sim.config == config
        assert sim.state is None

    def test_step_before_initialization(self):
        sim = ParticleLifeSimulation()
        with pytest.raises(RuntimeError):
            sim.step(0.01)

    def test_initialize_random(self):
        sim = ParticleLifeSimulation()
        state = sim.initialize_random(specie_n=3, particle_n=120, seed=0)

        assert state is sim.state
        assert state.n_particles == 120
        assert state.n_species == 3

    def test_initialize_from_arrays(self):
        sim = ParticleLifeSimulation()
        sim.initialize_from_arrays(
            positions=[[0.1, 0.2], [0.3, 0.4]],
            velocities=[[0.0, 0.0], [0.0, 0.0]],
            species=[0, 0],
            attractions=[[0.5]]
        )
        assert sim.state.n_particles == 2

    def test_run(self):
        sim = create_random_simulation(particle_n=100, specie_n=3, seed=1)
        state = sim.run(n_frames=7, frame_dt=1 / 60)
        assert state.frame_count == 7
        assert state.time == pytest.approx(7 / 60)

    def test_set_attraction(self):
        sim = create_random_simulation(particle_n=10, specie_n=3, seed=2)
        sim.set_attraction(0, 2, 1.5)
        assert sim.state.attractions[0, 2] == 1.5

        with pytest.raises(IndexError):
            sim.set_attraction(3, 0, 0.1)

    def test_set_attractions(self):
        sim = create_random_simulation(particle_n=10, specie_n=2, seed=3)
        sim.set_attractions([[0.1, 0.2], [0.3, 0.4]])
        assert np.array_equal(sim.state.attractions, [[0.1, 0.2], [0.3, 0.4]])

        with pytest.raises(ValueError):
            sim.set_attractions([[0.1, 0.2, 0.3]])

    def test_randomize_attractions(self):
        sim = create_random_simulation(particle_n=10, specie_n=4, seed=4)
        first = sim.randomize_attractions(seed=99)
        second = sim.randomize_attractions(seed=99)

        assert first.shape == (4, 4)
        assert np.array_equal(first, second)
        assert np.all(np.abs(first) <= 1.0)

    def test_update_config(self):
        sim = create_random_simulation(particle_n=10, specie_n=2, seed=5)
        sim.update_config(local_radius=0.05, substep_n=3)

        assert sim.config.local_radius == 0.05
        assert sim.config.substep_n == 3

    def test_update_config_rejects_invalid(self):
        sim = create_random_simulation(particle_n=10, specie_n=2, seed=5)

        with pytest.raises(ValueError):
            sim.update_config(substep_n=0)
        with pytest.raises(TypeError):
            sim.update_config(gravity=9.8)

        assert sim.config.substep_n == 8

    def test_edit_waits_for_running_frame(self):
        """An attraction edit issued mid-frame lands after the frame."""
        sim = create_random_simulation(particle_n=10, specie_n=2, seed=6)

        sim._lock.acquire()
        editor = threading.Thread(target=sim.set_attraction, args=(0, 1, 0.75))
        editor.start()
        editor.join(timeout=0.2)

        assert editor.is_alive()
        assert sim.state.attractions[0, 1] != 0.75

        sim._lock.release()
        editor.join(timeout=5.0)

        assert not editor.is_alive()
        assert sim.state.attractions[0, 1] == 0.75

    def test_frame_rate_counter_updates_under_lock(self, monkeypatch):
        """Steps-per-second bookkeeping happens while the lock is held."""
        sim = create_random_simulation(particle_n=5, specie_n=2, seed=7)
        lock_held = []

        class FakeClock:
            now = sim._last_time

            def time(self):
                lock_held.append(sim._lock.locked())
                FakeClock.now += 0.5
                return FakeClock.now

        monkeypatch.setattr(simulation_module, "time", FakeClock())

        sim.run(n_frames=100, frame_dt=0.0)

        assert lock_held == [True]
        assert sim.steps_per_second == pytest.approx(200.0)


class TestCreateRandomSimulation:
    """Tests for the helper function."""

    def test_creates_valid_simulation(self):
        sim = create_random_simulation(particle_n=64, specie_n=5, seed=0,
                                       local_radius=0.2)

        assert sim.state is not None
        assert sim.state.n_particles == 64
        assert sim.state.n_species == 5
        assert sim.config.local_radius == 0.2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
