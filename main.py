#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life - Command Line Interface
================================================================================

Project:        Particle Life
Module:         main.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

Command line interface for running, benchmarking and rendering the particle
life simulation.
"""

import argparse
import logging
import time
from typing import Any, Dict, Optional

import matplotlib.pyplot as plt

from particle_life.diagnostics import StatsTracker, collect_stats
from particle_life.simulation import ParticleLifeSimulation
from particle_life.utils import build_simulation, load_config, setup_logging
from particle_life.visualization import (
    VisualizationConfig, create_animation, make_specie_colors,
    render_attraction_matrix, render_particles_matplotlib, render_stats_plot
)

logger = logging.getLogger("particle_life.main")


def prepare_simulation(
    config: Dict[str, Any],
    particles: Optional[int],
    species: Optional[int],
    seed: Optional[int]
) -> ParticleLifeSimulation:
    """Apply command line overrides to the configuration and build the simulation."""
    init = dict(config.get('initialization', {}))
    if particles is not None:
        init['particle_n'] = particles
    if species is not None:
        init['specie_n'] = species
        # An explicit matrix no longer fits
        init.pop('attractions', None)
    if seed is not None:
        init['seed'] = seed
    return build_simulation({**config, 'initialization': init})


def run_benchmark(sim: ParticleLifeSimulation, run_control: Dict[str, Any]):
    """
    Step the simulation headless and report frame rate and diagnostics.

    Args:
        sim: Initialized simulation
        run_control: "frames", "frame_dt" and "log_throttle_steps" settings
    """
    n_frames = run_control.get('frames', 200)
    frame_dt = run_control.get('frame_dt', 1.0 / 60.0)
    log_throttle = run_control.get('log_throttle_steps', 50)

    state = sim.state
    print("=" * 60)
    print("Particle Life - Benchmark")
    print("=" * 60)
    print(f"\n{state.n_particles} particles, {state.n_species} species, "
          f"{sim.config.substep_n} substeps per frame")

    # First call compiles the kernels
    t_compile = time.time()
    sim.step(0.0)
    print(f"Kernel warm-up: {time.time() - t_compile:.2f} seconds")

    tracker = StatsTracker()
    t_start = time.time()

    for frame in range(1, n_frames + 1):
        sim.step(frame_dt)

        # Throttled: clustering is O(N^2)
        if frame % log_throttle == 0:
            stats = tracker.update(collect_stats(sim.state, sim.config.local_radius))
            logger.info(
                f"Frame {frame}/{n_frames} | KE = {stats.kinetic_energy:.4f} | "
                f"mean speed = {stats.mean_speed:.4f} | "
                f"clustering = {stats.clustering:.2f}"
            )

    elapsed = time.time() - t_start
    print(f"\nSimulated {n_frames} frames in {elapsed:.2f} seconds")
    if elapsed > 0:
        print(f"Frames per second: {n_frames / elapsed:.1f}")

    stats = collect_stats(sim.state, sim.config.local_radius)
    print(f"\nFinal State:")
    print(f"  Simulated time:  {stats.time:.3f}")
    print(f"  Kinetic Energy:  {stats.kinetic_energy:.4f}")
    print(f"  Mean Speed:      {stats.mean_speed:.4f}")
    print(f"  Clustering:      {stats.clustering:.2f}")
    print(f"  Species counts:  {stats.species_counts.tolist()}")

    return tracker


def run_snapshot(sim: ParticleLifeSimulation, run_control: Dict[str, Any], output: str):
    """
    Run the simulation and save the final configuration as an image.

    Args:
        sim: Initialized simulation
        run_control: "frames" and "frame_dt" settings
        output: PNG file path
    """
    tracker = run_benchmark(sim, run_control)

    state = sim.state
    specie_colors = make_specie_colors(state.n_species)

    fig = plt.figure(figsize=(16, 10))
    ax_particles = fig.add_subplot(1, 2, 1)
    render_particles_matplotlib(
        state.positions, state.species, specie_colors,
        state.velocities, VisualizationConfig(), ax=ax_particles
    )
    ax_particles.set_title('Final Configuration')

    render_attraction_matrix(state.attractions, specie_colors, ax=fig.add_subplot(2, 2, 2))
    if tracker.history:
        render_stats_plot(tracker, ax=fig.add_subplot(2, 2, 4))

    plt.tight_layout()
    plt.savefig(output, dpi=150)
    print(f"\nPlot saved to {output}")
    plt.close(fig)


def run_animation(sim: ParticleLifeSimulation, run_control: Dict[str, Any], output: str):
    """
    Create an animation of the simulation.

    Args:
        sim: Initialized simulation
        run_control: "frames" and "frame_dt" settings
        output: GIF file path
    """
    n_frames = run_control.get('frames', 200)
    frame_dt = run_control.get('frame_dt', 1.0 / 30.0)

    print(f"Creating animation with {n_frames} frames...")
    ani = create_animation(sim, n_frames=n_frames, frame_dt=frame_dt, fps=30)

    print("Saving animation (this may take a while)...")
    ani.save(output, writer='pillow', fps=30)
    print(f"Animation saved to {output}")


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Particle Life - 2D species attraction simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --benchmark              Step headless and report frame rate
  python main.py --snapshot               Save an image of the final state
  python main.py --animate                Create animation
  python main.py --app                    Launch Streamlit app
        """
    )

    parser.add_argument('--benchmark', action='store_true',
                        help='Run headless benchmark')
    parser.add_argument('--snapshot', action='store_true',
                        help='Run and save an image of the final state')
    parser.add_argument('--animate', action='store_true',
                        help='Create animation')
    parser.add_argument('--app', action='store_true',
                        help='Launch Streamlit web app')
    parser.add_argument('--config', '-c', default='config.json',
                        help='Path to JSON configuration (default: config.json)')
    parser.add_argument('--particles', '-n', type=int, default=None,
                        help='Number of particles (overrides config)')
    parser.add_argument('--species', '-k', type=int, default=None,
                        help='Number of species (overrides config)')
    parser.add_argument('--frames', '-f', type=int, default=None,
                        help='Number of frames to simulate (overrides config)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (overrides config)')
    parser.add_argument('--output', '-o', default=None,
                        help='Output file for --snapshot / --animate')

    args = parser.parse_args()

    if args.app:
        import subprocess
        print("Launching Streamlit app...")
        subprocess.run(['streamlit', 'run', 'app.py'])
        return

    if not (args.benchmark or args.snapshot or args.animate):
        parser.print_help()
        print("\nNo action specified. Run with --benchmark, --snapshot, --animate, or --app")
        return

    # Logging is not set up yet, so this one error goes to print
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return

    setup_logging(config)
    logger.info("--- Particle Life Starting ---")

    run_control = dict(config.get('run_control', {}))
    if args.frames is not None:
        run_control['frames'] = args.frames

    sim = prepare_simulation(config, args.particles, args.species, args.seed)

    if args.benchmark:
        run_benchmark(sim, run_control)
    elif args.snapshot:
        run_snapshot(sim, run_control, args.output or 'particle_life.png')
    elif args.animate:
        run_animation(sim, run_control, args.output or 'particle_life.gif')

    logger.info("--- Particle Life Shutting Down ---")


if __name__ == "__main__":
    main()
