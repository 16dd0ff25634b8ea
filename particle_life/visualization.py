#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Real-Time Visualization Module
================================================================================

Project:        Particle Life
Module:         visualization.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

This module provides visualization tools for the particle life simulation:
- Per-species color tables
- Particle rendering for Matplotlib and Streamlit, with zoom
- Attraction matrix heatmap
- Diagnostics history plots and animations
"""

import io
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import matplotlib.animation as animation
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import hsv_to_rgb, to_rgba_array

# Bounds of the attraction editor inputs
ATTRACTION_INPUT_LIMIT = 1.0

# Colors of the first species, in order
DEFAULT_SPECIE_COLORS = [
    'red',
    'lime',
    'blue',
    'yellow',
    'orange',
    'lightgreen',
    'lightblue',
    'lightyellow',
    'darkred',
    'darkgreen',
    'darkblue',
    'gray',
]


@dataclass
class VisualizationConfig:
    """Configuration for visualization."""
    particle_size: float = 2.0
    show_velocities: bool = False
    velocity_scale: float = 0.05
    background_color: str = "#000000"
    show_boundary: bool = True
    zoom_scale: float = 1.0
    zoom_center: Tuple[float, float] = (0.5, 0.5)
    figsize: Tuple[int, int] = (8, 8)


def make_specie_colors(
    specie_n: int,
    palette: Optional[Sequence] = None,
    fallback: bool = True
) -> np.ndarray:
    """
    Build the per-species RGBA color table.

    Uses the palette while it lasts. With more species than palette entries
    the whole table switches to evenly spaced hues.

    Args:
        specie_n: Number of species
        palette: Optional list of Matplotlib colors
        fallback: Allow the hue table when the palette is too short

    Returns:
        specie_n x 4 RGBA array

    Raises:
        ValueError: If the palette is too short and fallback is False
    """
    palette = DEFAULT_SPECIE_COLORS if palette is None else list(palette)

    if specie_n <= len(palette):
        return to_rgba_array(palette[:specie_n])
    if not fallback:
        raise ValueError(
            f"{specie_n} species but only {len(palette)} palette colors"
        )

    hues = np.arange(specie_n) / specie_n
    hsv = np.stack([hues, np.ones(specie_n), np.full(specie_n, 0.9)], axis=1)
    colors = np.ones((specie_n, 4))
    colors[:, :3] = hsv_to_rgb(hsv)
    return colors


def attraction_input_value(value: float, limit: float = ATTRACTION_INPUT_LIMIT) -> float:
    """Attraction value shown in the editor, clipped to the input bounds."""
    return float(np.clip(value, -limit, limit))


def calculate_particle_colors(species: np.ndarray, specie_colors: np.ndarray) -> np.ndarray:
    """Nx4 RGBA color of each particle from its species."""
    return specie_colors[species]


def view_limits(config: VisualizationConfig) -> Tuple[float, float, float, float]:
    """
    Visible window of the unit square for the zoom settings.

    Returns:
        (xmin, xmax, ymin, ymax)
    """
    half = 0.5 / max(config.zoom_scale, 1e-6)
    cx, cy = config.zoom_center
    return cx - half, cx + half, cy - half, cy + half


def render_particles_matplotlib(
    positions: np.ndarray,
    species: np.ndarray,
    specie_colors: Optional[np.ndarray] = None,
    velocities: Optional[np.ndarray] = None,
    config: Optional[VisualizationConfig] = None,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Render particles using Matplotlib.

    Args:
        positions: Nx2 array of positions
        species: N array of species indices
        specie_colors: Species color table (default palette if omitted)
        velocities: Nx2 array of velocities, needed for velocity arrows
        config: Visualization configuration
        ax: Optional existing axes to draw on

    Returns:
        Matplotlib figure
    """
    if config is None:
        config = VisualizationConfig()
    if specie_colors is None:
        n_species = int(species.max()) + 1 if len(species) > 0 else 1
        specie_colors = make_specie_colors(n_species)

    if ax is None:
        fig = plt.figure(figsize=config.figsize)
        ax = fig.add_axes([0, 0, 1, 1])  # Full figure, no margins
    else:
        fig = ax.figure

    ax.clear()
    ax.set_facecolor(config.background_color)
    fig.patch.set_facecolor(config.background_color)

    colors = calculate_particle_colors(species, specie_colors)

    # Markers grow with zoom so clusters stay readable
    sizes = config.particle_size * config.zoom_scale ** 2

    ax.scatter(
        positions[:, 0], positions[:, 1],
        s=sizes,
        c=colors,
        linewidths=0
    )

    if config.show_velocities and velocities is not None and len(positions) > 0:
        ax.quiver(
            positions[:, 0], positions[:, 1],
            velocities[:, 0], velocities[:, 1],
            color='white', alpha=0.5,
            scale=1.0 / config.velocity_scale,
            scale_units='xy',
            width=0.002
        )

    xmin, xmax, ymin, ymax = view_limits(config)
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    ax.set_aspect('equal')

    if config.show_boundary:
        ax.plot([0, 1, 1, 0, 0], [0, 0, 1, 1, 0],
                'white', linewidth=1.0, alpha=0.3)

    ax.set_xticks([])
    ax.set_yticks([])
    ax.axis('off')

    return fig


def render_particles_png(
    positions: np.ndarray,
    species: np.ndarray,
    specie_colors: Optional[np.ndarray] = None,
    velocities: Optional[np.ndarray] = None,
    config: Optional[VisualizationConfig] = None,
    dpi: int = 100
) -> bytes:
    """
    Render particles and return PNG bytes for Streamlit.

    Returns:
        PNG image as bytes
    """
    fig = render_particles_matplotlib(
        positions, species, specie_colors, velocities, config
    )

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=dpi,
                facecolor=fig.get_facecolor(), edgecolor='none',
                pad_inches=0)
    plt.close(fig)
    buf.seek(0)

    return buf.getvalue()


def render_attraction_matrix(
    attractions: np.ndarray,
    specie_colors: Optional[np.ndarray] = None,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Render the attraction matrix as a heatmap.

    Rows are the species feeling the force, columns the species exerting it.
    Tick labels are drawn in each species' color.

    Args:
        attractions: SxS attraction matrix
        specie_colors: Species color table
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    n_species = attractions.shape[0]
    if specie_colors is None:
        specie_colors = make_specie_colors(n_species)

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(5, 5))
    else:
        fig = ax.figure

    ax.clear()
    im = ax.imshow(attractions, cmap='RdBu_r', vmin=-1.0, vmax=1.0)

    for row in range(n_species):
        for col in range(n_species):
            ax.text(col, row, f"{attractions[row, col]:.2f}",
                    ha='center', va='center', fontsize=8, color='black')

    labels = [str(i) for i in range(n_species)]
    ax.set_xticks(range(n_species))
    ax.set_yticks(range(n_species))
    ax.set_xticklabels(labels)
    ax.set_yticklabels(labels)
    for tick, color in zip(ax.get_xticklabels(), specie_colors):
        tick.set_color(color)
    for tick, color in zip(ax.get_yticklabels(), specie_colors):
        tick.set_color(color)

    ax.set_xlabel('Other species')
    ax.set_ylabel('Own species')
    ax.set_title('Attraction Matrix')
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    return fig


def render_stats_plot(tracker, ax: Optional[plt.Axes] = None) -> plt.Figure:
    """
    Render kinetic energy and clustering history.

    Args:
        tracker: StatsTracker with recorded samples
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    else:
        fig = ax.figure

    ax.clear()
    times = tracker.series('time')
    ax.plot(times, tracker.series('kinetic_energy'), 'r-', label='Kinetic energy', linewidth=1.5)
    ax.set_xlabel('Time')
    ax.set_ylabel('Kinetic energy')
    ax.grid(True, alpha=0.3)

    ax2 = ax.twinx()
    ax2.plot(times, tracker.series('clustering'), 'b-', label='Clustering', linewidth=1.5)
    ax2.set_ylabel('Mean neighbors')

    lines = ax.get_lines() + ax2.get_lines()
    ax.legend(lines, [line.get_label() for line in lines], loc='best')
    ax.set_title('Diagnostics')

    return fig


def create_animation(
    simulation,
    n_frames: int,
    frame_dt: float,
    specie_colors: Optional[np.ndarray] = None,
    config: Optional[VisualizationConfig] = None,
    fps: int = 30
) -> animation.FuncAnimation:
    """
    Create an animation that steps the simulation between frames.

    Args:
        simulation: Initialized ParticleLifeSimulation
        n_frames: Number of animation frames
        frame_dt: Simulated seconds per frame
        specie_colors: Species color table
        config: Visualization configuration
        fps: Frames per second

    Returns:
        Matplotlib animation
    """
    if config is None:
        config = VisualizationConfig()
    if specie_colors is None:
        specie_colors = make_specie_colors(simulation.state.n_species)

    fig = plt.figure(figsize=config.figsize)
    ax = fig.add_axes([0, 0, 1, 1])

    def update(frame):
        state = simulation.step(frame_dt)
        render_particles_matplotlib(
            state.positions, state.species, specie_colors,
            state.velocities, config, ax=ax
        )
        return ax,

    ani = animation.FuncAnimation(
        fig, update, frames=n_frames,
        interval=1000 / fps, blit=False
    )

    return ani
