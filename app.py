#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life - Interactive Streamlit Application
================================================================================

Project:        Particle Life
Module:         app.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

This is the Streamlit front end for the particle life simulation.
Users can:
- Create a system with any number of particles and species
- Tune radius, friction, substeps and time scale while it runs
- Edit or randomize the attraction matrix
- Zoom into the torus and watch diagnostics
"""

import base64
import io
import logging
import time

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st
from PIL import Image

from particle_life.diagnostics import StatsTracker, collect_stats
from particle_life.simulation import ParticleLifeSimulation, SimulationConfig
from particle_life.visualization import (
    ATTRACTION_INPUT_LIMIT, VisualizationConfig, attraction_input_value,
    make_specie_colors, render_attraction_matrix, render_particles_png
)

logger = logging.getLogger("particle_life.app")

CANVAS_SIZE = 600


st.set_page_config(
    page_title="Particle Life",
    page_icon="🧫",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
.stApp {
    background-color: #0e1117;
}
.sim-container {
    width: 600px;
    height: 600px;
    background-color: #000000;
    border-radius: 8px;
    overflow: hidden;
    display: flex;
    align-items: center;
    justify-content: center;
}
.sim-container img {
    width: 100%;
    height: 100%;
    object-fit: contain;
}
</style>
""", unsafe_allow_html=True)


def initialize_session_state():
    """Initialize Streamlit session state variables."""
    if 'simulation' not in st.session_state:
        st.session_state.simulation = None
    if 'running' not in st.session_state:
        st.session_state.running = False
    if 'last_frame_time' not in st.session_state:
        st.session_state.last_frame_time = None
    if 'tracker' not in st.session_state:
        st.session_state.tracker = StatsTracker()
    if 'vis_config' not in st.session_state:
        st.session_state.vis_config = VisualizationConfig()
    if 'specie_colors' not in st.session_state:
        st.session_state.specie_colors = make_specie_colors(6)


def create_simulation(particle_n: int, specie_n: int, seed: int) -> ParticleLifeSimulation:
    """Create a new simulation with specified parameters."""
    sim = ParticleLifeSimulation(SimulationConfig())
    sim.initialize_random(specie_n=specie_n, particle_n=particle_n, seed=seed)
    # Compile the kernels before the first visible frame
    sim.step(0.0)
    return sim


def render_sidebar():
    """Render the sidebar with controls."""
    st.sidebar.title("🧫 Particle Life")

    st.sidebar.markdown("""
    ---
    Particles of different **species** attract or repel each other
    according to the **attraction matrix**. Every pair repels at very
    short range; beyond that the force follows the matrix entry,
    peaking half way to the interaction radius.

    ---
    """)

    st.sidebar.subheader("⚙️ Simulation Setup")

    particle_n = st.sidebar.slider(
        "Number of Particles",
        min_value=100, max_value=5000, value=1000, step=100,
        help="Force evaluation is O(N²) per substep"
    )
    specie_n = st.sidebar.slider(
        "Number of Species",
        min_value=1, max_value=12, value=6, step=1
    )
    seed = st.sidebar.number_input("Seed", min_value=0, value=0, step=1)

    if st.sidebar.button("🚀 Initialize Simulation", use_container_width=True):
        st.session_state.simulation = create_simulation(particle_n, specie_n, int(seed))
        st.session_state.specie_colors = make_specie_colors(specie_n)
        st.session_state.tracker = StatsTracker()
        st.session_state.running = False
        st.session_state.last_frame_time = None
        st.rerun()

    sim = st.session_state.simulation
    if sim is None:
        return

    st.sidebar.markdown("---")
    st.sidebar.subheader("🎛️ Simulation Settings")

    substep_n = st.sidebar.slider("substep_n", 1, 16, sim.config.substep_n)
    local_radius = st.sidebar.slider(
        "local_radius", 0.0, 0.2, float(sim.config.local_radius), step=0.005
    )
    friction_half_life = st.sidebar.slider(
        "friction_half_life", 0.005, 1.0, float(sim.config.friction_half_life),
        step=0.005
    )
    time_scale = st.sidebar.slider(
        "time_scale", 0.0, 1.0, float(sim.config.time_scale), step=0.05
    )

    changes = {}
    if substep_n != sim.config.substep_n:
        changes['substep_n'] = substep_n
    if local_radius != sim.config.local_radius:
        changes['local_radius'] = local_radius
    if friction_half_life != sim.config.friction_half_life:
        changes['friction_half_life'] = friction_half_life
    if time_scale != sim.config.time_scale:
        changes['time_scale'] = time_scale
    if changes:
        sim.update_config(**changes)

    st.sidebar.markdown("---")
    st.sidebar.subheader("🔍 View")

    vis_config = st.session_state.vis_config
    vis_config.particle_size = st.sidebar.slider(
        "Particle Size", 0.5, 20.0, vis_config.particle_size, step=0.5
    )
    vis_config.zoom_scale = st.sidebar.slider(
        "Zoom", 1.0, 10.0, vis_config.zoom_scale, step=0.5
    )
    zoom_x = st.sidebar.slider("Zoom center x", 0.0, 1.0, vis_config.zoom_center[0])
    zoom_y = st.sidebar.slider("Zoom center y", 0.0, 1.0, vis_config.zoom_center[1])
    vis_config.zoom_center = (zoom_x, zoom_y)


def render_attraction_editor(sim: ParticleLifeSimulation):
    """Grid of number inputs for the attraction matrix."""
    state = sim.state
    n = state.n_species

    if st.button("🎲 Randomize", use_container_width=True):
        sim.randomize_attractions()
        st.rerun()

    for row in range(n):
        cols = st.columns(n)
        for col in range(n):
            with cols[col]:
                # Values set outside the input bounds are shown clipped
                shown = attraction_input_value(state.attractions[row, col])
                value = st.number_input(
                    f"{row}→{col}",
                    min_value=-ATTRACTION_INPUT_LIMIT,
                    max_value=ATTRACTION_INPUT_LIMIT,
                    value=shown,
                    step=0.02, format="%.2f",
                    key=f"attraction_{row}_{col}_{state.attractions[row, col]:.4f}",
                    label_visibility="collapsed"
                )
                if value != shown:
                    sim.set_attraction(row, col, value)


def advance_simulation(sim: ParticleLifeSimulation):
    """Step the simulation by the wall-clock time since the previous frame."""
    now = time.time()
    last = st.session_state.last_frame_time
    frame_dt = 0.0 if last is None else now - last
    st.session_state.last_frame_time = now

    sim.step(frame_dt)
    st.session_state.tracker.update(collect_stats(sim.state, sim.config.local_radius))


def render_main_content():
    """Render the main simulation content."""
    sim = st.session_state.simulation

    if sim is None:
        st.title("🧫 Particle Life")
        st.markdown("""
        ## Welcome to Particle Life!

        Thousands of particles, a handful of species and one matrix of
        attraction coefficients are enough to grow cells, worms and
        orbiting clusters.

        ### 🚀 Getting Started:
        1. Use the sidebar to choose particle and species counts
        2. Click **Initialize Simulation**
        3. Press **Run** and tune the sliders while it runs
        4. Edit the attraction matrix to change how species interact

        ---
        *👈 Use the sidebar to begin!*
        """)
        return

    col1, col2 = st.columns([2, 1])

    with col1:
        btn_col1, btn_col2, btn_col3, btn_col4 = st.columns(4)

        with btn_col1:
            run_label = "▶️ Run" if not st.session_state.running else "⏸️ Pause"
            if st.button(run_label, use_container_width=True, key="run_pause_btn"):
                st.session_state.running = not st.session_state.running
                st.session_state.last_frame_time = None
                st.rerun()

        with btn_col2:
            if st.button("⏭️ Step", use_container_width=True):
                sim.step(1.0 / 60.0)

        with btn_col3:
            if st.button("🔄 Reset", use_container_width=True):
                st.session_state.simulation = None
                st.session_state.running = False
                st.rerun()

        with btn_col4:
            st.metric("Frames", sim.state.frame_count)

        if st.session_state.running:
            advance_simulation(sim)

        state = sim.state
        img_bytes = render_particles_png(
            state.positions, state.species,
            st.session_state.specie_colors,
            state.velocities,
            st.session_state.vis_config
        )

        pil_image = Image.open(io.BytesIO(img_bytes))
        pil_image = pil_image.resize((CANVAS_SIZE, CANVAS_SIZE), Image.Resampling.LANCZOS)
        buffered = io.BytesIO()
        pil_image.save(buffered, format="PNG")
        img_base64 = base64.b64encode(buffered.getvalue()).decode()

        st.markdown(
            f'<div class="sim-container"><img src="data:image/png;base64,{img_base64}"></div>',
            unsafe_allow_html=True
        )

    with col2:
        st.subheader("Attraction Matrix")
        render_attraction_editor(sim)

        fig = render_attraction_matrix(sim.state.attractions, st.session_state.specie_colors)
        st.pyplot(fig)
        plt.close(fig)

        st.subheader("Diagnostics")
        tracker = st.session_state.tracker
        if tracker.history:
            latest = tracker.history[-1]
            met1, met2 = st.columns(2)
            with met1:
                st.metric("Kinetic Energy", f"{latest.kinetic_energy:.4f}")
            with met2:
                st.metric("Mean Speed", f"{latest.mean_speed:.4f}")
            st.metric("Clustering", f"{latest.clustering:.2f}")

            if len(tracker.history) > 1:
                st.line_chart(np.column_stack([
                    tracker.series('kinetic_energy'),
                    tracker.series('mean_speed')
                ]))

    # Auto-refresh when running
    if st.session_state.running:
        time.sleep(0.01)
        st.rerun()


def main():
    """Main application entry point."""
    initialize_session_state()
    render_sidebar()
    render_main_content()


if __name__ == "__main__":
    main()
