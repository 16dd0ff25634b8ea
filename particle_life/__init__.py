#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Life
================================================================================

Project:        Particle Life
Description:    Real-time 2D particle life simulation where species attract
                and repel each other on a toroidal domain

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 19, 2026
Last Updated:   October 19, 2026

License:        MIT License
================================================================================

This package implements a real-time particle life simulation featuring:
- Asymmetric species-pair attraction matrix
- Brute-force all-pairs force kernel parallelized with Numba
- Substep integration with half-life friction on a unit torus
- Diagnostics and Matplotlib/Streamlit front ends

Modules:
    - physics: Attraction response curve and force kernel
    - simulation: Simulation state, configuration and substep integrator
    - diagnostics: Kinetic energy, clustering and density measurements
    - visualization: Species colors and particle rendering
    - utils: Configuration loading and logging setup
"""

__version__ = "1.0.0"
__author__ = "Ryan Kamp"
