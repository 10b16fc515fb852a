# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine for the liquid.

Provides the particle store, neighbor search, density kernel, pressure
and force models, time integration, boundary handling, the reactive
parameter mapper and the frame-stepped solver.
'''

from audioVisuals.LiquidSim.sph.protocols import SimulationConfig, SimulationState
from audioVisuals.LiquidSim.sph.particles import ParticleStore, ParticleSnapshot
from audioVisuals.LiquidSim.sph.kernels import QuadraticFalloffKernel
from audioVisuals.LiquidSim.sph.neighborSearch import AllPairsSearch, SpatialHashGrid
from audioVisuals.LiquidSim.sph.reactiveMapper import (
    ReactiveParameterMapper,
    SolverConstants,
    SpawnRequest,
)
from audioVisuals.LiquidSim.sph.liquidSolver import LiquidSolver
