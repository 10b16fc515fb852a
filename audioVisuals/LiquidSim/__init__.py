# -- LiquidSim Package -- #

'''
Audio-reactive viscous liquid simulation using Smoothed Particle
Hydrodynamics (SPH).

A bounded population of particles is advanced once per frame: audio
features and pointer gestures are mapped onto solver constants and spawn
requests, then density, pressure, viscosity and gravity forces are
accumulated, integrated and contained within the screen-space domain.
'''

__version__ = '0.1.0'

from audioVisuals.LiquidSim.signals import AudioFrame, ClickEvent, InputState, SyntheticAudio
from audioVisuals.LiquidSim.sph.protocols import SimulationConfig, SimulationState
from audioVisuals.LiquidSim.sph.liquidSolver import LiquidSolver
from audioVisuals.LiquidSim.runner import LiquidSimRunner
from audioVisuals.LiquidSim.export.frameExporter import FrameExporter
