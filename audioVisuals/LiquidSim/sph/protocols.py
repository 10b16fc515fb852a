# -- SPH Simulation Protocols -- #

'''
Configuration and result dataclasses for the liquid simulation.

Defines the SimulationConfig loaded from JSON presets, the per-tick
SimulationState diagnostics, and the solver protocol that the runner
drives.
'''

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Protocol, TYPE_CHECKING

from audioVisuals.LiquidSim import constants as const

if TYPE_CHECKING:
    from audioVisuals.LiquidSim.signals import AudioFrame, InputState
    from audioVisuals.LiquidSim.sph.particles import ParticleSnapshot


neighborSearchTypes = ('allPairs', 'spatialHash')


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass
class SimulationConfig:
    '''
    Configuration for a liquid simulation.

    Defines the screen-space domain, the fluid constants that are not
    audio-derived, spawn policy and run timing. Distances in pixels,
    times in seconds.

    Parameters:
    -----------
    domainWidth : float
        Domain extent along x [px]
    domainHeight : float
        Domain extent along y (downward) [px]
    maxParticles : int
        Store capacity
    initialParticles : int
        Particles seeded by LiquidSolver.initialize()
    smoothingRadius : float
        Interaction cutoff h [px]
    restDensity : float
        Density with zero pressure
    gasConstant : float
        Equation of state stiffness
    baseGravity : float
        Gravity before audio scaling [px/s^2]
    damping : float
        Velocity damping per reference frame
    maxSpeed : float
        Speed clamp applied after damping [px/s]
    spawnVelocityJitter : tuple[float, float]
        Half-ranges of the uniform initial velocity (vx, vy) [px/s]
    spawnSizeRange : tuple[float, float]
        Initial size range [px]
    neighborSearch : str
        'allPairs' (default) or 'spatialHash'
    timeStep : float
        Fixed tick length used by the runner [s]
    endTime : float
        Run length for headless runs [s]
    outputInterval : float
        Time between exported frames [s]
    seed : int | None
        Seed for the spawn random generator
    '''

    domainWidth: float = 1280.0
    domainHeight: float = 720.0
    maxParticles: int = const.maxParticles
    initialParticles: int = const.initialParticles
    smoothingRadius: float = const.smoothingRadius
    restDensity: float = const.restDensity
    gasConstant: float = const.gasConstant
    baseGravity: float = const.baseGravity
    damping: float = const.damping
    maxSpeed: float = const.maxSpeed
    spawnVelocityJitter: tuple[float, float] = field(
        default_factory=lambda: const.spawnVelocityJitter
    )
    spawnSizeRange: tuple[float, float] = field(
        default_factory=lambda: const.spawnSizeRange
    )
    neighborSearch: str = 'allPairs'
    timeStep: float = const.fixedTimeStep
    endTime: float = 10.0
    outputInterval: float = 1.0 / 30.0
    seed: int | None = None

    def validate(self) -> None:
        '''
        Reject configurations the solver cannot run.

        Raises:
        -------
        ValueError : If any extent, capacity, radius or time step is
            non-positive, or the neighbor search name is unknown
        '''
        if self.domainWidth <= 0.0 or self.domainHeight <= 0.0:
            raise ValueError(
                f'Domain must have positive extent, got '
                f'{self.domainWidth} x {self.domainHeight}'
            )
        if self.maxParticles <= 0:
            raise ValueError(f'maxParticles must be positive, got {self.maxParticles}')
        if not 0 <= self.initialParticles <= self.maxParticles:
            raise ValueError(
                f'initialParticles must lie in [0, {self.maxParticles}], '
                f'got {self.initialParticles}'
            )
        if self.smoothingRadius <= 0.0:
            raise ValueError(f'smoothingRadius must be positive, got {self.smoothingRadius}')
        if self.timeStep <= 0.0:
            raise ValueError(f'timeStep must be positive, got {self.timeStep}')
        if not 0.0 < self.damping <= 1.0:
            raise ValueError(f'damping must lie in (0, 1], got {self.damping}')
        if self.neighborSearch not in neighborSearchTypes:
            raise ValueError(
                f'Unknown neighborSearch {self.neighborSearch!r}, '
                f'expected one of {neighborSearchTypes}'
            )

    @classmethod
    def small(cls) -> SimulationConfig:
        '''Small window and population for quick runs.'''
        return cls(
            domainWidth=640.0,
            domainHeight=360.0,
            maxParticles=120,
            initialParticles=30,
            endTime=5.0,
        )

    @classmethod
    def standard(cls) -> SimulationConfig:
        '''Full HD-ish window with the default 300 particle capacity.'''
        return cls(endTime=10.0)

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'domain', 'sph', 'fluid', 'spawn' and 'simulation'
        sections; missing keys keep their defaults.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded and validated configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data)

    @classmethod
    def fromDict(cls, data: dict) -> SimulationConfig:
        '''Build a configuration from already-parsed JSON sections.'''
        defaults = cls()
        domainSection = data.get('domain', {})
        sphSection = data.get('sph', {})
        fluidSection = data.get('fluid', {})
        spawnSection = data.get('spawn', {})
        simSection = data.get('simulation', {})

        config = cls(
            domainWidth=domainSection.get('width', defaults.domainWidth),
            domainHeight=domainSection.get('height', defaults.domainHeight),
            maxParticles=spawnSection.get('maxParticles', defaults.maxParticles),
            initialParticles=spawnSection.get('initialParticles', defaults.initialParticles),
            smoothingRadius=sphSection.get('smoothingRadius', defaults.smoothingRadius),
            restDensity=fluidSection.get('restDensity', defaults.restDensity),
            gasConstant=fluidSection.get('gasConstant', defaults.gasConstant),
            baseGravity=fluidSection.get('gravity', defaults.baseGravity),
            damping=sphSection.get('damping', defaults.damping),
            maxSpeed=sphSection.get('maxSpeed', defaults.maxSpeed),
            spawnVelocityJitter=tuple(
                spawnSection.get('velocityJitter', defaults.spawnVelocityJitter)
            ),
            spawnSizeRange=tuple(spawnSection.get('sizeRange', defaults.spawnSizeRange)),
            neighborSearch=sphSection.get('neighborSearch', defaults.neighborSearch),
            timeStep=simSection.get('timeStep', defaults.timeStep),
            endTime=simSection.get('endTime', defaults.endTime),
            outputInterval=simSection.get('outputInterval', defaults.outputInterval),
            seed=simSection.get('seed', defaults.seed),
        )
        config.validate()
        return config


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostics for one completed tick.

    Parameters:
    -----------
    time : float
        Simulation time after the tick [s]
    step : int
        Number of completed ticks
    dt : float
        Length of this tick [s]
    nParticles : int
        Live particles after the tick
    nSpawned : int
        Particles created during the tick
    nEvicted : int
        Particles removed during the tick (capacity and settling)
    kineticEnergy : float
        Sum of 0.5 * |v|^2 over particles (unit mass)
    maxSpeed : float
        Largest particle speed [px/s]
    meanDensity : float
        Mean smoothed density
    viscosity : float
        Effective viscosity coefficient used this tick
    gravity : float
        Effective gravity used this tick [px/s^2]
    rolledBack : bool
        True if the kinematic update was abandoned on a numeric fault
    '''

    time: float
    step: int
    dt: float
    nParticles: int
    nSpawned: int
    nEvicted: int
    kineticEnergy: float
    maxSpeed: float
    meanDensity: float
    viscosity: float
    gravity: float
    rolledBack: bool = False


######################################################################
# -- Solver Protocol -- #
######################################################################

class LiquidSimulation(Protocol):
    '''Protocol for frame-stepped liquid solvers.'''

    def initialize(self) -> None:
        '''Seed the initial population and compute its density.'''
        ...

    def step(self, dt: float, audio: AudioFrame, inputState: InputState) -> SimulationState:
        '''Advance one tick and return its diagnostics.'''
        ...

    def snapshot(self) -> ParticleSnapshot:
        '''Read-only particle state of the last completed tick.'''
        ...

    @property
    def time(self) -> float:
        '''Current simulation time [s].'''
        ...
