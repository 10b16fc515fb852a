# -- Reactive Parameter Mapping -- #

'''
Maps external audio and pointer signals onto solver inputs.

Once per tick, before any numerical stage runs, the mapper turns the
audio frame, the pointer state and the simulation clock into:

1. SolverConstants -- the fluid constants used by every later stage
   (bass thickens the liquid and makes it fall faster, a fixed-rate
   throb flips phase on beats)
2. SpawnRequests -- drag trails, click bursts and bass-triggered drips

Nothing downstream reads audio or input directly, so the density,
pressure, force, integration and boundary stages stay pure numerical
code.
'''

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from audioVisuals.LiquidSim import constants as const
from audioVisuals.LiquidSim.signals import AudioFrame, InputState
from audioVisuals.LiquidSim.sph.protocols import SimulationConfig


######################################################################
# -- Mapper Outputs -- #
######################################################################

@dataclass(frozen=True)
class SolverConstants:
    '''
    Fluid constants for a single tick.

    Parameters:
    -----------
    smoothingRadius : float
        Interaction cutoff h [px]
    restDensity : float
        Density with zero pressure
    gasConstant : float
        Equation of state stiffness
    gravity : float
        Effective downward acceleration [px/s^2]
    viscosity : float
        Effective viscosity coefficient
    baseViscosity : float
        Bass-derived viscosity before loudness and throb scaling
    throb : float
        Oscillating viscosity multiplier
    '''

    smoothingRadius: float
    restDensity: float
    gasConstant: float
    gravity: float
    viscosity: float
    baseViscosity: float = 0.0
    throb: float = 1.0


@dataclass(frozen=True)
class SpawnRequest:
    '''A particle to create at (x, y) with the given hue; source is informational.'''

    x: float
    y: float
    hue: float
    source: str = 'api'


@dataclass(frozen=True)
class ReactiveUpdate:
    '''Everything the mapper derives for one tick.'''

    constants: SolverConstants
    spawnRequests: list[SpawnRequest] = field(default_factory=list)


######################################################################
# -- Mapper -- #
######################################################################

class ReactiveParameterMapper:
    '''
    Derives solver constants and spawn requests from external signals.

    The mapping is a pure function of (audio, input, simTime) apart from
    the random draws, which all come from the generator passed in.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (domain, capacity, fixed constants)
    '''

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config

    def map(
        self,
        audio: AudioFrame,
        inputState: InputState,
        simTime: float,
        rng: np.random.Generator,
        particleCount: int = 0,
    ) -> ReactiveUpdate:
        '''
        Map one tick of external signals.

        Parameters:
        -----------
        audio : AudioFrame
            Audio features for this tick
        inputState : InputState
            Pointer state for this tick
        simTime : float
            Simulation time at the start of the tick [s]
        rng : np.random.Generator
            Random source for spawn triggers and jitter
        particleCount : int
            Live particles before spawning, gates drag trails

        Returns:
        --------
        ReactiveUpdate : Constants and spawn requests for the tick
        '''
        constants = self.solverConstants(audio, simTime)

        requests: list[SpawnRequest] = []
        requests.extend(self._dragRequests(audio, inputState, simTime, rng, particleCount))
        requests.extend(self._clickRequests(audio, inputState, simTime, rng))
        requests.extend(self._bassRequests(audio, simTime, rng))

        return ReactiveUpdate(constants=constants, spawnRequests=requests)

    def solverConstants(self, audio: AudioFrame, simTime: float) -> SolverConstants:
        '''
        Fluid constants for the given audio frame and time.

        viscosity = (0.3 + 0.7 * bass) * (1 + 0.5 * rms) * throb
        throb     = 1 + 0.3 * sin(8 * t + (pi if beat else 0))
        gravity   = baseGravity * (1 + 0.5 * bass)
        '''
        cfg = self._config

        baseViscosity = const.viscosityFloor + audio.bass * const.viscosityBassGain
        beatPhase = const.beatPhaseShift if audio.beat else 0.0
        throb = 1.0 + math.sin(simTime * const.throbFrequency + beatPhase) * const.throbAmplitude
        viscosity = baseViscosity * (1.0 + audio.rms * const.viscosityRmsGain) * throb

        gravity = cfg.baseGravity * (1.0 + audio.bass * const.gravityBassGain)

        return SolverConstants(
            smoothingRadius=cfg.smoothingRadius,
            restDensity=cfg.restDensity,
            gasConstant=cfg.gasConstant,
            gravity=gravity,
            viscosity=viscosity,
            baseViscosity=baseViscosity,
            throb=throb,
        )

    ######################################################################
    # -- Spawn Triggers -- #
    ######################################################################

    def _dragRequests(
        self,
        audio: AudioFrame,
        inputState: InputState,
        simTime: float,
        rng: np.random.Generator,
        particleCount: int,
    ) -> list[SpawnRequest]:
        '''Glistening trail behind a drag gesture, only while below capacity.'''
        if not inputState.isDragging or particleCount >= self._config.maxParticles:
            return []

        hue = (simTime * const.dragHueRate + audio.centroid * const.spawnHueSignalGain) % 360.0
        jitter = rng.uniform(
            -const.dragSpawnJitter, const.dragSpawnJitter, size=(const.dragSpawnCount, 2)
        )
        return [
            SpawnRequest(inputState.x + dx, inputState.y + dy, hue, 'drag')
            for dx, dy in jitter
        ]

    def _clickRequests(
        self,
        audio: AudioFrame,
        inputState: InputState,
        simTime: float,
        rng: np.random.Generator,
    ) -> list[SpawnRequest]:
        '''Splash of particles for each click made during this tick.'''
        requests: list[SpawnRequest] = []
        hue = (simTime * const.bassHueRate + audio.centroid * const.spawnHueSignalGain) % 360.0

        for click in inputState.recentClicks(simTime, const.clickMaxAge):
            jitter = rng.uniform(
                -const.clickBurstJitter, const.clickBurstJitter,
                size=(const.clickBurstCount, 2),
            )
            requests.extend(
                SpawnRequest(click.x + dx, click.y + dy, hue, 'click')
                for dx, dy in jitter
            )

        return requests

    def _bassRequests(
        self,
        audio: AudioFrame,
        simTime: float,
        rng: np.random.Generator,
    ) -> list[SpawnRequest]:
        '''Occasional drip from the top, more likely on heavy bass.'''
        if rng.random() >= audio.bass * const.bassSpawnProbability:
            return []

        width = self._config.domainWidth
        x = rng.uniform(width * 0.2, width * 0.8)
        hue = (simTime * const.bassHueRate + audio.rms * const.spawnHueSignalGain) % 360.0
        return [SpawnRequest(x, const.bassSpawnHeight, hue, 'bass')]
