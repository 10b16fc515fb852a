# -- Audio-Reactive Liquid Solver -- #

'''
Frame-stepped SPH solver for the viscous liquid effect.

One call to step() is one frame. External signals are snapshotted on
entry and every stage runs to completion before the next begins; there
is no suspension point and no shared state with the renderer, which
only ever sees a copied ParticleSnapshot.

Algorithm per tick:
    1. Map audio/input onto SolverConstants and spawn requests
    2. Spawn (evicting the oldest particles at capacity)
    3. Neighbor query and density summation
    4. Pressure from the linear equation of state
    5. Forces (pressure + viscosity + gravity)
    6. Integrate (damped symplectic Euler)
    7. Enforce domain boundaries
    8. Update cosmetic hue and size
    9. Drain particles that have settled on the floor

Stages 5-7 operate on gathered copies of the live particle arrays. If
they produce a non-finite position or velocity, the kinematic update
is discarded and the store keeps its pre-tick positions and
velocities; the next tick starts from there with fresh inputs.
'''

from __future__ import annotations

import logging

import numpy as np

from audioVisuals.LiquidSim import constants as const
from audioVisuals.LiquidSim.signals import AudioFrame, InputState
from audioVisuals.LiquidSim.sph.protocols import SimulationConfig, SimulationState
from audioVisuals.LiquidSim.sph.particles import ParticleStore, ParticleSnapshot
from audioVisuals.LiquidSim.sph.kernels import SphKernel, QuadraticFalloffKernel
from audioVisuals.LiquidSim.sph.neighborSearch import (
    NeighborSearch,
    createNeighborSearch,
    pairGeometry,
)
from audioVisuals.LiquidSim.sph.density import computeDensity, computePressure
from audioVisuals.LiquidSim.sph.forces import computeForces
from audioVisuals.LiquidSim.sph.timeIntegration import DampedSymplecticEuler
from audioVisuals.LiquidSim.sph.boundaryHandling import BoundaryHandler
from audioVisuals.LiquidSim.sph.reactiveMapper import (
    ReactiveParameterMapper,
    SolverConstants,
    SpawnRequest,
)

logger = logging.getLogger(__name__)


class LiquidSolver:
    '''
    Audio-reactive SPH liquid solver.

    Owns the particle store and every solver stage. Drive it with one
    step() per rendered frame and hand snapshot() to the renderer.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (domain, capacity, fluid constants)
    kernel : SphKernel | None
        Density kernel (defaults to QuadraticFalloffKernel)
    neighborSearch : NeighborSearch | None
        Pair search (defaults to the one named in config)
    rng : np.random.Generator | None
        Random source for spawning (defaults to one seeded from config.seed)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        kernel: SphKernel | None = None,
        neighborSearch: NeighborSearch | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._kernel = kernel or QuadraticFalloffKernel()
        self._neighborSearch = neighborSearch or createNeighborSearch(
            config.neighborSearch, config.smoothingRadius
        )
        self._store = ParticleStore(
            capacity=config.maxParticles,
            rng=self._rng,
            velocityJitter=config.spawnVelocityJitter,
            sizeRange=config.spawnSizeRange,
        )
        self._mapper = ReactiveParameterMapper(config)
        self._integrator = DampedSymplecticEuler(
            damping=config.damping,
            maxSpeed=config.maxSpeed,
        )
        self._boundaryHandler = BoundaryHandler(config.domainWidth, config.domainHeight)

        self._pendingSpawns: list[SpawnRequest] = []
        self._constants = self._mapper.solverConstants(AudioFrame.silent(), 0.0)
        self._time: float = 0.0
        self._step: int = 0

    ######################################################################
    # -- Initialization -- #
    ######################################################################

    def initialize(self) -> None:
        '''
        Seed the initial population and compute its density.

        Particles are scattered over the middle of the upper part of the
        domain with random hues.
        '''
        cfg = self._config
        self._store.clear()
        self._pendingSpawns.clear()
        self._time = 0.0
        self._step = 0

        for _ in range(cfg.initialParticles):
            x = self._rng.uniform(cfg.domainWidth * 0.3, cfg.domainWidth * 0.7)
            y = self._rng.uniform(50.0, 150.0)
            self._spawn(SpawnRequest(x, y, self._rng.uniform(0.0, 360.0), 'seed'))

        slots = self._store.activeSlots()
        densities, pressures, _ = self._densityPass(self._store.positions[slots])
        self._store.densities[slots] = densities
        self._store.pressures[slots] = pressures

        logger.debug(
            'Seeded %d particles in a %.0f x %.0f domain (capacity %d)',
            self._store.count, cfg.domainWidth, cfg.domainHeight, cfg.maxParticles,
        )

    def requestSpawn(self, x: float, y: float, hue: float) -> None:
        '''Queue a particle to be created during the next tick's spawn stage.'''
        self._pendingSpawns.append(SpawnRequest(x, y, hue, 'api'))

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self, dt: float, audio: AudioFrame, inputState: InputState) -> SimulationState:
        '''
        Advance one tick.

        Parameters:
        -----------
        dt : float
            Tick length [s], >= 0
        audio : AudioFrame
            Audio features for this tick
        inputState : InputState
            Pointer state for this tick

        Returns:
        --------
        SimulationState : Diagnostics after the tick
        '''
        if dt < 0.0:
            raise ValueError(f'dt must be non-negative, got {dt}')

        store = self._store

        # 1. External signals -> constants and spawn requests
        update = self._mapper.map(audio, inputState, self._time, self._rng, store.count)
        self._constants = update.constants

        # 2. Spawn, evicting the oldest at capacity
        requests = self._pendingSpawns + update.spawnRequests
        self._pendingSpawns = []
        nEvicted = 0
        for request in requests:
            if store.isFull:
                nEvicted += 1
            self._spawn(request)

        slots = store.activeSlots()
        positions = store.positions[slots]
        velocities = store.velocities[slots]

        # 3-4. Density and pressure
        densities, pressures, pairs = self._densityPass(positions)
        store.densities[slots] = densities
        store.pressures[slots] = pressures

        # 5-6. Forces and integration on the gathered copies
        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            forces = computeForces(
                positions, velocities, densities, pressures, pairs, self._constants,
            )
            self._integrator.integrate(positions, velocities, forces, dt)

        rolledBack = not (np.isfinite(positions).all() and np.isfinite(velocities).all())
        if rolledBack:
            logger.warning(
                'Non-finite particle state at t=%.4f s (step %d, %d particles); '
                'keeping pre-tick kinematics',
                self._time, self._step, len(slots),
            )
        else:
            # 7. Boundaries
            self._boundaryHandler.enforceBoundary(positions, velocities)
            store.positions[slots] = positions
            store.velocities[slots] = velocities

        self._time += dt
        self._step += 1

        # 8. Cosmetic update
        self._updateAppearance(slots, audio, dt)

        # 9. Settle drain
        nEvicted += store.evictSettled(self._config.domainHeight)

        return SimulationState(
            time=self._time,
            step=self._step,
            dt=dt,
            nParticles=store.count,
            nSpawned=len(requests),
            nEvicted=nEvicted,
            kineticEnergy=store.kineticEnergy(),
            maxSpeed=store.maxSpeed(),
            meanDensity=store.meanDensity(),
            viscosity=self._constants.viscosity,
            gravity=self._constants.gravity,
            rolledBack=rolledBack,
        )

    ######################################################################
    # -- Stages -- #
    ######################################################################

    def _spawn(self, request: SpawnRequest) -> int:
        '''Create a particle, clamping its position into the domain.'''
        cfg = self._config
        x = min(max(float(request.x), 0.0), cfg.domainWidth)
        y = min(max(float(request.y), 0.0), cfg.domainHeight)
        return self._store.spawn(x, y, request.hue)

    def _densityPass(
        self, positions: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray, tuple[np.ndarray, np.ndarray]]:
        '''Neighbor query, density summation and equation of state.'''
        h = self._constants.smoothingRadius

        self._neighborSearch.build(positions)
        pairs = self._neighborSearch.queryPairs(h)
        _, distances = pairGeometry(positions, *pairs)

        densities = computeDensity(len(positions), pairs, distances, h, self._kernel)
        pressures = computePressure(
            densities, self._constants.gasConstant, self._constants.restDensity,
        )
        return (densities, pressures, pairs)

    def _updateAppearance(self, slots: np.ndarray, audio: AudioFrame, dt: float) -> None:
        '''
        Drift hues and pulse sizes with the audio.

        hue  += 20 * dt + 10 * centroid          (mod 360)
        size  = 4 + 4 * rms + 2 * sin(5 t + 0.01 x)
        '''
        store = self._store
        hues = store.hues[slots] + dt * const.hueDriftRate + audio.centroid * const.hueCentroidShift
        store.hues[slots] = np.mod(hues, 360.0)

        x = store.positions[slots, 0]
        sizes = (
            const.sizeBase
            + audio.rms * const.sizeRmsGain
            + np.sin(self._time * const.sizeWobbleRate + x * const.sizeWobbleSpatial) * const.sizeWobble
        )
        store.sizes[slots] = np.maximum(sizes, const.sizeFloor)

    ######################################################################
    # -- Properties -- #
    ######################################################################

    def snapshot(self) -> ParticleSnapshot:
        '''Read-only particle state for the renderer.'''
        return self._store.snapshot(self._time, self._config.restDensity)

    @property
    def store(self) -> ParticleStore:
        '''Access the particle store.'''
        return self._store

    @property
    def constants(self) -> SolverConstants:
        '''Solver constants used by the last tick.'''
        return self._constants

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def time(self) -> float:
        '''Current simulation time [s].'''
        return self._time

    @property
    def stepCount(self) -> int:
        '''Number of completed ticks.'''
        return self._step
