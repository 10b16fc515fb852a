# -- SPH Particle Store -- #

'''
Fixed-capacity particle arena for the liquid simulation.

Particle attributes live in preallocated NumPy arrays indexed by slot.
Slots are stable for a particle's lifetime; freed slots go back on an
explicit free-list so spawning never reallocates. Every spawn stamps its
slot with a monotonically increasing sequence number, and a deque of
(slot, sequence) entries records insertion order so the oldest live
particle can be evicted in O(1) amortized time.

The renderer never touches the store directly: it receives a
ParticleSnapshot of copied, read-only arrays in insertion order.
'''

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np

from audioVisuals.LiquidSim import constants as const


######################################################################
# -- Renderer Snapshot -- #
######################################################################

@dataclass(frozen=True)
class ParticleSnapshot:
    '''
    Read-only view of the particles after a completed tick.

    Arrays are copies ordered oldest to newest. They are only valid for
    the tick they were taken in: the store may grow or shrink before
    the next one.

    Parameters:
    -----------
    time : float
        Simulation time of the snapshot [s]
    positions : np.ndarray
        Positions [px], shape (N, 2)
    velocities : np.ndarray
        Velocities [px/s], shape (N, 2)
    densities : np.ndarray
        Smoothed densities, shape (N,)
    pressures : np.ndarray
        Pressures, shape (N,)
    hues : np.ndarray
        Hues [deg], shape (N,)
    sizes : np.ndarray
        Radii [px], shape (N,)
    restDensity : float
        Rest density used to derive opacity
    '''

    time: float
    positions: np.ndarray
    velocities: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray
    hues: np.ndarray
    sizes: np.ndarray
    restDensity: float

    @property
    def nParticles(self) -> int:
        '''Number of particles in the snapshot.'''
        return self.positions.shape[0]

    def opacity(self) -> np.ndarray:
        '''
        Per-particle opacity for the renderer.

        alpha = min(1, rho / rho_0) * maxOpacity

        Returns:
        --------
        np.ndarray : Opacities in [0, maxOpacity], shape (N,)
        '''
        return np.minimum(1.0, self.densities / self.restDensity) * const.maxOpacity


######################################################################
# -- Particle Store -- #
######################################################################

class ParticleStore:
    '''
    Bounded particle collection with FIFO capacity eviction.

    Parameters:
    -----------
    capacity : int
        Maximum number of live particles
    rng : np.random.Generator | None
        Random source for spawn jitter (defaults to a fresh generator)
    velocityJitter : tuple[float, float]
        Half-ranges (jx, jy) of the uniform initial velocity [px/s]
    sizeRange : tuple[float, float]
        Range of the uniform initial size [px]
    '''

    def __init__(
        self,
        capacity: int,
        rng: np.random.Generator | None = None,
        velocityJitter: tuple[float, float] = const.spawnVelocityJitter,
        sizeRange: tuple[float, float] = const.spawnSizeRange,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f'capacity must be positive, got {capacity}')

        self._capacity = capacity
        self._rng = rng if rng is not None else np.random.default_rng()
        self._velocityJitter = np.asarray(velocityJitter, dtype=float)
        self._sizeRange = sizeRange

        self.positions = np.zeros((capacity, 2))
        self.velocities = np.zeros((capacity, 2))
        self.densities = np.zeros(capacity)
        self.pressures = np.zeros(capacity)
        self.hues = np.zeros(capacity)
        self.sizes = np.zeros(capacity)
        self.alive = np.zeros(capacity, dtype=bool)
        self.sequence = np.full(capacity, -1, dtype=np.int64)

        # Pop from the end so slot 0 is handed out first
        self._freeSlots: list[int] = list(range(capacity - 1, -1, -1))
        self._order: deque[tuple[int, int]] = deque()
        self._nextSequence = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        '''Maximum number of live particles.'''
        return self._capacity

    @property
    def count(self) -> int:
        '''Number of live particles.'''
        return self._count

    @property
    def isFull(self) -> bool:
        '''True when the next spawn will evict the oldest particle.'''
        return self._count >= self._capacity

    def __len__(self) -> int:
        return self._count

    ######################################################################
    # -- Spawn / Evict -- #
    ######################################################################

    def spawn(self, x: float, y: float, hue: float) -> int:
        '''
        Append a particle at (x, y).

        When the store is full the oldest particle is evicted first, so
        the call always succeeds and the count never exceeds capacity.
        Density and pressure start at zero until the next density pass.

        Parameters:
        -----------
        x, y : float
            Spawn position [px]
        hue : float
            Hue [deg], wrapped into [0, 360)

        Returns:
        --------
        int : Slot index of the new particle
        '''
        if self.isFull:
            self.evictOldest()

        slot = self._freeSlots.pop()
        jx, jy = self._velocityJitter

        self.positions[slot] = (x, y)
        self.velocities[slot] = (
            self._rng.uniform(-jx, jx),
            self._rng.uniform(-jy, jy),
        )
        self.densities[slot] = 0.0
        self.pressures[slot] = 0.0
        self.hues[slot] = hue % 360.0
        self.sizes[slot] = self._rng.uniform(*self._sizeRange)
        self.alive[slot] = True
        self.sequence[slot] = self._nextSequence

        self._order.append((slot, self._nextSequence))
        self._nextSequence += 1
        self._count += 1
        return slot

    def evictOldest(self) -> int | None:
        '''
        Remove the oldest live particle.

        Entries for particles already drained by settling are discarded
        lazily as they reach the front of the order queue.

        Returns:
        --------
        int | None : Freed slot, or None if the store is empty
        '''
        while self._order:
            slot, seq = self._order.popleft()
            if self.alive[slot] and self.sequence[slot] == seq:
                self._release(slot)
                return slot
        return None

    def evictSettled(
        self,
        domainHeight: float,
        epsilon: float = const.settleEpsilon,
        speedThreshold: float = const.settleSpeed,
    ) -> int:
        '''
        Drain particles resting on the floor.

        A particle is settled when it lies within `epsilon` of the lower
        boundary and both velocity components are below `speedThreshold`.

        Parameters:
        -----------
        domainHeight : float
            y coordinate of the lower boundary [px]
        epsilon : float
            Resting band above the floor [px]
        speedThreshold : float
            Per-component speed limit [px/s]

        Returns:
        --------
        int : Number of particles removed
        '''
        settled = (
            self.alive
            & (self.positions[:, 1] >= domainHeight - epsilon)
            & (np.abs(self.velocities[:, 0]) < speedThreshold)
            & (np.abs(self.velocities[:, 1]) < speedThreshold)
        )
        slots = np.flatnonzero(settled)
        for slot in slots:
            self._release(int(slot))

        # Keep the order queue from accumulating dead entries
        if len(self._order) > 2 * self._capacity:
            self._compactOrder()

        return len(slots)

    def clear(self) -> None:
        '''Remove every particle.'''
        for slot in np.flatnonzero(self.alive):
            self._release(int(slot))
        self._order.clear()

    def _release(self, slot: int) -> None:
        '''Return a slot to the free-list.'''
        self.alive[slot] = False
        self.sequence[slot] = -1
        self._freeSlots.append(slot)
        self._count -= 1

    def _compactOrder(self) -> None:
        '''Drop order entries whose particle is gone.'''
        self._order = deque(
            (slot, seq) for slot, seq in self._order
            if self.alive[slot] and self.sequence[slot] == seq
        )

    ######################################################################
    # -- Access -- #
    ######################################################################

    def activeSlots(self) -> np.ndarray:
        '''
        Slots of the live particles, oldest first.

        Returns:
        --------
        np.ndarray : Slot indices, shape (count,)
        '''
        slots = np.flatnonzero(self.alive)
        return slots[np.argsort(self.sequence[slots], kind='stable')]

    def snapshot(self, time: float, restDensity: float) -> ParticleSnapshot:
        '''
        Copy the live particles into a read-only snapshot.

        Parameters:
        -----------
        time : float
            Simulation time to stamp on the snapshot [s]
        restDensity : float
            Rest density used by the renderer for opacity

        Returns:
        --------
        ParticleSnapshot : Copied arrays in insertion order
        '''
        slots = self.activeSlots()
        arrays = []
        for source in (
            self.positions, self.velocities, self.densities,
            self.pressures, self.hues, self.sizes,
        ):
            copy = source[slots]
            copy.setflags(write=False)
            arrays.append(copy)

        positions, velocities, densities, pressures, hues, sizes = arrays
        return ParticleSnapshot(
            time=time,
            positions=positions,
            velocities=velocities,
            densities=densities,
            pressures=pressures,
            hues=hues,
            sizes=sizes,
            restDensity=restDensity,
        )

    def kineticEnergy(self) -> float:
        '''
        Kinetic energy of the live particles (unit mass).

        KE = (1/2) * sum_i |v_i|^2
        '''
        vels = self.velocities[self.alive]
        return 0.5 * float(np.sum(vels * vels))

    def maxSpeed(self) -> float:
        '''
        Maximum velocity magnitude among live particles.

        Returns:
        --------
        float : Maximum speed [px/s]
        '''
        vels = self.velocities[self.alive]
        if len(vels) == 0:
            return 0.0
        return float(np.max(np.linalg.norm(vels, axis=1)))

    def meanDensity(self) -> float:
        '''Mean smoothed density of live particles (0 when empty).'''
        if self._count == 0:
            return 0.0
        return float(np.mean(self.densities[self.alive]))
