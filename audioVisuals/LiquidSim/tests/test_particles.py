# -- Particle Store Tests -- #

'''
Spawn, FIFO capacity eviction, settle draining and snapshots of the
fixed-capacity particle store.
'''

import numpy as np
import pytest

from audioVisuals.LiquidSim.sph.particles import ParticleStore


def makeStore(capacity: int, **kwargs) -> ParticleStore:
    return ParticleStore(capacity, rng=np.random.default_rng(3), **kwargs)


def testSpawnSamplesJitterAndSize():
    '''New particles get bounded velocity jitter, sized within range, zero density.'''
    store = makeStore(50, velocityJitter=(50.0, 20.0), sizeRange=(4.0, 8.0))
    for k in range(50):
        store.spawn(10.0 + k, 20.0, 370.0)

    slots = store.activeSlots()
    assert store.count == 50
    assert np.all(np.abs(store.velocities[slots, 0]) <= 50.0)
    assert np.all(np.abs(store.velocities[slots, 1]) <= 20.0)
    assert np.all((store.sizes[slots] >= 4.0) & (store.sizes[slots] <= 8.0))
    assert np.all(store.densities[slots] == 0.0)
    assert np.all(store.pressures[slots] == 0.0)
    # Hue wrapped into [0, 360)
    assert np.allclose(store.hues[slots], 10.0)


def testCapacityEvictsOldestFirst():
    '''Spawning capacity + 5 keeps only the newest `capacity` particles.'''
    store = makeStore(10)
    for k in range(15):
        store.spawn(float(k), 0.0, 0.0)

    assert store.count == 10
    assert store.isFull
    xs = store.positions[store.activeSlots(), 0]
    np.testing.assert_array_equal(xs, np.arange(5.0, 15.0))


def testEvictionReusesSlots():
    '''Slots freed by eviction are handed back out, the arena never grows.'''
    store = makeStore(4)
    firstSlots = {store.spawn(float(k), 0.0, 0.0) for k in range(4)}
    laterSlots = {store.spawn(float(k), 0.0, 0.0) for k in range(4, 12)}

    assert firstSlots == {0, 1, 2, 3}
    assert laterSlots <= firstSlots
    assert store.positions.shape == (4, 2)


def testEvictOldestSkipsDrainedParticles():
    '''FIFO eviction ignores particles that were already drained by settling.'''
    store = makeStore(3, velocityJitter=(0.0, 0.0))
    a = store.spawn(1.0, 100.0, 0.0)
    store.spawn(2.0, 50.0, 0.0)
    store.spawn(3.0, 50.0, 0.0)

    # Particle a rests on the floor at y = 100
    assert store.evictSettled(domainHeight=100.0) == 1
    assert not store.alive[a]

    store.spawn(4.0, 50.0, 0.0)
    store.spawn(5.0, 50.0, 0.0)  # full: evicts the particle at x = 2

    xs = store.positions[store.activeSlots(), 0]
    np.testing.assert_array_equal(xs, [3.0, 4.0, 5.0])


def testEvictOldestOnEmptyStore():
    store = makeStore(2)
    assert store.evictOldest() is None


def testEvictSettledRules():
    '''Only slow particles within epsilon of the floor are drained.'''
    store = makeStore(4, velocityJitter=(0.0, 0.0))
    resting = store.spawn(10.0, 98.0, 0.0)
    bouncing = store.spawn(20.0, 98.0, 0.0)
    sliding = store.spawn(30.0, 98.0, 0.0)
    hovering = store.spawn(40.0, 80.0, 0.0)

    store.velocities[resting] = (3.0, -2.0)
    store.velocities[bouncing] = (0.0, -40.0)
    store.velocities[sliding] = (25.0, 0.0)

    removed = store.evictSettled(domainHeight=100.0, epsilon=5.0, speedThreshold=10.0)

    assert removed == 1
    assert not store.alive[resting]
    assert store.alive[bouncing] and store.alive[sliding] and store.alive[hovering]


def testSnapshotIsReadOnlyCopy():
    '''The renderer snapshot is ordered oldest first and cannot be written.'''
    store = makeStore(5)
    for k in range(3):
        store.spawn(float(k), 1.0, 0.0)
    store.densities[store.activeSlots()] = [500.0, 1000.0, 2000.0]

    snapshot = store.snapshot(time=1.5, restDensity=1000.0)

    assert snapshot.nParticles == 3
    assert snapshot.time == 1.5
    np.testing.assert_array_equal(snapshot.positions[:, 0], [0.0, 1.0, 2.0])
    np.testing.assert_allclose(snapshot.opacity(), [0.4, 0.8, 0.8])

    with pytest.raises(ValueError):
        snapshot.positions[0, 0] = 99.0

    # Mutating the store afterwards does not touch the snapshot
    store.positions[:] = -1.0
    assert snapshot.positions[0, 0] == 0.0


def testClearEmptiesStore():
    store = makeStore(5)
    for k in range(5):
        store.spawn(float(k), 0.0, 0.0)
    store.clear()

    assert store.count == 0
    assert len(store.activeSlots()) == 0
    store.spawn(1.0, 1.0, 0.0)
    assert store.count == 1


def testInvalidCapacity():
    with pytest.raises(ValueError):
        ParticleStore(0)
