# -- Integration and Boundary Tests -- #

'''
Damped symplectic Euler, the speed clamp, and wall containment.
'''

import numpy as np
import pytest

from audioVisuals.LiquidSim.sph.timeIntegration import DampedSymplecticEuler, clampSpeed
from audioVisuals.LiquidSim.sph.boundaryHandling import BoundaryHandler


def testKickThenDriftThenDamp():
    '''Position advances with the updated velocity; damping comes last.'''
    integrator = DampedSymplecticEuler(damping=0.99, referenceRate=60.0, maxSpeed=None)
    positions = np.array([[10.0, 20.0]])
    velocities = np.array([[6.0, 0.0]])
    forces = np.array([[0.0, 600.0]])
    dt = 0.1

    integrator.integrate(positions, velocities, forces, dt)

    factor = 0.99 ** 6.0
    np.testing.assert_allclose(positions, [[10.6, 26.0]])
    np.testing.assert_allclose(velocities, [[6.0 * factor, 60.0 * factor]])


def testDampingFactorAtReferenceRate():
    integrator = DampedSymplecticEuler(damping=0.99, referenceRate=60.0)

    assert integrator.dampingFactor(1.0 / 60.0) == pytest.approx(0.99)
    assert integrator.dampingFactor(1.0 / 30.0) == pytest.approx(0.99 ** 2)
    assert integrator.dampingFactor(0.0) == 1.0


def testZeroDtLeavesStateUnchanged():
    integrator = DampedSymplecticEuler()
    positions = np.array([[1.0, 2.0], [3.0, 4.0]])
    velocities = np.array([[-7.0, 8.0], [9.0, -10.0]])
    forces = np.array([[1e6, -1e6], [5.0, 5.0]])

    integrator.integrate(positions, velocities, forces, 0.0)

    np.testing.assert_array_equal(positions, [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(velocities, [[-7.0, 8.0], [9.0, -10.0]])


def testSpeedClampPreservesDirection():
    velocities = np.array([[3000.0, 4000.0], [30.0, 40.0]])
    clampSpeed(velocities, 1000.0)

    np.testing.assert_allclose(velocities, [[600.0, 800.0], [30.0, 40.0]])


def testIntegratorAppliesClamp():
    integrator = DampedSymplecticEuler(damping=1.0, maxSpeed=100.0)
    positions = np.zeros((1, 2))
    velocities = np.zeros((1, 2))

    integrator.integrate(positions, velocities, np.array([[1e5, 0.0]]), 0.1)

    assert np.linalg.norm(velocities[0]) == pytest.approx(100.0)


def testSideWallsReflectAndAttenuate():
    handler = BoundaryHandler(100.0, 50.0)
    positions = np.array([[-5.0, 10.0], [120.0, 10.0]])
    velocities = np.array([[-10.0, 3.0], [10.0, 3.0]])

    handler.enforceBoundary(positions, velocities)

    np.testing.assert_array_equal(positions, [[0.0, 10.0], [100.0, 10.0]])
    np.testing.assert_allclose(velocities, [[5.0, 3.0], [-5.0, 3.0]])


def testCeilingAndFloor():
    '''Top and floor reflect vy by -0.3; landing also damps vx by 0.8.'''
    handler = BoundaryHandler(100.0, 50.0)
    positions = np.array([[20.0, -3.0], [30.0, 60.0]])
    velocities = np.array([[10.0, -10.0], [10.0, 20.0]])

    handler.enforceBoundary(positions, velocities)

    np.testing.assert_array_equal(positions, [[20.0, 0.0], [30.0, 50.0]])
    np.testing.assert_allclose(velocities, [[10.0, 3.0], [8.0, -6.0]])


def testCornerHitsBothAxes():
    handler = BoundaryHandler(100.0, 50.0)
    positions = np.array([[150.0, 80.0]])
    velocities = np.array([[20.0, 20.0]])

    handler.enforceBoundary(positions, velocities)

    np.testing.assert_array_equal(positions, [[100.0, 50.0]])
    np.testing.assert_allclose(velocities, [[-10.0 * 0.8, -6.0]])


def testInteriorParticlesUntouched():
    handler = BoundaryHandler(100.0, 50.0)
    positions = np.array([[0.0, 0.0], [100.0, 50.0], [40.0, 25.0]])
    velocities = np.array([[-1.0, -1.0], [1.0, 1.0], [2.0, 2.0]])
    before = (positions.copy(), velocities.copy())

    handler.enforceBoundary(positions, velocities)

    np.testing.assert_array_equal(positions, before[0])
    np.testing.assert_array_equal(velocities, before[1])


def testContainmentForRandomOvershoot():
    rng = np.random.default_rng(2)
    handler = BoundaryHandler(320.0, 240.0)
    positions = rng.uniform(-500.0, 800.0, size=(500, 2))
    velocities = rng.normal(0.0, 300.0, size=(500, 2))

    handler.enforceBoundary(positions, velocities)

    assert np.all((positions[:, 0] >= 0.0) & (positions[:, 0] <= 320.0))
    assert np.all((positions[:, 1] >= 0.0) & (positions[:, 1] <= 240.0))
