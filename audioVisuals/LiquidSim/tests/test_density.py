# -- Density and Pressure Tests -- #

'''
Quadratic kernel, density summation with its floor, and the linear
equation of state.
'''

import numpy as np
import pytest

from audioVisuals.LiquidSim.sph.kernels import QuadraticFalloffKernel
from audioVisuals.LiquidSim.sph.neighborSearch import AllPairsSearch, pairGeometry
from audioVisuals.LiquidSim.sph.density import computeDensity, computePressure


def densitiesFor(positions: np.ndarray, h: float) -> np.ndarray:
    search = AllPairsSearch()
    search.build(positions)
    pairs = search.queryPairs(h)
    _, distances = pairGeometry(positions, *pairs)
    return computeDensity(len(positions), pairs, distances, h)


def testKernelShape():
    kernel = QuadraticFalloffKernel()

    assert kernel.evaluate(0.0, 30.0) == 1.0
    assert kernel.evaluate(15.0, 30.0) == pytest.approx(0.25)
    assert kernel.evaluate(30.0, 30.0) == 0.0
    assert kernel.evaluate(45.0, 30.0) == 0.0

    r = np.linspace(0.0, 40.0, 81)
    w = kernel.evaluateBatch(r, 30.0)
    assert np.all(np.diff(w) <= 0.0)
    np.testing.assert_allclose(w, [kernel.evaluate(x, 30.0) for x in r])


def testIsolatedParticleHasUnitDensity():
    densities = densitiesFor(np.array([[10.0, 10.0], [200.0, 200.0]]), 30.0)
    np.testing.assert_allclose(densities, [1.0, 1.0])


def testPairDensity():
    '''Two particles h/2 apart each see 1 + (1 - 0.5)^2.'''
    densities = densitiesFor(np.array([[0.0, 0.0], [15.0, 0.0]]), 30.0)
    np.testing.assert_allclose(densities, [1.25, 1.25])


def testCoincidentParticles():
    '''Coincident particles contribute the full kernel weight to each other.'''
    densities = densitiesFor(np.array([[5.0, 5.0], [5.0, 5.0], [5.0, 5.0]]), 30.0)
    np.testing.assert_allclose(densities, [3.0, 3.0, 3.0])


def testDensityFloor():
    '''Density never drops below 1, even with a kernel that weighs nothing.'''

    class ZeroKernel:
        def evaluate(self, r, h):
            return 0.0

        def evaluateBatch(self, r, h):
            return np.zeros_like(r)

    densities = computeDensity(
        3, (np.array([0]), np.array([1])), np.array([1.0]), 30.0, kernel=ZeroKernel(),
    )
    np.testing.assert_array_equal(densities, [1.0, 1.0, 1.0])


def testDensityLowerBoundRandomClouds():
    rng = np.random.default_rng(5)
    for _ in range(10):
        positions = rng.uniform(0.0, 100.0, size=(rng.integers(1, 60), 2))
        assert np.all(densitiesFor(positions, 30.0) >= 1.0)


def testPressureEquationOfState():
    densities = np.array([1.0, 999.0, 1000.0, 1001.5])
    pressures = computePressure(densities, gasConstant=2000.0, restDensity=1000.0)

    np.testing.assert_allclose(pressures, [-1998000.0, -2000.0, 0.0, 3000.0])
