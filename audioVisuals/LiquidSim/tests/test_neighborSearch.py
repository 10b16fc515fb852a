# -- Neighbor Search Tests -- #

'''
All-pairs and spatial hash queries against a brute-force reference.
'''

import itertools

import numpy as np
import pytest

from audioVisuals.LiquidSim.sph.neighborSearch import (
    AllPairsSearch,
    SpatialHashGrid,
    createNeighborSearch,
    pairGeometry,
)


def bruteForcePairs(positions: np.ndarray, radius: float) -> set:
    pairs = set()
    for i, j in itertools.combinations(range(len(positions)), 2):
        if np.linalg.norm(positions[i] - positions[j]) < radius:
            pairs.add((i, j))
    return pairs


@pytest.fixture
def scatteredPositions() -> np.ndarray:
    rng = np.random.default_rng(11)
    return rng.uniform(0.0, 200.0, size=(80, 2))


def testAllPairsMatchesBruteForce(scatteredPositions):
    search = AllPairsSearch()
    search.build(scatteredPositions)
    iIdx, jIdx = search.queryPairs(30.0)

    assert np.all(iIdx < jIdx)
    assert set(zip(iIdx.tolist(), jIdx.tolist())) == bruteForcePairs(scatteredPositions, 30.0)


def testSpatialHashMatchesAllPairs(scatteredPositions):
    grid = SpatialHashGrid(cellSize=30.0)
    grid.build(scatteredPositions)
    iIdx, jIdx = grid.queryPairs(30.0)

    pairs = list(zip(iIdx.tolist(), jIdx.tolist()))
    assert len(pairs) == len(set(pairs))
    assert np.all(iIdx < jIdx)
    assert set(pairs) == bruteForcePairs(scatteredPositions, 30.0)


def testRadiusIsExclusive():
    '''A pair exactly h apart is not a neighbor.'''
    positions = np.array([[0.0, 0.0], [30.0, 0.0], [10.0, 0.0]])
    search = AllPairsSearch()
    search.build(positions)
    iIdx, jIdx = search.queryPairs(30.0)

    assert set(zip(iIdx.tolist(), jIdx.tolist())) == {(0, 2), (1, 2)}


def testEmptyAndSingleParticle():
    search = AllPairsSearch()
    iIdx, jIdx = search.queryPairs(30.0)
    assert len(iIdx) == 0 and len(jIdx) == 0

    search.build(np.array([[5.0, 5.0]]))
    iIdx, jIdx = search.queryPairs(30.0)
    assert len(iIdx) == 0


def testPairGeometry():
    positions = np.array([[0.0, 0.0], [3.0, 4.0]])
    d, r = pairGeometry(positions, np.array([0]), np.array([1]))

    np.testing.assert_array_equal(d, [[3.0, 4.0]])
    np.testing.assert_allclose(r, [5.0])


def testCreateNeighborSearch():
    assert isinstance(createNeighborSearch('allPairs', 30.0), AllPairsSearch)
    assert isinstance(createNeighborSearch('spatialHash', 30.0), SpatialHashGrid)
    with pytest.raises(ValueError):
        createNeighborSearch('octree', 30.0)
