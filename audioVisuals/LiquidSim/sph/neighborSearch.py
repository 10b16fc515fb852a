# -- Neighbor Search -- #

'''
Neighbor pair search for the liquid solver.

AllPairsSearch is the reference query: every unordered pair is tested,
O(N^2), which is affordable because the store holds a few hundred
particles at most. The squared distance is compared against h^2 first
and the square root is only taken for the accepted pairs.

SpatialHashGrid bins particles into cells of size h and only tests the
9 surrounding cells, O(N) for uniform populations. It answers the same
query and can be selected for larger capacities.

References:
-----------
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH
Green (2010) -- Particle Simulation using CUDA
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


def _emptyPairs() -> tuple[np.ndarray, np.ndarray]:
    return (np.array([], dtype=np.intp), np.array([], dtype=np.intp))


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor search algorithms.'''

    def build(self, positions: np.ndarray) -> None:
        '''Build spatial data structure from particle positions.'''
        ...

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all particle pairs within the given radius.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (i_indices, j_indices) where particle i and j are neighbors.
            Each pair appears once with i < j.
        '''
        ...


def pairGeometry(
    positions: np.ndarray,
    iIdx: np.ndarray,
    jIdx: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Separation vectors and distances for a list of pairs.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    iIdx, jIdx : np.ndarray
        Pair indices, shape (P,)

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] :
        (d, r) with d = x_j - x_i, shape (P, 2), and r = |d|, shape (P,)
    '''
    d = positions[jIdx] - positions[iIdx]
    r = np.sqrt(np.sum(d * d, axis=1))
    return (d, r)


#--------------------------------------------------------------------#
# -- All-Pairs Scan -- #
#--------------------------------------------------------------------#

class AllPairsSearch:
    '''
    Brute-force neighbor query over every unordered pair.

    The full (N, N) squared-distance matrix is built with NumPy
    broadcasting and filtered against radius^2 on its upper triangle.
    '''

    def __init__(self) -> None:
        self._positions: np.ndarray | None = None

    def build(self, positions: np.ndarray) -> None:
        '''
        Record the positions to query.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        '''
        self._positions = positions

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all unique particle pairs (i, j), i < j, closer than radius.

        Parameters:
        -----------
        radius : float
            Search radius [px]

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) arrays of neighbor pair indices
        '''
        if self._positions is None or len(self._positions) < 2:
            return _emptyPairs()

        positions = self._positions
        diff = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]  # (n, n, 2)
        distSq = np.sum(diff * diff, axis=2)  # (n, n)

        rowIdx, colIdx = np.triu_indices(len(positions), k=1)
        withinRadius = distSq[rowIdx, colIdx] < radius * radius

        return (rowIdx[withinRadius], colIdx[withinRadius])


#--------------------------------------------------------------------#
# -- Spatial Hash Grid -- #
#--------------------------------------------------------------------#

class SpatialHashGrid:
    '''
    Uniform grid spatial hashing for 2D neighbor search.

    Cell size equals the smoothing radius. Particles are binned into
    cells using integer coordinates; a query only compares a cell with
    itself and the half of its 8 neighbors that come after it, so each
    pair is found exactly once.

    Parameters:
    -----------
    cellSize : float
        Grid cell size [px], should equal the smoothing radius
    '''

    # 4 neighbors in the "positive half" of the 3x3 stencil
    _halfStencil = ((1, -1), (1, 0), (1, 1), (0, 1))

    def __init__(self, cellSize: float) -> None:
        self._cellSize = cellSize
        self._positions: np.ndarray | None = None
        self._cells: dict[tuple[int, int], np.ndarray] = {}

    def build(self, positions: np.ndarray) -> None:
        '''
        Bin particles into grid cells.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        '''
        self._positions = positions
        cellIndices = np.floor(positions / self._cellSize).astype(np.int64)

        cellDict: dict[tuple[int, int], list[int]] = {}
        for i, (cx, cy) in enumerate(cellIndices):
            cellDict.setdefault((int(cx), int(cy)), []).append(i)

        self._cells = {k: np.array(v, dtype=np.intp) for k, v in cellDict.items()}

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all unique particle pairs (i, j), i < j, closer than radius.

        Radius must not exceed the cell size, otherwise pairs more than
        one cell apart are missed.

        Parameters:
        -----------
        radius : float
            Search radius [px]

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) arrays of neighbor pair indices
        '''
        if self._positions is None:
            return _emptyPairs()

        radiusSq = radius * radius
        positions = self._positions
        iChunks: list[np.ndarray] = []
        jChunks: list[np.ndarray] = []

        for (cx, cy), cellParticles in self._cells.items():
            cellPos = positions[cellParticles]

            # --- Pairs within the same cell --- #
            nCell = len(cellParticles)
            if nCell > 1:
                diff = cellPos[:, np.newaxis, :] - cellPos[np.newaxis, :, :]
                distSq = np.sum(diff * diff, axis=2)
                rowIdx, colIdx = np.triu_indices(nCell, k=1)
                withinRadius = distSq[rowIdx, colIdx] < radiusSq
                if np.any(withinRadius):
                    iChunks.append(cellParticles[rowIdx[withinRadius]])
                    jChunks.append(cellParticles[colIdx[withinRadius]])

            # --- Pairs with neighbor cells (half-stencil only) --- #
            for ox, oy in self._halfStencil:
                neighborParticles = self._cells.get((cx + ox, cy + oy))
                if neighborParticles is None:
                    continue

                neighborPos = positions[neighborParticles]
                diff = cellPos[:, np.newaxis, :] - neighborPos[np.newaxis, :, :]
                distSq = np.sum(diff * diff, axis=2)
                localI, localJ = np.where(distSq < radiusSq)
                if len(localI) > 0:
                    iChunks.append(cellParticles[localI])
                    jChunks.append(neighborParticles[localJ])

        if not iChunks:
            return _emptyPairs()

        iAll = np.concatenate(iChunks)
        jAll = np.concatenate(jChunks)

        # Ensure i < j for consistency with AllPairsSearch
        return (np.minimum(iAll, jAll), np.maximum(iAll, jAll))


def createNeighborSearch(name: str, smoothingRadius: float) -> NeighborSearch:
    '''
    Build a neighbor search by configuration name.

    Parameters:
    -----------
    name : str
        'allPairs' or 'spatialHash'
    smoothingRadius : float
        Smoothing radius h [px], used as the hash cell size

    Returns:
    --------
    NeighborSearch : The requested search
    '''
    if name == 'allPairs':
        return AllPairsSearch()
    if name == 'spatialHash':
        return SpatialHashGrid(cellSize=smoothingRadius)
    raise ValueError(f'Unknown neighbor search {name!r}')
