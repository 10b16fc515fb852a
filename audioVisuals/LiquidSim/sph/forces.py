# -- Force Accumulation -- #

'''
Pairwise pressure and viscosity forces plus gravity.

For every neighbor pair (i, j) with separation d = x_j - x_i and
distance r = |d| > eps:

Pressure (averaged over the pair, divided by the partner's density):
    f_i += -(P_i + P_j) / (2 * rho_j) / r * d
    f_j += -(P_i + P_j) / (2 * rho_i) / r * (-d)

Viscosity (relative velocity projected on the separation):
    s    = (v_j - v_i) . d / r^2
    f_i += mu * s * d
    f_j -= mu * s * d

Gravity:
    f_y += g            (screen y points down)

Particles have unit mass, so force and acceleration coincide. Pairs
closer than eps are skipped rather than divided by ~0; integration
separates them on the next tick.
'''

from __future__ import annotations

import numpy as np

from audioVisuals.LiquidSim import constants as const
from audioVisuals.LiquidSim.sph.reactiveMapper import SolverConstants


def pairwisePressureForces(
    d: np.ndarray,
    r: np.ndarray,
    iIdx: np.ndarray,
    jIdx: np.ndarray,
    densities: np.ndarray,
    pressures: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Pressure force on each member of every pair.

    Parameters:
    -----------
    d : np.ndarray
        Separation x_j - x_i, shape (P, 2)
    r : np.ndarray
        Distances |d|, all > 0, shape (P,)
    iIdx, jIdx : np.ndarray
        Pair indices, shape (P,)
    densities : np.ndarray
        Particle densities (>= 1), shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] :
        (force on i, force on j), each shape (P, 2)
    '''
    pressureSum = pressures[iIdx] + pressures[jIdx]
    coeffI = -pressureSum / (2.0 * densities[jIdx]) / r
    coeffJ = -pressureSum / (2.0 * densities[iIdx]) / r

    forceOnI = coeffI[:, np.newaxis] * d
    forceOnJ = -coeffJ[:, np.newaxis] * d
    return (forceOnI, forceOnJ)


def pairwiseViscosityForces(
    d: np.ndarray,
    r: np.ndarray,
    iIdx: np.ndarray,
    jIdx: np.ndarray,
    velocities: np.ndarray,
    viscosity: float,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Viscous force on each member of every pair.

    Equal and opposite by construction.

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] :
        (force on i, force on j), each shape (P, 2)
    '''
    dv = velocities[jIdx] - velocities[iIdx]
    projection = np.sum(dv * d, axis=1) / (r * r)

    forceOnI = (viscosity * projection)[:, np.newaxis] * d
    return (forceOnI, -forceOnI)


def computeForces(
    positions: np.ndarray,
    velocities: np.ndarray,
    densities: np.ndarray,
    pressures: np.ndarray,
    pairs: tuple[np.ndarray, np.ndarray],
    constants: SolverConstants,
    epsilon: float = const.distanceEpsilon,
) -> np.ndarray:
    '''
    Total force on every particle.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)
    pairs : tuple[np.ndarray, np.ndarray]
        Unique neighbor pairs (iIdx, jIdx) within the smoothing radius
    constants : SolverConstants
        Viscosity and gravity for this tick
    epsilon : float
        Minimum pair distance that produces a force [px]

    Returns:
    --------
    np.ndarray : Forces, shape (N, 2)
    '''
    forces = np.zeros_like(positions)
    forces[:, 1] = constants.gravity

    iIdx, jIdx = pairs
    if len(iIdx) == 0:
        return forces

    d = positions[jIdx] - positions[iIdx]
    r = np.sqrt(np.sum(d * d, axis=1))

    # Skip coincident pairs
    valid = r > epsilon
    if not np.any(valid):
        return forces
    d, r, iIdx, jIdx = d[valid], r[valid], iIdx[valid], jIdx[valid]

    pressureI, pressureJ = pairwisePressureForces(d, r, iIdx, jIdx, densities, pressures)
    viscousI, viscousJ = pairwiseViscosityForces(
        d, r, iIdx, jIdx, velocities, constants.viscosity
    )

    np.add.at(forces, iIdx, pressureI + viscousI)
    np.add.at(forces, jIdx, pressureJ + viscousJ)

    return forces
