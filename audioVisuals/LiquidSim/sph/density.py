# -- Density Estimation and Equation of State -- #

'''
Smoothed density and pressure for the liquid particles.

Density is a kernel-weighted neighbor count including the particle
itself:

    rho_i = W(0) + sum_j W(|x_i - x_j|, h)

floored at 1 so the pressure force, which divides by density, stays
well conditioned. Edge particles legitimately see fewer neighbors and
report lower density; no boundary correction is applied.

Pressure follows a linear equation of state

    P_i = k * (rho_i - rho_0)

which goes negative below rest density. That tension pulls sparse
particles together into droplets.
'''

from __future__ import annotations

import numpy as np

from audioVisuals.LiquidSim import constants as const
from audioVisuals.LiquidSim.sph.kernels import SphKernel, QuadraticFalloffKernel


def computeDensity(
    nParticles: int,
    pairs: tuple[np.ndarray, np.ndarray],
    distances: np.ndarray,
    h: float,
    kernel: SphKernel | None = None,
) -> np.ndarray:
    '''
    Kernel-summed density for every particle.

    Vectorized: kernel evaluation for all pairs at once, then a
    symmetric scatter-add with np.add.at.

    Parameters:
    -----------
    nParticles : int
        Number of particles
    pairs : tuple[np.ndarray, np.ndarray]
        Unique neighbor pairs (iIdx, jIdx), i < j
    distances : np.ndarray
        Pair distances |x_j - x_i|, shape (P,)
    h : float
        Smoothing radius [px]
    kernel : SphKernel | None
        Smoothing kernel (defaults to QuadraticFalloffKernel)

    Returns:
    --------
    np.ndarray : Densities, each >= densityFloor, shape (N,)
    '''
    kernel = kernel or QuadraticFalloffKernel()

    # Self-contribution W(0)
    densities = np.full(nParticles, kernel.evaluate(0.0, h))

    iIdx, jIdx = pairs
    if len(iIdx) > 0:
        wij = kernel.evaluateBatch(distances, h)
        np.add.at(densities, iIdx, wij)
        np.add.at(densities, jIdx, wij)

    np.maximum(densities, const.densityFloor, out=densities)
    return densities


def computePressure(
    densities: np.ndarray,
    gasConstant: float,
    restDensity: float,
) -> np.ndarray:
    '''
    Linear equation of state.

    P = k * (rho - rho_0)

    Negative pressures are kept.

    Parameters:
    -----------
    densities : np.ndarray
        Particle densities, shape (N,)
    gasConstant : float
        Stiffness k
    restDensity : float
        Rest density rho_0

    Returns:
    --------
    np.ndarray : Pressures, shape (N,)
    '''
    return gasConstant * (densities - restDensity)
