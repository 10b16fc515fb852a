# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel for the liquid density estimate.

The liquid uses a simple quadratic falloff rather than a normalized
SPH kernel: particles carry no mass, so density is a dimensionless
weighted neighbor count that is compared against a rest density.

    W(q) = (1 - q)^2    for 0 <= q < 1
    W(q) = 0            for q >= 1

with q = r / h. The kernel peaks at 1 for a particle's own position
and vanishes at the smoothing radius.
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SphKernel(Protocol):
    '''Protocol for SPH smoothing kernel functions.'''

    def evaluate(self, r: float, h: float) -> float:
        '''
        Evaluate kernel W(r, h).

        Parameters:
        -----------
        r : float
            Distance between particles [px]
        h : float
            Smoothing radius [px]

        Returns:
        --------
        float : Kernel weight
        '''
        ...

    def evaluateBatch(self, r: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate W for an array of distances.'''
        ...


######################################################################
# -- Quadratic Falloff Kernel -- #
######################################################################

class QuadraticFalloffKernel:
    '''
    Unnormalized quadratic kernel W(q) = (1 - q)^2 on [0, 1).

    Monotonically decreasing, W(0) = 1, W(1) = 0.
    '''

    def evaluate(self, r: float, h: float) -> float:
        '''
        Evaluate the kernel for one distance.

        Parameters:
        -----------
        r : float
            Distance between particles [px]
        h : float
            Smoothing radius [px]

        Returns:
        --------
        float : Kernel weight in [0, 1]
        '''
        q = r / h
        if q >= 1.0:
            return 0.0
        oneMinusQ = 1.0 - q
        return oneMinusQ * oneMinusQ

    def evaluateBatch(self, r: np.ndarray, h: float) -> np.ndarray:
        '''
        Vectorized kernel evaluation.

        Parameters:
        -----------
        r : np.ndarray
            Distances [px], any shape
        h : float
            Smoothing radius [px]

        Returns:
        --------
        np.ndarray : Kernel weights, same shape as r
        '''
        oneMinusQ = np.clip(1.0 - np.asarray(r, dtype=float) / h, 0.0, None)
        return oneMinusQ * oneMinusQ
