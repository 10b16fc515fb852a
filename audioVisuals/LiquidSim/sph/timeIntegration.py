# -- SPH Time Integration -- #

'''
Time integration for the liquid particles.

Symplectic (semi-implicit) Euler with unit mass, followed by velocity
damping and a speed clamp:

    v(t+dt) = v(t) + f(t) * dt          (kick)
    x(t+dt) = x(t) + v(t+dt) * dt       (drift)
    v(t+dt) *= damping ** (dt * rate)   (bleed)
    |v| <= maxSpeed                     (clamp)

The drift uses the updated velocity, which is what makes the scheme
symplectic. Pairwise SPH forces are not unconditionally stable at a
fixed frame step, so damping removes a small share of the velocity on
every tick. The exponent makes it independent of frame rate: at the
reference rate the factor is exactly `damping` per tick, and a
zero-length tick leaves velocities untouched.

References:
-----------
Monaghan (2005) -- Smoothed Particle Hydrodynamics
Hairer et al. (2003) -- Geometric Numerical Integration
'''

from __future__ import annotations

from typing import Protocol

import numpy as np

from audioVisuals.LiquidSim import constants as const


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for time integration schemes.'''

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        forces: np.ndarray,
        dt: float,
    ) -> None:
        '''
        Advance particles by one tick, in place.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        velocities : np.ndarray
            Particle velocities, shape (N, 2)
        forces : np.ndarray
            Accumulated forces (unit mass), shape (N, 2)
        dt : float
            Tick length [s]
        '''
        ...


######################################################################
# -- Damped Symplectic Euler -- #
######################################################################

class DampedSymplecticEuler:
    '''
    Kick-drift Euler with per-tick damping and a speed clamp.

    Parameters:
    -----------
    damping : float
        Velocity factor applied once per reference frame
    referenceRate : float
        Frame rate at which `damping` is applied exactly [Hz]
    maxSpeed : float | None
        Speed clamp [px/s]; None disables it
    '''

    def __init__(
        self,
        damping: float = const.damping,
        referenceRate: float = const.dampingReferenceRate,
        maxSpeed: float | None = const.maxSpeed,
    ) -> None:
        self._damping = damping
        self._referenceRate = referenceRate
        self._maxSpeed = maxSpeed

    def dampingFactor(self, dt: float) -> float:
        '''Velocity factor for a tick of length dt.'''
        return self._damping ** (dt * self._referenceRate)

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        forces: np.ndarray,
        dt: float,
    ) -> None:
        '''
        Advance particles by one tick, in place.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        velocities : np.ndarray
            Particle velocities, shape (N, 2)
        forces : np.ndarray
            Accumulated forces (unit mass), shape (N, 2)
        dt : float
            Tick length [s]
        '''
        # Kick: update velocities from forces
        velocities += forces * dt

        # Drift: update positions from (new) velocities
        positions += velocities * dt

        velocities *= self.dampingFactor(dt)

        if self._maxSpeed is not None:
            clampSpeed(velocities, self._maxSpeed)


def clampSpeed(velocities: np.ndarray, maxSpeed: float) -> None:
    '''
    Rescale, in place, every velocity faster than maxSpeed onto maxSpeed.

    Direction is preserved.
    '''
    speeds = np.sqrt(np.sum(velocities * velocities, axis=1))
    tooFast = speeds > maxSpeed
    if np.any(tooFast):
        velocities[tooFast] *= (maxSpeed / speeds[tooFast])[:, np.newaxis]
