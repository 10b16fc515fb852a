# -- SPH Boundary Conditions -- #

'''
Containment of liquid particles within the screen-space domain.

The domain is the rectangle [0, width] x [0, height] with y pointing
down, so y = height is the floor. A particle past a wall is clamped
onto it and the normal velocity component is reflected and attenuated:

    left / right walls   vx *= -0.5
    top / floor          vy *= -0.3

Landing on the floor also damps vx by 0.8 so drops spread and stop
instead of skating along the bottom. The pass is stateless and runs
once per tick after integration.
'''

from __future__ import annotations

import numpy as np

from audioVisuals.LiquidSim import constants as const


class BoundaryHandler:
    '''
    Clamps and reflects particles at the domain edges.

    Parameters:
    -----------
    domainWidth : float
        Domain extent along x [px]
    domainHeight : float
        Domain extent along y [px]
    horizontalRestitution : float
        Velocity multiplier on the side walls
    verticalRestitution : float
        Velocity multiplier on the top and floor
    floorFriction : float
        Extra horizontal velocity multiplier on floor contact
    '''

    def __init__(
        self,
        domainWidth: float,
        domainHeight: float,
        horizontalRestitution: float = const.horizontalRestitution,
        verticalRestitution: float = const.verticalRestitution,
        floorFriction: float = const.floorFriction,
    ) -> None:
        self._domainWidth = domainWidth
        self._domainHeight = domainHeight
        self._horizontalRestitution = horizontalRestitution
        self._verticalRestitution = verticalRestitution
        self._floorFriction = floorFriction

    @property
    def domainWidth(self) -> float:
        return self._domainWidth

    @property
    def domainHeight(self) -> float:
        return self._domainHeight

    def enforceBoundary(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        '''
        Clamp positions into the domain and reflect wall velocities.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2), modified in place
        velocities : np.ndarray
            Particle velocities, shape (N, 2), modified in place
        '''
        x = positions[:, 0]
        y = positions[:, 1]

        # Side walls
        leftWall = x < 0.0
        x[leftWall] = 0.0
        velocities[leftWall, 0] *= self._horizontalRestitution

        rightWall = x > self._domainWidth
        x[rightWall] = self._domainWidth
        velocities[rightWall, 0] *= self._horizontalRestitution

        # Top
        ceiling = y < 0.0
        y[ceiling] = 0.0
        velocities[ceiling, 1] *= self._verticalRestitution

        # Floor
        floor = y > self._domainHeight
        y[floor] = self._domainHeight
        velocities[floor, 1] *= self._verticalRestitution
        velocities[floor, 0] *= self._floorFriction
