# -- Constants for the Viscous Liquid Simulation -- #

'''
Tuning constants for the audio-reactive SPH liquid.

Distances are in screen units (pixels), times in seconds. The vertical
axis points down the screen, so gravity acts along +y and the lower
boundary sits at y = domainHeight.

Audio inputs (rms, bass, centroid, ...) arrive normalized to roughly
0 - 1, so every gain below is expressed per unit of normalized signal.
'''

import math

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Interaction cutoff h [px]
smoothingRadius: float = 30.0

# Density at which the pressure force vanishes (unitless kernel sum)
restDensity: float = 1000.0

# Equation of state stiffness: P = k * (rho - rho_0)
gasConstant: float = 2000.0

# Downward acceleration before audio scaling [px/s^2]
baseGravity: float = 500.0

# Lower bound applied to every density estimate
densityFloor: float = 1.0

# Pairs closer than this are skipped in the force pass [px]
distanceEpsilon: float = 0.01

#--------------------------------------------------------------------#
# -- Integration & Stability -- #
#--------------------------------------------------------------------#

# Velocity damping per reference frame
damping: float = 0.99

# Frame rate at which `damping` is applied exactly once per tick [Hz]
dampingReferenceRate: float = 60.0

# Hard speed limit applied after damping [px/s]
maxSpeed: float = 3000.0

# Fixed tick length used by the runner [s]
fixedTimeStep: float = 1.0 / 60.0

#--------------------------------------------------------------------#
# -- Boundary Restitution -- #
#--------------------------------------------------------------------#

# Velocity multiplier on the left/right walls
horizontalRestitution: float = -0.5

# Velocity multiplier on the top/bottom walls
verticalRestitution: float = -0.3

# Extra horizontal damping when a particle lands on the floor
floorFriction: float = 0.8

#--------------------------------------------------------------------#
# -- Settling -- #
#--------------------------------------------------------------------#

# Distance above the floor counted as resting [px]
settleEpsilon: float = 5.0

# Per-component speed below which a floor particle is drained [px/s]
settleSpeed: float = 10.0

#--------------------------------------------------------------------#
# -- Audio-Reactive Mapping -- #
#--------------------------------------------------------------------#

# baseViscosity = viscosityFloor + bass * viscosityBassGain
viscosityFloor: float = 0.3
viscosityBassGain: float = 0.7

# Loudness boost on the viscosity coefficient
viscosityRmsGain: float = 0.5

# Throb: 1 + throbAmplitude * sin(throbFrequency * t + beatPhase)
throbFrequency: float = 8.0
throbAmplitude: float = 0.3
beatPhaseShift: float = math.pi

# gravity = baseGravity * (1 + bass * gravityBassGain)
gravityBassGain: float = 0.5

#--------------------------------------------------------------------#
# -- Spawning -- #
#--------------------------------------------------------------------#

# Particles seeded at start-up
initialParticles: int = 50

# Store capacity
maxParticles: int = 300

# Initial velocity jitter half-ranges (vx, vy) [px/s]
spawnVelocityJitter: tuple[float, float] = (50.0, 20.0)

# Initial size range [px]
spawnSizeRange: tuple[float, float] = (4.0, 8.0)

# Drag gesture: particles per tick and positional jitter [px]
dragSpawnCount: int = 3
dragSpawnJitter: float = 10.0
dragHueRate: float = 30.0

# Click burst: particles per fresh click, jitter [px] and freshness window [s]
clickBurstCount: int = 6
clickBurstJitter: float = 15.0
clickMaxAge: float = 0.05

# Autonomous spawn: probability per tick = bass * bassSpawnProbability
bassSpawnProbability: float = 0.1
bassSpawnHeight: float = 50.0
bassHueRate: float = 50.0

# Hue offset contributed by the spectral centroid / rms at spawn [deg]
spawnHueSignalGain: float = 180.0

#--------------------------------------------------------------------#
# -- Appearance -- #
#--------------------------------------------------------------------#

# Hue drift per second and per unit centroid per tick [deg]
hueDriftRate: float = 20.0
hueCentroidShift: float = 10.0

# size = sizeBase + rms * sizeRmsGain + sizeWobble * sin(sizeWobbleRate * t + x * sizeWobbleSpatial)
sizeBase: float = 4.0
sizeRmsGain: float = 4.0
sizeWobble: float = 2.0
sizeWobbleRate: float = 5.0
sizeWobbleSpatial: float = 0.01
sizeFloor: float = 0.5

# Renderer opacity = min(1, density / restDensity) * maxOpacity
maxOpacity: float = 0.8
