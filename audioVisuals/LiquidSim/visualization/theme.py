# -- Visualization Theme -- #

'''
Dark-mode styling shared by the LiquidSim Plotly previews.

Particles are drawn as hsla() markers on a black canvas, matching the
live renderer; diagnostics use the series colors below.
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Canvas behind the particle preview
BACKGROUND = '#000000'

# Diagnostics series colors
COUNT_COLOR = '#42A5F5'
ENERGY_COLOR = '#EF5350'
DENSITY_COLOR = '#66BB6A'
VISCOSITY_COLOR = '#AB47BC'
GRAVITY_COLOR = '#FFA726'

# Particle color channels (HSL saturation / lightness, percent)
PARTICLE_SATURATION = 85
PARTICLE_LIGHTNESS = 55

# Marker diameter per unit particle size (sizes are radii)
MARKER_SCALE = 2.0

# Diagnostics figure height [px]
DIAGNOSTICS_HEIGHT = 700
