# -- Audio Visuals Package -- #

'''
Master package for audio-reactive generative visuals.

Domain-specific sub-packages:
    - LiquidSim: SPH viscous liquid driven by audio features and pointer input

Rendering, audio feature extraction and pointer tracking are external
collaborators; this package only produces particle state.
'''
