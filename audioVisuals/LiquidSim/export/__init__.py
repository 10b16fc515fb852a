# -- Export Package -- #

'''
Frame export for offline playback of liquid simulation runs.
'''

from audioVisuals.LiquidSim.export.frameExporter import FrameExporter
