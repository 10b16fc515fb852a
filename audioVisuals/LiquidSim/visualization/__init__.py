# -- Visualization Package -- #

'''
Plotly previews of liquid simulation snapshots and run diagnostics.
'''

from audioVisuals.LiquidSim.visualization.previewPlots import (
    createDiagnosticsFigure,
    createSnapshotFigure,
)
