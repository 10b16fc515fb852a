# -- Runner, Export and Preview Tests -- #

'''
Short headless runs through LiquidSimRunner, the JSON frame export and
the Plotly previews.
'''

import json
import os

import numpy as np

from audioVisuals.LiquidSim.runner import LiquidSimRunner, buildParser
from audioVisuals.LiquidSim.sph.protocols import SimulationConfig
from audioVisuals.LiquidSim.sph.liquidSolver import LiquidSolver
from audioVisuals.LiquidSim.visualization.previewPlots import (
    createDiagnosticsFigure,
    createSnapshotFigure,
    particleColors,
)


def _shortConfig() -> SimulationConfig:
    config = SimulationConfig.small()
    config.endTime = 0.5
    config.seed = 21
    return config


def testRunExportsFrames(tmp_path):
    runner = LiquidSimRunner()
    results = runner.run(_shortConfig(), drag=True, exportDir=str(tmp_path), verbose=False)

    assert results['finalState'] is not None
    assert results['finalState'].time >= 0.5
    assert results['nFrames'] > 0
    assert results['rollbacks'] == 0
    assert results['totalSpawned'] > 0
    assert os.path.exists(results['exportPath'])

    with open(results['exportPath']) as f:
        data = json.load(f)

    assert data['meta']['type'] == 'liquidSim'
    assert data['meta']['nFrames'] == results['nFrames']
    assert len(data['frames']) == results['nFrames']
    assert data['config']['domainWidth'] == 640.0
    frame = data['frames'][-1]
    assert len(frame['positions']) == len(frame['hues']) == len(frame['sizes'])
    assert all(0.0 <= a <= 0.8 for a in frame['opacities'])
    assert len(data['history']['times']) == results['nFrames']


def testRunWithoutExportWritesPlots(tmp_path):
    runner = LiquidSimRunner()
    results = runner.run(
        _shortConfig(), doExport=False, doPlot=True,
        exportDir=str(tmp_path), verbose=False,
    )

    assert results['exportPath'] is None
    assert len(results['plotPaths']) == 2
    for path in results['plotPaths']:
        assert os.path.exists(path)


def testSnapshotFigure():
    config = SimulationConfig.small()
    config.seed = 2
    solver = LiquidSolver(config)
    solver.initialize()
    snap = solver.snapshot()

    fig = createSnapshotFigure(snap, config.domainWidth, config.domainHeight)

    assert len(fig.data) == 1
    assert len(fig.data[0].x) == snap.nParticles
    # y axis runs top to bottom
    assert tuple(fig.layout.yaxis.range) == (config.domainHeight, 0)
    colors = particleColors(snap)
    assert len(colors) == snap.nParticles
    assert all(c.startswith('hsla(') for c in colors)


def testDiagnosticsFigure():
    times = list(np.linspace(0.0, 1.0, 5))
    history = {
        'times': times,
        'nParticles': [10, 12, 14, 14, 13],
        'kinetic': [0.0, 5.0, 8.0, 7.0, 6.0],
        'meanDensity': [1.0, 1.2, 1.3, 1.3, 1.2],
        'viscosity': [0.3, 0.35, 0.4, 0.3, 0.25],
        'gravity': [500.0, 520.0, 560.0, 540.0, 510.0],
    }

    fig = createDiagnosticsFigure(history)

    assert len(fig.data) == 5


def testParserDefaults():
    args = buildParser().parse_args([])

    assert args.preset == 'small'
    assert args.config is None
    assert not args.drag
    assert not args.no_export
    assert args.output_dir == 'output'


def testParserOverrides():
    args = buildParser().parse_args([
        '--preset', 'standard', '--duration', '2.5', '--seed', '4',
        '--neighbor-search', 'spatialHash', '--drag', '--no-export',
    ])

    assert args.preset == 'standard'
    assert args.duration == 2.5
    assert args.seed == 4
    assert args.neighbor_search == 'spatialHash'
    assert args.drag
    assert args.no_export
