# -- Simulation Frame Exporter -- #

'''
Exports liquid simulation frames as JSON for offline playback.

Collects particle snapshots during a run and writes them to a compact
JSON file that a renderer or the Plotly preview can load. Each frame
stores positions, hues, sizes and opacities; a separate history block
tracks particle count, energy and the reactive constants per frame.
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from audioVisuals.LiquidSim.sph.protocols import SimulationConfig, SimulationState
from audioVisuals.LiquidSim.sph.particles import ParticleSnapshot


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Usage:
        exporter = FrameExporter()
        # During simulation loop:
        exporter.addFrame(state, solver.snapshot())
        # After simulation:
        exporter.export(config, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "liquidSim", "created": "...", ... },
        "config": { "domainWidth": 1280, ... },
        "frames": [
            {
                "time": 0.0,
                "positions": [[x0, y0], [x1, y1], ...],
                "hues": [h0, h1, ...],
                "sizes": [s0, s1, ...],
                "opacities": [a0, a1, ...]
            },
            ...
        ],
        "history": {
            "times": [...],
            "nParticles": [...],
            "kinetic": [...],
            "meanDensity": [...],
            "viscosity": [...],
            "gravity": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._history: dict[str, list[float]] = {
            'times': [],
            'nParticles': [],
            'kinetic': [],
            'meanDensity': [],
            'viscosity': [],
            'gravity': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        return self._frames

    @property
    def history(self) -> dict[str, list[float]]:
        '''Per-frame diagnostic series.'''
        return self._history

    def addFrame(self, state: SimulationState, snapshot: ParticleSnapshot) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Diagnostics of the tick that produced the snapshot
        snapshot : ParticleSnapshot
            Particle state after that tick
        '''
        frame = {
            'time': round(state.time, 6),
            'positions': np.round(snapshot.positions, 3).tolist(),
            'hues': np.round(snapshot.hues, 2).tolist(),
            'sizes': np.round(snapshot.sizes, 3).tolist(),
            'opacities': np.round(snapshot.opacity(), 4).tolist(),
        }
        self._frames.append(frame)

        self._history['times'].append(round(state.time, 6))
        self._history['nParticles'].append(state.nParticles)
        self._history['kinetic'].append(round(state.kineticEnergy, 3))
        self._history['meanDensity'].append(round(state.meanDensity, 4))
        self._history['viscosity'].append(round(state.viscosity, 5))
        self._history['gravity'].append(round(state.gravity, 3))

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'output',
        scenarioName: str = 'viscousLiquid',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'liquidSim_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        output = {
            'meta': {
                'type': 'liquidSim',
                'nFrames': len(self._frames),
                'maxParticles': config.maxParticles,
                'created': datetime.now().isoformat(),
            },
            'config': {
                'domainWidth': config.domainWidth,
                'domainHeight': config.domainHeight,
                'smoothingRadius': config.smoothingRadius,
                'restDensity': config.restDensity,
                'gasConstant': config.gasConstant,
                'baseGravity': config.baseGravity,
                'timeStep': config.timeStep,
                'endTime': config.endTime,
            },
            'frames': self._frames,
            'history': self._history,
        }

        with open(filepath, 'w') as f:
            json.dump(output, f, indent=None, separators=(',', ':'))

        return filepath
