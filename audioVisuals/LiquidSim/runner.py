# -- Liquid Simulation Runner -- #

'''
Command-line entry point for headless liquid simulation runs.

Drives the solver at a fixed frame step with the synthetic audio
stream (and optionally a scripted drag gesture), prints progress, and
optionally exports frame data and Plotly previews.

Usage:
    python -m audioVisuals.LiquidSim                          # Default small run
    python -m audioVisuals.LiquidSim --preset standard        # Full-size window
    python -m audioVisuals.LiquidSim --config configs/viscousLiquid_default.json
    python -m audioVisuals.LiquidSim --drag --plot            # Drag trail + HTML previews
    python -m audioVisuals.LiquidSim --no-export              # Skip frame export
'''

from __future__ import annotations

import argparse
import os
import time as timeModule

from audioVisuals.LiquidSim.signals import InputState, SyntheticAudio, sweepingDrag
from audioVisuals.LiquidSim.sph.protocols import SimulationConfig, neighborSearchTypes
from audioVisuals.LiquidSim.sph.liquidSolver import LiquidSolver
from audioVisuals.LiquidSim.export.frameExporter import FrameExporter


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='LiquidSim -- audio-reactive SPH liquid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--preset', type=str, default='small',
        choices=['small', 'standard'],
        help='Configuration preset when no --config is given (default: small)',
    )
    parser.add_argument(
        '--duration', type=float, default=None,
        help='Override the run length in seconds',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Seed for the spawn random generator',
    )
    parser.add_argument(
        '--neighbor-search', type=str, default=None,
        choices=list(neighborSearchTypes),
        help='Override the neighbor search algorithm',
    )
    parser.add_argument(
        '--drag', action='store_true',
        help='Sweep a scripted drag gesture across the domain',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Write Plotly HTML previews of the final frame and diagnostics',
    )
    parser.add_argument(
        '--output-dir', type=str, default='output',
        help='Output directory for exported frames and plots (default: output)',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class LiquidSimRunner:
    '''
    Runs a headless liquid simulation and stores results.

    Handles the full pipeline: solver setup, fixed-step loop with
    progress reporting, and optional frame export and previews.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()
        self._audio = SyntheticAudio()

    @property
    def exporter(self) -> FrameExporter:
        return self._exporter

    def runFromConfig(self, configPath: str, **kwargs) -> dict:
        '''
        Run simulation from a JSON configuration file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file
        **kwargs
            Forwarded to run()

        Returns:
        --------
        dict : Simulation results summary
        '''
        return self.run(SimulationConfig.fromJson(configPath), **kwargs)

    def run(
        self,
        config: SimulationConfig,
        drag: bool = False,
        doExport: bool = True,
        doPlot: bool = False,
        exportDir: str = 'output',
        verbose: bool = True,
    ) -> dict:
        '''
        Run a liquid simulation at a fixed frame step.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration
        drag : bool
            Whether to feed the scripted drag gesture
        doExport : bool
            Whether to export frame data
        doPlot : bool
            Whether to write Plotly HTML previews
        exportDir : str
            Output directory for exports
        verbose : bool
            Whether to print progress

        Returns:
        --------
        dict : Simulation results summary
        '''
        log = print if verbose else (lambda *args, **kwargs: None)

        log()
        log('=' * 62)
        log('  LIQUIDSIM -- AUDIO-REACTIVE SPH LIQUID')
        log('=' * 62)
        log()

        #--------------------------------------------------------------------#
        # Setup
        #--------------------------------------------------------------------#
        solver = LiquidSolver(config)
        solver.initialize()

        log('-' * 62)
        log('  SETUP')
        log('-' * 62)
        log(f'  Domain:            {config.domainWidth:6.0f} x {config.domainHeight:.0f} px')
        log(f'  Capacity:          {config.maxParticles:8d}')
        log(f'  Seeded Particles:  {solver.store.count:8d}')
        log(f'  Smoothing Radius:  {config.smoothingRadius:8.2f} px')
        log(f'  Rest Density:      {config.restDensity:8.1f}')
        log(f'  Gas Constant:      {config.gasConstant:8.1f}')
        log(f'  Neighbor Search:   {config.neighborSearch:>8s}')
        log(f'  Time Step:         {config.timeStep:8.4f} s')
        log(f'  End Time:          {config.endTime:8.2f} s')
        log(f'  Drag Gesture:      {"on" if drag else "off":>8s}')
        log()

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        log('-' * 62)
        log('  RUNNING SIMULATION')
        log('-' * 62)
        log()
        log(f'  {"Time":>8}  {"Step":>7}  {"Count":>6}  {"MaxVel":>8}  {"Density":>8}  {"Visc":>6}  {"Grav":>7}')
        log(f'  {"(s)":>8}  {"":>7}  {"":>6}  {"(px/s)":>8}  {"(mean)":>8}  {"":>6}  {"(px/s2)":>7}')
        log('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        nextOutputTime = 0.0
        printInterval = max(0.25, config.endTime / 20.0)
        nextPrintTime = 0.0
        totalSpawned = 0
        totalEvicted = 0
        rollbacks = 0
        state = None

        while solver.time < config.endTime:
            audio = self._audio.frameAt(solver.time)
            if drag:
                inputState = sweepingDrag(solver.time, config.domainWidth, config.domainHeight)
            else:
                inputState = InputState.idle()

            state = solver.step(config.timeStep, audio, inputState)
            totalSpawned += state.nSpawned
            totalEvicted += state.nEvicted
            rollbacks += int(state.rolledBack)

            if solver.time >= nextOutputTime:
                self._exporter.addFrame(state, solver.snapshot())
                nextOutputTime += config.outputInterval

            if solver.time >= nextPrintTime:
                log(
                    f'  {state.time:8.3f}  {state.step:7d}  {state.nParticles:6d}  '
                    f'{state.maxSpeed:8.1f}  {state.meanDensity:8.3f}  '
                    f'{state.viscosity:6.3f}  {state.gravity:7.1f}'
                )
                nextPrintTime += printInterval

        wallClockSeconds = timeModule.time() - wallClockStart

        log()
        log(f'  Simulation complete.')
        log(f'  Total steps:       {solver.stepCount:8d}')
        log(f'  Wall-clock time:   {wallClockSeconds:8.2f} s')
        log(f'  Frames collected:  {self._exporter.nFrames:8d}')
        log()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            log('-' * 62)
            log('  EXPORTING FRAME DATA')
            log('-' * 62)
            exportPath = self._exporter.export(config=config, outputDir=exportDir)
            log(f'  Exported to: {exportPath}')
            log()

        plotPaths: list[str] = []
        if doPlot:
            plotPaths = self._writePlots(solver, exportDir)
            for path in plotPaths:
                log(f'  Preview written: {path}')
            log()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        log('=' * 62)
        log('  SIMULATION SUMMARY')
        log('=' * 62)
        log(f'  Final Particles:   {solver.store.count:8d}')
        log(f'  Spawned:           {totalSpawned:8d}')
        log(f'  Evicted:           {totalEvicted:8d}')
        log(f'  Rolled-back Ticks: {rollbacks:8d}')
        if state is not None:
            log(f'  Final KE:          {state.kineticEnergy:12.1f}')
            log(f'  Max Velocity:      {state.maxSpeed:8.1f} px/s')
        log('=' * 62)
        log()

        return {
            'finalState': state,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'totalSpawned': totalSpawned,
            'totalEvicted': totalEvicted,
            'rollbacks': rollbacks,
            'exportPath': exportPath,
            'plotPaths': plotPaths,
        }

    def _writePlots(self, solver: LiquidSolver, outputDir: str) -> list[str]:
        '''Write the final snapshot and diagnostics previews as HTML.'''
        from audioVisuals.LiquidSim.visualization.previewPlots import (
            createDiagnosticsFigure,
            createSnapshotFigure,
        )

        os.makedirs(outputDir, exist_ok=True)
        config = solver.config

        snapshotPath = os.path.join(outputDir, 'liquidSim_snapshot.html')
        createSnapshotFigure(
            solver.snapshot(), config.domainWidth, config.domainHeight,
        ).write_html(snapshotPath)

        diagnosticsPath = os.path.join(outputDir, 'liquidSim_diagnostics.html')
        createDiagnosticsFigure(self._exporter.history).write_html(diagnosticsPath)

        return [snapshotPath, diagnosticsPath]


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main() -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args()

    if args.config:
        config = SimulationConfig.fromJson(args.config)
    else:
        presets = {
            'small': SimulationConfig.small,
            'standard': SimulationConfig.standard,
        }
        config = presets[args.preset]()

    if args.duration is not None:
        config.endTime = args.duration
    if args.seed is not None:
        config.seed = args.seed
    if args.neighbor_search is not None:
        config.neighborSearch = args.neighbor_search

    runner = LiquidSimRunner()
    runner.run(
        config,
        drag=args.drag,
        doExport=not args.no_export,
        doPlot=args.plot,
        exportDir=args.output_dir,
    )


if __name__ == '__main__':
    main()
