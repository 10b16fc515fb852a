# -- Snapshot and Diagnostics Previews -- #

'''
Plotly figures for inspecting a liquid simulation without the live
renderer.

createSnapshotFigure draws one ParticleSnapshot in screen space with
each particle's hue, size and density-derived opacity.
createDiagnosticsFigure plots the per-frame history collected by the
FrameExporter.
'''

from __future__ import annotations

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from audioVisuals.LiquidSim.sph.particles import ParticleSnapshot
from audioVisuals.LiquidSim.visualization import theme


def particleColors(snapshot: ParticleSnapshot) -> list[str]:
    '''CSS hsla() color per particle.'''
    return [
        f'hsla({hue:.1f}, {theme.PARTICLE_SATURATION}%, {theme.PARTICLE_LIGHTNESS}%, {alpha:.3f})'
        for hue, alpha in zip(snapshot.hues, snapshot.opacity())
    ]


def createSnapshotFigure(
    snapshot: ParticleSnapshot,
    domainWidth: float,
    domainHeight: float,
) -> go.Figure:
    '''
    Scatter preview of the particles at one instant.

    Parameters:
    -----------
    snapshot : ParticleSnapshot
        Particle state to draw
    domainWidth : float
        Domain extent along x [px]
    domainHeight : float
        Domain extent along y [px]

    Returns:
    --------
    go.Figure : Plotly figure with y pointing down
    '''
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=snapshot.positions[:, 0],
        y=snapshot.positions[:, 1],
        mode='markers',
        marker=dict(
            size=theme.MARKER_SCALE * snapshot.sizes,
            color=particleColors(snapshot),
            line=dict(width=0),
        ),
        customdata=snapshot.densities,
        hovertemplate='x=%{x:.1f}<br>y=%{y:.1f}<br>density=%{customdata:.2f}<extra></extra>',
        showlegend=False,
    ))

    fig.update_xaxes(range=[0, domainWidth], showgrid=False, zeroline=False)
    # Screen coordinates: y grows downward
    fig.update_yaxes(
        range=[domainHeight, 0], showgrid=False, zeroline=False,
        scaleanchor='x', scaleratio=1,
    )
    fig.update_layout(
        template=theme.TEMPLATE,
        title=f'Liquid snapshot  t = {snapshot.time:.2f} s  ({snapshot.nParticles} particles)',
        plot_bgcolor=theme.BACKGROUND,
    )
    return fig


def createDiagnosticsFigure(history: dict[str, list[float]]) -> go.Figure:
    '''
    Four-panel run history.

    Layout:
        Row 1: Particle Count   |  Kinetic Energy
        Row 2: Mean Density     |  Reactive Constants

    Parameters:
    -----------
    history : dict[str, list[float]]
        FrameExporter.history

    Returns:
    --------
    go.Figure : Plotly figure with 4 subplots
    '''
    times = history['times']

    fig = make_subplots(
        rows=2, cols=2,
        subplot_titles=(
            'Particle Count', 'Kinetic Energy',
            'Mean Density', 'Reactive Constants',
        ),
        specs=[[{}, {}], [{}, {'secondary_y': True}]],
        vertical_spacing=0.12,
        horizontal_spacing=0.08,
    )

    fig.add_trace(go.Scatter(x=times, y=history['nParticles'], mode='lines',
                             line=dict(color=theme.COUNT_COLOR, width=2), showlegend=False),
                  row=1, col=1)
    fig.update_yaxes(title_text='particles', row=1, col=1)

    fig.add_trace(go.Scatter(x=times, y=history['kinetic'], mode='lines',
                             line=dict(color=theme.ENERGY_COLOR, width=2), showlegend=False),
                  row=1, col=2)
    fig.update_yaxes(title_text='px^2/s^2', row=1, col=2)

    fig.add_trace(go.Scatter(x=times, y=history['meanDensity'], mode='lines',
                             line=dict(color=theme.DENSITY_COLOR, width=2), showlegend=False),
                  row=2, col=1)
    fig.update_yaxes(title_text='density', row=2, col=1)

    fig.add_trace(go.Scatter(x=times, y=history['viscosity'], mode='lines',
                             name='Viscosity', line=dict(color=theme.VISCOSITY_COLOR, width=2)),
                  row=2, col=2, secondary_y=False)
    fig.add_trace(go.Scatter(x=times, y=history['gravity'], mode='lines',
                             name='Gravity', line=dict(color=theme.GRAVITY_COLOR, width=2)),
                  row=2, col=2, secondary_y=True)
    fig.update_yaxes(title_text='viscosity', row=2, col=2, secondary_y=False)
    fig.update_yaxes(title_text='px/s^2', row=2, col=2, secondary_y=True)

    for col in (1, 2):
        fig.update_xaxes(title_text='time (s)', row=2, col=col)

    fig.update_layout(
        template=theme.TEMPLATE,
        title='Liquid Simulation Diagnostics',
        height=theme.DIAGNOSTICS_HEIGHT,
    )
    return fig
