# -- External Signal Snapshots -- #

'''
Immutable per-tick snapshots of the external collaborators.

The audio feature extractor and the pointer/webcam tracker live outside
this package. Each tick they hand the simulation one AudioFrame and one
InputState; both are frozen so no stage can mutate them mid-tick.

SyntheticAudio reproduces the smooth fake feature stream used when no
microphone is available, so the simulation can run headless.
'''

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

# Width of the log-mapped spectrum supplied by the extractor
spectrumBands: int = 32


######################################################################
# -- Audio -- #
######################################################################

@dataclass(frozen=True)
class AudioFrame:
    '''
    Audio features for a single tick.

    Parameters:
    -----------
    rms : float
        Overall loudness, roughly 0 - 1
    bass : float
        Low-frequency energy, roughly 0 - 1
    mid : float
        Mid-frequency energy, roughly 0 - 1
    treble : float
        High-frequency energy, roughly 0 - 1
    centroid : float
        Spectral centroid (brightness), roughly 0 - 1
    beat : bool
        True when a beat was detected this tick
    bpm : float
        Estimated tempo [beats/min]
    spectrum : np.ndarray
        Log-mapped band energies, shape (spectrumBands,)
    '''

    rms: float = 0.0
    bass: float = 0.0
    mid: float = 0.0
    treble: float = 0.0
    centroid: float = 0.0
    beat: bool = False
    bpm: float = 0.0
    spectrum: np.ndarray = field(default_factory=lambda: np.zeros(spectrumBands))

    @classmethod
    def silent(cls) -> AudioFrame:
        '''Frame with every feature at zero.'''
        return cls()


class SyntheticAudio:
    '''
    Deterministic stand-in for the live feature extractor.

    Every feature is a slow sinusoid around a mid-level value and beats
    fire near the crest of a faster sinusoid, which exercises every
    reactive path of the simulation without an audio device.
    '''

    def frameAt(self, time: float) -> AudioFrame:
        '''
        Sample the synthetic feature stream.

        Parameters:
        -----------
        time : float
            Stream time [s]

        Returns:
        --------
        AudioFrame : Features at the given time
        '''
        slowTime = time * 0.3
        bands = np.arange(spectrumBands)
        spectrum = (
            (np.sin(time * 2.0 + bands * 0.3) * 0.3 + 0.3)
            * np.exp(-bands / 10.0)
            * (0.7 + np.sin(slowTime + bands * 0.1) * 0.3)
        )

        return AudioFrame(
            rms=0.4 + math.sin(time * 1.5) * 0.25,
            bass=0.45 + math.sin(time * 1.2) * 0.3,
            mid=0.35 + math.sin(time * 1.7) * 0.25,
            treble=0.25 + math.sin(time * 2.3) * 0.2,
            centroid=0.4 + math.sin(time * 0.8) * 0.3,
            beat=math.sin(time * 2.2) > 0.85,
            bpm=120.0,
            spectrum=spectrum,
        )


######################################################################
# -- Pointer Input -- #
######################################################################

@dataclass(frozen=True)
class ClickEvent:
    '''A discrete click at (x, y), stamped on the simulation clock [s].'''

    x: float
    y: float
    time: float


@dataclass(frozen=True)
class InputState:
    '''
    Pointer state for a single tick.

    Parameters:
    -----------
    x, y : float
        Current pointer position [px]
    isDown : bool
        True while the pointer button is held
    isDragging : bool
        True once a held pointer has moved past the drag threshold
    clicks : tuple[ClickEvent, ...]
        Recently retained clicks, oldest first
    '''

    x: float = 0.0
    y: float = 0.0
    isDown: bool = False
    isDragging: bool = False
    clicks: tuple[ClickEvent, ...] = ()

    @classmethod
    def idle(cls) -> InputState:
        '''Pointer at the origin, no gesture in progress.'''
        return cls()

    def recentClicks(self, now: float, maxAge: float) -> list[ClickEvent]:
        '''
        Clicks that happened within `maxAge` seconds before `now`.

        Clicks stamped in the future (negative age) are ignored.
        '''
        return [c for c in self.clicks if 0.0 <= now - c.time < maxAge]


def sweepingDrag(time: float, domainWidth: float, domainHeight: float) -> InputState:
    '''
    Scripted drag gesture for headless runs.

    The pointer traces a slow figure-eight across the upper half of the
    domain while held down.
    '''
    x = domainWidth * (0.5 + 0.35 * math.sin(time * 0.7))
    y = domainHeight * (0.25 + 0.1 * math.sin(time * 1.4))
    return InputState(x=x, y=y, isDown=True, isDragging=True)
