"""Streaming biquad filter — the core engine.

Signal flow per block:
    1. Resolve frequency / detune / Q / gain at the block start time
    2. Design normalized coefficients
    3. Run the direct-form-I recurrence on each channel in place,
       carrying (x1, x2, y1, y2) into the next block

BiquadFilter does not own the stream. Whatever drives it (shared.streaming,
a GUI callback, a test) hands it blocks together with a StreamContext.
"""

import logging
import time

import numpy as np

from biquad.engine.coeffs import Coefficients, design
from biquad.engine.params import CHUNK_SIZE, SR, FilterSpec, FilterType, as_parameter
from primitives.filters import biquad_df1, new_state
from shared.streaming import AudioBlock, StreamContext, chunk_source, stream_blocks

log = logging.getLogger(__name__)


class BiquadFilter:
    """Per-channel biquad with block-rate parameter updates.

    Args:
        spec: FilterSpec; when omitted one is built from the keyword
            arguments (type, frequency, detune, Q, gain)
        channels: number of channels to filter. Blocks with more channels
            keep the extra ones untouched.

    frequency, detune, Q and gain accept a number or a ``time -> value``
    callable and may be reassigned between blocks.
    """

    def __init__(self, spec: FilterSpec | None = None, channels: int = 2, **options):
        if spec is None:
            spec = FilterSpec(**options)
        elif options:
            raise TypeError("pass either spec or keyword options, not both")
        self.spec = spec
        self.channels = channels
        self._state = new_state(channels)
        self.coeffs = design(spec.type, *spec.resolve(0.0, SR))
        log.debug("biquad %s, %d ch", spec.type.value, channels)

    # -- configuration ---------------------------------------------------

    @property
    def type(self) -> FilterType:
        return self.spec.type

    @type.setter
    def type(self, value):
        self.spec.type = FilterType.parse(value)

    @property
    def frequency(self):
        return self.spec.frequency

    @frequency.setter
    def frequency(self, value):
        self.spec.frequency = as_parameter(value)

    @property
    def detune(self):
        return self.spec.detune

    @detune.setter
    def detune(self, value):
        self.spec.detune = as_parameter(value)

    @property
    def Q(self):
        return self.spec.Q

    @Q.setter
    def Q(self, value):
        self.spec.Q = as_parameter(value)

    @property
    def gain(self):
        return self.spec.gain

    @gain.setter
    def gain(self, value):
        self.spec.gain = as_parameter(value)

    # -- processing ------------------------------------------------------

    def update(self, context: StreamContext) -> Coefficients:
        """Recompute coefficients for a block starting at ``context.time``."""
        frequency, q, gain = self.spec.resolve(context.time, context.sample_rate)
        self.coeffs = design(self.spec.type, frequency, q, gain)
        return self.coeffs

    def process(self, block: AudioBlock, context: StreamContext) -> AudioBlock:
        """Filter ``block`` in place and return it."""
        b0, b1, b2, a1, a2 = self.update(context)
        for ch in range(min(block.channels, self.channels)):
            biquad_df1(block.channel_data(ch), b0, b1, b2, a1, a2, self._state[ch])
        return block

    def reset(self):
        """Clear every channel's history."""
        self._state[:] = 0.0
        log.debug("biquad state reset")

    @property
    def state(self) -> np.ndarray:
        """Copy of the (channels, 4) state: x1, x2, y1, y2 per row."""
        return self._state.copy()


def render_filter(input_audio: np.ndarray, spec: FilterSpec, sr: int = SR,
                  chunk_callback=None, chunk_size: int = CHUNK_SIZE) -> np.ndarray:
    """The single offline entry point: stream a buffer through a fresh filter.

    Args:
        input_audio: float array -- mono (samples,) or (samples, channels)
        spec: filter configuration (time-varying parameters are evaluated
            per chunk, measured from the start of the buffer)
        sr: sample rate of input_audio
        chunk_callback: if provided, called with each filtered chunk.
            Return False to stop early.
        chunk_size: samples per block

    Returns:
        filtered copy with the input's shape (truncated if stopped early)
    """
    t0 = time.perf_counter()
    mono = input_audio.ndim == 1
    channels = 1 if mono else input_audio.shape[1]
    context = StreamContext(sample_rate=sr, channels=channels)
    filt = BiquadFilter(spec, channels=channels)

    chunks = []
    for block in stream_blocks(chunk_source(input_audio, chunk_size), [filt], context):
        chunks.append(block.data)
        if chunk_callback is not None and chunk_callback(block.data) is False:
            break

    if chunks:
        result = np.concatenate(chunks, axis=0)
    else:
        result = np.zeros((0, channels))
    if mono:
        result = result[:, 0]

    elapsed = time.perf_counter() - t0
    duration = input_audio.shape[0] / sr
    rtf = duration / elapsed if elapsed > 0 else float('inf')
    log.info("render %.1fs audio in %.3fs (%s, %d ch, %.0fx RT)",
             duration, elapsed, spec.type.value, channels, rtf)
    return result
