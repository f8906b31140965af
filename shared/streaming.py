"""Block streaming utilities shared by the renderers and the live demo.

A stream is an iterable of (samples, channels) float arrays. Transforms are
any objects with ``process(block, context)``: they mutate the block in place.
StreamContext carries the sample rate and how many samples have already gone
through, so time-varying parameters can be evaluated per block.
safety_check deduplicates the post-render pipeline.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class StreamContext:
    """Sample clock of a running stream."""
    sample_rate: int = 44100
    channels: int = 2
    sample_count: int = 0

    @property
    def time(self) -> float:
        """Seconds elapsed at the start of the current block."""
        return self.sample_count / self.sample_rate

    def advance(self, n_samples: int):
        self.sample_count += n_samples


class AudioBlock:
    """Mutable view over one block of audio, shape (samples, channels).

    Mono (samples,) arrays are viewed as a single channel. The wrapped
    array is never copied, so transforms write straight into it.
    """

    def __init__(self, data: np.ndarray):
        if not isinstance(data, np.ndarray):
            raise TypeError(f"AudioBlock needs a numpy array, got {type(data).__name__}")
        if not np.issubdtype(data.dtype, np.floating):
            raise TypeError(f"AudioBlock needs float samples, got dtype {data.dtype}")
        if data.ndim == 1:
            data = data[:, np.newaxis]
        elif data.ndim != 2:
            raise ValueError(f"AudioBlock needs (samples,) or (samples, channels), got shape {data.shape}")
        if not data.flags.writeable:
            raise ValueError("AudioBlock buffer is read-only")
        self.data = data

    @property
    def channels(self) -> int:
        return self.data.shape[1]

    @property
    def length(self) -> int:
        return self.data.shape[0]

    def channel_data(self, channel: int) -> np.ndarray:
        """Writable view of one channel."""
        return self.data[:, channel]


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def chunk_source(audio, chunk_size=4096):
    """Split a buffer into consecutive chunks.

    Yields float64 copies so in-place transforms leave ``audio`` intact.
    """
    audio = np.asarray(audio, dtype=np.float64)
    if audio.ndim == 1:
        audio = audio[:, np.newaxis]
    for start in range(0, audio.shape[0], chunk_size):
        yield audio[start:start + chunk_size].copy()


def noise_source(seconds=2.0, sr=44100, channels=2, chunk_size=4096, seed=None):
    """Uniform white noise in [-1, 1), generated chunk by chunk."""
    rng = np.random.default_rng(seed)
    remaining = int(seconds * sr)
    while remaining > 0:
        n = min(chunk_size, remaining)
        yield rng.uniform(-1.0, 1.0, size=(n, channels))
        remaining -= n


# ---------------------------------------------------------------------------
# Transforms and drivers
# ---------------------------------------------------------------------------

class Volume:
    """Static gain in dB."""

    def __init__(self, db=0.0):
        self.db = db

    def process(self, block: AudioBlock, context: StreamContext) -> AudioBlock:
        block.data *= 10.0 ** (self.db / 20.0)
        return block


def stream_blocks(source, transforms, context: StreamContext):
    """Pull-based driver: yield each block once every transform has run.

    The context advances after the block is yielded, so consumers still
    see the block's start time in ``context.time``.
    """
    for chunk in source:
        block = chunk if isinstance(chunk, AudioBlock) else AudioBlock(chunk)
        for transform in transforms:
            transform.process(block, context)
        yield block
        context.advance(block.length)


def run_stream(source, transforms, context: StreamContext, sink=None):
    """Push-based driver: feed every processed block to ``sink``.

    ``sink`` gets the raw array and returns False to stop early
    (StreamPlayer.write_chunk fits directly). Returns samples processed.
    """
    start = context.sample_count
    for block in stream_blocks(source, transforms, context):
        if sink is not None and sink(block.data) is False:
            context.advance(block.length)
            break
    return context.sample_count - start


def safety_check(output):
    """Reject non-finite or exploded output.

    Returns (ok, error_message).
    """
    if not np.all(np.isfinite(output)):
        return False, "ERROR: output diverged (non-finite values)"
    peak = np.max(np.abs(output)) if output.size else 0.0
    if peak > 1e6:
        return False, f"ERROR: output exploded (peak={peak:.0e})"
    return True, ""
