"""Test block streaming utilities — sources, drivers, sample clock.

Run: uv run python tests/test_streaming.py
"""

import numpy as np
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from biquad.engine.biquad import BiquadFilter
from shared.streaming import (
    AudioBlock, StreamContext, Volume, chunk_source, noise_source,
    run_stream, safety_check, stream_blocks,
)

SR = 44100


class Recorder:
    """Transform that records the context time it was called at."""

    def __init__(self):
        self.times = []

    def process(self, block, context):
        self.times.append(context.time)
        return block


# ---------------------------------------------------------------------------
# Test 1: Sources
# ---------------------------------------------------------------------------
def test_chunk_source():
    print("Test 1: chunk_source splits and copies")
    audio = np.arange(10, dtype=np.float64)
    chunks = list(chunk_source(audio, 4))
    assert [c.shape for c in chunks] == [(4, 1), (4, 1), (2, 1)]
    chunks[0][:] = -1.0
    assert audio[0] == 0.0
    stereo = np.zeros((9, 2))
    assert sum(c.shape[0] for c in chunk_source(stereo, 3)) == 9
    print("  OK")


def test_noise_source():
    chunks = list(noise_source(seconds=0.1, sr=1000, channels=2, chunk_size=32, seed=7))
    total = np.concatenate(chunks)
    assert total.shape == (100, 2)
    assert np.all(np.abs(total) <= 1.0)
    again = np.concatenate(list(noise_source(0.1, 1000, 2, 32, seed=7)))
    assert np.array_equal(total, again)


# ---------------------------------------------------------------------------
# Test 2: Drivers and sample clock
# ---------------------------------------------------------------------------
def test_stream_blocks_advances_clock():
    print("Test 2: Context time per block")
    context = StreamContext(sample_rate=1000, channels=1)
    recorder = Recorder()
    blocks = list(stream_blocks(chunk_source(np.zeros(250), 100), [recorder], context))
    assert len(blocks) == 3
    assert recorder.times == [0.0, 0.1, 0.2]
    assert context.sample_count == 250
    assert context.time == 0.25
    print("  OK")


def test_run_stream_sink_and_early_stop():
    context = StreamContext(sample_rate=SR, channels=2)
    received = []

    def sink(chunk):
        received.append(chunk.copy())
        return len(received) < 2

    n = run_stream(chunk_source(np.ones((1000, 2)), 300), [Volume(-6.0)], context, sink)
    assert len(received) == 2
    assert n == 600
    assert context.sample_count == 600
    assert np.allclose(received[0], 10 ** (-6.0 / 20))


def test_run_stream_without_sink():
    context = StreamContext(sample_rate=SR, channels=2)
    assert run_stream(noise_source(0.01, SR, 2, 128, seed=1), [], context) == 441


def test_pipeline_matches_direct_processing():
    """Generator -> filter -> volume, the same as filtering then scaling."""
    audio = np.random.default_rng(3).standard_normal((1000, 2))
    context = StreamContext(sample_rate=SR, channels=2)
    out = np.concatenate([b.data for b in stream_blocks(
        chunk_source(audio, 256), [BiquadFilter(type="notch", frequency=1000, Q=3), Volume(6.0)],
        context)])

    filt = BiquadFilter(type="notch", frequency=1000, Q=3)
    block = AudioBlock(audio.copy())
    filt.process(block, StreamContext(sample_rate=SR, channels=2))
    assert np.allclose(out, block.data * 10 ** (6.0 / 20))


# ---------------------------------------------------------------------------
# Test 3: Safety check
# ---------------------------------------------------------------------------
def test_safety_check():
    assert safety_check(np.zeros(10)) == (True, "")
    ok, msg = safety_check(np.array([0.0, np.nan]))
    assert not ok and "non-finite" in msg
    ok, msg = safety_check(np.array([1e9]))
    assert not ok and "exploded" in msg


if __name__ == "__main__":
    test_chunk_source()
    test_noise_source()
    test_stream_blocks_advances_clock()
    test_run_stream_sink_and_early_stop()
    test_run_stream_without_sink()
    test_pipeline_matches_direct_processing()
    test_safety_check()
    print("\nDone!")
