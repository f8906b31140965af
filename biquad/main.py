#!/usr/bin/env python3
"""Biquad — live demo: white noise -> filter -> volume -> speaker."""

import argparse
import logging

from biquad.engine.biquad import BiquadFilter
from biquad.engine.params import CHUNK_SIZE, FILTER_TYPES, SR
from shared.playback import StreamPlayer
from shared.streaming import StreamContext, Volume, noise_source, run_stream

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
log = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play filtered white noise")
    parser.add_argument("--type", default="bandpass", help=f"One of: {', '.join(FILTER_TYPES)}")
    parser.add_argument("--frequency", type=float, default=440.0)
    parser.add_argument("--q", type=float, default=30.0)
    parser.add_argument("--gain", type=float, default=0.0)
    parser.add_argument("--volume", type=float, default=0.0, help="Output gain in dB")
    parser.add_argument("--seconds", type=float, default=2.0)
    args = parser.parse_args(argv)

    context = StreamContext(sample_rate=SR, channels=2)
    filt = BiquadFilter(type=args.type, frequency=args.frequency, Q=args.q,
                        gain=args.gain, channels=context.channels)
    source = noise_source(args.seconds, SR, context.channels, CHUNK_SIZE)

    player = StreamPlayer(sr=SR, channels=context.channels)
    player.start()
    try:
        n = run_stream(source, [filt, Volume(args.volume)], context, sink=player.write_chunk)
        log.info("played %.2fs", n / SR)
    except KeyboardInterrupt:
        player.stop()
    finally:
        player.close(cancelled=player.stopped)


if __name__ == "__main__":
    main()
