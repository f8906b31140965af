"""Offline WAV rendering — load audio, stream it through the biquad, save output.

Usage:
    uv run python -m biquad.audio.render input.wav output.wav --type lowpass --frequency 800
    uv run python -m biquad.audio.render input.wav output.wav --preset presets/notch.json
    uv run python -m biquad.audio.render input.wav output.wav --frequency 200 --sweep-to 8000

Without --preset, uses the default params (lowpass 350 Hz, Q 1).
"""

import argparse
import json
import logging

from biquad.engine.biquad import render_filter
from biquad.engine.params import CHUNK_SIZE, FILTER_TYPES, FilterSpec, as_parameter, default_params
from shared.audio import load_wav, save_wav
from shared.streaming import safety_check

log = logging.getLogger(__name__)


def load_preset(path):
    """Load a params dict from JSON."""
    with open(path) as f:
        return json.load(f)


def exponential_sweep(f_start, f_end, duration):
    """``time -> Hz`` glide from f_start to f_end over duration seconds, then hold."""
    ratio = f_end / f_start

    def sweep(t):
        if duration <= 0:
            return f_end
        return f_start * ratio ** min(t / duration, 1.0)
    return sweep


def build_spec(args, duration):
    """FilterSpec from preset/defaults plus CLI overrides."""
    params = load_preset(args.preset) if args.preset else default_params()
    overrides = {
        "type": args.type, "frequency": args.frequency, "Q": args.q,
        "gain": args.gain, "detune": args.detune,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})
    spec = FilterSpec.from_params(params)

    if args.sweep_to is not None:
        f_start = spec.frequency.at(0.0)
        if f_start <= 0 or args.sweep_to <= 0:
            raise ValueError("--sweep-to needs positive start and end frequencies")
        spec.frequency = as_parameter(exponential_sweep(f_start, args.sweep_to, duration))
    return spec


def render_file(audio, sr, output_path, spec, chunk_size=CHUNK_SIZE, normalize=False):
    """Filter loaded audio into a WAV file. Returns the filtered audio."""
    output = render_filter(audio, spec, sr, chunk_size=chunk_size)
    ok, message = safety_check(output)
    if not ok:
        log.warning("%s: %s", output_path, message)
        raise RuntimeError(message)
    save_wav(output_path, output, sr, normalize=normalize)
    return output


def main(argv=None):
    parser = argparse.ArgumentParser(description="Process audio through a biquad filter")
    parser.add_argument("input", help="Input WAV file")
    parser.add_argument("output", help="Output WAV file")
    parser.add_argument("--preset", help="JSON preset file (default params if omitted)")
    parser.add_argument("--type", help=f"Filter type: {', '.join(FILTER_TYPES)}")
    parser.add_argument("--frequency", type=float, help="Cutoff / centre frequency in Hz")
    parser.add_argument("--q", type=float, help="Q (resonance in dB for lowpass/highpass)")
    parser.add_argument("--gain", type=float, help="Gain in dB (shelf and peaking)")
    parser.add_argument("--detune", type=float, help="Detune in cents")
    parser.add_argument("--sweep-to", type=float,
                        help="Glide the frequency exponentially to this value (Hz) over the file")
    parser.add_argument("--chunk-size", type=int, default=CHUNK_SIZE,
                        help=f"Samples per block (default: {CHUNK_SIZE})")
    parser.add_argument("--normalize", action="store_true",
                        help="Peak-normalize quiet output to 0.9")
    args = parser.parse_args(argv)

    print(f"Loading: {args.input}")
    audio, sr = load_wav(args.input)
    duration = audio.shape[0] / sr
    print(f"  {audio.shape[0]} samples, {duration:.2f}s, {sr} Hz")

    spec = build_spec(args, duration)
    print(f"Filter: {json.dumps(spec.to_params())}"
          + (f" sweeping to {args.sweep_to:.0f} Hz" if args.sweep_to else ""))

    render_file(audio, sr, args.output, spec, args.chunk_size, args.normalize)
    print(f"Saved: {args.output}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    main()
