"""Parameter schema and per-block parameter resolution for the biquad filter.

Any numeric parameter is either Fixed (a constant) or TimeVarying (a
function of elapsed seconds). The streaming engine resolves every parameter
once per block at the block's start time, so modulation is block-granular.

Defaults follow the Web Audio BiquadFilterNode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from shared.params import ParamType as T, ParamDef, ParamSchema

SR = 44100
CHUNK_SIZE = 4096


class FilterType(Enum):
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    LOWSHELF = "lowshelf"
    HIGHSHELF = "highshelf"
    PEAKING = "peaking"
    NOTCH = "notch"
    ALLPASS = "allpass"
    BANDPASS = "bandpass"

    @classmethod
    def parse(cls, value) -> FilterType:
        """Accept a FilterType or a name like 'lowshelf', 'low_shelf', 'lowShelf'."""
        if isinstance(value, cls):
            return value
        key = str(value).replace("_", "").replace("-", "").lower()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown filter type '{value}'. Options: {FILTER_TYPES}") from None


FILTER_TYPES = [t.value for t in FilterType]


# ── Fixed | TimeVarying ───────────────────────────────────────────────

@dataclass(frozen=True)
class Fixed:
    value: float

    def at(self, time: float) -> float:
        return self.value


@dataclass(frozen=True)
class TimeVarying:
    fn: Callable[[float], float]

    def at(self, time: float) -> float:
        return float(self.fn(time))


Parameter = Fixed | TimeVarying


def as_parameter(value) -> Parameter:
    """Wrap a number or a ``time -> value`` callable."""
    if isinstance(value, (Fixed, TimeVarying)):
        return value
    if callable(value):
        return TimeVarying(value)
    return Fixed(float(value))


# ── Schema ────────────────────────────────────────────────────────────

_PARAMS = [
    ParamDef("type", T.CHOICE, section="filter",
             default="lowpass", choices=FILTER_TYPES),

    ParamDef("frequency", T.FLOAT, section="filter", label="Frequency (Hz)",
             default=350.0, range=(0.0, 96000.0)),

    ParamDef("detune", T.FLOAT, section="filter", label="Detune (cents)",
             default=0.0, range=(-153600.0, 153600.0)),

    # Resonance in dB for lowpass/highpass, quality factor elsewhere
    ParamDef("Q", T.FLOAT, section="filter", label="Q",
             default=1.0, range=(0.0, 1000.0)),

    ParamDef("gain", T.FLOAT, section="filter", label="Gain (dB)",
             default=0.0, range=(-100.0, 100.0)),
]

FILTER_SCHEMA = ParamSchema(_PARAMS)


def default_params():
    return FILTER_SCHEMA.default_params()


# ── Filter spec ───────────────────────────────────────────────────────

def _fixed(key):
    return field(default_factory=lambda: Fixed(FILTER_SCHEMA.get(key).default))


@dataclass
class FilterSpec:
    """Logical filter configuration; may be mutated between blocks."""
    type: FilterType = FilterType.LOWPASS
    frequency: Parameter = _fixed("frequency")
    detune: Parameter = _fixed("detune")
    Q: Parameter = _fixed("Q")
    gain: Parameter = _fixed("gain")

    def __post_init__(self):
        self.type = FilterType.parse(self.type)
        self.frequency = as_parameter(self.frequency)
        self.detune = as_parameter(self.detune)
        self.Q = as_parameter(self.Q)
        self.gain = as_parameter(self.gain)

    @classmethod
    def from_params(cls, raw: dict) -> FilterSpec:
        """Build from a raw dict (JSON preset, CLI overrides), defaults filled in."""
        raw = dict(raw)
        if "type" in raw:
            raw["type"] = FilterType.parse(raw["type"]).value
        params = default_params()
        params.update(FILTER_SCHEMA.validate_and_clamp(raw))
        return cls(**params)

    def to_params(self) -> dict:
        """Plain dict of current values; time-varying ones are sampled at t=0."""
        return {
            "type": self.type.value,
            "frequency": self.frequency.at(0.0),
            "detune": self.detune.at(0.0),
            "Q": self.Q.at(0.0),
            "gain": self.gain.at(0.0),
        }

    def resolve(self, time: float, sample_rate: float):
        """Scalar (normalized frequency, Q, gain dB) for a block starting at ``time``.

        Frequency is normalized by Nyquist, detuned, and clamped to [0, 1];
        Q is clamped to >= 0.
        """
        nyquist = 0.5 * sample_rate
        frequency = self.frequency.at(time) / nyquist
        detune = self.detune.at(time)
        if detune:
            frequency *= 2.0 ** (detune / 1200.0)
        frequency = max(0.0, min(frequency, 1.0))
        q = max(0.0, self.Q.at(time))
        return frequency, q, self.gain.at(time)
