"""Biquad coefficient design for the eight filter responses.

design(type, frequency, Q, gain_db) -> Coefficients(b0, b1, b2, a1, a2)

frequency is normalized by Nyquist (0 = DC, 1 = Nyquist). Coefficients are
normalized so a0 = 1. The general trigonometric formulas have removable
singularities at the edges of the frequency range and, for the Q-based
responses, at Q = 0; those points get their closed-form limit instead.

Lowpass and highpass read Q as a resonance in dB (10^(0.05*Q) peak gain);
the other responses read it as a quality factor.
"""

import math
from typing import NamedTuple

from biquad.engine.params import FilterType


class Coefficients(NamedTuple):
    b0: float
    b1: float
    b2: float
    a1: float
    a2: float


IDENTITY = Coefficients(1.0, 0.0, 0.0, 0.0, 0.0)
ZERO = Coefficients(0.0, 0.0, 0.0, 0.0, 0.0)


def normalize(b0, b1, b2, a0, a1, a2) -> Coefficients:
    """Divide through by a0."""
    assert a0 != 0, "a0 == 0: unreachable for clamped frequency and Q"
    a0_inv = 1.0 / a0
    return Coefficients(b0 * a0_inv, b1 * a0_inv, b2 * a0_inv,
                        a1 * a0_inv, a2 * a0_inv)


def _constant_gain(gain):
    return normalize(gain, 0.0, 0.0, 1.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# Lowpass / highpass (resonance in dB)
# ---------------------------------------------------------------------------

# Above this the poles sit within rounding of the unit circle
MAX_RESONANCE_DB = 60.0


def _resonant_terms(cutoff, resonance):
    """Shared (beta, gamma) of the resonant lowpass/highpass pair."""
    g = 10.0 ** (0.05 * min(resonance, MAX_RESONANCE_DB))
    h = 16.0 / (g * g)
    # (4 - sqrt(16 - 16/g^2)) / 2 without the cancellation for large g
    d = math.sqrt(h / (2.0 * (4.0 + math.sqrt(16.0 - h))))
    theta = math.pi * cutoff
    sn = 0.5 * d * math.sin(theta)
    beta = 0.5 * (1.0 - sn) / (1.0 + sn)
    gamma = (0.5 + beta) * math.cos(theta)
    return beta, gamma


def _lowpass(cutoff, resonance, gain_db):
    if cutoff == 1:
        return IDENTITY
    if cutoff == 0:
        # Nothing gets through
        return ZERO
    beta, gamma = _resonant_terms(cutoff, resonance)
    alpha = 0.25 * (0.5 + beta - gamma)
    return normalize(2.0 * alpha, 4.0 * alpha, 2.0 * alpha,
                     1.0, -2.0 * gamma, 2.0 * beta)


def _highpass(cutoff, resonance, gain_db):
    if cutoff == 1:
        return ZERO
    if cutoff == 0:
        # Poles and zeros coincide on the unit circle; the limit is 1
        return IDENTITY
    beta, gamma = _resonant_terms(cutoff, resonance)
    alpha = 0.25 * (0.5 + beta + gamma)
    return normalize(2.0 * alpha, -4.0 * alpha, 2.0 * alpha,
                     1.0, -2.0 * gamma, 2.0 * beta)


# ---------------------------------------------------------------------------
# Shelves (slope S = 1, Q unused)
# ---------------------------------------------------------------------------

def _shelf_terms(frequency, A):
    w0 = math.pi * frequency
    S = 1.0  # shelf slope (1 is the steepest without overshoot)
    alpha = 0.5 * math.sin(w0) * math.sqrt((A + 1.0 / A) * (1.0 / S - 1.0) + 2.0)
    k = math.cos(w0)
    k2 = 2.0 * math.sqrt(A) * alpha
    return k, k2


def _lowshelf(frequency, q, gain_db):
    A = 10.0 ** (gain_db / 40.0)
    if frequency == 1:
        return _constant_gain(A * A)
    if frequency == 0:
        return IDENTITY
    k, k2 = _shelf_terms(frequency, A)
    a_plus = A + 1.0
    a_minus = A - 1.0
    return normalize(
        A * (a_plus - a_minus * k + k2),
        2.0 * A * (a_minus - a_plus * k),
        A * (a_plus - a_minus * k - k2),
        a_plus + a_minus * k + k2,
        -2.0 * (a_minus + a_plus * k),
        a_plus + a_minus * k - k2,
    )


def _highshelf(frequency, q, gain_db):
    A = 10.0 ** (gain_db / 40.0)
    if frequency == 1:
        return IDENTITY
    if frequency == 0:
        return _constant_gain(A * A)
    k, k2 = _shelf_terms(frequency, A)
    a_plus = A + 1.0
    a_minus = A - 1.0
    return normalize(
        A * (a_plus + a_minus * k + k2),
        -2.0 * A * (a_minus + a_plus * k),
        A * (a_plus + a_minus * k - k2),
        a_plus - a_minus * k + k2,
        2.0 * (a_minus - a_plus * k),
        a_plus - a_minus * k - k2,
    )


# ---------------------------------------------------------------------------
# Q-based responses: identity at both frequency edges, closed-form Q -> 0 limit
# ---------------------------------------------------------------------------

def _peaking(frequency, q, gain_db):
    A = 10.0 ** (gain_db / 40.0)
    if not 0 < frequency < 1:
        return IDENTITY
    if q == 0:
        return _constant_gain(A * A)
    w0 = math.pi * frequency
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    return normalize(1.0 + alpha * A, -2.0 * k, 1.0 - alpha * A,
                     1.0 + alpha / A, -2.0 * k, 1.0 - alpha / A)


def _notch(frequency, q, gain_db):
    if not 0 < frequency < 1:
        return IDENTITY
    if q == 0:
        return ZERO
    w0 = math.pi * frequency
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    return normalize(1.0, -2.0 * k, 1.0,
                     1.0 + alpha, -2.0 * k, 1.0 - alpha)


def _allpass(frequency, q, gain_db):
    if not 0 < frequency < 1:
        return IDENTITY
    if q == 0:
        # Limit is -1: a polarity flip, not the identity
        return normalize(-1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
    w0 = math.pi * frequency
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    return normalize(1.0 - alpha, -2.0 * k, 1.0 + alpha,
                     1.0 + alpha, -2.0 * k, 1.0 - alpha)


def _bandpass(frequency, q, gain_db):
    if not 0 < frequency < 1:
        # Response vanishes at both edges; at f = 0 and Q = 0 it is
        # undefined and taken as zero too
        return ZERO
    if q == 0:
        return IDENTITY
    w0 = math.pi * frequency
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    return normalize(alpha, 0.0, -alpha,
                     1.0 + alpha, -2.0 * k, 1.0 - alpha)


DESIGNERS = {
    FilterType.LOWPASS: _lowpass,
    FilterType.HIGHPASS: _highpass,
    FilterType.LOWSHELF: _lowshelf,
    FilterType.HIGHSHELF: _highshelf,
    FilterType.PEAKING: _peaking,
    FilterType.NOTCH: _notch,
    FilterType.ALLPASS: _allpass,
    FilterType.BANDPASS: _bandpass,
}
assert set(DESIGNERS) == set(FilterType), "every FilterType needs a designer"


def design(filter_type, frequency: float, q: float, gain_db: float = 0.0) -> Coefficients:
    """Normalized biquad coefficients for one filter setting.

    Args:
        filter_type: FilterType or its name
        frequency: cutoff/centre normalized by Nyquist, clamped to [0, 1]
        q: resonance (dB) for lowpass/highpass, quality factor otherwise;
            clamped to >= 0
        gain_db: shelf/peak gain, ignored by the other responses
    """
    filter_type = FilterType.parse(filter_type)
    frequency = max(0.0, min(float(frequency), 1.0))
    q = max(0.0, float(q))
    return DESIGNERS[filter_type](frequency, q, float(gain_db))
