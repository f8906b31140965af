"""Offline inspection of designed coefficients: frequency response, poles.

Dependencies: numpy, scipy.
"""

import numpy as np
from scipy.signal import freqz, lfilter


def ba(coeffs):
    """(b, a) arrays in scipy.signal order."""
    b0, b1, b2, a1, a2 = coeffs
    return np.array([b0, b1, b2]), np.array([1.0, a1, a2])


def frequency_response(coeffs, sr=44100, n_points=512):
    """Magnitude response.

    Returns (freqs_hz, magnitude_db), freqs from 0 up to (not incl.) Nyquist.
    """
    b, a = ba(coeffs)
    freqs, h = freqz(b, a, worN=n_points, fs=sr)
    mag = np.abs(h)
    mag_db = 20.0 * np.log10(np.maximum(mag, 1e-12))
    return freqs, mag_db


def poles(coeffs):
    """Roots of z^2 + a1*z + a2 (fewer when a2 / a1 vanish)."""
    _, _, _, a1, a2 = coeffs
    return np.roots([1.0, a1, a2])


def is_stable(coeffs):
    """True if every pole lies strictly inside the unit circle.

    Uses the stability triangle on (a1, a2) so poles within rounding of
    the circle are not reported as stable.
    """
    _, _, _, a1, a2 = coeffs
    return bool(abs(a2) < 1.0 and abs(a1) < 1.0 + a2)


def impulse_response(coeffs, n=64):
    """First n samples of the impulse response (reference via lfilter)."""
    b, a = ba(coeffs)
    impulse = np.zeros(n)
    impulse[0] = 1.0
    return lfilter(b, a, impulse)
