"""Shared audio I/O utilities.

Provides load_wav, save_wav and make_impulse used by the renderer and tests.
"""

from math import gcd

import numpy as np
from scipy.io import wavfile


def load_wav(path, sr=None):
    """Load a WAV file as float64, keeping every channel.

    With ``sr`` set and different from the file rate the audio is resampled.
    Returns (audio_array, sample_rate); audio is (samples,) or
    (samples, channels).
    """
    file_sr, data = wavfile.read(path)
    if data.dtype == np.int16:
        audio = data.astype(np.float64) / 32768.0
    elif data.dtype == np.int32:
        audio = data.astype(np.float64) / 2147483648.0
    elif data.dtype == np.uint8:
        audio = (data.astype(np.float64) - 128.0) / 128.0
    else:
        audio = data.astype(np.float64)
    if sr is None or sr == file_sr:
        return audio, file_sr
    from scipy.signal import resample_poly
    g = gcd(sr, file_sr)
    audio = resample_poly(audio, sr // g, file_sr // g, axis=0)
    return audio, sr


def save_wav(path, audio, sr=44100, normalize=False):
    """Save audio to a 16-bit WAV file.

    Peaks above 1.0 are always scaled down; ``normalize`` also brings
    quiet output up to 0.9.
    """
    peak = np.max(np.abs(audio)) if audio.size else 0.0
    if peak > 1.0:
        audio = audio / peak * 0.95
    elif normalize and 0 < peak < 0.9:
        audio = audio / peak * 0.9
    out = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)
    wavfile.write(path, sr, out)


def make_impulse(n=64, channels=1):
    """Unit impulse (1, 0, 0, ...), shape (n,) or (n, channels)."""
    if channels == 1:
        impulse = np.zeros(n)
        impulse[0] = 1.0
    else:
        impulse = np.zeros((n, channels))
        impulse[0, :] = 1.0
    return impulse
