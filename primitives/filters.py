"""Filters — direct-form-I biquad kernel. Built from scratch.

Difference equation (Direct Form 1):
    y[n] = b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]
"""

import numpy as np
from numba import njit


def new_state(channels: int) -> np.ndarray:
    """Zeroed (channels, 4) state array, one (x1, x2, y1, y2) row per channel."""
    return np.zeros((channels, 4), dtype=np.float64)


@njit(cache=True)
def biquad_df1(samples, b0, b1, b2, a1, a2, state):
    """Filter one channel in place, carrying state across calls.

    samples: 1-D float array (may be a strided column view), overwritten
    state:   length-4 float64 row (x1, x2, y1, y2), updated on return
    """
    x1 = state[0]
    x2 = state[1]
    y1 = state[2]
    y2 = state[3]
    for i in range(len(samples)):
        x = samples[i]
        y = b0 * x + b1 * x1 + b2 * x2 - a1 * y1 - a2 * y2
        samples[i] = y
        x2 = x1
        x1 = x
        y2 = y1
        y1 = y
    state[0] = x1
    state[1] = x2
    state[2] = y1
    state[3] = y2
