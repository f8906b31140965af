"""Live playback sink.

StreamPlayer wraps an sd.OutputStream; write_chunk is usable directly as
the ``sink`` of shared.streaming.run_stream.
"""

import logging
import time

import numpy as np
import sounddevice as sd

log = logging.getLogger(__name__)


class StreamPlayer:
    """Manages streaming audio playback via sd.OutputStream."""

    def __init__(self, sr=44100, channels=2):
        self.sr = sr
        self.channels = channels
        self._stream = None
        self._stop_flag = False

    def start(self):
        """Open and start the output stream."""
        self._stop_flag = False
        self._stream = sd.OutputStream(
            samplerate=self.sr, channels=self.channels, dtype='float32',
        )
        self._stream.start()
        log.debug("output stream open: %d Hz, %d ch", self.sr, self.channels)

    def write_chunk(self, chunk):
        """Write a (samples, channels) chunk. Returns False to stop the stream."""
        if self._stop_flag:
            return False
        clipped = np.clip(chunk, -1.0, 1.0).astype(np.float32)
        if clipped.ndim == 1:
            clipped = clipped[:, np.newaxis]
        if clipped.shape[1] < self.channels:
            # Duplicate the last channel into any missing device channels
            pad = np.repeat(clipped[:, -1:], self.channels - clipped.shape[1], axis=1)
            clipped = np.hstack([clipped, pad])
        try:
            self._stream.write(clipped[:, :self.channels])
            return True
        except sd.PortAudioError as exc:
            log.error("write_chunk failed: %s", exc)
            return False

    def stop(self):
        """Signal stop and abort the stream immediately."""
        self._stop_flag = True
        if self._stream is not None:
            self._stream.abort()

    def close(self, cancelled=False):
        """Close the stream gracefully (drain) or abruptly."""
        if self._stream is None:
            return
        if not cancelled:
            time.sleep(0.05)  # let buffer drain
            self._stream.stop()
        else:
            self._stream.abort()
        self._stream.close()
        self._stream = None

    @property
    def stopped(self):
        return self._stop_flag
