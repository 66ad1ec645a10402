"""Replay mode for testing without GPS hardware."""

import logging
import time
from typing import Callable, List, Optional

from config import GPS_REPLAY_RATE_HZ

logger = logging.getLogger('openLap.replay')


class NMEAReplaySource:
    """
    Feeds a recorded NMEA log back as if it came from the serial port.

    Lines are released at rate_hz sentences per second, measured on the
    supplied clock. Lines are passed through byte for byte (CRLF restored),
    so corrupt lines in the recording are rejected downstream exactly as
    they would be live.
    """

    def __init__(self, path: str, rate_hz: float = GPS_REPLAY_RATE_HZ,
                 loop: bool = False, clock: Callable[[], float] = time.monotonic):
        self.path = path
        self.rate_hz = rate_hz
        self.loop = loop
        self._clock = clock
        self._lines: List[bytes] = []
        self._index = 0
        self._start_time: Optional[float] = None

    def open(self) -> bool:
        """Load the recording."""
        try:
            with open(self.path, 'rb') as f:
                self._lines = [line.rstrip(b"\r\n") + b"\r\n" for line in f if line.strip()]
        except OSError as e:
            logger.warning("Replay: Could not read %s: %s", self.path, e)
            return False

        self._index = 0
        self._start_time = None
        logger.info("Replay: Loaded %d sentences from %s", len(self._lines), self.path)
        return True

    @property
    def exhausted(self) -> bool:
        return not self.loop and self._index >= len(self._lines)

    def read_available(self) -> bytes:
        """Return every line due by now, or b"" if none is due."""
        if not self._lines:
            return b""

        now = self._clock()
        if self._start_time is None:
            self._start_time = now

        due = int((now - self._start_time) * self.rate_hz) + 1
        chunk = []
        while self._index < due:
            position = self._index % len(self._lines)
            if not self.loop and self._index >= len(self._lines):
                break
            chunk.append(self._lines[position])
            self._index += 1
        return b"".join(chunk)

    def close(self):
        self._lines = []
