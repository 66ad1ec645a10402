"""
Byte-at-a-time framing of the receiver's NMEA stream.

A frame runs from the '$' start marker to the line feed. Carriage returns
are dropped. Bytes beyond the buffer capacity are discarded silently; the
truncated frame is still handed on when its line feed arrives and normally
fails checksum validation there.
"""

from typing import Optional

from lap_timing.config import NMEA_FRAME_CAPACITY, NMEA_START_MARKER

CR = 0x0D
LF = 0x0A


class FrameBuffer:
    """
    Fixed-capacity byte buffer with an explicit write cursor.

    One slot of the capacity is reserved for the terminating sentinel, so at
    most capacity - 1 bytes are stored.
    """

    def __init__(self, capacity: int = NMEA_FRAME_CAPACITY):
        if capacity < 2:
            raise ValueError("Frame capacity must leave room for data and sentinel")
        self.capacity = capacity
        self._data = bytearray(capacity)
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def is_full(self) -> bool:
        return self._length >= self.capacity - 1

    def append(self, byte: int) -> bool:
        """Store one byte. Returns False (and drops it) when full."""
        if self.is_full:
            return False
        self._data[self._length] = byte
        self._length += 1
        self._data[self._length] = 0
        return True

    def reset(self):
        self._length = 0
        self._data[0] = 0

    def contents(self) -> bytes:
        return bytes(self._data[:self._length])


class FrameAccumulator:
    """
    Turns incoming bytes into candidate sentence frames.

    Usage:
        accumulator = FrameAccumulator()
        for byte in data:
            frame = accumulator.feed(byte)
            if frame is not None:
                handle(frame)
    """

    def __init__(self, capacity: int = NMEA_FRAME_CAPACITY):
        self._buffer = FrameBuffer(capacity)
        self.overflowed = False
        self.last_frame_truncated = False

    def feed(self, byte: int) -> Optional[bytes]:
        """
        Consume one byte.

        Returns:
            The completed frame (line feed included when it fit) once a line
            feed arrives, otherwise None.
        """
        if byte == CR:
            return None

        if byte == NMEA_START_MARKER:
            # An unterminated earlier frame is superseded
            self._buffer.reset()
            self.overflowed = False
            self._buffer.append(byte)
            return None

        if not self._buffer.append(byte):
            self.overflowed = True

        if byte == LF:
            frame = self._buffer.contents()
            self.last_frame_truncated = self.overflowed
            self._buffer.reset()
            self.overflowed = False
            return frame

        return None
