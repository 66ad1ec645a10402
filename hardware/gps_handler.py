"""
GPS Handler for openLap.
Reads raw NMEA bytes from the receiver's serial port without blocking.
"""

import logging
from typing import Optional

import serial

from config import (
    GPS_BAUD_RATE,
    GPS_MAX_CONSECUTIVE_ERRORS,
    GPS_SERIAL_PORT,
    GPS_SERIAL_TIMEOUT_S,
)

logger = logging.getLogger('openLap.gps')
raw_logger = logging.getLogger('openLap.gps.raw')


class GPSHandler:
    """
    Non-blocking byte source for the receiver's serial port.

    The tick loop calls read_available() once per tick and hands the bytes
    to the lap timer session. No parsing happens here.

    Error Recovery
    --------------
    Serial errors are counted. The third consecutive error is logged, and
    after max_consecutive_errors (10) the port is closed and reopened. This
    handles temporary USB disconnects or serial port issues. Absence of data
    is not an error: read_available() simply returns b"".
    """

    def __init__(self, port: str = GPS_SERIAL_PORT, baud_rate: int = GPS_BAUD_RATE):
        self.port = port
        self.baud_rate = baud_rate
        self.serial_port: Optional[serial.Serial] = None
        self.hardware_available = False

        # Statistics
        self.bytes_read = 0

        # Error tracking
        self.consecutive_errors = 0
        self.max_consecutive_errors = GPS_MAX_CONSECUTIVE_ERRORS

    def open(self) -> bool:
        """Open the serial connection to the receiver."""
        try:
            self.serial_port = serial.Serial(
                port=self.port,
                baudrate=self.baud_rate,
                timeout=GPS_SERIAL_TIMEOUT_S
            )
            logger.info("GPS: Connected to %s at %s baud", self.port, self.baud_rate)
            self.hardware_available = True
            self.consecutive_errors = 0
        except (serial.SerialException, OSError) as e:
            logger.warning("GPS: Failed to open %s: %s", self.port, e)
            self._close_port()
            self.hardware_available = False
        return self.hardware_available

    def _close_port(self):
        if self.serial_port:
            try:
                self.serial_port.close()
            except (serial.SerialException, OSError):
                pass
        self.serial_port = None

    def read_available(self) -> bytes:
        """
        Read every byte the port currently holds.

        Returns:
            The bytes read, or b"" if nothing is waiting or the port is down
        """
        if not self.serial_port or not self.hardware_available:
            return b""

        try:
            waiting = self.serial_port.in_waiting
            if waiting <= 0:
                return b""
            data = self.serial_port.read(waiting)
            self.consecutive_errors = 0
        except serial.SerialException as e:
            self._record_error(e)
            return b""

        self.bytes_read += len(data)
        if raw_logger.isEnabledFor(logging.DEBUG):
            raw_logger.debug("%s", data.decode('ascii', errors='replace'))
        return data

    def _record_error(self, error: Exception):
        self.consecutive_errors += 1
        if self.consecutive_errors == 3:
            logger.warning("GPS: Serial error: %s", error)
        elif self.consecutive_errors >= self.max_consecutive_errors:
            logger.warning("GPS: Too many errors, attempting reconnect...")
            self._close_port()
            self.open()
            self.consecutive_errors = 0

    def close(self):
        """Close the serial connection."""
        self._close_port()
        self.hardware_available = False
        logger.info("GPS handler stopped")
