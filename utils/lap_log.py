"""
Lap log writer for openLap.
Appends one CSV line per completed lap to the session log file.
"""

import csv
import logging
import os
from typing import List, Optional

from lap_timing.data.models import LapRecord
from utils.conversions import format_timestamp

logger = logging.getLogger('openLap.lap_log')

LAP_LOG_HEADER = ["LAPCount", "LapTime", "TopSpeed", "YYYY/MM/DD/Hour:Minute:Second"]


def format_lap_row(record: LapRecord) -> List[str]:
    """Convert a lap record to its CSV columns."""
    return [
        str(record.lap_number),
        str(record.duration),
        f"{record.top_speed:.2f}",
        format_timestamp(record.timestamp),
    ]


class LapLogWriter:
    """
    Append-only CSV log of completed laps.

    The header is written once when the session opens the log. Write
    failures are logged and the lap is skipped; timing carries on.

    Usage:
        writer = LapLogWriter("/home/pi/laps/LAP_log.csv")
        writer.open()
        # ... for every completed lap ...
        writer.write_lap(record)
    """

    def __init__(self, path: str):
        """
        Initialise the writer.

        Args:
            path: CSV file to append to (parent directory is created)
        """
        self.path = path
        self.laps_written = 0
        self._opened = False

    def _append_row(self, row: List[str]) -> bool:
        try:
            with open(self.path, 'a', newline='', encoding='ascii') as f:
                csv.writer(f).writerow(row)
            return True
        except OSError as e:
            logger.warning("Lap log: Could not write to %s: %s", self.path, e)
            return False

    def open(self) -> bool:
        """Start a session: write the header line."""
        directory = os.path.dirname(self.path)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                logger.warning("Lap log: Could not create %s: %s", directory, e)
                return False

        self._opened = self._append_row(LAP_LOG_HEADER)
        if self._opened:
            logger.info("Lap log: Writing to %s", self.path)
        return self._opened

    def write_lap(self, record: LapRecord) -> bool:
        """
        Append one completed lap.

        Returns:
            True if the line was written
        """
        if not self._opened:
            self.open()
        written = self._append_row(format_lap_row(record))
        if written:
            self.laps_written += 1
        return written

    def read_laps(self) -> Optional[List[List[str]]]:
        """Return every data row written so far (headers excluded)."""
        if not os.path.exists(self.path):
            return None
        with open(self.path, newline='', encoding='ascii') as f:
            return [row for row in csv.reader(f) if row and row != LAP_LOG_HEADER]
