"""
Headless presentation sink: one log line per refresh.
"""

import logging

from lap_timing.data.models import PresentationState
from utils.conversions import format_lap_time, format_timestamp

logger = logging.getLogger('openLap.console_display')


def format_status_line(state: PresentationState) -> str:
    """Summarise a presentation snapshot on a single line."""
    readout = "-"
    if state.readout is not None and state.readout.seconds is not None:
        readout = f"{state.readout.lap_number}>{format_lap_time(state.readout.seconds)}"

    best = "-"
    if state.best_lap is not None:
        best = f"{state.best_lap.lap_number}>{format_lap_time(state.best_lap.duration)}"

    delta = f"{state.lap_delta:+.1f}" if state.lap_delta is not None else "-"

    return (f"{format_timestamp(state.local_time)} sats={state.satellites} "
            f"lap={readout} delta={delta} best={best} "
            f"avg={format_lap_time(state.average_lap)} "
            f"speed={state.speed_kmh:.1f}km/h dist={state.distance_m:.1f}m "
            f"rad={state.radius_m:.0f}m")


class ConsoleDisplay:
    """Writes each presentation snapshot to the log."""

    def __init__(self):
        self.refresh_count = 0
        self.last_line = ""

    def show(self, state: PresentationState):
        self.last_line = format_status_line(state)
        self.refresh_count += 1
        logger.info("%s", self.last_line)

    def close(self):
        pass
