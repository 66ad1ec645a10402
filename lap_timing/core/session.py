"""
Lap timer session: the single owner of all timing state.

One call to tick() runs the whole pipeline in a fixed order, so lap
evaluation always sees the fix parsed in the same tick:

    1. Decode the bytes read from the receiver this tick
    2. Distance from the origin
    3. Top speed accumulator
    4. Set-origin signal (level)
    5. Cycle-radius signal (edge)
    6. Lap state machine
    7. Presentation snapshot, if the refresh interval has passed
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from lap_timing.config import DISPLAY_REFRESH_INTERVAL_S, TIMEZONE_OFFSET_HOURS
from lap_timing.core.lap_detector import LapDetector, RadiusSelector
from lap_timing.data.models import (
    ButtonState,
    Fix,
    LapReadout,
    LapRecord,
    LocalTime,
    Origin,
    PresentationState,
)
from lap_timing.nmea.receiver import NMEAReceiver
from lap_timing.utils.geometry import haversine_distance
from utils.conversions import to_local_time

logger = logging.getLogger('openLap.session')


@dataclass
class TickResult:
    """Outcome of one tick: at most one lap record and one refresh."""
    lap: Optional[LapRecord] = None
    presentation: Optional[PresentationState] = None
    distance_m: float = 0.0


class RefreshGate:
    """Lets a refresh through once more than interval seconds have passed."""

    def __init__(self, interval: float = DISPLAY_REFRESH_INTERVAL_S):
        self.interval = interval
        self._last_refresh: Optional[float] = None

    def ready(self, now: float) -> bool:
        if self._last_refresh is not None and now <= self._last_refresh + self.interval:
            return False
        self._last_refresh = now
        return True


class LapTimerSession:
    """
    Owns the receiver, origin, trigger radius and lap detector.

    Nothing else mutates this state; callers hand in bytes and button levels
    and get results back.
    """

    def __init__(self, origin: Optional[Origin] = None,
                 receiver: Optional[NMEAReceiver] = None,
                 detector: Optional[LapDetector] = None,
                 radius: Optional[RadiusSelector] = None,
                 refresh_gate: Optional[RefreshGate] = None,
                 timezone_offset_hours: int = TIMEZONE_OFFSET_HOURS):
        self.origin = origin or Origin()
        self.receiver = receiver or NMEAReceiver()
        self.detector = detector or LapDetector()
        self.radius = radius or RadiusSelector()
        self.refresh_gate = refresh_gate or RefreshGate()
        self.timezone_offset_hours = timezone_offset_hours

    @property
    def fix(self) -> Fix:
        return self.receiver.fix

    def distance_from_origin(self) -> float:
        fix = self.receiver.fix
        return haversine_distance(fix.latitude, fix.longitude,
                                  self.origin.latitude, self.origin.longitude)

    def local_time(self) -> LocalTime:
        return to_local_time(self.receiver.fix, self.timezone_offset_hours)

    def set_origin(self):
        """Move the origin to the current fix position."""
        fix = self.receiver.fix
        self.origin = Origin(latitude=fix.latitude, longitude=fix.longitude)

    def tick(self, data: Iterable[int], buttons: ButtonState, now: float) -> TickResult:
        """
        Run one processing tick.

        Args:
            data: Bytes read from the receiver since the last tick (may be empty)
            buttons: Current manual signal levels
            now: Monotonic time in seconds

        Returns:
            TickResult with the completed lap (if any) and the presentation
            snapshot (if the refresh interval has passed)
        """
        self.receiver.feed(data)
        fix = self.receiver.fix

        distance = self.distance_from_origin()
        self.detector.record_speed(fix.speed_kmh)
        local_time = self.local_time()

        if buttons.set_origin:
            self.set_origin()
            distance = self.distance_from_origin()
            logger.debug("Session: Origin set to %.6f, %.6f",
                         self.origin.latitude, self.origin.longitude)

        self.radius.update(buttons.cycle_radius)

        lap = self.detector.update(
            distance=distance,
            radius=self.radius.radius,
            force_lap=buttons.force_lap,
            now=now,
            timestamp=local_time,
        )

        presentation = None
        if self.refresh_gate.ready(now):
            presentation = self.presentation(now, distance, local_time)

        return TickResult(lap=lap, presentation=presentation, distance_m=distance)

    def presentation(self, now: float, distance: float,
                     local_time: Optional[LocalTime] = None) -> PresentationState:
        """Build the full presentation tuple for the current state."""
        detector = self.detector
        fix = self.receiver.fix
        elapsed = detector.current_lap_elapsed(now)

        readout = None
        if detector.lap_count > 1:
            readout = LapReadout(detector.lap_count - 1, detector.history.latest())
        elif detector.lap_count == 1:
            readout = LapReadout(1, elapsed)

        return PresentationState(
            local_time=local_time or self.local_time(),
            satellites=fix.satellites,
            lap_count=detector.lap_count,
            readout=readout,
            current_lap_elapsed=elapsed,
            lap_delta=detector.last_lap_delta(),
            best_lap=detector.best_lap,
            average_lap=detector.average_lap,
            speed_kmh=fix.speed_kmh,
            distance_m=distance,
            radius_m=self.radius.radius,
            history=list(detector.history),
        )
