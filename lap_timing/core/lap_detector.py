"""
Lap crossing detection around a circular trigger zone.

A lap is counted when the vehicle enters the zone (distance from the origin
within the trigger radius) or the force-lap signal is held, provided more
than MIN_LAP_TIME has passed since the previous counted crossing, or since
session start for the first one. After a count the detector stays armed
until the vehicle leaves the zone again.
"""

import logging
from enum import Enum
from typing import Optional

from lap_timing.config import (
    LAP_HISTORY_DEPTH,
    MIN_LAP_TIME,
    TRIGGER_RADIUS_DEFAULT,
    TRIGGER_RADIUS_MAX,
    TRIGGER_RADIUS_STEP,
)
from lap_timing.data.models import BestLap, LapHistory, LapRecord, LocalTime

logger = logging.getLogger('openLap.lap_timing')


class LapState(Enum):
    UNARMED = "unarmed"
    ARMED = "armed"


class RadiusSelector:
    """
    Trigger radius cycled by a button, one step per press.

    The ladder runs 0, 5, ..., 50 and wraps: a press at the maximum lands on
    0. Holding the button only counts once.
    """

    def __init__(self, radius: float = TRIGGER_RADIUS_DEFAULT,
                 step: float = TRIGGER_RADIUS_STEP,
                 maximum: float = TRIGGER_RADIUS_MAX):
        self.radius = radius
        self.step = step
        self.maximum = maximum
        self._latched = False

    def cycle(self):
        if self.radius >= self.maximum:
            self.radius = 0.0
        else:
            self.radius += self.step
        logger.info("Lap timing: Trigger radius %.0fm", self.radius)

    def update(self, pressed: bool) -> bool:
        """
        Feed the current button level.

        Returns:
            True if this call changed the radius
        """
        if not pressed:
            self._latched = False
            return False
        if self._latched:
            return False
        self._latched = True
        self.cycle()
        return True


class LapDetector:
    """
    Debounced lap state machine with session statistics.

    The first counted crossing only starts the clock, and like every other
    crossing it is held back until the debounce window has passed. Every later counted
    crossing completes a lap: its duration goes into the history, the best
    lap, the running sum and average, and a LapRecord is returned for the
    log.
    """

    def __init__(self, min_lap_time: float = MIN_LAP_TIME,
                 history_depth: int = LAP_HISTORY_DEPTH,
                 start_time: Optional[float] = None):
        """
        Args:
            min_lap_time: Debounce window in seconds
            history_depth: Completed laps kept in the history
            start_time: Session start on the update clock (taken from the
                first update when None)
        """
        self.min_lap_time = min_lap_time
        self.start_time = start_time

        self.lap_count = 0
        self.armed = False
        self.lap_start_time: Optional[float] = None

        self.history = LapHistory(history_depth)
        self.best_lap: Optional[BestLap] = None
        self.lap_time_sum = 0.0
        self.average_lap: Optional[float] = None
        self.top_speed = 0.0

    @property
    def state(self) -> LapState:
        return LapState.ARMED if self.armed else LapState.UNARMED

    def record_speed(self, speed_kmh: float):
        """Raise the top speed accumulator. Called every tick."""
        if speed_kmh > self.top_speed:
            self.top_speed = speed_kmh

    def current_lap_elapsed(self, now: float) -> Optional[float]:
        if self.lap_start_time is None:
            return None
        return now - self.lap_start_time

    def _debounce_elapsed(self, now: float) -> bool:
        # Before the first crossing the window runs from session start
        reference = self.lap_start_time
        if reference is None:
            reference = self.start_time
        return now - reference > self.min_lap_time

    def update(self, distance: float, radius: float, force_lap: bool,
               now: float, timestamp: LocalTime) -> Optional[LapRecord]:
        """
        Evaluate one tick.

        Args:
            distance: Metres from the origin this tick
            radius: Trigger radius in metres
            force_lap: Manual lap signal level
            now: Monotonic time in seconds
            timestamp: Local wall-clock time, stamped on the LapRecord

        Returns:
            LapRecord when this tick completed a lap, otherwise None
        """
        if self.start_time is None:
            self.start_time = now

        # Holding force-lap keeps the detector armed
        if self.armed and distance >= radius and not force_lap:
            self.armed = False

        in_zone = distance != 0 and distance <= radius
        if self.armed or not (in_zone or force_lap) or not self._debounce_elapsed(now):
            return None

        record = None
        if self.lap_count > 0:
            record = self._complete_lap(now, timestamp)
        else:
            logger.info("Lap timing: First crossing, timing started")

        self.lap_start_time = now
        self.lap_count += 1
        self.armed = True
        return record

    def _complete_lap(self, now: float, timestamp: LocalTime) -> LapRecord:
        lap_number = self.lap_count
        duration = now - self.lap_start_time
        self.history.push(duration)

        if self.best_lap is None or duration < self.best_lap.duration:
            self.best_lap = BestLap(lap_number=lap_number, duration=duration)
            logger.info("Lap timing: New best lap %d: %.3fs", lap_number, duration)

        self.lap_time_sum += duration
        if self.lap_count > 1:
            self.average_lap = self.lap_time_sum / self.lap_count

        record = LapRecord(
            lap_number=lap_number,
            duration=int(duration),
            top_speed=self.top_speed,
            timestamp=timestamp,
        )
        self.top_speed = 0.0

        logger.info("Lap timing: Lap %d - %.3fs (top %.1f km/h)",
                    lap_number, duration, record.top_speed)
        return record

    def last_lap_delta(self) -> Optional[float]:
        """Latest completed lap minus the one before it."""
        latest = self.history.latest()
        previous = self.history.previous()
        if latest is None or previous is None:
            return None
        return latest - previous
