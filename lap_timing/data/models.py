"""
Core data structures for the lap timing system.

Unit Conventions
----------------
- Time: seconds (float, monotonic clock unless noted)
- Distance: metres
- Speed: kilometres per hour (km/h), as delivered by the receiver after
  knot conversion
- Coordinates: decimal degrees (WGS84, signed)
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, Optional

from lap_timing.config import (
    DEFAULT_ORIGIN_LAT,
    DEFAULT_ORIGIN_LON,
    LAP_HISTORY_DEPTH,
)


@dataclass
class FixUpdate:
    """
    Fields carried by one accepted sentence.

    None means the sentence did not carry (or left empty) that field, so the
    matching Fix field keeps its previous value.
    """
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    hour: Optional[int] = None
    minute: Optional[int] = None
    second: Optional[int] = None
    speed_kmh: Optional[float] = None
    altitude: Optional[float] = None
    satellites: Optional[int] = None


@dataclass
class Fix:
    """
    Most recent position/time snapshot derived from the receiver.

    Updated field by field: a sentence only touches the fields it carries.
    Rejected sentences never reach this object.

    Attributes:
        latitude: Decimal degrees, negative south.
        longitude: Decimal degrees, negative west.
        year, month, day: UTC calendar date.
        hour, minute, second: UTC time of day (not range checked).
        speed_kmh: Ground speed in km/h.
        altitude: Metres above mean sea level.
        satellites: Satellites in use.
    """
    latitude: float = 0.0
    longitude: float = 0.0
    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    speed_kmh: float = 0.0
    altitude: float = 0.0
    satellites: int = 0

    def apply(self, update: FixUpdate):
        """Copy every field the update carries onto this fix."""
        for name, value in vars(update).items():
            if value is not None:
                setattr(self, name, value)


@dataclass
class Origin:
    """User-settable reference point for the distance sample."""
    latitude: float = DEFAULT_ORIGIN_LAT
    longitude: float = DEFAULT_ORIGIN_LON


@dataclass(frozen=True)
class LocalTime:
    """Wall-clock time after the fixed timezone shift."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


@dataclass(frozen=True)
class LapRecord:
    """
    One completed lap, emitted exactly once per counted crossing.

    Attributes:
        lap_number: Ordinal of the lap that just finished (1-based).
        duration: Lap time truncated to whole seconds.
        top_speed: Highest speed seen since the previous crossing (km/h).
        timestamp: Local wall-clock time of the crossing.
    """
    lap_number: int
    duration: int
    top_speed: float
    timestamp: LocalTime


@dataclass(frozen=True)
class BestLap:
    """Fastest completed lap of the session."""
    lap_number: int
    duration: float


class LapHistory:
    """
    Fixed-depth history of completed lap durations.

    Pushing onto a full history overwrites the oldest entry. Iteration runs
    newest first.
    """

    def __init__(self, capacity: int = LAP_HISTORY_DEPTH):
        self.capacity = capacity
        self._durations: Deque[float] = deque(maxlen=capacity)

    def push(self, duration: float):
        self._durations.appendleft(duration)

    def latest(self) -> Optional[float]:
        return self._durations[0] if self._durations else None

    def previous(self) -> Optional[float]:
        return self._durations[1] if len(self._durations) > 1 else None

    def __iter__(self) -> Iterator[float]:
        return iter(self._durations)

    def __len__(self) -> int:
        return len(self._durations)


@dataclass(frozen=True)
class ButtonState:
    """Current pressed state of the three manual signals."""
    set_origin: bool = False
    cycle_radius: bool = False
    force_lap: bool = False


@dataclass(frozen=True)
class LapReadout:
    """Headline lap shown on screen: ordinal and its time in seconds."""
    lap_number: int
    seconds: float


@dataclass
class PresentationState:
    """
    Everything the presentation sink needs for one refresh.

    Attributes:
        local_time: Receiver date/time after the timezone shift.
        satellites: Satellites in use.
        lap_count: Crossings counted so far (the lap in progress is lap_count).
        readout: Last completed lap, or running time while on the first lap.
        current_lap_elapsed: Seconds since the last counted crossing.
        lap_delta: Latest completed lap minus the one before it.
        best_lap: Fastest completed lap, if any.
        average_lap: Mean completed lap time once two laps are complete.
        speed_kmh: Instantaneous speed.
        distance_m: Distance from the origin.
        radius_m: Current trigger radius.
        history: Completed lap durations, newest first.
    """
    local_time: LocalTime
    satellites: int
    lap_count: int
    readout: Optional[LapReadout]
    current_lap_elapsed: Optional[float]
    lap_delta: Optional[float]
    best_lap: Optional[BestLap]
    average_lap: Optional[float]
    speed_kmh: float
    distance_m: float
    radius_m: float
    history: list = field(default_factory=list)
