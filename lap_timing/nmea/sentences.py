"""
NMEA sentence validation, tokenising and interpretation.

Only two sentence families are interpreted:

RMC (Recommended Minimum):
    $GPRMC,time,status,lat,N/S,lon,E/W,speed,course,date,mag,mode*checksum
    Example: $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A

GGA (Fix Data):
    $GPGGA,time,lat,N/S,lon,E/W,quality,num_sats,hdop,alt,M,geoid,M,...*checksum
    Example: $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*4F

Any talker prefix is accepted (GP, GN, GL, ...): only the last three
characters of the sentence type are examined. Every other sentence type is
validated and tokenised, then ignored.

Nothing in this module raises on bad input. Each step returns an explicit
reject value (None or SentenceKind.UNRECOGNISED) instead.
"""

import re
from enum import Enum
from typing import List, Optional, Tuple

from lap_timing.config import (
    CENTURY_PIVOT_YEAR,
    NMEA_CHECKSUM_DELIMITER,
    NMEA_FIELD_DELIMITER,
    NMEA_MAX_FIELDS,
    NMEA_START_MARKER,
)
from lap_timing.data.models import FixUpdate
from lap_timing.utils.geometry import nmea_to_degrees
from utils.conversions import knots_to_kmh

MIN_FIELDS = 10
RMC_VALID = 'A'

_INT_PREFIX = re.compile(r'\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


class SentenceKind(Enum):
    """Sentence families the interpreter knows about."""
    RMC = "RMC"
    GGA = "GGA"
    UNRECOGNISED = "UNRECOGNISED"


def _hex_digit(byte: int) -> int:
    """Decode one hex digit. Anything else reads as 0."""
    char = chr(byte)
    if char in '0123456789abcdefABCDEF':
        return int(char, 16)
    return 0


def _parse_int(text: str) -> int:
    """Integer value of the leading digits of text, 0 when there are none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _parse_float(text: str) -> float:
    """Float value of the leading number in text, 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def nmea_checksum(payload: bytes) -> int:
    """XOR of every byte of the payload (the bytes between '$' and '*')."""
    checksum = 0
    for byte in payload:
        checksum ^= byte
    return checksum


def validate_sentence(frame: bytes) -> Optional[str]:
    """
    Check a framed sentence against its checksum trailer.

    The two bytes after the first '*' are decoded as hex. Non-hex digits
    decode as 0 rather than failing, so a damaged trailer is rejected by the
    comparison instead of a separate error path.

    Args:
        frame: Raw frame bytes starting with '$'

    Returns:
        Payload between '$' and '*' as text, or None if the frame is rejected
    """
    if not frame or frame[0] != NMEA_START_MARKER:
        return None

    delimiter = frame.find(NMEA_CHECKSUM_DELIMITER, 1)
    if delimiter <= 1:
        return None

    trailer = frame[delimiter + 1:delimiter + 3]
    if len(trailer) < 2:
        return None

    payload = frame[1:delimiter]
    transmitted = (_hex_digit(trailer[0]) << 4) | _hex_digit(trailer[1])
    if nmea_checksum(payload) != transmitted:
        return None

    return payload.decode('latin-1')


def tokenize_fields(payload: str) -> List[str]:
    """
    Split a payload into at most NMEA_MAX_FIELDS comma separated fields.

    Consecutive delimiters collapse: empty fields are dropped and the fields
    after them move up, so a sentence with blank fields gets shorter and can
    fall below the minimum field count.
    """
    fields = [field for field in payload.split(NMEA_FIELD_DELIMITER) if field]
    return fields[:NMEA_MAX_FIELDS]


def classify_sentence(fields: List[str]) -> SentenceKind:
    """Sentence family from the last three characters of the type field."""
    if not fields or len(fields[0]) < 3:
        return SentenceKind.UNRECOGNISED
    suffix = fields[0][-3:]
    if suffix == SentenceKind.RMC.value:
        return SentenceKind.RMC
    if suffix == SentenceKind.GGA.value:
        return SentenceKind.GGA
    return SentenceKind.UNRECOGNISED


def parse_time(text: str) -> Optional[Tuple[int, int, int]]:
    """
    Parse HHMMSS[.sss] into (hour, minute, second).

    Fractional seconds are ignored and no range check is applied.
    """
    if len(text) < 6:
        return None
    return _parse_int(text[0:2]), _parse_int(text[2:4]), _parse_int(text[4:6])


def parse_date(text: str) -> Optional[Tuple[int, int, int]]:
    """Parse DDMMYY into (year, month, day) using the century pivot."""
    if len(text) < 6:
        return None
    day = _parse_int(text[0:2])
    month = _parse_int(text[2:4])
    year = _parse_int(text[4:6])
    year += 1900 if year >= CENTURY_PIVOT_YEAR else 2000
    return year, month, day


def parse_position(lat: str, ns: str, lon: str, ew: str) -> Optional[Tuple[float, float]]:
    """
    Parse NMEA latitude/longitude with hemisphere letters.

    'S' and 'W' negate their axis, any other letter leaves it positive.
    Both coordinates must be present.
    """
    if not lat or not lon:
        return None

    latitude = nmea_to_degrees(_parse_float(lat))
    longitude = nmea_to_degrees(_parse_float(lon))

    if ns[:1] == 'S':
        latitude = -latitude
    if ew[:1] == 'W':
        longitude = -longitude

    return latitude, longitude


def _apply_time(update: FixUpdate, text: str):
    parsed = parse_time(text)
    if parsed:
        update.hour, update.minute, update.second = parsed


def _apply_position(update: FixUpdate, lat: str, ns: str, lon: str, ew: str):
    position = parse_position(lat, ns, lon, ew)
    if position:
        update.latitude, update.longitude = position


def _interpret_rmc(fields: List[str]) -> Optional[FixUpdate]:
    if len(fields) < MIN_FIELDS:
        return None

    # Receiver flags the fix as unreliable (V): keep the previous fix intact
    if fields[2][:1] != RMC_VALID:
        return None

    update = FixUpdate()
    _apply_time(update, fields[1])
    _apply_position(update, fields[3], fields[4], fields[5], fields[6])

    update.speed_kmh = knots_to_kmh(_parse_float(fields[7]))

    date = parse_date(fields[9])
    if date:
        update.year, update.month, update.day = date

    return update


def _interpret_gga(fields: List[str]) -> Optional[FixUpdate]:
    if len(fields) < MIN_FIELDS:
        return None

    # No quality gate here, unlike RMC
    update = FixUpdate()
    _apply_time(update, fields[1])
    _apply_position(update, fields[2], fields[3], fields[4], fields[5])

    update.satellites = _parse_int(fields[7])
    update.altitude = _parse_float(fields[9])

    return update


def interpret_sentence(fields: List[str]) -> Tuple[SentenceKind, Optional[FixUpdate]]:
    """
    Turn tokenised fields into a fix update.

    Returns:
        (kind, update). update is None when the sentence is unrecognised,
        too short, or (for RMC) flagged invalid by the receiver.
    """
    kind = classify_sentence(fields)

    if kind is SentenceKind.RMC:
        return kind, _interpret_rmc(fields)
    if kind is SentenceKind.GGA:
        return kind, _interpret_gga(fields)
    return kind, None
