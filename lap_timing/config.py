"""
Configuration file for the lap timing core.

Contains settings for NMEA framing, lap detection and the trigger radius.
"""

# =============================================================================
# NMEA Framing Settings
# =============================================================================

NMEA_START_MARKER = ord('$')
NMEA_CHECKSUM_DELIMITER = ord('*')
NMEA_FIELD_DELIMITER = ','

NMEA_FRAME_CAPACITY = 160       # Bytes including the terminating sentinel
                                 # Longer sentences are truncated and then
                                 # fail checksum validation

NMEA_MAX_FIELDS = 24            # Fields beyond this are dropped

KNOTS_TO_KMH = 1.852

# Two-digit years at or above the pivot are 19xx, below are 20xx
CENTURY_PIVOT_YEAR = 80


# =============================================================================
# Origin Settings
# =============================================================================

DEFAULT_ORIGIN_LAT = 35.3698692322
DEFAULT_ORIGIN_LON = 138.9336547852


# =============================================================================
# Lap Detection Settings
# =============================================================================

MIN_LAP_TIME = 10.0             # Debounce window (seconds)
                                 # Counted crossings must be strictly more
                                 # than this apart

LAP_HISTORY_DEPTH = 5           # Completed lap durations kept for display


# =============================================================================
# Trigger Radius Settings
# =============================================================================

TRIGGER_RADIUS_DEFAULT = 5.0    # Metres
TRIGGER_RADIUS_STEP = 5.0       # Metres per press
TRIGGER_RADIUS_MAX = 50.0       # Ladder wraps to 0 after this


# =============================================================================
# Presentation Settings
# =============================================================================

DISPLAY_REFRESH_INTERVAL_S = 1.0  # Minimum time between presentation refreshes

TIMEZONE_OFFSET_HOURS = 9       # Fixed shift from receiver UTC to local time
                                 # Only the day carries, month/year never roll
