"""
Configuration settings for the openLap application.
Contains constants for hardware, the lap log and display.

Organised into logical sections:
1. Hardware - GPS (serial, timeouts)
2. Features - Lap Log (file location)
3. Display & UI (resolution, colours, refresh)
4. Hardware - Input (keyboard buttons)

Lap detection constants (debounce, radius ladder, default origin) live in
lap_timing/config.py.
"""

import os

# ==============================================================================
# APPLICATION VERSION
# ==============================================================================
APP_VERSION = "0.3.0"

# Data directory for lap logs
DATA_DIR = os.environ.get("OPENLAP_DATA_DIR", os.path.expanduser("~/.openlap"))


# ##############################################################################
#
#                          1. HARDWARE - GPS
#
# ##############################################################################

# Serial port for GPS receiver
GPS_SERIAL_PORT = "/dev/ttyS0"
GPS_BAUD_RATE = 115200

# GPS serial timeout settings
GPS_SERIAL_TIMEOUT_S = 0  # Non-blocking reads: an empty port ends the parse phase
GPS_MAX_CONSECUTIVE_ERRORS = 10  # Reopen the port after this many serial errors

# Replay pacing (sentences per second) when feeding a recorded NMEA file
GPS_REPLAY_RATE_HZ = 10.0


# ##############################################################################
#
#                          2. FEATURES - LAP LOG
#
# ##############################################################################

LAP_LOG_FILENAME = "LAP_log.csv"
LAP_LOG_PATH = os.path.join(DATA_DIR, LAP_LOG_FILENAME)


# ##############################################################################
#
#                          3. DISPLAY & UI
#
# ##############################################################################

DISPLAY_WIDTH = 320
DISPLAY_HEIGHT = 240
DISPLAY_CAPTION = "openLap"

# Tick pacing: short sleep at the end of every loop iteration
TICK_SLEEP_S = 0.001

# Colours (RGB)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
ORANGE = (255, 165, 0)
CYAN = (0, 255, 255)
YELLOW = (255, 255, 0)
BLUE = (0, 0, 255)
RED = (255, 0, 0)
PINK = (255, 192, 203)

FONT_SIZE_SMALL = 12
FONT_SIZE_MEDIUM = 20
FONT_SIZE_LARGE = 32


# ##############################################################################
#
#                          4. HARDWARE - INPUT
#
# ##############################################################################

# Keyboard keys standing in for the device's three buttons (pygame key names)
BUTTON_SET_ORIGIN_KEY = "a"
BUTTON_CYCLE_RADIUS_KEY = "b"
BUTTON_FORCE_LAP_KEY = "c"
