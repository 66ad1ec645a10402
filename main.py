#!/usr/bin/env python3
"""
openLap - GPS lap timer
Turns a serial NMEA stream into lap times around a user-set zero point.
"""

import argparse
import logging
import sys
import time

from config import (
    APP_VERSION,
    GPS_BAUD_RATE,
    GPS_REPLAY_RATE_HZ,
    GPS_SERIAL_PORT,
    LAP_LOG_PATH,
    TICK_SLEEP_S,
)
from lap_timing.core.session import LapTimerSession
from utils.lap_log import LapLogWriter

logger = logging.getLogger('openLap')


class OpenLap:
    """
    Single-threaded tick loop.

    Each iteration reads whatever bytes the receiver has, polls the buttons,
    runs one session tick, then hands any completed lap to the log and any
    refresh to the display.
    """

    def __init__(self, args):
        self.args = args
        self.running = False
        self.session = LapTimerSession()
        self.lap_log = LapLogWriter(args.log_path)

        if args.replay:
            from hardware.nmea_replay import NMEAReplaySource
            self.source = NMEAReplaySource(args.replay, rate_hz=args.replay_rate)
        else:
            from hardware.gps_handler import GPSHandler
            self.source = GPSHandler(port=args.port, baud_rate=args.baud)

        if args.headless:
            from gui.console_display import ConsoleDisplay
            from gui.input import NullButtons
            self.display = ConsoleDisplay()
            self.buttons = NullButtons()
        else:
            from gui.lap_timing_display import LapTimingDisplay
            from gui.input import KeyboardButtons
            self.display = LapTimingDisplay()
            self.buttons = KeyboardButtons()

    def run(self):
        logger.info("openLap %s starting", APP_VERSION)
        self.source.open()
        self.lap_log.open()
        self.running = True

        try:
            while self.running:
                self.step(time.monotonic())
                if self.buttons.quit_requested:
                    self.running = False
                if self.args.replay and self.source.exhausted:
                    logger.info("Replay finished")
                    self.running = False
                time.sleep(TICK_SLEEP_S)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.shutdown()

    def step(self, now: float):
        """Run one tick of the loop."""
        data = self.source.read_available()
        buttons = self.buttons.poll()
        result = self.session.tick(data, buttons, now)

        if result.lap is not None:
            self.lap_log.write_lap(result.lap)
        if result.presentation is not None:
            self.display.show(result.presentation)
        return result

    def shutdown(self):
        self.source.close()
        self.display.close()
        logger.info("Shutdown complete (%d laps logged)", self.lap_log.laps_written)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="openLap - GPS lap timer"
    )
    parser.add_argument("--port", default=GPS_SERIAL_PORT,
                        help="Serial port of the GPS receiver")
    parser.add_argument("--baud", type=int, default=GPS_BAUD_RATE,
                        help="Serial baud rate")
    parser.add_argument("--replay", metavar="FILE",
                        help="Replay a recorded NMEA file instead of the serial port")
    parser.add_argument("--replay-rate", type=float, default=GPS_REPLAY_RATE_HZ,
                        help="Sentences per second when replaying")
    parser.add_argument("--log-path", default=LAP_LOG_PATH,
                        help="CSV file receiving one line per completed lap")
    parser.add_argument("--headless", action="store_true",
                        help="Log refreshes instead of opening a window")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging (including raw NMEA)")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='[%(levelname)s] %(name)s: %(message)s',
        stream=sys.stdout
    )

    app = OpenLap(args)
    app.run()
