"""
Lap Timing display for openLap.
Shows date/time, satellites, last lap, delta, running time, best and average
laps, speed, distance from the origin and the trigger radius.
"""

import logging
from typing import Optional

import pygame

from config import (
    BLACK,
    BLUE,
    CYAN,
    DISPLAY_CAPTION,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    FONT_SIZE_LARGE,
    FONT_SIZE_MEDIUM,
    FONT_SIZE_SMALL,
    ORANGE,
    PINK,
    RED,
    WHITE,
    YELLOW,
)
from lap_timing.data.models import PresentationState

logger = logging.getLogger('openLap.lap_timing_display')


def format_delta(delta: Optional[float]) -> str:
    """Format a lap delta as +S.s / -S.s."""
    if delta is None:
        return "--.-"
    sign = "+" if delta > 0 else ""
    return f"{sign}{delta:.1f}"


def remaining_fraction(reference: Optional[float], elapsed: Optional[float]) -> float:
    """
    Share of a reference lap still left at the current elapsed time.

    Clamped to 0..1 so the bar never draws backwards.
    """
    if not reference or elapsed is None:
        return 0.0
    return max(0.0, min(1.0, (reference - elapsed) / reference))


class LapTimingDisplay:
    """Full-screen lap timer drawn with pygame."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT,
                 screen: Optional[pygame.Surface] = None):
        """
        Initialise the lap timing display.

        Args:
            width, height: Window size in pixels
            screen: Existing surface to draw on (a window is opened if None)
        """
        self.width = width
        self.height = height

        if not pygame.get_init():
            pygame.init()
        if screen is None:
            screen = pygame.display.set_mode((width, height))
            pygame.display.set_caption(DISPLAY_CAPTION)
        self.screen = screen

        # Fonts
        try:
            self.font_small = pygame.font.SysFont("monospace", FONT_SIZE_SMALL)
            self.font_medium = pygame.font.SysFont("monospace", FONT_SIZE_MEDIUM)
            self.font_large = pygame.font.SysFont("monospace", FONT_SIZE_LARGE)
        except (pygame.error, OSError) as e:
            logger.warning("Error loading fonts: %s", e)
            self.font_small = pygame.font.Font(None, FONT_SIZE_SMALL)
            self.font_medium = pygame.font.Font(None, FONT_SIZE_MEDIUM)
            self.font_large = pygame.font.Font(None, FONT_SIZE_LARGE)

    def _text(self, font, text, colour, pos):
        self.screen.blit(font.render(text, True, colour), pos)

    def show(self, state: PresentationState):
        """Redraw the whole screen from one presentation snapshot."""
        self.screen.fill(BLACK)
        self._draw_header(state)
        self._draw_last_lap(state)
        self._draw_delta(state)
        self._draw_running_time(state)
        self._draw_best_and_average(state)
        self._draw_bars(state)
        self._draw_footer(state)
        pygame.display.flip()

    def _draw_header(self, state):
        t = state.local_time
        stamp = f"{t.year}/{t.month}/{t.day} {t.hour}:{t.minute:02d}:{t.second:02d}"
        self._text(self.font_medium, stamp, WHITE, (5, 0))
        self._text(self.font_small, "GPS:", CYAN, (245, 5))
        self._text(self.font_medium, str(state.satellites), CYAN, (285, 1))

    def _draw_last_lap(self, state):
        pygame.draw.rect(self.screen, YELLOW, (0, 20, self.width, 59))
        readout = state.readout
        if readout is None or readout.seconds is None:
            return
        self._text(self.font_large, f"{readout.lap_number}>", BLACK, (15, 30))
        self._text(self.font_large, f"{readout.seconds:.3f}", BLACK, (70, 30))

    def _draw_delta(self, state):
        delta = state.lap_delta
        colour = BLUE if delta is None or delta <= 0 else RED
        pygame.draw.rect(self.screen, colour, (1, 80, 178, 50))
        self._text(self.font_large, format_delta(delta), WHITE, (8, 90))

    def _draw_running_time(self, state):
        pygame.draw.rect(self.screen, WHITE, (180, 80, 140, 50), 1, border_radius=10)
        elapsed = state.current_lap_elapsed
        text = f"{int(elapsed)}" if elapsed is not None else "-"
        self._text(self.font_large, text, WHITE, (190, 90))
        self._text(self.font_medium, "s", WHITE, (300, 110))

    def _draw_best_and_average(self, state):
        best = state.best_lap
        label = f"Best({best.lap_number})" if best else "Best(0)"
        self._text(self.font_medium, label, CYAN, (20, 145))
        if best:
            self._text(self.font_medium, f"> {best.duration:.2f}", CYAN, (120, 140))

        self._text(self.font_medium, "Average", PINK, (20, 175))
        if state.average_lap:
            self._text(self.font_medium, f"> {state.average_lap:.2f}", PINK, (120, 170))

    def _draw_bars(self, state):
        bar_width = 300
        elapsed = state.current_lap_elapsed
        average = remaining_fraction(state.average_lap, elapsed)
        if average > 0:
            pygame.draw.rect(self.screen, PINK, (10, 200, int(bar_width * average), 25))
        if state.best_lap:
            best = remaining_fraction(state.best_lap.duration, elapsed)
            if best > 0:
                pygame.draw.rect(self.screen, CYAN, (10, 200, int(bar_width * best), 25))
        pygame.draw.rect(self.screen, WHITE, (10, 200, bar_width, 25), 1)

        self._text(self.font_small, f"{state.speed_kmh:.1f} km/h", WHITE, (20, 205))
        self._text(self.font_small, f"{state.distance_m:.1f} m", WHITE, (160, 205))

    def _draw_footer(self, state):
        self._text(self.font_small, "SET Zero-Point", ORANGE, (15, 228))
        self._text(self.font_small, f"Rad= {state.radius_m:.0f} m", ORANGE, (120, 228))
        self._text(self.font_small, "Lap Count", ORANGE, (230, 228))

    def close(self):
        pygame.display.quit()
