"""
Input module for openLap.
Reads the three manual signals: set origin, cycle radius and force lap.
"""

import logging

import pygame

from config import (
    BUTTON_CYCLE_RADIUS_KEY,
    BUTTON_FORCE_LAP_KEY,
    BUTTON_SET_ORIGIN_KEY,
)
from lap_timing.data.models import ButtonState

logger = logging.getLogger('openLap.input')


class NullButtons:
    """Button source for headless runs: nothing is ever pressed."""

    quit_requested = False

    def poll(self) -> ButtonState:
        return ButtonState()


class KeyboardButtons:
    """
    Keyboard stand-in for the device's three buttons.

    Reports current key levels. Edge detection for the radius button is
    done by the lap timer, not here.
    """

    def __init__(self,
                 set_origin_key: str = BUTTON_SET_ORIGIN_KEY,
                 cycle_radius_key: str = BUTTON_CYCLE_RADIUS_KEY,
                 force_lap_key: str = BUTTON_FORCE_LAP_KEY):
        self.set_origin_key = pygame.key.key_code(set_origin_key)
        self.cycle_radius_key = pygame.key.key_code(cycle_radius_key)
        self.force_lap_key = pygame.key.key_code(force_lap_key)
        self.quit_requested = False

    def poll(self) -> ButtonState:
        """Pump pending events and return the current key levels."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.quit_requested = True

        pressed = pygame.key.get_pressed()
        return ButtonState(
            set_origin=bool(pressed[self.set_origin_key]),
            cycle_radius=bool(pressed[self.cycle_radius_key]),
            force_lap=bool(pressed[self.force_lap_key]),
        )
