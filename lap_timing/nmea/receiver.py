"""
NMEA receiver: drives the framing, validation and interpretation chain and
owns the resulting Fix.
"""

import logging
from typing import Iterable

from lap_timing.data.models import Fix
from lap_timing.nmea.framing import FrameAccumulator
from lap_timing.nmea.sentences import (
    SentenceKind,
    interpret_sentence,
    tokenize_fields,
    validate_sentence,
)

logger = logging.getLogger('openLap.nmea')


class NMEAReceiver:
    """
    Decodes a raw receiver byte stream into a continuously updated Fix.

    Every rejection (bad checksum, truncated frame, unsupported or short
    sentence, RMC flagged invalid) is equivalent to the sentence never having
    arrived: the Fix keeps its previous values.
    """

    def __init__(self):
        self._accumulator = FrameAccumulator()
        self._fix = Fix()

        # Statistics
        self.sentences_accepted = 0
        self.sentences_rejected = 0
        self.sentences_ignored = 0

    @property
    def fix(self) -> Fix:
        return self._fix

    def encode(self, byte: int) -> bool:
        """
        Consume one byte.

        Returns:
            True if the byte completed a frame (accepted or not)
        """
        frame = self._accumulator.feed(byte)
        if frame is None:
            return False
        self._process_frame(frame)
        return True

    def feed(self, data: Iterable[int]) -> int:
        """
        Consume every byte of a chunk.

        Returns:
            Number of sentences that updated the fix
        """
        before = self.sentences_accepted
        for byte in data:
            self.encode(byte)
        return self.sentences_accepted - before

    def _process_frame(self, frame: bytes):
        truncated = self._accumulator.last_frame_truncated

        payload = validate_sentence(frame)
        if payload is None:
            self.sentences_rejected += 1
            if truncated:
                logger.debug("NMEA: Rejected truncated frame (%d bytes)", len(frame))
            else:
                logger.debug("NMEA: Rejected frame %r", frame)
            return

        fields = tokenize_fields(payload)
        kind, update = interpret_sentence(fields)
        if update is None:
            self.sentences_ignored += 1
            if kind is not SentenceKind.UNRECOGNISED:
                logger.debug("NMEA: Ignored %s sentence (%d fields)", fields[0], len(fields))
            return

        self._fix.apply(update)
        self.sentences_accepted += 1
