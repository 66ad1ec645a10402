"""
Shared pytest fixtures for openLap tests.
"""

import os
import sys
import pytest
import tempfile

# Add project root to path for imports
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from lap_timing.data.models import LocalTime  # noqa: E402


def with_checksum(body: str) -> str:
    """Wrap a sentence body as $body*HH with its correct checksum."""
    checksum = 0
    for char in body:
        checksum ^= ord(char)
    return f"${body}*{checksum:02X}"


@pytest.fixture
def make_sentence():
    """Build a checksummed sentence from its body (no '$', no '*')."""
    return with_checksum


@pytest.fixture
def rmc_example():
    """Reference RMC sentence with its published checksum."""
    return "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"


@pytest.fixture
def gga_example():
    """GGA sentence for the same position as rmc_example."""
    return with_checksum("GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,")


@pytest.fixture
def to_bytes():
    """Turn sentences into the CRLF-terminated byte stream a receiver sends."""
    def _to_bytes(*sentences):
        return b"".join(s.encode('ascii') + b"\r\n" for s in sentences)
    return _to_bytes


@pytest.fixture
def local_time():
    """Fixed wall-clock time for lap records."""
    return LocalTime(year=2024, month=6, day=1, hour=14, minute=30, second=5)


@pytest.fixture
def temp_log_path():
    """Path to a not-yet-created lap log inside a temporary directory."""
    with tempfile.TemporaryDirectory() as directory:
        yield os.path.join(directory, "laps", "LAP_log.csv")


@pytest.fixture
def circuit_points():
    """Positions near the default origin: inside, edge and outside the zone."""
    return {
        'origin': (35.3698692322, 138.9336547852),
        # ~2.2 m north of the origin
        'inside': (35.3698892322, 138.9336547852),
        # ~111 m north of the origin
        'outside': (35.3708692322, 138.9336547852),
    }
