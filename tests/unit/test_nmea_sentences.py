"""
Unit tests for NMEA sentence validation, tokenising and interpretation.
Tests the parsing logic without requiring actual serial hardware.
"""

import pytest

from lap_timing.nmea.sentences import (
    SentenceKind,
    classify_sentence,
    interpret_sentence,
    nmea_checksum,
    parse_date,
    parse_position,
    parse_time,
    tokenize_fields,
    validate_sentence,
)


class TestNMEAChecksum:
    """Tests for NMEA checksum validation."""

    @pytest.mark.unit
    def test_checksum_calculation(self):
        """XOR of every character between $ and * matches the trailer."""
        payload = b"GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"
        assert f"{nmea_checksum(payload):02X}" == "6A"

    @pytest.mark.unit
    def test_valid_sentence_returns_payload(self, rmc_example):
        """Checksum and trailer are stripped from the accepted payload."""
        payload = validate_sentence(rmc_example.encode('ascii') + b"\n")
        assert payload == "GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"

    @pytest.mark.unit
    def test_round_trip_checksum(self, make_sentence):
        """Re-deriving the checksum from the payload reproduces the trailer."""
        bodies = [
            "GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,",
            "GNRMC,081836,A,3751.65,S,14507.36,E,000.0,360.0,130998,011.3,E",
            "GPGSV,3,1,11,03,03,111,00,04,15,270,00,06,01,010,00,13,06,292,00",
        ]
        for body in bodies:
            sentence = make_sentence(body)
            payload = validate_sentence(sentence.encode('ascii'))
            assert payload == body
            assert nmea_checksum(payload.encode('latin-1')) == int(sentence[-2:], 16)

    @pytest.mark.unit
    @pytest.mark.parametrize("trailer", ["6B", "7A", "0A", "6F"])
    def test_single_digit_flip_rejected(self, trailer):
        """Changing one hex digit of a correct trailer rejects the sentence."""
        sentence = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*" + trailer
        assert validate_sentence(sentence.encode('ascii')) is None

    @pytest.mark.unit
    def test_lowercase_trailer_accepted(self):
        """Hex decoding is case-insensitive."""
        sentence = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6a"
        assert validate_sentence(sentence) is not None

    @pytest.mark.unit
    def test_non_hex_digit_decodes_as_zero(self):
        """A non-hex trailer digit reads as 0 instead of failing outright."""
        # '@' is 0x40, so '4Z' decodes to 0x40 and matches
        assert validate_sentence(b"$@*4Z") == "@"
        assert validate_sentence(b"$@*40") == "@"

    @pytest.mark.unit
    def test_missing_checksum_rejected(self):
        """Sentence without '*' is rejected."""
        sentence = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W\n"
        assert validate_sentence(sentence) is None

    @pytest.mark.unit
    def test_missing_start_marker_rejected(self):
        """Frames must begin with '$'."""
        sentence = b"GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"
        assert validate_sentence(sentence) is None

    @pytest.mark.unit
    def test_empty_payload_rejected(self):
        """Nothing between '$' and '*' is rejected."""
        assert validate_sentence(b"$*00") is None

    @pytest.mark.unit
    def test_short_trailer_rejected(self):
        """Fewer than two characters after '*' is rejected."""
        assert validate_sentence(b"$@*4") is None

    @pytest.mark.unit
    def test_truncated_trailer_with_line_feed_rejected(self, rmc_example):
        """A line feed counts as a trailer digit and fails the comparison."""
        frame = rmc_example[:-1].encode('ascii') + b"\n"
        assert validate_sentence(frame) is None

    @pytest.mark.unit
    def test_empty_frame_rejected(self):
        assert validate_sentence(b"") is None


class TestTokenizer:
    """Tests for field splitting."""

    @pytest.mark.unit
    def test_split_on_commas(self):
        assert tokenize_fields("GPGGA,1,2") == ["GPGGA", "1", "2"]

    @pytest.mark.unit
    def test_empty_fields_collapse(self):
        """Consecutive delimiters drop the empty fields between them."""
        assert tokenize_fields("GPRMC,,V,,") == ["GPRMC", "V"]

    @pytest.mark.unit
    def test_later_fields_move_up(self):
        fields = tokenize_fields("GNRMC,123519.00,A,,230394")
        assert fields[3] == "230394"

    @pytest.mark.unit
    def test_fields_beyond_maximum_dropped(self):
        """At most 24 fields are kept."""
        payload = ",".join(str(i) for i in range(30))
        fields = tokenize_fields(payload)
        assert len(fields) == 24
        assert fields[-1] == "23"

    @pytest.mark.unit
    def test_empty_payload_has_no_fields(self):
        assert tokenize_fields("") == []


class TestClassification:
    """Tests for sentence type dispatch."""

    @pytest.mark.unit
    @pytest.mark.parametrize("sentence_type,expected", [
        ("GPRMC", SentenceKind.RMC),
        ("GNRMC", SentenceKind.RMC),
        ("RMC", SentenceKind.RMC),
        ("GPGGA", SentenceKind.GGA),
        ("GLGGA", SentenceKind.GGA),
        ("GPGSV", SentenceKind.UNRECOGNISED),
        ("PMTK001", SentenceKind.UNRECOGNISED),
        ("MC", SentenceKind.UNRECOGNISED),
    ])
    def test_suffix_dispatch(self, sentence_type, expected):
        """Only the last three characters of the type are examined."""
        assert classify_sentence([sentence_type, "x"]) is expected

    @pytest.mark.unit
    def test_no_fields_unrecognised(self):
        assert classify_sentence([]) is SentenceKind.UNRECOGNISED


class TestFieldParsers:
    """Tests for time, date and coordinate field parsing."""

    @pytest.mark.unit
    def test_parse_time(self):
        assert parse_time("123519") == (12, 35, 19)

    @pytest.mark.unit
    def test_parse_time_ignores_fraction(self):
        assert parse_time("081836.75") == (8, 18, 36)

    @pytest.mark.unit
    def test_parse_time_no_range_check(self):
        """Out-of-range values pass through unchanged."""
        assert parse_time("996199") == (99, 61, 99)

    @pytest.mark.unit
    def test_parse_time_too_short(self):
        assert parse_time("1235") is None

    @pytest.mark.unit
    @pytest.mark.parametrize("text,expected", [
        ("230394", (1994, 3, 23)),
        ("010180", (1980, 1, 1)),
        ("311279", (2079, 12, 31)),
        ("150624", (2024, 6, 15)),
    ])
    def test_parse_date_century_pivot(self, text, expected):
        """Two-digit years of 80 and above are 19xx, the rest 20xx."""
        assert parse_date(text) == expected

    @pytest.mark.unit
    def test_parse_date_too_short(self):
        assert parse_date("2303") is None

    @pytest.mark.unit
    def test_parse_position_north_east(self):
        lat, lon = parse_position("4807.038", "N", "01131.000", "E")
        assert pytest.approx(lat, abs=0.0001) == 48.1173
        assert pytest.approx(lon, abs=0.0001) == 11.5167

    @pytest.mark.unit
    def test_parse_position_south_west(self):
        """S and W negate their axis."""
        lat, lon = parse_position("3352.038", "S", "00007.670", "W")
        assert pytest.approx(lat, abs=0.0001) == -33.8673
        assert pytest.approx(lon, abs=0.0001) == -0.1278

    @pytest.mark.unit
    def test_parse_position_unknown_hemisphere_positive(self):
        """Any other hemisphere letter leaves the value positive."""
        lat, lon = parse_position("4807.038", "X", "01131.000", "")
        assert lat > 0
        assert lon > 0

    @pytest.mark.unit
    def test_parse_position_requires_both_coordinates(self):
        assert parse_position("", "N", "01131.000", "E") is None
        assert parse_position("4807.038", "N", "", "E") is None


class TestRMCInterpretation:
    """Tests for RMC sentence interpretation."""

    @pytest.mark.unit
    def test_reference_sentence(self, rmc_example):
        """Reference sentence decodes position, time, date and speed."""
        fields = tokenize_fields(validate_sentence(rmc_example.encode('ascii')))
        kind, update = interpret_sentence(fields)

        assert kind is SentenceKind.RMC
        assert pytest.approx(update.latitude, abs=0.0001) == 48.1173
        assert pytest.approx(update.longitude, abs=0.0001) == 11.5167
        assert (update.hour, update.minute, update.second) == (12, 35, 19)
        assert (update.year, update.month, update.day) == (1994, 3, 23)
        # 22.4 knots * 1.852
        assert pytest.approx(update.speed_kmh, abs=0.01) == 41.48
        assert update.satellites is None
        assert update.altitude is None

    @pytest.mark.unit
    def test_invalid_status_ignored(self):
        """Status V means no update at all."""
        fields = tokenize_fields("GPRMC,123519,V,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W")
        kind, update = interpret_sentence(fields)
        assert kind is SentenceKind.RMC
        assert update is None

    @pytest.mark.unit
    def test_too_few_fields_ignored(self):
        fields = tokenize_fields("GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4")
        assert interpret_sentence(fields) == (SentenceKind.RMC, None)

    @pytest.mark.unit
    def test_empty_course_shifts_date(self):
        """A blank course moves the date out of place, so no date is read."""
        fields = tokenize_fields(
            "GNRMC,123519.00,A,4807.038,N,01131.000,E,0.010,,230394,,,A")
        kind, update = interpret_sentence(fields)

        assert kind is SentenceKind.RMC
        assert fields[9] == "A"
        assert update.year is None
        assert update.month is None
        assert update.day is None
        assert pytest.approx(update.speed_kmh, abs=1e-6) == 0.01852
        assert (update.hour, update.minute, update.second) == (12, 35, 19)

    @pytest.mark.unit
    def test_empty_position_too_short(self):
        """Blank coordinates collapse away and leave too few fields."""
        fields = tokenize_fields("GPRMC,123519,A,,,,,010.0,,230394,,")
        assert interpret_sentence(fields) == (SentenceKind.RMC, None)


class TestGGAInterpretation:
    """Tests for GGA sentence interpretation."""

    @pytest.mark.unit
    def test_valid_gga(self, gga_example):
        fields = tokenize_fields(validate_sentence(gga_example.encode('ascii')))
        kind, update = interpret_sentence(fields)

        assert kind is SentenceKind.GGA
        assert update.satellites == 8
        assert pytest.approx(update.altitude, abs=0.01) == 545.4
        assert pytest.approx(update.latitude, abs=0.0001) == 48.1173
        assert (update.hour, update.minute, update.second) == (12, 35, 19)
        assert update.speed_kmh is None
        assert update.year is None

    @pytest.mark.unit
    def test_no_quality_gate(self):
        """Fix quality 0 is still applied."""
        fields = tokenize_fields("GNGGA,010203,3521.000,N,13856.000,E,0,03,9.9,12.0,M,,M,,")
        _, update = interpret_sentence(fields)
        assert update.satellites == 3
        assert pytest.approx(update.latitude, abs=0.0001) == 35.35

    @pytest.mark.unit
    def test_no_fix_gga_ignored(self, make_sentence):
        """A GGA with no fix collapses to five fields and is ignored."""
        sentence = make_sentence("GPGGA,123519,,,,,0,00,99.99,,,,,,")
        payload = validate_sentence(sentence.encode('ascii'))
        fields = tokenize_fields(payload)
        assert len(fields) == 5
        assert interpret_sentence(fields) == (SentenceKind.GGA, None)

    @pytest.mark.unit
    def test_too_few_fields_ignored(self):
        fields = tokenize_fields("GPGGA,123519,4807.038,N")
        assert interpret_sentence(fields) == (SentenceKind.GGA, None)

    @pytest.mark.unit
    def test_unsupported_sentence_ignored(self):
        fields = tokenize_fields("GPGSV,3,1,11,03,03,111,00,04,15,270,00")
        assert interpret_sentence(fields) == (SentenceKind.UNRECOGNISED, None)
