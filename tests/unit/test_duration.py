"""Unit tests for duration parsing."""

import pytest

from webapp_admission.utils.duration import DurationParseError, parse_duration

SECOND = 1_000_000_000


class TestParseDuration:
    """Test cases for Go-style duration strings."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("0", 0),
            ("5s", 5 * SECOND),
            ("30s", 30 * SECOND),
            ("1478s", 1478 * SECOND),
            ("-5s", -5 * SECOND),
            ("+5s", 5 * SECOND),
            ("-0", 0),
            ("5.0s", 5 * SECOND),
            ("5.6s", 5 * SECOND + 600_000_000),
            ("5.s", 5 * SECOND),
            (".5s", SECOND // 2),
            ("1.004s", SECOND + 4_000_000),
            ("10ns", 10),
            ("11us", 11_000),
            ("12µs", 12_000),
            ("12μs", 12_000),
            ("13ms", 13_000_000),
            ("14s", 14 * SECOND),
            ("15m", 15 * 60 * SECOND),
            ("16h", 16 * 3600 * SECOND),
            ("3h30m", (3 * 3600 + 30 * 60) * SECOND),
            ("10.5s4m", (4 * 60 + 10) * SECOND + 500_000_000),
            ("-2m3.4s", -(2 * 60 * SECOND + 3 * SECOND + 400_000_000)),
            ("1h2m3s4ms5us6ns", 3723 * SECOND + 4_005_006),
        ],
    )
    def test_valid_durations(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "3",
            "-",
            "s",
            ".",
            "-.",
            ".s",
            "+.s",
            "1d",
            "3000000h0x",
            "5 m",
            "٥m",  # Arabic-Indic digit five
            "５s",  # fullwidth digit five
            "1٥s",
        ],
    )
    def test_invalid_durations(self, text):
        with pytest.raises(DurationParseError):
            parse_duration(text)

    def test_overflow_is_rejected(self):
        with pytest.raises(DurationParseError):
            parse_duration("9223372036854775808ns")

    def test_negative_range_includes_int64_minimum(self):
        assert parse_duration("-9223372036854775808ns") == -(2**63)
        assert parse_duration("9223372036854775807ns") == 2**63 - 1

        with pytest.raises(DurationParseError):
            parse_duration("-9223372036854775809ns")

    def test_non_ascii_digit_is_not_a_number(self):
        with pytest.raises(DurationParseError) as exc_info:
            parse_duration("٥")

        assert exc_info.value.reason == "invalid"

    def test_error_message(self):
        with pytest.raises(DurationParseError) as exc_info:
            parse_duration("5")

        assert str(exc_info.value) == 'time: missing unit in duration "5"'
        assert exc_info.value.text == "5"
        assert isinstance(exc_info.value, ValueError)

    def test_non_string_is_rejected(self):
        with pytest.raises(DurationParseError):
            parse_duration(5)
