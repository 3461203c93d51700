"""
Tests for the time token parser.

Golden values pin the exact inference table, including the bare hours above
12 that are taken literally.
"""

import pytest

from timeblock.timeparse import (
    add_minutes,
    default_block,
    infer_hour,
    parse_compact_time,
    parse_time,
)


# =============================================================================
# INFERENCE
# =============================================================================

class TestInferHour:

    @pytest.mark.parametrize("hour,expected", [
        (1, 13), (3, 15), (5, 17),
        (6, 18), (7, 19), (8, 20),
        (9, 9), (10, 10), (11, 11), (12, 12), (0, 0),
    ])
    def test_inference_table(self, hour, expected):
        assert infer_hour(hour) == expected


# =============================================================================
# PARSE_TIME
# =============================================================================

class TestParseTime:

    @pytest.mark.parametrize("token,expected", [
        ("3", "15:00"),
        ("7", "19:00"),
        ("10", "10:00"),
        ("3pm", "15:00"),
        ("23", "23:00"),
        ("12", "12:00"),
        ("0", "00:00"),
        ("9:30", "09:30"),
        ("3:15", "15:15"),
        ("14:30", "14:30"),
        ("0800", "08:00"),
        ("11am", "11:00"),
    ])
    def test_with_inference(self, token, expected):
        assert parse_time(token, True) == expected

    @pytest.mark.parametrize("token,expected", [
        ("3", "03:00"),
        ("3:15", "03:15"),
        ("1430", "14:30"),
        ("930", "09:30"),
        ("12am", "00:00"),
        ("12pm", "12:00"),
        ("12:30 a", "00:30"),
        ("3 P", "15:00"),
        ("  4PM ", "16:00"),
    ])
    def test_without_inference(self, token, expected):
        assert parse_time(token) == expected

    def test_explicit_period_skips_inference(self):
        """Compact digits are already 24h even when inference is requested."""
        assert parse_time("0300", True) == "03:00"
        assert parse_time("3am", True) == "03:00"

    @pytest.mark.parametrize("token", [
        "24", "2400", "960", "13pm", "25:00", "9:60", "abc", "", "3 o'clock", "12345",
    ])
    def test_rejects_invalid(self, token):
        assert parse_time(token) is None
        assert parse_time(token, True) is None

    @pytest.mark.parametrize("token", ["0pm", "0am", "00a", "13am", "19 am", "14:30 a", "23:00pm"])
    def test_meridiem_needs_twelve_hour_value(self, token):
        assert parse_time(token) is None
        assert parse_time(token, True) is None

    @pytest.mark.parametrize("token", ["١٤٠٠", "３", "３p", "９:３０", "٣"])
    def test_only_ascii_digits(self, token):
        assert parse_time(token) is None
        assert parse_time(token, True) is None

    def test_results_are_always_valid_clock_values(self):
        for token in [str(n) for n in range(0, 2400)] + [f"{h}:{m:02d}" for h in range(24) for m in range(0, 60, 7)]:
            for inference in (False, True):
                out = parse_time(token, inference)
                if out is None:
                    continue
                h, m = out.split(":")
                assert len(h) == 2 and len(m) == 2
                assert 0 <= int(h) <= 23
                assert 0 <= int(m) <= 59


# =============================================================================
# HELPERS
# =============================================================================

class TestHelpers:

    @pytest.mark.parametrize("s,expected", [
        ("9", (9, 0)),
        ("17", (17, 0)),
        ("930", (9, 30)),
        ("1045", (10, 45)),
        ("12345", None),
        ("ab", None),
        ("١٤", None),
    ])
    def test_parse_compact_time(self, s, expected):
        assert parse_compact_time(s) == expected

    def test_add_minutes_carries_hour(self):
        assert add_minutes("09:45") == "10:15"
        assert add_minutes("10:00") == "10:30"

    def test_add_minutes_wraps_midnight(self):
        assert add_minutes("23:45") == "00:15"

    def test_default_block(self):
        assert default_block("15:00") == "15:00 - 15:30"
        assert default_block("23:30") == "23:30 - 00:00"
