"""
Tests for combatlog.lines — timestamp and boundary marker parsing.
"""

from datetime import datetime

from combatlog.lines import (
    WIPE_MARKER,
    is_clear,
    is_fight_end,
    is_wipe,
    millis_between,
    parse_actor,
    parse_timestamp,
    parse_zone_change,
)

TODAY = datetime(2024, 3, 9, 1, 2, 3, 4)


class TestParseTimestamp:
    def test_parses_fields_and_keeps_date(self):
        ts = parse_timestamp("[21:14:58.004] 00:0039:Engage!", TODAY)
        assert ts == datetime(2024, 3, 9, 21, 14, 58, 4000)

    def test_uses_first_bracketed_timestamp(self):
        ts = parse_timestamp("[01:00:00.000] 00:0038:[02:00:00.000]", TODAY)
        assert ts.hour == 1

    def test_defaults_to_current_day(self):
        ts = parse_timestamp("[00:00:00.000] 00:0038:x")
        assert ts is not None
        assert (ts.hour, ts.minute, ts.second, ts.microsecond) == (0, 0, 0, 0)

    def test_missing_timestamp_returns_none(self):
        assert parse_timestamp("00:0039:Engage!", TODAY) is None
        assert parse_timestamp("", TODAY) is None
        assert parse_timestamp(None, TODAY) is None

    def test_out_of_range_fields_return_none(self):
        assert parse_timestamp("[25:00:00.000] 00:0038:x", TODAY) is None
        assert parse_timestamp("[10:61:00.000] 00:0038:x", TODAY) is None

    def test_millis_between(self):
        a = parse_timestamp("[00:00:05.000] x", TODAY)
        b = parse_timestamp("[00:00:10.250] x", TODAY)
        assert millis_between(a, b) == 5250


class TestMarkers:
    def test_zone_change(self):
        assert parse_zone_change("[00:00:00.000] 01:Changed Zone to Arena.") == "Arena"
        assert parse_zone_change("[00:00:00.000] 01:Changed Zone to Eden's Gate: Resurrection.") == (
            "Eden's Gate: Resurrection"
        )
        assert parse_zone_change("[00:00:00.000] 00:0038:Changed Zone to Arena.") is None

    def test_wipe_control_line(self):
        assert is_wipe("[00:00:10.000] 21:80034E2B:40000010:00:00:00:00")
        assert is_wipe("[00:00:10.000] ... 21:........:40000010:")
        assert not is_wipe("[00:00:10.000] 21:80034E2B:40000003:00:00:00:00")

    def test_synthetic_wipe_marker(self):
        assert is_wipe(WIPE_MARKER)
        assert is_wipe("[00:00:10.000] 00:0038:cactbot wipe")

    def test_clear(self):
        assert is_clear("[00:00:10.000] 21:80034E2B:40000003:00:00:00:00")
        assert not is_clear("[00:00:10.000] 21:80034E2B:40000010:00:00:00:00")
        assert is_fight_end("[00:00:10.000] 21:80034E2B:40000003:00:00:00:00")
        assert not is_fight_end("[00:00:10.000] 00:0039:Engage!")

    def test_actor_from_ability_lines(self):
        assert parse_actor("[00:00:01.000] 15:1039A1D9:Tini Poutini:3EF5:Ruin III:") == "Tini Poutini"
        assert parse_actor("[00:00:01.000] 16:1039A1D9:Potato Chippy:3EF5:Ruin III:") == "Potato Chippy"
        assert parse_actor("[00:00:01.000] 15:1039A1D9::3EF5:") == ""
        assert parse_actor("[00:00:01.000] 21:1039A1D9:Tini:3EF5:") is None
