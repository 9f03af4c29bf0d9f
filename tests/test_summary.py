"""
Tests for combatlog.summary — cached fight info and picker/progress text.
"""

from datetime import datetime

from combatlog.collector import FightCollector
from combatlog.models import Fight
from combatlog.summary import duration_str, fight_info, fight_label, progress_str, time_str


def _fights(lines):
    collector = FightCollector()
    collector.append_import_lines(lines)
    return collector.fights


class TestFightInfo:
    def test_wipe_info(self, two_pull_log):
        first = _fights(two_pull_log)[0]
        assert fight_info(first) == "Arena\nFrom 20:00 to 20:00 (Wipe?)\nPotato Chippy, Tini Poutini"

    def test_clear_info(self, two_pull_log):
        second = _fights(two_pull_log)[1]
        assert fight_info(second) == "Arena\nFrom 20:02 to 20:05 (Clear)\nJane Doe, Tini Poutini"

    def test_info_is_cached(self, two_pull_log):
        first = _fights(two_pull_log)[0]
        text = fight_info(first)
        assert first.info == text

        # a cached value wins over the logs
        first.logs.append("[20:00:31.000] 15:1039A1D9:Someone New:3EF5:x:")
        assert fight_info(first) is text

    def test_actor_list_is_sorted_and_distinct(self):
        fight = Fight(key=0, zone_name="Arena", start_date=datetime(2024, 1, 1, 9, 5))
        fight.end_date = datetime(2024, 1, 1, 9, 7)
        fight.logs = [
            "[09:05:00.000] 00:0039:Engage!",
            "[09:05:01.000] 15:10000001:Zed:1:x:",
            "[09:05:02.000] 16:10000002:Amy:1:x:",
            "[09:05:03.000] 15:10000001:Zed:1:x:",
            "[09:05:04.000] 15:10000003::1:x:",
        ]
        assert fight_info(fight).splitlines()[-1] == "Amy, Zed"


class TestFormatting:
    def test_time_str(self):
        assert time_str(datetime(2024, 1, 1, 7, 4, 59)) == "07:04"
        assert time_str(None) == "--:--"

    def test_duration_str(self):
        assert duration_str(0) == "0s"
        assert duration_str(5000) == "5s"
        assert duration_str(5001) == "6s"
        assert duration_str(65000) == "1m5s"
        assert duration_str(180000) == "3m0s"

    def test_fight_label(self, two_pull_log):
        first, second = _fights(two_pull_log)
        assert fight_label(first) == "Arena, 20:00, 25s"
        assert fight_label(second) == "Arena, 20:02, 3m0s"

    def test_progress_str(self):
        assert progress_str(0, 180000) == "00:00 / 03:00"
        assert progress_str(61500, 180000) == "01:02 / 03:00"
        assert progress_str(0, None) == "00:00 / 00:00"
