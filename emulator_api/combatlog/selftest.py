from __future__ import annotations

import logging
from typing import List, Optional, Pattern

from combatlog.lang import countdown_engage_regex
from combatlog.lines import is_clear, is_wipe, parse_actor, parse_timestamp, parse_zone_change

logger = logging.getLogger("raidemulator")


DEFAULT_SELFTEST_LINES: List[str] = [
    "[21:14:03.221] 01:Changed Zone to The Unending Coil Of Bahamut (Ultimate).",
    "[21:14:58.004] 00:0039:Engage!",
    "[21:15:01.330] 15:1039A1D9:Tini Poutini:3EF5:Ruin III:4000B2B4:Twintania:",
    "[21:16:40.512] 21:80034E2B:40000010:00:00:00:00",
    "[21:18:12.900] 21:80034E2B:40000003:00:00:00:00",
    "[21:18:13.000] 00:0038:cactbot wipe",
    "no timestamp here",
]


class MarkerSelfTestError(RuntimeError):
    pass


def run_marker_selftest(lines: Optional[List[str]] = None, countdown_regex: Optional[Pattern] = None) -> None:
    """Smoke-test the boundary marker patterns at startup.

    Only the default lines are checked for expected results; custom lines are
    just required not to raise.
    """
    test_lines = lines or DEFAULT_SELFTEST_LINES
    rx = countdown_regex or countdown_engage_regex("en")

    for s in test_lines:
        # Should never raise
        parse_timestamp(s)
        parse_zone_change(s)
        parse_actor(s)
        is_wipe(s)
        is_clear(s)
        rx.search(s)

    if lines is None:
        d = DEFAULT_SELFTEST_LINES
        checks = [
            parse_zone_change(d[0]) == "The Unending Coil Of Bahamut (Ultimate)",
            parse_actor(d[2]) == "Tini Poutini",
            is_wipe(d[3]) and not is_clear(d[3]),
            is_clear(d[4]) and not is_wipe(d[4]),
            is_wipe(d[5]),
            parse_timestamp(d[6]) is None,
        ]
        if countdown_regex is None:
            checks.append(bool(rx.search(d[1])))
        if not all(checks):
            raise MarkerSelfTestError("Boundary marker self-test failed")

    logger.info("Marker self-test passed (%d lines).", len(test_lines))
