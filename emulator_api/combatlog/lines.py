from __future__ import annotations

import re
from datetime import datetime
from typing import Optional


# Network log lines look like:
#   [21:14:03.221] 01:Changed Zone to The Weapon's Refrain (Ultimate).
#   [21:14:58.004] 00:0039:Engage!
#   [21:16:40.512] 21:80034E2B:40000010:00:00:00:00
# The bracketed timestamp is the only clock a line carries (no date).
_RX_TIMESTAMP = re.compile(r"\[(?P<hour>\d\d):(?P<minute>\d\d):(?P<second>\d\d).(?P<millis>\d\d\d)\]")

_RX_ZONE_CHANGE = re.compile(r" 01:Changed Zone to (?P<zone>.*)\.")

# Actor control line list: https://gist.github.com/quisquous/250001cbce232a48e6a9ce772a56675a
_RX_WIPE = re.compile(r" 21:........:40000010:")
_RX_CLEAR = re.compile(r" 21:........:40000003:")

# 15/16 are ability lines; field 3 is the source actor name.
_RX_ACTOR = re.compile(r" 1[56]:........:(?P<actor>[^:]*):")

# Synthetic line the emulator (and `/echo cactbot wipe`) uses to reset triggers.
WIPE_MARKER = "00:0038:cactbot wipe"


def parse_timestamp(line: str, today: Optional[datetime] = None) -> Optional[datetime]:
    """Return the line's `[HH:MM:SS.mmm]` time anchored to today's date.

    Returns None when the line has no timestamp or the fields are out of range.
    Values are only comparable within one session: cross-midnight fights are
    not supported.
    """
    m = _RX_TIMESTAMP.search(line or "")
    if not m:
        return None

    base = today or datetime.now()
    try:
        return base.replace(
            hour=int(m.group("hour")),
            minute=int(m.group("minute")),
            second=int(m.group("second")),
            microsecond=int(m.group("millis")) * 1000,
        )
    except ValueError:
        return None


def parse_zone_change(line: str) -> Optional[str]:
    m = _RX_ZONE_CHANGE.search(line or "")
    if not m:
        return None
    return m.group("zone")


def is_wipe(line: str) -> bool:
    s = line or ""
    return bool(_RX_WIPE.search(s)) or WIPE_MARKER in s


def is_clear(line: str) -> bool:
    s = line or ""
    # cheap substring check before the regex; most lines are not actor control
    return " 21:" in s and bool(_RX_CLEAR.search(s))


def parse_actor(line: str) -> Optional[str]:
    """Source actor of an ability (15/16) line, or None."""
    s = line or ""
    if " 15:" not in s and " 16:" not in s:
        return None
    m = _RX_ACTOR.search(s)
    if not m:
        return None
    return m.group("actor")


def millis_between(start: datetime, end: datetime) -> int:
    return int(round((end - start).total_seconds() * 1000))


def is_fight_end(line: str) -> bool:
    """Wipe or clear: either closes an open fight."""
    return is_wipe(line) or is_clear(line)
