from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Set

from combatlog.lines import is_clear, parse_actor
from combatlog.models import Fight


def time_str(date: Optional[datetime]) -> str:
    if date is None:
        return "--:--"
    return f"{date.hour:02d}:{date.minute:02d}"


def duration_str(duration_ms: Optional[int]) -> str:
    """`1m5s` style duration, seconds rounded up."""
    total_seconds = int(math.ceil((duration_ms or 0) / 1000))
    minutes = total_seconds // 60
    out = ""
    if minutes > 0:
        out += f"{minutes}m"
    out += f"{total_seconds % 60}s"
    return out


def fight_label(fight: Fight) -> str:
    """One-line entry for the fight picker."""
    return f"{fight.zone_name or ''}, {time_str(fight.start_date)}, {duration_str(fight.duration_ms)}"


def progress_str(elapsed_ms: int, total_ms: Optional[int]) -> str:
    def _fmt(ms: int) -> str:
        ms = max(0, int(ms or 0))
        minutes = ms // 60000
        seconds = int(math.ceil(ms / 1000)) % 60
        return f"{minutes:02d}:{seconds:02d}"

    return f"{_fmt(elapsed_ms)} / {_fmt(total_ms or 0)}"


def fight_info(fight: Fight) -> str:
    """
    Multi-line summary of a completed pull:
      <zone>
      From HH:MM to HH:MM (Clear|Wipe?)
      <sorted, comma-joined actor names>

    Computed once and cached on the fight.
    """
    if fight.info is not None:
        return fight.info

    is_clear_pull = False
    actors: Set[str] = set()
    for line in fight.logs:
        if is_clear(line):
            is_clear_pull = True
        actor = parse_actor(line)
        if actor:
            actors.add(actor)

    info = f"{fight.zone_name or ''}\n"
    info += f"From {time_str(fight.start_date)} to {time_str(fight.end_date)}"
    info += " (Clear)" if is_clear_pull else " (Wipe?)"
    info += "\n"
    info += ", ".join(sorted(actors))

    fight.info = info
    return info
