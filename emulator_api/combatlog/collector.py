from __future__ import annotations

import itertools
import logging
from typing import Callable, Iterable, List, Optional, Pattern

from combatlog.lang import countdown_engage_regex
from combatlog.lines import is_fight_end, millis_between, parse_timestamp, parse_zone_change
from combatlog.models import Fight

logger = logging.getLogger("raidemulator")


class FightCollector:
    """Splits imported network log lines into countdown-started fights.

    A fight opens on a countdown engage line and closes on a wipe, a clear or
    a zone change. Re-importing the same log does not produce duplicate fights:
    identity is the opening line plus the zone, never the sequence key.
    """

    def __init__(
        self,
        on_fight_completed: Optional[Callable[[Fight], None]] = None,
        *,
        countdown_regex: Optional[Pattern] = None,
    ) -> None:
        self._on_fight_completed = on_fight_completed
        self._countdown_regex = countdown_regex or countdown_engage_regex("en")
        self._keys = itertools.count()

        self.current_zone: Optional[str] = None
        self.current_fight: Optional[Fight] = None
        self._fights: List[Fight] = []

    @property
    def fights(self) -> List[Fight]:
        return list(self._fights)

    def get_fight(self, key: int) -> Optional[Fight]:
        for f in self._fights:
            if f.key == key:
                return f
        return None

    def append_import_lines(self, lines: Iterable[str]) -> List[Fight]:
        """Feed lines in stream order. Returns the fights completed by this call."""
        added: List[Fight] = []
        for line in lines or []:
            fight = self._append_line(line)
            if fight is not None:
                added.append(fight)
        return added

    def _append_line(self, line: str) -> Optional[Fight]:
        # Lines without a timestamp can never be a boundary.
        ts = parse_timestamp(line)

        zone = parse_zone_change(line) if ts is not None else None
        if zone is not None and zone != self.current_zone:
            ended = self._end_fight(line) if self.current_fight else None
            self.current_zone = zone
            return ended

        if self.current_fight is not None:
            self.current_fight.logs.append(line)
            if ts is not None and is_fight_end(line):
                return self._end_fight(line)
            return None

        if ts is not None and self._countdown_regex.search(line):
            # Only start fights on a countdown so every fight has a well-defined start.
            if not self.current_zone:
                logger.warning("Countdown seen before any zone change; recording fight with no zone.")
            self.current_fight = Fight(
                key=next(self._keys),
                zone_name=self.current_zone,
                start_date=ts,
                logs=[line],
            )
        return None

    def _end_fight(self, line: str) -> Optional[Fight]:
        fight = self.current_fight
        self.current_fight = None
        if fight is None:
            return None

        end_date = parse_timestamp(line)
        fight.end_date = end_date
        fight.duration_ms = millis_between(fight.start_date, end_date)

        # The sequence key is always unique, so it can't be used here.
        for f in self._fights:
            if f.dedup_key == fight.dedup_key:
                logger.debug("Dropping duplicate fight in %s starting %s", fight.zone_name, fight.logs[0])
                return None

        self._fights.append(fight)
        logger.info(
            "Recorded fight #%d in %s (%d lines, %d ms)",
            fight.key,
            fight.zone_name or "<no zone>",
            len(fight.logs),
            fight.duration_ms,
        )
        if self._on_fight_completed:
            self._on_fight_completed(fight)
        return fight
