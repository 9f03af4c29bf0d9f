from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol

from combatlog.lines import WIPE_MARKER, millis_between, parse_timestamp
from combatlog.models import Fight

logger = logging.getLogger("raidemulator")


class PlayerBusyError(RuntimeError):
    pass


class PlayerState(str, Enum):
    IDLE = "IDLE"
    PLAYING = "PLAYING"


class ReplayListener(Protocol):
    def on_zone_changed(self, zone_name: Optional[str]) -> None: ...

    def on_log_event(self, logs: List[str]) -> None: ...


class FightPlayer:
    """Replays one fight's lines against the wall clock.

    Each tick emits every line whose recorded time is at or before
    `fight.start_date + (now - start time)`. Ticks come from an external
    scheduler at no fixed period, so a batch may hold zero, one or many lines.
    """

    def __init__(self, listener: ReplayListener, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._listener = listener
        self._clock = clock
        self._reset()

    def _reset(self) -> None:
        self.state = PlayerState.IDLE
        self.fight: Optional[Fight] = None
        self._log_idx = 0
        self._local_start: Optional[datetime] = None
        self._log_start: Optional[datetime] = None

    def is_playing(self) -> bool:
        return self.state == PlayerState.PLAYING

    @property
    def cursor(self) -> int:
        return self._log_idx

    def elapsed_ms(self) -> int:
        if not self.is_playing() or self._local_start is None:
            return 0
        return millis_between(self._local_start, self._clock())

    def start(self, fight: Fight) -> None:
        if self.is_playing():
            raise PlayerBusyError(f"Fight #{self.fight.key} is already playing")  # type: ignore[union-attr]

        self._local_start = self._clock()
        self._log_start = fight.start_date
        self.fight = fight
        self._log_idx = 0

        logger.info("Replaying fight #%d in %s (%d lines)", fight.key, fight.zone_name or "<no zone>", len(fight.logs))
        # PLAYING before notifying, so a stop() from the callback takes effect.
        self.state = PlayerState.PLAYING
        self._listener.on_zone_changed(fight.zone_name)
        self.tick()

    def tick(self) -> None:
        # The scheduler may fire once more after stopping.
        if not self.is_playing() or self.fight is None:
            return

        elapsed = self._clock() - self._local_start  # type: ignore[operator]
        cutoff = self._log_start + elapsed  # type: ignore[operator]

        logs = self.fight.logs
        batch: List[str] = []
        while self._log_idx < len(logs) and self._is_due(logs[self._log_idx], cutoff):
            batch.append(logs[self._log_idx])
            self._log_idx += 1

        self._listener.on_log_event(batch)
        if self._log_idx >= len(logs):
            self.stop()

    def _is_due(self, line: str, cutoff: datetime) -> bool:
        ts = parse_timestamp(line, self._log_start)
        if ts is None:
            # Untimed lines ride along with the line before them.
            return True
        return ts <= cutoff

    def stop(self) -> None:
        if not self.is_playing():
            return

        fight = self.fight
        # Reset first: a listener reacting to the wipe may call stop() again.
        self._reset()
        # Always end with a wipe so triggers reset, even if the fight was a clear.
        self._listener.on_log_event([WIPE_MARKER])
        if fight is not None:
            logger.info("Replay of fight #%d stopped", fight.key)
