from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from combatlog.collector import FightCollector
from combatlog.lang import countdown_engage_regex
from combatlog.models import Fight
from combatlog.player import FightPlayer, ReplayListener
from combatlog.summary import fight_info, fight_label, progress_str

logger = logging.getLogger("raidemulator")


class FightNotFoundError(LookupError):
    pass


class EmulatorSession:
    """Owns one collector, one player and the task that ticks the player.

    Notifications from the player are fanned out, in order, to every
    registered listener (timeline forwarder, CLI printer, tests).
    """

    def __init__(
        self,
        *,
        language: str = "en",
        tick_interval_seconds: float = 1.0 / 60.0,
        clock: Callable[[], datetime] = datetime.now,
        listeners: Optional[Iterable[ReplayListener]] = None,
    ) -> None:
        self._listeners: List[ReplayListener] = list(listeners or [])
        self._fight_added_callbacks: List[Callable[[Fight], None]] = []
        self._tick_interval = float(tick_interval_seconds)
        self._task: Optional[asyncio.Task] = None

        self.collector = FightCollector(self._on_fight_completed, countdown_regex=countdown_engage_regex(language))
        self.player = FightPlayer(self, clock=clock)
        self.selected_key: Optional[int] = None

    # -----------------------------
    # Listener fan-out
    # -----------------------------
    def add_listener(self, listener: ReplayListener) -> None:
        self._listeners.append(listener)

    def on_fight_added(self, callback: Callable[[Fight], None]) -> None:
        self._fight_added_callbacks.append(callback)

    def on_zone_changed(self, zone_name: Optional[str]) -> None:
        for listener in self._listeners:
            listener.on_zone_changed(zone_name)

    def on_log_event(self, logs: List[str]) -> None:
        for listener in self._listeners:
            listener.on_log_event(logs)

    def _on_fight_completed(self, fight: Fight) -> None:
        for cb in self._fight_added_callbacks:
            cb(fight)

    # -----------------------------
    # Fights
    # -----------------------------
    def import_lines(self, lines: Iterable[str]) -> List[Fight]:
        return self.collector.append_import_lines(lines)

    def fights(self) -> List[Fight]:
        return self.collector.fights

    def get_fight(self, key: int) -> Fight:
        fight = self.collector.get_fight(key)
        if fight is None:
            raise FightNotFoundError(f"No fight with key {key}")
        return fight

    def select(self, key: int) -> Fight:
        fight = self.get_fight(key)
        self.selected_key = key
        return fight

    # -----------------------------
    # Playback
    # -----------------------------
    @property
    def is_playing(self) -> bool:
        return self.player.is_playing()

    async def start(self, key: Optional[int] = None) -> Fight:
        """Start replaying `key` (or the selected fight) and schedule ticks."""
        if key is None:
            key = self.selected_key
        if key is None:
            raise FightNotFoundError("No fight selected")

        fight = self.select(key)
        # Raises PlayerBusyError if something is already playing.
        self.player.start(fight)

        if self.player.is_playing():
            self._task = asyncio.create_task(self._run_ticks())
        return fight

    async def _run_ticks(self) -> None:
        while self.player.is_playing():
            await asyncio.sleep(self._tick_interval)
            try:
                self.player.tick()
            except Exception:
                logger.exception("Replay tick failed; stopping playback")
                self.player.stop()
                return

    async def wait(self) -> None:
        """Wait until the current replay finishes on its own or is stopped."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def stop(self) -> None:
        self.player.stop()
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    def status(self) -> Dict[str, Any]:
        fight = self.player.fight
        if fight is None and self.selected_key is not None:
            fight = self.collector.get_fight(self.selected_key)

        out: Dict[str, Any] = {
            "playing": self.player.is_playing(),
            "selected_key": self.selected_key,
            "key": None,
            "label": None,
            "info": None,
            "elapsed_ms": self.player.elapsed_ms(),
            "progress": None,
        }
        if fight is not None:
            out["key"] = fight.key
            out["label"] = fight_label(fight)
            out["info"] = fight_info(fight)
            if self.player.is_playing():
                out["progress"] = progress_str(out["elapsed_ms"], fight.duration_ms)
        return out
