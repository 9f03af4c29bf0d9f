from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

import pytest


def ln(hms: str, body: str) -> str:
    """Network log line at `hms` (HH:MM:SS.mmm)."""
    return f"[{hms}] {body}"


def zone(hms: str, name: str) -> str:
    return ln(hms, f"01:Changed Zone to {name}.")


def countdown(hms: str) -> str:
    return ln(hms, "00:0039:Engage!")


def wipe(hms: str) -> str:
    return ln(hms, "21:80034E2B:40000010:00:00:00:00")


def clear(hms: str) -> str:
    return ln(hms, "21:80034E2B:40000003:00:00:00:00")


def ability(hms: str, actor: str, target: str = "Boss") -> str:
    return ln(hms, f"15:1039A1D9:{actor}:3EF5:Ruin III:4000B2B4:{target}:")


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, 20, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, ms: int) -> None:
        self.now = self.now + timedelta(milliseconds=ms)


class RecordingListener:
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def on_zone_changed(self, zone_name):
        self.events.append(("zone", zone_name))

    def on_log_event(self, logs):
        self.events.append(("logs", list(logs)))

    @property
    def batches(self) -> List[List[str]]:
        return [e[1] for e in self.events if e[0] == "logs"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def two_pull_log() -> List[str]:
    return [
        zone("20:00:00.000", "Arena"),
        ln("20:00:01.000", "00:0038:hello"),
        countdown("20:00:05.000"),
        ability("20:00:06.000", "Tini Poutini"),
        ability("20:00:07.500", "Potato Chippy"),
        wipe("20:00:30.000"),
        zone("20:01:00.000", "Arena"),
        countdown("20:02:00.000"),
        ability("20:02:01.000", "Tini Poutini"),
        ability("20:02:02.000", "Jane Doe"),
        clear("20:05:00.000"),
        ln("20:05:01.000", "00:0839:loot"),
    ]
