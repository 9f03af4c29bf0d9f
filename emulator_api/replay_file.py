#!/usr/bin/env python3
"""Split a network log file into fights and optionally replay one.

This DOES NOT talk to a timeline engine. It prints what the emulator would
emit, in real time.

Examples:
  raid-emulator-replay Network_20240101.log
  raid-emulator-replay Network_20240101.log --play 2 --language de
  python emulator_api/replay_file.py Network_20240101.log
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from combatlog.lang import supported_languages
from combatlog.summary import fight_info, fight_label
from session import EmulatorSession


class StdoutListener:
    def __init__(self, out=None) -> None:
        self._out = out or sys.stdout

    def on_zone_changed(self, zone_name: Optional[str]) -> None:
        print(f"== zone: {zone_name or '<none>'}", file=self._out)

    def on_log_event(self, logs: List[str]) -> None:
        for line in logs:
            print(line, file=self._out)


def read_lines(path: str) -> List[str]:
    with open(path, encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]


async def _play(sess: EmulatorSession, key: int) -> None:
    await sess.start(key)
    await sess.wait()


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser()
    p.add_argument("logfile", help="Network log file to import")
    p.add_argument("--language", default="en", choices=supported_languages(), help="Game client language")
    p.add_argument("--play", type=int, default=None, help="Fight key to replay after listing")
    p.add_argument("--tick", type=float, default=1.0 / 60.0, help="Seconds between replay ticks")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        lines = read_lines(args.logfile)
    except OSError as e:
        print(f"Error: cannot read {args.logfile}: {e}", file=sys.stderr)
        return 2

    sess = EmulatorSession(language=args.language, tick_interval_seconds=args.tick, listeners=[StdoutListener()])
    sess.import_lines(lines)

    fights = sess.fights()
    if not fights:
        print("No countdown-started fights found.")
        return 1

    for f in fights:
        print(f"[{f.key}] {fight_label(f)}")

    if args.play is None:
        return 0

    if sess.collector.get_fight(args.play) is None:
        print(f"Error: no fight with key {args.play}", file=sys.stderr)
        return 2

    print()
    print(fight_info(sess.get_fight(args.play)))
    print()
    try:
        asyncio.run(_play(sess, args.play))
    except KeyboardInterrupt:
        sess.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
