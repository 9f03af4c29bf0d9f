from __future__ import annotations

import regex as re
from typing import Dict, Pattern


class UnknownLanguageError(ValueError):
    pass


# -----------------
# Countdown engage lines (game log type 0039), per client language
# -----------------

_COUNTDOWN_ENGAGE: Dict[str, str] = {
    "en": r" 00:0039:Engage!",
    "de": r" 00:0039:Start!",
    "fr": r" 00:0039:À l'attaque !",
    "ja": r" 00:0039:戦闘開始！",
    "cn": r" 00:0039:战斗开始！",
    "ko": r" 00:0039:전투 시작!",
}

_COMPILED: Dict[str, Pattern] = {}


def supported_languages() -> tuple:
    return tuple(_COUNTDOWN_ENGAGE)


def countdown_engage_regex(language: str = "en") -> Pattern:
    lang = (language or "en").strip().lower()
    if lang not in _COUNTDOWN_ENGAGE:
        raise UnknownLanguageError(f"Unsupported language '{language}'. Expected one of: {', '.join(_COUNTDOWN_ENGAGE)}")

    rx = _COMPILED.get(lang)
    if rx is None:
        rx = re.compile(_COUNTDOWN_ENGAGE[lang])
        _COMPILED[lang] = rx
    return rx
