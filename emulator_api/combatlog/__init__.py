from .collector import FightCollector
from .lang import UnknownLanguageError, countdown_engage_regex, supported_languages
from .lines import WIPE_MARKER, parse_timestamp
from .models import Fight
from .player import FightPlayer, PlayerBusyError, PlayerState, ReplayListener
from .summary import fight_info, fight_label

__all__ = [
    "Fight",
    "FightCollector",
    "FightPlayer",
    "PlayerBusyError",
    "PlayerState",
    "ReplayListener",
    "UnknownLanguageError",
    "WIPE_MARKER",
    "countdown_engage_regex",
    "fight_info",
    "fight_label",
    "parse_timestamp",
    "supported_languages",
]
