from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass
class Fight:
    key: int  # collector sequence number; UI handle only, never used for dedup
    zone_name: Optional[str]
    start_date: datetime
    logs: List[str] = field(default_factory=list)

    # Set once the fight ends.
    end_date: Optional[datetime] = None
    duration_ms: Optional[int] = None

    # Cached summary text (see combatlog.summary.fight_info).
    info: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    @property
    def dedup_key(self) -> Tuple[str, Optional[str]]:
        """Content identity, stable across re-imports of the same log."""
        return (self.logs[0] if self.logs else "", self.zone_name)
