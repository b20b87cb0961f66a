"""
Link record for shortlink.

A Link is the only entity the engine knows about. It is a plain dataclass so
that storage backends, the manager and the resolver can share it without
pulling in the HTTP schemas.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Link:
    """
    A short code mapped to a target URL plus its click counters.

    Attributes:
        code (str): 6-8 alphanumeric chars, case-sensitive primary key.
        url (str): Absolute http/https target.
        total_clicks (int): Number of recorded visits; never decreases.
        last_clicked (Optional[datetime]): Time of the latest recorded visit.
        created_at (datetime): Insertion time (UTC).
    """

    code: str
    url: str
    total_clicks: int = 0
    last_clicked: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)

    def clicked(self, at: datetime) -> "Link":
        """Return a copy with one more click recorded at `at`."""
        return replace(self, total_clicks=self.total_clicks + 1, last_clicked=at)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Link":
        """Build a Link from a storage row (snake_case columns)."""
        return cls(
            code=row["code"],
            url=row["url"],
            total_clicks=int(row.get("total_clicks") or 0),
            last_clicked=row.get("last_clicked"),
            created_at=row["created_at"],
        )
