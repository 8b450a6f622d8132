from dataclasses import dataclass
from datetime import datetime, timezone
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class RawFeedItem:
    """One entry as read from a feed, before dates are resolved or topics applied."""
    title: str
    link: str
    iso_date: Optional[str] = None
    pub_date: Optional[str] = None
    summary: str = ""


@dataclass(frozen=True)
class NewsItem:
    """
    A classified news item as served by the API.

    ``published_at`` is timezone-aware UTC, or None when the feed gave no
    usable date.  Instances are never mutated; each aggregation run builds
    a fresh list.
    """
    source: str
    title: str
    link: str
    published_at: Optional[datetime]
    topics: FrozenSet[str] = frozenset()

    @property
    def iso_date(self) -> Optional[str]:
        if self.published_at is None:
            return None
        return self.published_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
