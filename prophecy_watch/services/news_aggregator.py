import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional, Sequence

from ..core.exceptions import FeedFetchError
from ..core.feeds import FEED_SOURCES, FeedSource
from ..models.news import NewsItem, RawFeedItem
from .classifier import build_classification_text, classify
from .feed_fetcher import FeedFetcher

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

# Sort key stand-in for items without a usable date; sorts them last.
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 or RFC-822 date string into an aware UTC datetime.

    Naive values are taken to be UTC.  Returns None for empty or
    unparseable input instead of guessing.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    dt: Optional[datetime] = None
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            dt = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_published(raw: RawFeedItem) -> Optional[datetime]:
    """Prefer the structured ISO date, then the raw publication string."""
    for candidate in (raw.iso_date, raw.pub_date):
        dt = parse_date(candidate)
        if dt is not None:
            return dt
    return None


def build_news_item(source: FeedSource, raw: RawFeedItem) -> NewsItem:
    title = raw.title or UNTITLED
    return NewsItem(
        source=source.name,
        title=title,
        link=raw.link,
        published_at=resolve_published(raw),
        topics=frozenset(classify(build_classification_text(raw.title, raw.summary))),
    )


def sort_newest_first(items: Sequence[NewsItem]) -> List[NewsItem]:
    """Stable descending sort by publication time; undated items go last."""
    return sorted(items, key=lambda item: item.published_at or _OLDEST, reverse=True)


class NewsAggregator:
    """
    Fetches every configured feed, classifies each entry and merges the
    results into one list ordered newest first.

    Sources are fetched concurrently.  A source that fails contributes no
    items; a run where every source fails returns an empty list.
    """

    def __init__(self, sources: Sequence[FeedSource] = FEED_SOURCES, fetcher: Optional[FeedFetcher] = None):
        self.sources = tuple(sources)
        self.fetcher = fetcher or FeedFetcher()

    async def _fetch_source(self, source: FeedSource) -> List[NewsItem]:
        try:
            raw_items = await self.fetcher.fetch(source)
        except FeedFetchError as e:
            logger.warning(f"Feed error: {e}")
            return []
        except Exception as e:
            logger.warning(f"Unexpected error fetching feed '{source.name}': {e!r}")
            return []
        return [build_news_item(source, raw) for raw in raw_items]

    async def aggregate(self) -> List[NewsItem]:
        # gather keeps results in source order whatever order fetches finish in
        per_source = await asyncio.gather(*(self._fetch_source(s) for s in self.sources))
        items = [item for batch in per_source for item in batch]
        ok = sum(1 for batch in per_source if batch)
        logger.info(f"Aggregated {len(items)} items from {ok}/{len(self.sources)} sources")
        return sort_newest_first(items)


news_aggregator = NewsAggregator()
