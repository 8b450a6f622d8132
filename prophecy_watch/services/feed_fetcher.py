import asyncio
import logging
import re
from datetime import datetime, timezone
from html import unescape
from typing import Any, List, Optional, Tuple

import aiohttp
import feedparser

from ..core.config import settings
from ..core.exceptions import FeedFetchError
from ..core.feeds import FeedSource
from ..models.news import RawFeedItem

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")

DEFAULT_HEADERS = {
    # Some publishers reject the default aiohttp agent outright.
    "User-Agent": "Mozilla/5.0 (compatible; ProphecyWatch/1.0)",
    "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
}


def _strip_html(value: str) -> str:
    text = _TAG_RE.sub(" ", value or "")
    return _SPACE_RE.sub(" ", unescape(text)).strip()


def _struct_to_iso(value: Any) -> Optional[str]:
    """feedparser normalizes ``*_parsed`` fields to UTC struct_time tuples."""
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc).isoformat()
    except (TypeError, ValueError):
        return None


def _entry_summary(entry: Any) -> str:
    parts = [entry.get("summary") or entry.get("description") or ""]
    # Atom feeds may carry the body in ``content`` in addition to the summary
    for content in entry.get("content") or []:
        value = content.get("value") if hasattr(content, "get") else None
        if value and value != parts[0]:
            parts.append(value)
    return " ".join(_strip_html(p) for p in parts if p).strip()


def entry_to_raw_item(entry: Any) -> RawFeedItem:
    """Map a feedparser entry onto the fields the aggregator needs."""
    iso_date = _struct_to_iso(entry.get("published_parsed")) or _struct_to_iso(entry.get("updated_parsed"))
    pub_date = entry.get("published") or entry.get("updated") or None
    return RawFeedItem(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("link") or "").strip(),
        iso_date=iso_date,
        pub_date=pub_date,
        summary=_entry_summary(entry),
    )


def parse_feed(source: FeedSource, content: bytes, content_type: str = "") -> List[RawFeedItem]:
    """Parse a feed body, raising FeedFetchError if nothing usable comes out."""
    # the charset may only be declared in the HTTP header
    feed = feedparser.parse(content, response_headers={"content-type": content_type})
    entries = getattr(feed, "entries", None) or []
    if getattr(feed, "bozo", False) and not entries:
        # bozo_exception may exist; include it for diagnostics
        exc = getattr(feed, "bozo_exception", None)
        raise FeedFetchError(source.name, f"malformed feed ({exc})" if exc else "malformed feed")
    return [entry_to_raw_item(entry) for entry in entries]


class FeedFetcher:
    """
    Retrieves one feed source over HTTP and parses it with feedparser.

    Each call is bounded by a total timeout so a single unresponsive source
    cannot stall an aggregation run.  Every failure mode is reported as a
    ``FeedFetchError``.
    """

    def __init__(self, timeout: Optional[float] = None, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = settings.FEED_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session

    async def _download(self, session: aiohttp.ClientSession, source: FeedSource) -> Tuple[bytes, str]:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with session.get(source.url, headers=DEFAULT_HEADERS, timeout=timeout) as resp:
            if resp.status >= 400:
                raise FeedFetchError(source.name, f"HTTP {resp.status}")
            return await resp.read(), resp.headers.get("Content-Type", "")

    async def fetch(self, source: FeedSource) -> List[RawFeedItem]:
        try:
            if self.session is not None and not self.session.closed:
                content, content_type = await self._download(self.session, source)
            else:
                async with aiohttp.ClientSession() as session:
                    content, content_type = await self._download(session, source)
        except asyncio.TimeoutError as e:
            raise FeedFetchError(source.name, f"timed out after {self.timeout:g}s") from e
        except aiohttp.ClientError as e:
            raise FeedFetchError(source.name, str(e) or e.__class__.__name__) from e

        items = parse_feed(source, content, content_type)
        logger.debug(f"Fetched {len(items)} entries from {source.name}")
        return items
