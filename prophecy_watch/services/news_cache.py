import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..core.config import settings
from ..models.news import NewsItem
from .news_aggregator import NewsAggregator, news_aggregator

logger = logging.getLogger(__name__)

CACHE_KEY = "ALL_NEWS"


@dataclass(frozen=True)
class CachedResult:
    key: str
    items: Tuple[NewsItem, ...]
    computed_at: float
    expires_at: float


class NewsCache:
    """
    Holds the latest aggregation result for a fixed time-to-live.

    Reads inside the TTL window return the stored tuple untouched.  An
    expired or missing entry triggers a synchronous re-aggregation whose
    result replaces the entry in one assignment.  If that re-aggregation
    raises and an older entry exists, the older entry is served instead.
    """

    def __init__(
        self,
        aggregator: NewsAggregator,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.aggregator = aggregator
        self.ttl = settings.NEWS_CACHE_TTL_SECONDS if ttl is None else ttl
        self._clock = clock
        self._entry: Optional[CachedResult] = None

    @property
    def entry(self) -> Optional[CachedResult]:
        return self._entry

    def _fresh_entry(self) -> Optional[CachedResult]:
        entry = self._entry
        if entry is not None and self._clock() < entry.expires_at:
            return entry
        return None

    async def get_news(self) -> Tuple[NewsItem, ...]:
        entry = self._fresh_entry()
        if entry is not None:
            return entry.items

        stale = self._entry
        try:
            items = tuple(await self.aggregator.aggregate())
        except Exception as e:
            if stale is None:
                raise
            logger.error(f"News refresh failed, serving previous result: {e}")
            return stale.items

        now = self._clock()
        self._entry = CachedResult(key=CACHE_KEY, items=items, computed_at=now, expires_at=now + self.ttl)
        return items

    def invalidate(self) -> None:
        self._entry = None


news_cache = NewsCache(news_aggregator)
