import asyncio
import enum
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.config import settings
from ..models.news import NewsItem
from .news_cache import NewsCache, news_cache
from .push_service import PushService, push_service

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Prophecy Watch: New headline"


class NotifierState(enum.Enum):
    IDLE = "idle"
    CHECKING = "checking"


def build_payload(item: NewsItem) -> Dict[str, Any]:
    return {
        "title": NOTIFICATION_TITLE,
        "body": item.title,
        "url": item.link or "/",
    }


class NewsNotifier:
    """
    Periodically checks the newest cached item and pushes a notification
    when its publication time moves past the last one notified.

    Only a strictly later publication time notifies, so items sharing the
    last notified timestamp are ignored.  Items without a date never notify.
    """

    def __init__(self, cache: NewsCache, push: PushService, interval: Optional[float] = None):
        self.cache = cache
        self.push = push
        self.interval = settings.NOTIFY_INTERVAL_SECONDS if interval is None else interval
        self.state = NotifierState.IDLE
        self.last_notified: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None

    async def tick(self) -> bool:
        """Run one check; returns True if a new newest item was found."""
        if self.state is NotifierState.CHECKING:
            logger.debug("Previous news check still running; skipping tick")
            return False

        self.state = NotifierState.CHECKING
        try:
            return await self._check()
        except Exception as e:
            logger.error(f"Notifier error: {e}")
            return False
        finally:
            self.state = NotifierState.IDLE

    async def _check(self) -> bool:
        news = await self.cache.get_news()
        if not news:
            return False

        newest = news[0]
        published = newest.published_at
        if published is None:
            return False

        if self.last_notified is not None and published <= self.last_notified:
            return False

        self.last_notified = published

        if not self.push.enabled:
            logger.info(f"New headline at {newest.iso_date}; push disabled, not sending")
            return True

        result = await self.push.broadcast(build_payload(newest))
        logger.info(
            f"Notified {result.delivered} subscribers of '{newest.title}' "
            f"({result.removed} subscriptions removed)"
        )
        return True

    async def run_forever(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())
            logger.info(f"News notifier started (every {self.interval:g}s)")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


news_notifier = NewsNotifier(news_cache, push_service)
