from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str


# Order matters: items with equal publication times keep this order.
FEED_SOURCES: Tuple[FeedSource, ...] = (
    FeedSource("Reuters World", "https://www.reutersagency.com/feed/?best-topics=world&post_type=best"),
    FeedSource("AP Top Stories", "https://feeds.apnews.com/apf-topnews"),
    FeedSource("BBC World", "http://feeds.bbci.co.uk/news/world/rss.xml"),
    FeedSource("Al Jazeera", "https://www.aljazeera.com/xml/rss/all.xml"),
    FeedSource("NASA News", "https://www.nasa.gov/rss/dyn/breaking_news.rss"),
)
