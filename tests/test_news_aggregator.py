import asyncio
import unittest
from datetime import datetime, timedelta, timezone

from prophecy_watch.core.exceptions import FeedFetchError
from prophecy_watch.core.feeds import FeedSource
from prophecy_watch.models.news import NewsItem, RawFeedItem
from prophecy_watch.services.news_aggregator import (
    NewsAggregator,
    build_news_item,
    parse_date,
    resolve_published,
    sort_newest_first,
)

T1 = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)

SOURCE_A = FeedSource("A", "https://a.example.com/rss")
SOURCE_B = FeedSource("B", "https://b.example.com/rss")


class FakeFetcher:
    def __init__(self, results, delays=None):
        self.results = results
        self.delays = delays or {}
        self.calls = []
        self.finished = []

    async def fetch(self, source):
        self.calls.append(source.name)
        await asyncio.sleep(self.delays.get(source.name, 0))
        self.finished.append(source.name)
        result = self.results[source.name]
        if isinstance(result, Exception):
            raise result
        return result


class TestParseDate(unittest.TestCase):
    def test_iso_with_z(self):
        self.assertEqual(parse_date("2025-01-06T10:00:00Z"), T2)

    def test_iso_with_offset_normalized_to_utc(self):
        self.assertEqual(parse_date("2025-01-06T12:00:00+02:00"), T2)

    def test_rfc822(self):
        self.assertEqual(parse_date("Mon, 06 Jan 2025 10:00:00 GMT"), T2)

    def test_naive_taken_as_utc(self):
        self.assertEqual(parse_date("2025-01-06T10:00:00"), T2)

    def test_garbage_and_empty_are_none(self):
        for value in (None, "", "   ", "not a date", "yesterday-ish"):
            with self.subTest(value=value):
                self.assertIsNone(parse_date(value))

    def test_resolve_prefers_iso_then_pub_date(self):
        raw = RawFeedItem(title="x", link="", iso_date="2025-01-06T09:00:00Z", pub_date="Mon, 06 Jan 2025 10:00:00 GMT")
        self.assertEqual(resolve_published(raw), T1)

        raw = RawFeedItem(title="x", link="", iso_date=None, pub_date="Mon, 06 Jan 2025 10:00:00 GMT")
        self.assertEqual(resolve_published(raw), T2)

        raw = RawFeedItem(title="x", link="", iso_date="bogus", pub_date="also bogus")
        self.assertIsNone(resolve_published(raw))


class TestBuildNewsItem(unittest.TestCase):
    def test_untitled_default_and_topics_from_summary(self):
        raw = RawFeedItem(title="", link="https://a/1", iso_date=None, summary="Volcano erupts overnight")
        item = build_news_item(SOURCE_A, raw)

        self.assertEqual(item.title, "Untitled")
        self.assertEqual(item.source, "A")
        self.assertIsNone(item.published_at)
        self.assertEqual(item.topics, frozenset({"disasters"}))


class TestSortNewestFirst(unittest.TestCase):
    def _item(self, title, published_at):
        return NewsItem(source="S", title=title, link="", published_at=published_at)

    def test_descending_with_undated_last(self):
        items = [self._item("none", None), self._item("old", T1), self._item("new", T2)]
        ordered = sort_newest_first(items)
        self.assertEqual([i.title for i in ordered], ["new", "old", "none"])

    def test_ties_keep_input_order(self):
        items = [self._item("first", T1), self._item("second", T1), self._item("u1", None), self._item("u2", None)]
        ordered = sort_newest_first(items)
        self.assertEqual([i.title for i in ordered], ["first", "second", "u1", "u2"])


class TestNewsAggregator(unittest.IsolatedAsyncioTestCase):
    async def test_failed_source_is_skipped(self):
        fetcher = FakeFetcher({
            "A": [
                RawFeedItem(title="Aftershock follows earthquake", link="https://a/old", iso_date=T1.isoformat()),
                RawFeedItem(title="Earthquake strikes capital", link="https://a/new", iso_date=T2.isoformat()),
            ],
            "B": FeedFetchError("B", "HTTP 503"),
        })
        aggregator = NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=fetcher)

        items = await aggregator.aggregate()

        self.assertEqual([i.link for i in items], ["https://a/new", "https://a/old"])
        self.assertEqual([i.published_at for i in items], [T2, T1])
        for item in items:
            self.assertIn("disasters", item.topics)
        self.assertEqual(sorted(fetcher.calls), ["A", "B"])

    async def test_unexpected_error_is_isolated(self):
        fetcher = FakeFetcher({
            "A": RuntimeError("parser blew up"),
            "B": [RawFeedItem(title="Quiet day", link="https://b/1", iso_date=None)],
        })
        aggregator = NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=fetcher)

        items = await aggregator.aggregate()

        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].source, "B")

    async def test_all_sources_failing_is_empty_success(self):
        fetcher = FakeFetcher({
            "A": FeedFetchError("A", "timed out"),
            "B": FeedFetchError("B", "HTTP 404"),
        })
        aggregator = NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=fetcher)

        self.assertEqual(await aggregator.aggregate(), [])

    async def test_slow_failing_source_only_fails_itself(self):
        fetcher = FakeFetcher(
            {
                "A": FeedFetchError("A", "timed out"),
                "B": [RawFeedItem(title="Wildfire spreads", link="https://b/1", iso_date=T1.isoformat())],
            },
            delays={"A": 0.05},
        )
        aggregator = NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=fetcher)

        items = await aggregator.aggregate()

        self.assertEqual(fetcher.finished, ["B", "A"])
        self.assertEqual([i.link for i in items], ["https://b/1"])

    async def test_order_independent_of_completion_order(self):
        results = {
            "A": [RawFeedItem(title="a-tie", link="https://a/1", iso_date=T1.isoformat()),
                  RawFeedItem(title="a-undated", link="https://a/2")],
            "B": [RawFeedItem(title="b-tie", link="https://b/1", iso_date=T1.isoformat()),
                  RawFeedItem(title="b-undated", link="https://b/2")],
        }
        slow_a = FakeFetcher(results, delays={"A": 0.05})
        slow_b = FakeFetcher(results, delays={"B": 0.05})

        first = await NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=slow_a).aggregate()
        second = await NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=slow_b).aggregate()

        self.assertEqual(slow_a.finished, ["B", "A"])
        self.assertEqual(slow_b.finished, ["A", "B"])
        expected = ["a-tie", "b-tie", "a-undated", "b-undated"]
        self.assertEqual([i.title for i in first], expected)
        self.assertEqual([i.title for i in second], expected)

    async def test_output_sorted_across_sources(self):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        fetcher = FakeFetcher({
            "A": [RawFeedItem(title=f"a{i}", link="", iso_date=(base + timedelta(hours=i * 2)).isoformat()) for i in range(4)]
                 + [RawFeedItem(title="a-undated", link="")],
            "B": [RawFeedItem(title=f"b{i}", link="", pub_date=(base + timedelta(hours=i * 3)).strftime("%a, %d %b %Y %H:%M:%S GMT")) for i in range(3)],
        })
        aggregator = NewsAggregator(sources=[SOURCE_A, SOURCE_B], fetcher=fetcher)

        items = await aggregator.aggregate()

        dated = [i.published_at for i in items if i.published_at is not None]
        self.assertEqual(dated, sorted(dated, reverse=True))
        self.assertIsNone(items[-1].published_at)
        # a0 and b0 share a timestamp; source order breaks the tie
        tied = [i.title for i in items if i.published_at == base]
        self.assertEqual(tied, ["a0", "b0"])


if __name__ == "__main__":
    unittest.main()
