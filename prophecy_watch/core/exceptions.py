class ProphecyWatchError(Exception):
    """Base class for errors raised by the news pipeline."""


class FeedFetchError(ProphecyWatchError):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to fetch feed '{source}': {reason}")
        self.source = source
        self.reason = reason


class InvalidSubscriptionError(ProphecyWatchError):
    """Raised when a push subscription descriptor lacks a usable endpoint."""
