from typing import Iterable, List, Mapping, Optional, Set

from ..core.topics import TOPICS, Topic


def build_classification_text(*parts: Optional[str]) -> str:
    """Join title and body snippets with spaces; missing parts count as empty."""
    return " ".join(part or "" for part in parts)


def classify(text: Optional[str], topics: Mapping[str, Topic] = TOPICS) -> Set[str]:
    """
    Return the ids of every topic with at least one keyword contained in ``text``.

    Matching is a case-insensitive substring test.  An item may match any
    number of topics, including none.
    """
    lower = (text or "").lower()
    return {
        topic_id
        for topic_id, topic in topics.items()
        if any(keyword.lower() in lower for keyword in topic.keywords)
    }


def ordered_topics(topic_ids: Iterable[str], topics: Mapping[str, Topic] = TOPICS) -> List[str]:
    """Return ``topic_ids`` in ruleset order."""
    wanted = set(topic_ids)
    return [topic_id for topic_id in topics if topic_id in wanted]
