"""
Feed Preview
============

Summarises generated feed XML for display. This is informational only: a
feed that feedparser struggles with is still returned to callers as-is.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import feedparser


@dataclass
class PreviewItem:
    """One article in a feed preview."""
    title: str
    link: str
    published: Optional[str] = None


@dataclass
class FeedPreview:
    """Channel metadata and items of a generated feed."""
    title: str
    link: str
    description: str = ""
    language: Optional[str] = None
    items: List[PreviewItem] = field(default_factory=list)
    parse_warning: Optional[str] = None

    @property
    def item_count(self) -> int:
        return len(self.items)


def summarize_feed(xml: str) -> FeedPreview:
    """Parse feed XML into a FeedPreview.

    Args:
        xml: RSS document text

    Returns:
        FeedPreview; ``parse_warning`` is set when feedparser flagged the XML
    """
    parsed = feedparser.parse(xml)
    channel = parsed.feed

    items = [
        PreviewItem(
            title=entry.get("title", "Untitled"),
            link=entry.get("link", ""),
            published=entry.get("published"),
        )
        for entry in parsed.entries
    ]

    warning = None
    if parsed.bozo:
        warning = str(getattr(parsed, "bozo_exception", "Invalid XML structure"))

    return FeedPreview(
        title=channel.get("title", "Untitled feed"),
        link=channel.get("link", ""),
        description=channel.get("description", ""),
        language=channel.get("language"),
        items=items,
        parse_warning=warning,
    )
