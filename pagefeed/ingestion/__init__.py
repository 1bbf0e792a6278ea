"""Source page ingestion."""

from .page_fetcher import PageFetcher

__all__ = ["PageFetcher"]
