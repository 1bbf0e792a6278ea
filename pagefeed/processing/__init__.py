"""
PageFeed Processing Module
==========================

The request pipeline orchestrating fetch, generation and caching.
"""

from .pipeline import FeedPipeline, PipelineResult, PipelineStage, CacheDisposition

__all__ = [
    'FeedPipeline',
    'PipelineResult',
    'PipelineStage',
    'CacheDisposition',
]
