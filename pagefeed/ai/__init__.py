"""
PageFeed AI Module
==================

Prompt construction, model invocation and classification of model output.
"""

from .prompts import PromptBuilder, build_feed_prompt
from .classifier import (
    ClassifiedResponse,
    ValidFeed,
    StructuredError,
    Malformed,
    classify_response,
)
from .model_invoker import ModelInvoker
from .providers.base import AIProvider

__all__ = [
    "PromptBuilder",
    "build_feed_prompt",
    "ClassifiedResponse",
    "ValidFeed",
    "StructuredError",
    "Malformed",
    "classify_response",
    "ModelInvoker",
    "AIProvider",
]
