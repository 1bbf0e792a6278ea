"""AI provider implementations."""

from .base import AIProvider, AIProviderType

__all__ = ["AIProvider", "AIProviderType"]
