"""
Base AI Provider Interface
==========================

Abstract base class for text generation providers. A provider takes a
prompt and returns the model's raw text; it knows nothing about feeds.
"""

from abc import ABC, abstractmethod
from enum import Enum


class AIProviderType(str, Enum):
    """Available AI provider types."""
    GEMINI = "gemini"


class AIProvider(ABC):
    """Abstract base class for AI provider implementations."""

    def __init__(self, api_key: str, model_name: str, provider_type: AIProviderType):
        """Initialize AI provider.

        Args:
            api_key: API key for the provider
            model_name: Model to use for requests
            provider_type: Type of provider
        """
        self.api_key = api_key
        self.model_name = model_name
        self.provider_type = provider_type

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the raw response text.

        Args:
            prompt: Prompt text

        Returns:
            Raw model output (may be empty)

        Raises:
            ModelUnavailableError: If the provider cannot be reached or errors
            ModelConfigurationError: If the provider rejects the credentials
        """
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_name})"
