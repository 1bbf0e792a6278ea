"""
Model Invoker
=============

Sends prompts to the configured provider under an explicit deadline. The
provider is built lazily so that a missing API key surfaces on the first
request instead of at startup.
"""

import asyncio
from typing import Callable, Optional

from .providers.base import AIProvider
from ..config.settings import AISettings
from ..utils.exceptions import (
    ErrorCode,
    ModelConfigurationError,
    ModelUnavailableError,
)
from ..utils.logging import get_logger_for_component


ProviderFactory = Callable[[], AIProvider]


def gemini_provider_factory(ai_settings: AISettings) -> ProviderFactory:
    """Build a factory creating a GeminiProvider from settings."""

    def factory() -> AIProvider:
        if not ai_settings.has_credentials():
            raise ModelConfigurationError(
                "Gemini API key is not configured",
                provider="gemini",
                error_code=ErrorCode.CONFIG_MISSING,
            )

        from .providers.gemini_provider import GeminiProvider
        return GeminiProvider(
            api_key=ai_settings.gemini_api_key,
            model_name=ai_settings.gemini_model,
            temperature=ai_settings.temperature,
            max_output_tokens=ai_settings.max_output_tokens,
        )

    return factory


class ModelInvoker:
    """Invokes the generation provider once per prompt, without retries."""

    def __init__(
        self,
        provider_factory: ProviderFactory,
        timeout: Optional[float] = None,
    ):
        """Initialize model invoker.

        Args:
            provider_factory: Callable returning a ready provider
            timeout: Default deadline in seconds; None means unbounded
        """
        self.provider_factory = provider_factory
        self.timeout = timeout
        self._provider: Optional[AIProvider] = None
        self.logger = get_logger_for_component("model_invoker")

    @classmethod
    def from_settings(cls, ai_settings: AISettings) -> "ModelInvoker":
        return cls(gemini_provider_factory(ai_settings), timeout=ai_settings.request_timeout)

    def get_provider(self) -> AIProvider:
        """Return the provider, creating it on first use.

        Raises:
            ModelConfigurationError: If credentials are absent
        """
        if self._provider is None:
            self._provider = self.provider_factory()
        return self._provider

    async def invoke(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Send a prompt and return the raw model text.

        Args:
            prompt: Prompt text
            timeout: Deadline in seconds, overriding the invoker default

        Returns:
            Raw response text

        Raises:
            ModelConfigurationError: If credentials are absent or rejected
            ModelUnavailableError: If the call fails or misses its deadline
        """
        provider = self.get_provider()
        deadline = timeout if timeout is not None else self.timeout

        self.logger.debug(f"Invoking {provider} (deadline={deadline})")

        try:
            if deadline is None:
                return await provider.generate(prompt)
            return await asyncio.wait_for(provider.generate(prompt), timeout=deadline)

        except asyncio.TimeoutError as e:
            self.logger.warning(f"Model call exceeded {deadline}s deadline")
            raise ModelUnavailableError(
                f"Model call timed out after {deadline}s",
                provider=provider.provider_type.value,
                error_code=ErrorCode.AI_TIMEOUT,
            ) from e

        except (ModelConfigurationError, ModelUnavailableError):
            raise

        except Exception as e:
            raise ModelUnavailableError(
                f"Model call failed: {e}",
                provider=provider.provider_type.value,
                error_code=ErrorCode.AI_PROVIDER_UNAVAILABLE,
            ) from e
