"""
Google Gemini AI provider implementation for PageFeed.

Wraps the Gemini generation API behind the AIProvider interface and maps
SDK failures onto PageFeed's model error types.
"""

import time

import google.generativeai as genai

from .base import AIProvider, AIProviderType
from ...utils.exceptions import (
    ErrorCode,
    ModelConfigurationError,
    ModelUnavailableError,
)
from ...utils.logging import get_logger_for_component


# Substrings of SDK error messages that mean the key itself is the problem
_CREDENTIAL_MARKERS = ("api key", "api_key", "authentication", "permission denied", "unauthenticated")


class GeminiProvider(AIProvider):
    """Google Gemini AI provider."""

    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        temperature: float = 0.1,
        max_output_tokens: int = 8192,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google Gemini API key
            model_name: Model to use (default: gemini-2.5-flash)
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens

        Raises:
            ModelConfigurationError: If no API key is supplied
        """
        if not api_key:
            raise ModelConfigurationError(
                "Gemini API key is required",
                provider=AIProviderType.GEMINI.value,
                error_code=ErrorCode.AI_INVALID_CREDENTIALS,
            )

        super().__init__(api_key, model_name, AIProviderType.GEMINI)

        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name=model_name)

        self.logger = get_logger_for_component("gemini_provider")
        self.logger.info(f"Gemini provider initialized with model: {model_name}")

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Prompt text

        Returns:
            Raw response text; empty if the response was blocked or had no parts
        """
        start_time = time.time()

        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            self.logger.error(f"Gemini generation error: {e}", exc_info=True)

            if any(marker in str(e).lower() for marker in _CREDENTIAL_MARKERS):
                raise ModelConfigurationError(
                    f"Gemini rejected the credentials: {e}",
                    provider=AIProviderType.GEMINI.value,
                ) from e

            raise ModelUnavailableError(
                f"Gemini API error: {e}",
                provider=AIProviderType.GEMINI.value,
                error_code=ErrorCode.AI_API_ERROR,
            ) from e

        # .text raises ValueError when the candidate was blocked or is empty
        try:
            text = response.text
        except ValueError as e:
            self.logger.warning(f"Gemini response blocked or empty: {e}")
            text = ""

        processing_time_ms = int((time.time() - start_time) * 1000)
        self.logger.debug(
            f"Gemini generation complete: {len(text)} chars, time={processing_time_ms}ms"
        )

        return text

    def __repr__(self) -> str:
        return f"GeminiProvider(model={self.model_name}, temperature={self.temperature})"
