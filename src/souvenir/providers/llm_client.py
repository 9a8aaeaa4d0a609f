"""Text-generation provider implementations.

This module provides concrete implementations of the TextProvider Protocol,
allowing the answer generator to call an LLM without depending on a specific
provider.
"""

import logging
from typing import Any

from groq import AsyncGroq

from ..errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.1-70b-versatile"


class GroqTextProvider:
    """TextProvider implementation that wraps AsyncGroq.

    Example:
        from groq import AsyncGroq
        from souvenir.providers import GroqTextProvider

        groq = AsyncGroq(api_key="...")
        provider = GroqTextProvider(groq, model="llama-3.1-70b-versatile")
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        """Initialize the Groq wrapper.

        Args:
            client: The AsyncGroq client instance to wrap.
            model: The model to use for completions.
            temperature: Sampling temperature.
            max_tokens: Upper bound on generated tokens.
        """
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(self, prompt: str, system: str | None = None) -> str:
        """Complete a prompt and return the text response.

        Args:
            prompt: The user message.
            system: Optional system instruction.

        Returns:
            The LLM's text response.

        Raises:
            GenerationError: If the Groq call fails.
        """
        messages: list[dict[str, Any]] = []

        if system:
            messages.append({"role": "system", "content": system})

        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(f"Groq completion failed: {e}")
            raise GenerationError(f"Text generation failed: {e}") from e

        return response.choices[0].message.content or ""

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model
