"""Language-model collaborators.

The memory engine depends only on two small protocols:

- Embedder: turns text into a fixed-length vector.
- Completer: turns a prompt into a text reply (empty string = no reply).

GroqCompleter and OpenAIEmbedder are the production implementations.
"""

from typing import Any, Protocol

from groq import AsyncGroq
from openai import AsyncOpenAI

DEFAULT_CHAT_MODEL = "llama-3.1-70b-versatile"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class Embedder(Protocol):
    """Anything that can embed text into a fixed-dimension vector."""

    async def embed(self, text: str) -> list[float]: ...


class Completer(Protocol):
    """Anything that can complete a prompt."""

    async def complete(self, prompt: str) -> str: ...


class GroqCompleter:
    """Completer implementation that wraps AsyncGroq.

    Example:
        from groq import AsyncGroq
        from personalizer.llm import GroqCompleter

        completer = GroqCompleter(AsyncGroq(api_key="..."))
        reply = await completer.complete("Hello")
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = DEFAULT_CHAT_MODEL,
    ) -> None:
        """Initialize the Groq completer.

        Args:
            client: The AsyncGroq client instance to wrap.
            model: The model to use for completions.
        """
        self._client = client
        self._model = model

    async def complete(self, prompt: str) -> str:
        """Complete a prompt and return the text response.

        Args:
            prompt: The full prompt, sent as a single user message.

        Returns:
            The LLM's text response, or an empty string if it gave none.
        """
        messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model


class OpenAIEmbedder:
    """Embedder implementation backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = DEFAULT_EMBEDDING_MODEL,
    ) -> None:
        self._client = client
        self._model = model

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            ValueError: If the API returned no embedding.
        """
        response = await self._client.embeddings.create(
            model=self._model,
            input=text,
        )
        if not response.data:
            raise ValueError(f"No embedding returned for model {self._model}")
        return list(response.data[0].embedding)

    @property
    def model(self) -> str:
        return self._model
