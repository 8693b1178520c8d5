"""Memory manager for embedding and storing facts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import InsertOutcome
from .store import MemoryStore
from .vectors import KEY_WEIGHT, VALUE_WEIGHT, weighted_average

if TYPE_CHECKING:
    from ..llm import Embedder


class MemoryManager:
    """Turns (key, value) facts into embedded records in the store.

    This is the write path of the memory system: every fact is embedded
    once, as a weighted mix of its key and value embeddings, before it
    reaches the store's dedup check.
    """

    def __init__(
        self,
        store: MemoryStore,
        embedder: Embedder,
        key_weight: float = KEY_WEIGHT,
        value_weight: float = VALUE_WEIGHT,
    ) -> None:
        """Initialize the manager.

        Args:
            store: The MemoryStore for persistence.
            embedder: Embedder used for keys and values.
            key_weight: Weight of the key embedding in the composite.
            value_weight: Weight of the value embedding in the composite.
        """
        self.store = store
        self.embedder = embedder
        self.key_weight = key_weight
        self.value_weight = value_weight

    async def embed_fact(self, key: str, value: str) -> list[float]:
        """Embed a fact as a weighted average of its key and value."""
        key_embedding = await self.embedder.embed(key)
        value_embedding = await self.embedder.embed(value)
        return weighted_average(
            key_embedding, value_embedding, self.key_weight, self.value_weight
        )

    async def remember(
        self, key: str, value: str, category: str | None = None
    ) -> InsertOutcome:
        """Embed and store a fact.

        Embedder errors propagate before anything is written.

        Returns:
            The store's InsertOutcome (skipped for duplicates).
        """
        embedding = await self.embed_fact(key, value)
        return self.store.insert(key, value, embedding, category=category)
