"""Similarity search over stored memories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import ScoredMemory
from .store import MemoryStore
from .vectors import cosine_similarities

if TYPE_CHECKING:
    from ..llm import Embedder

DEFAULT_TOP_N = 3


class Retriever:
    """Ranks every stored memory against a query by cosine similarity.

    This is a linear scan over the store. It is meant for one user's
    personal facts; a larger corpus would need a nearest-neighbor index
    behind the same ``retrieve`` call.
    """

    def __init__(
        self,
        store: MemoryStore,
        embedder: Embedder,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.top_n = top_n

    async def retrieve(self, query: str, top_n: int | None = None) -> list[ScoredMemory]:
        """Return the ``top_n`` memories most similar to ``query``.

        Results are in non-increasing score order; equal scores keep store
        order. Fewer than ``top_n`` results are returned when the store is
        smaller, and an empty store returns ``[]`` without embedding.
        """
        limit = self.top_n if top_n is None else top_n
        records = self.store.get_all()
        if limit <= 0 or not records:
            return []

        query_embedding = await self.embedder.embed(query)
        scores = cosine_similarities(query_embedding, [r.embedding for r in records])

        ranked = sorted(
            (ScoredMemory(record=r, score=s) for r, s in zip(records, scores)),
            key=lambda m: m.score,
            reverse=True,
        )
        return ranked[:limit]
