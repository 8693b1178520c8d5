"""Data models for the memory system."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MemoryRecord:
    """A fact stored in memory about the user.

    Attributes:
        id: Store-assigned identifier, unique and never reused.
        key: Short semantic label (e.g., 'favorite_color').
        value: The fact content.
        created_at: ISO timestamp when stored.
        embedding: Weighted combination of the key and value embeddings.
        category: Optional free-text tag used for listing.
    """

    id: int
    key: str
    value: str
    created_at: str
    embedding: tuple[float, ...]
    category: str | None = None

    @property
    def text(self) -> str:
        """Display form of the fact."""
        return f"{self.key}: {self.value}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "text": self.text,
        }
        if self.category:
            data["category"] = self.category
        data["createdAt"] = self.created_at
        data["embedding"] = list(self.embedding)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemoryRecord":
        """Create from a persisted record.

        Older files stored the creation time under ``timestamp`` and the
        id as a string; both are accepted.
        """
        return cls(
            id=int(data["id"]),
            key=str(data["key"]),
            value=str(data["value"]),
            created_at=data.get("createdAt") or data.get("timestamp") or "",
            embedding=tuple(float(x) for x in data["embedding"]),
            category=data.get("category") or None,
        )


@dataclass(frozen=True)
class InsertOutcome:
    """Result of a store insert.

    Exactly one of ``record`` (stored) or ``duplicate_of`` (skipped) is set.
    """

    record: MemoryRecord | None = None
    duplicate_of: MemoryRecord | None = None

    @property
    def skipped(self) -> bool:
        return self.record is None


@dataclass(frozen=True)
class ScoredMemory:
    """A record paired with its similarity to a query."""

    record: MemoryRecord
    score: float


@dataclass(frozen=True)
class ConversationTurn:
    """One user utterance and the assistant's reply to it."""

    user: str
    assistant: str

    def to_dict(self) -> dict[str, str]:
        return {"user": self.user, "assistant": self.assistant}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationTurn":
        return cls(user=str(data["user"]), assistant=str(data["assistant"]))
