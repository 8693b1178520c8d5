"""JSON-backed storage for memory records."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from .models import InsertOutcome, MemoryRecord
from .persistence import JSONFile
from .vectors import cosine_similarity

DEFAULT_DEDUP_THRESHOLD = 0.95


class MemoryStore:
    """Persistent collection of memory records.

    The in-memory list is the source of truth during a session; the whole
    collection is rewritten to disk after every mutation. Records are
    deduplicated per key: a new record is skipped when a record with the
    same key already has an embedding at least ``dedup_threshold`` similar.
    """

    def __init__(
        self,
        path: Path | str | JSONFile,
        dedup_threshold: float = DEFAULT_DEDUP_THRESHOLD,
    ) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the collection (or a JSONFile port).
            dedup_threshold: Minimum cosine similarity for two records with
                the same key to count as duplicates.
        """
        self.file = path if isinstance(path, JSONFile) else JSONFile(path)
        self.dedup_threshold = dedup_threshold
        self._records: list[MemoryRecord] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def dimension(self) -> int | None:
        """Embedding length shared by all records, None while empty."""
        if not self._records:
            return None
        return len(self._records[0].embedding)

    def load(self) -> int:
        """Load records from disk, replacing the in-memory collection.

        A missing file is treated as an empty store.

        Returns:
            Number of records loaded.
        """
        data = self.file.read(default=[])
        self._records = [MemoryRecord.from_dict(item) for item in data]
        self._next_id = max((r.id for r in self._records), default=0) + 1
        return len(self._records)

    def save(self) -> None:
        """Rewrite the full collection to disk."""
        self.file.write([record.to_dict() for record in self._records])

    def find_duplicate(
        self, key: str, embedding: Sequence[float]
    ) -> MemoryRecord | None:
        """Find an existing record that a new (key, embedding) would duplicate.

        Key equality is checked first; similarity is only computed for
        records sharing the key.
        """
        for record in self._records:
            if record.key != key:
                continue
            if cosine_similarity(record.embedding, embedding) >= self.dedup_threshold:
                return record
        return None

    def insert(
        self,
        key: str,
        value: str,
        embedding: Sequence[float],
        category: str | None = None,
    ) -> InsertOutcome:
        """Store a new fact unless it duplicates an existing one.

        Args:
            key: Semantic label of the fact.
            value: The fact content.
            embedding: Precomputed embedding of the fact.
            category: Optional tag.

        Returns:
            InsertOutcome with the new record, or with ``duplicate_of`` set
            when the insert was skipped.

        Raises:
            ValueError: If the embedding is empty or its length differs from
                the embeddings already stored.
        """
        vector = tuple(float(x) for x in embedding)
        if not vector:
            raise ValueError("Embedding must not be empty")
        if self.dimension is not None and len(vector) != self.dimension:
            raise ValueError(
                f"Embedding dimension {len(vector)} does not match store "
                f"dimension {self.dimension}"
            )

        duplicate = self.find_duplicate(key, vector)
        if duplicate is not None:
            return InsertOutcome(duplicate_of=duplicate)

        record = MemoryRecord(
            id=self._next_id,
            key=key,
            value=value,
            created_at=datetime.now(timezone.utc).isoformat(),
            embedding=vector,
            category=category or None,
        )
        self._records.append(record)
        try:
            self.save()
        except OSError:
            self._records.pop()
            raise
        self._next_id += 1
        return InsertOutcome(record=record)

    def get(self, record_id: int) -> MemoryRecord | None:
        """Look up a record by id."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def get_all(self) -> list[MemoryRecord]:
        """Get all records in insertion order."""
        return list(self._records)

    def get_by_category(self, category: str) -> list[MemoryRecord]:
        """Get records whose category equals ``category``, in insertion order."""
        return [r for r in self._records if r.category == category]

    def category_summary(self) -> dict[str, int]:
        """Count records per category, ignoring uncategorized ones."""
        counts: dict[str, int] = {}
        for record in self._records:
            if record.category:
                counts[record.category] = counts.get(record.category, 0) + 1
        return counts

    def delete_by_id(self, record_id: int) -> MemoryRecord | None:
        """Delete a record by its id.

        Returns:
            The removed record, or None if no record has that id.
        """
        for index, record in enumerate(self._records):
            if record.id == record_id:
                break
        else:
            return None

        removed = self._records.pop(index)
        try:
            self.save()
        except OSError:
            self._records.insert(index, removed)
            raise
        return removed

    def clear(self) -> int:
        """Remove every record.

        Returns:
            Number of records removed.
        """
        previous = self._records
        self._records = []
        try:
            self.save()
        except OSError:
            self._records = previous
            raise
        return len(previous)
