"""Tests for memory data models."""

import dataclasses

import pytest

from personalizer.memory import ConversationTurn, InsertOutcome, MemoryRecord


@pytest.fixture
def record() -> MemoryRecord:
    return MemoryRecord(
        id=1,
        key="favorite_color",
        value="blue",
        created_at="2024-01-01T00:00:00+00:00",
        embedding=(0.1, 0.2),
    )


class TestMemoryRecord:
    def test_text(self, record: MemoryRecord):
        assert record.text == "favorite_color: blue"

    def test_frozen(self, record: MemoryRecord):
        """Records are never edited in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.value = "red"  # type: ignore[misc]

    def test_category_defaults_to_none(self, record: MemoryRecord):
        assert record.category is None
        assert "category" not in record.to_dict()


class TestInsertOutcome:
    def test_stored(self, record: MemoryRecord):
        outcome = InsertOutcome(record=record)
        assert outcome.skipped is False

    def test_skipped(self, record: MemoryRecord):
        outcome = InsertOutcome(duplicate_of=record)
        assert outcome.skipped is True
        assert outcome.record is None


class TestConversationTurn:
    def test_round_trip(self):
        turn = ConversationTurn(user="hi", assistant="hello")
        assert turn.to_dict() == {"user": "hi", "assistant": "hello"}
        assert ConversationTurn.from_dict(turn.to_dict()) == turn
