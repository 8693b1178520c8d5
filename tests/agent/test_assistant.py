"""Tests for the Assistant orchestrator."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from personalizer.agent import Assistant
from personalizer.logging import JSONLLogger
from personalizer.memory import (
    ConversationTurn,
    ConversationWindow,
    ExtractionPipeline,
    ExtractionStatus,
    FactExtractor,
    MemoryManager,
    MemoryStore,
    Retriever,
)


@pytest.fixture
def store(tmp_path: Path) -> MemoryStore:
    return MemoryStore(tmp_path / "memory.json")


@pytest.fixture
def window(tmp_path: Path) -> ConversationWindow:
    return ConversationWindow(tmp_path / "chat_history.json", limit=5)


def make_assistant(store, window, embedder, completer, event_log) -> Assistant:
    manager = MemoryManager(store, embedder)
    pipeline = ExtractionPipeline(FactExtractor(completer), manager)
    return Assistant(
        Retriever(store, embedder, top_n=3),
        window,
        completer,
        pipeline=pipeline,
        event_log=event_log,
    )


class TestAssistantRespond:
    @pytest.mark.asyncio
    async def test_reply_updates_window_and_memory(
        self, store, window, embedder, make_completer, event_log: JSONLLogger
    ):
        completer = make_completer([
            "Blue is a lovely color!",
            '[{"key": "favorite_color", "value": "blue", "category": "preferences"}]',
        ])
        assistant = make_assistant(store, window, embedder, completer, event_log)

        result = await assistant.respond("My favorite color is blue")

        assert result.reply == "Blue is a lovely color!"
        assert window.get_turns() == [
            ConversationTurn("My favorite color is blue", "Blue is a lovely color!")
        ]
        assert result.extraction is not None
        assert result.extraction.result.status is ExtractionStatus.EXTRACTED
        assert [r.text for r in store.get_all()] == ["favorite_color: blue"]

    @pytest.mark.asyncio
    async def test_prompt_includes_memories_and_history(
        self, store, window, embedder, make_completer, event_log
    ):
        manager = MemoryManager(store, embedder)
        await manager.remember("pet", "a dog named Rex")
        window.append(ConversationTurn("hello", "hi there"))
        completer = make_completer(["Rex sounds great", "[]"])
        assistant = make_assistant(store, window, embedder, completer, event_log)

        result = await assistant.respond("tell me about my pet")

        prompt = completer.prompts[0]
        assert "- pet: a dog named Rex" in prompt
        assert "User: hello\nAssistant: hi there" in prompt
        assert prompt.endswith("User: tell me about my pet")
        assert [m.record.key for m in result.memories] == ["pet"]

    @pytest.mark.asyncio
    async def test_empty_reply_skips_window_and_extraction(
        self, store, window, embedder, make_completer, event_log
    ):
        completer = make_completer([""])
        assistant = make_assistant(store, window, embedder, completer, event_log)

        result = await assistant.respond("anyone there?")

        assert result.reply == ""
        assert result.extraction is None
        assert window.get_turns() == []
        assert len(completer.prompts) == 1

    @pytest.mark.asyncio
    async def test_completer_error_propagates(self, store, window, embedder, event_log):
        completer = AsyncMock()
        completer.complete = AsyncMock(side_effect=ConnectionError("down"))
        assistant = make_assistant(store, window, embedder, completer, event_log)

        with pytest.raises(ConnectionError):
            await assistant.respond("hi")
        assert window.get_turns() == []

    @pytest.mark.asyncio
    async def test_extraction_error_keeps_reply(
        self, store, window, event_log, make_completer
    ):
        """An embedder failure while storing facts does not lose the reply."""
        embedder = AsyncMock()
        embedder.embed = AsyncMock(side_effect=RuntimeError("embedding service down"))
        completer = make_completer(["Nice!", '[{"key": "name", "value": "Ana"}]'])
        assistant = make_assistant(store, window, embedder, completer, event_log)

        result = await assistant.respond("I'm Ana")

        assert result.reply == "Nice!"
        assert result.extraction is None
        assert len(window) == 1
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_without_pipeline(self, store, window, embedder, make_completer, event_log):
        completer = make_completer(["ok"])
        assistant = Assistant(Retriever(store, embedder), window, completer, event_log=event_log)

        result = await assistant.respond("hi")

        assert result.reply == "ok"
        assert result.extraction is None
        assert len(completer.prompts) == 1

    @pytest.mark.asyncio
    async def test_events_logged(self, store, window, embedder, make_completer, event_log):
        completer = make_completer(["Hi Ana", '[{"key": "name", "value": "Ana"}]'])
        assistant = make_assistant(store, window, embedder, completer, event_log)

        await assistant.respond("I'm Ana")

        events = [json.loads(line)["event"] for line in event_log.log_path.read_text().splitlines()]
        assert events == ["assistant_reply", "memory_insert", "extraction"]
