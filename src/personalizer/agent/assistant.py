"""Memory-augmented assistant turn."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..logging import JSONLLogger, get_logger
from ..memory import (
    ConversationTurn,
    ConversationWindow,
    ExtractionPipeline,
    ExtractionReport,
    Retriever,
    ScoredMemory,
)
from .prompt import build_prompt

if TYPE_CHECKING:
    from ..llm import Completer

logger = logging.getLogger(__name__)


@dataclass
class AssistantReply:
    """Result from answering one query."""

    reply: str
    memories: list[ScoredMemory] = field(default_factory=list)
    extraction: ExtractionReport | None = None


class Assistant:
    """Answers queries with relevant memories and recent history.

    retrieve → build prompt → complete → update window → extract facts.
    """

    def __init__(
        self,
        retriever: Retriever,
        window: ConversationWindow,
        completer: Completer,
        pipeline: ExtractionPipeline | None = None,
        event_log: JSONLLogger | None = None,
    ) -> None:
        self.retriever = retriever
        self.window = window
        self.completer = completer
        self.pipeline = pipeline
        self.event_log = event_log or get_logger()

    async def respond(self, query: str) -> AssistantReply:
        """Answer ``query`` and learn from the exchange.

        Retrieval and completion errors propagate. An empty reply leaves the
        window untouched and skips extraction. Extraction is best-effort:
        its errors are logged and reported as ``extraction=None``.
        """
        start = time.monotonic()
        memories = await self.retriever.retrieve(query)
        prompt = build_prompt(
            [m.record for m in memories], self.window.get_turns(), query
        )
        reply = (await self.completer.complete(prompt) or "").strip()

        self.event_log.log_reply(
            duration_ms=(time.monotonic() - start) * 1000,
            memories_used=len(memories),
            has_reply=bool(reply),
        )

        result = AssistantReply(reply=reply, memories=memories)
        if not reply:
            return result

        self.window.append(ConversationTurn(user=query, assistant=reply))

        if self.pipeline is not None:
            result.extraction = await self._extract(query, reply)

        return result

    async def _extract(self, query: str, reply: str) -> ExtractionReport | None:
        assert self.pipeline is not None

        try:
            report = await self.pipeline.run(query, reply)
        except Exception as e:
            logger.warning(f"Memory extraction failed: {e}")
            self.event_log.log("error", error=str(e), context="extraction")
            return None

        for outcome in report.stored:
            assert outcome.record is not None
            self.event_log.log_memory_insert(
                outcome.record.id, outcome.record.key, outcome.record.category
            )
        for outcome in report.skipped:
            assert outcome.duplicate_of is not None
            self.event_log.log_memory_skip(
                outcome.duplicate_of.key, outcome.duplicate_of.id
            )
        self.event_log.log_extraction(
            report.result.status.value,
            stored=len(report.stored),
            skipped=len(report.skipped),
            declined=len(report.declined),
        )
        return report
