"""Fact extraction from conversation turns using the LLM."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from .models import InsertOutcome

if TYPE_CHECKING:
    from ..llm import Completer
    from .manager import MemoryManager

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """From the following user message and the assistant's response, extract all useful memory facts about the user.
Respond in JSON array format, each item must include a 'key' and 'value', and optionally a 'category'.
Respond only with the JSON array. If nothing is relevant, respond with "[]".

User: {query}
Assistant: {reply}"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

ConfirmCallback = Callable[[str, str], bool]


class ExtractionStatus(Enum):
    """How an extraction attempt ended."""

    EXTRACTED = "extracted"
    EMPTY = "empty"
    PARSE_FAILURE = "parse_failure"


@dataclass(frozen=True)
class CandidateFact:
    """A fact proposed by the LLM, not yet stored."""

    key: str
    value: str
    category: str | None = None


@dataclass
class ExtractionResult:
    """Tagged outcome of parsing the LLM's extraction response."""

    status: ExtractionStatus
    facts: list[CandidateFact] = field(default_factory=list)
    raw: str = ""


@dataclass
class ExtractionReport:
    """What the pipeline did with one exchange."""

    result: ExtractionResult
    outcomes: list[InsertOutcome] = field(default_factory=list)
    declined: list[CandidateFact] = field(default_factory=list)

    @property
    def stored(self) -> list[InsertOutcome]:
        return [o for o in self.outcomes if not o.skipped]

    @property
    def skipped(self) -> list[InsertOutcome]:
        return [o for o in self.outcomes if o.skipped]


def strip_code_fence(content: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    return _FENCE_RE.sub("", content.strip()).strip()


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def parse_extraction(content: str) -> ExtractionResult:
    """Parse an extraction response into a tagged result.

    Never raises: malformed output becomes PARSE_FAILURE and items that
    are not objects or lack a key or value are dropped.
    """
    raw = (content or "").strip()
    if not raw or raw == "[]":
        return ExtractionResult(ExtractionStatus.EMPTY, raw=raw)

    cleaned = strip_code_fence(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse memory JSON array: {e}")
        return ExtractionResult(ExtractionStatus.PARSE_FAILURE, raw=raw)

    if not isinstance(data, list):
        logger.warning("Extraction response is not a JSON array")
        return ExtractionResult(ExtractionStatus.PARSE_FAILURE, raw=raw)

    facts = []
    for item in data:
        if not isinstance(item, dict):
            continue
        key = _as_text(item.get("key") or "")
        value = _as_text(item.get("value") or "")
        if not key or not value:
            continue
        category = _as_text(item.get("category") or "") or None
        facts.append(CandidateFact(key=key, value=value, category=category))

    if not facts:
        return ExtractionResult(ExtractionStatus.EMPTY, raw=raw)
    return ExtractionResult(ExtractionStatus.EXTRACTED, facts=facts, raw=raw)


class FactExtractor:
    """Asks the LLM which facts about the user an exchange implies."""

    def __init__(self, completer: Completer) -> None:
        self.completer = completer

    def build_prompt(self, query: str, reply: str) -> str:
        return EXTRACTION_PROMPT.format(query=query, reply=reply)

    async def extract(self, query: str, reply: str) -> ExtractionResult:
        """Extract candidate facts from one (query, reply) exchange.

        Completer errors propagate; parse problems do not.
        """
        content = await self.completer.complete(self.build_prompt(query, reply))
        return parse_extraction(content)


class ExtractionPipeline:
    """Feeds extracted facts into memory, optionally after confirmation."""

    def __init__(
        self,
        extractor: FactExtractor,
        manager: MemoryManager,
        confirm: ConfirmCallback | None = None,
        ask_confirmation: bool = False,
    ) -> None:
        """Initialize the pipeline.

        Args:
            extractor: Produces candidate facts.
            manager: Embeds and stores accepted facts.
            confirm: Called with (key, value); returns True to store.
            ask_confirmation: Whether to consult ``confirm`` at all.
        """
        if ask_confirmation and confirm is None:
            raise ValueError("confirm callback is required when ask_confirmation is set")
        self.extractor = extractor
        self.manager = manager
        self.confirm = confirm
        self.ask_confirmation = ask_confirmation

    async def run(self, query: str, reply: str) -> ExtractionReport:
        """Extract facts from an exchange and store the accepted ones.

        Existing records are never edited or deleted here; duplicates are
        reported as skipped outcomes.
        """
        result = await self.extractor.extract(query, reply)
        report = ExtractionReport(result=result)

        for fact in result.facts:
            if self.ask_confirmation and not self.confirm(fact.key, fact.value):
                report.declined.append(fact)
                continue
            outcome = await self.manager.remember(fact.key, fact.value, fact.category)
            report.outcomes.append(outcome)

        return report
