"""Memory module for persistent, searchable facts about the user."""

from .extractor import (
    CandidateFact,
    ExtractionPipeline,
    ExtractionReport,
    ExtractionResult,
    ExtractionStatus,
    FactExtractor,
)
from .manager import MemoryManager
from .models import ConversationTurn, InsertOutcome, MemoryRecord, ScoredMemory
from .persistence import JSONFile
from .retriever import Retriever
from .store import MemoryStore
from .window import ConversationWindow

__all__ = [
    "CandidateFact",
    "ConversationTurn",
    "ConversationWindow",
    "ExtractionPipeline",
    "ExtractionReport",
    "ExtractionResult",
    "ExtractionStatus",
    "FactExtractor",
    "InsertOutcome",
    "JSONFile",
    "MemoryManager",
    "MemoryRecord",
    "MemoryStore",
    "Retriever",
    "ScoredMemory",
]
