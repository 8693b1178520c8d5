"""Runtime configuration for the assistant.

Values come from environment variables (a ``.env`` file is loaded by the
entry point) and fall back to the defaults below.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from .llm import DEFAULT_CHAT_MODEL, DEFAULT_EMBEDDING_MODEL
from .memory.retriever import DEFAULT_TOP_N
from .memory.store import DEFAULT_DEDUP_THRESHOLD
from .memory.vectors import KEY_WEIGHT, VALUE_WEIGHT
from .memory.window import DEFAULT_HISTORY_LIMIT

DEFAULT_DATA_DIR = Path.home() / ".personalizer"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() == "true"


@dataclass
class AssistantConfig:
    """Configuration for the memory-augmented assistant.

    Attributes:
        data_dir: Directory for memory, chat history and logs.
        chat_model: Groq model used for replies and extraction.
        embedding_model: OpenAI model used for embeddings.
        history_limit: Number of conversation turns kept in the window.
        top_n: Number of memories injected into each prompt.
        dedup_threshold: Similarity at which a same-key fact is a duplicate.
        key_weight: Weight of the key embedding in a fact's embedding.
        value_weight: Weight of the value embedding in a fact's embedding.
        ask_memory_confirm: Ask before storing each extracted fact.
    """

    data_dir: Path = DEFAULT_DATA_DIR
    chat_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    history_limit: int = DEFAULT_HISTORY_LIMIT
    top_n: int = DEFAULT_TOP_N
    dedup_threshold: float = DEFAULT_DEDUP_THRESHOLD
    key_weight: float = KEY_WEIGHT
    value_weight: float = VALUE_WEIGHT
    ask_memory_confirm: bool = False

    def __post_init__(self) -> None:
        """Validate config."""
        self.data_dir = Path(self.data_dir).expanduser()

        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")

        if self.top_n < 0:
            raise ValueError("top_n must not be negative")

        if not -1.0 <= self.dedup_threshold <= 1.0:
            raise ValueError("dedup_threshold must be between -1 and 1")

    @property
    def memory_path(self) -> Path:
        return self.data_dir / "memory.json"

    @property
    def history_path(self) -> Path:
        return self.data_dir / "chat_history.json"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    @classmethod
    def from_env(cls) -> "AssistantConfig":
        """Load configuration from environment variables."""
        return cls(
            data_dir=Path(os.getenv("PERSONALIZER_DATA_DIR", str(DEFAULT_DATA_DIR))),
            chat_model=os.getenv("GROQ_MODEL", DEFAULT_CHAT_MODEL),
            embedding_model=os.getenv("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
            history_limit=int(os.getenv("CHAT_HISTORY_LIMIT", str(DEFAULT_HISTORY_LIMIT))),
            top_n=int(os.getenv("MEMORY_TOP_N", str(DEFAULT_TOP_N))),
            dedup_threshold=float(
                os.getenv("MEMORY_DEDUP_THRESHOLD", str(DEFAULT_DEDUP_THRESHOLD))
            ),
            ask_memory_confirm=_env_bool("ASK_MEMORY_CONFIRM"),
        )
