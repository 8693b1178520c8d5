"""Prompt builder for the assistant."""

from typing import Sequence

from ..memory.models import ConversationTurn, MemoryRecord

SYSTEM_PROMPT = "You are a helpful assistant."

MEMORY_HEADER = "User's persistent memory:"
HISTORY_HEADER = "Recent conversation:"


def format_memories(records: Sequence[MemoryRecord]) -> str:
    """Render memories as ``- key: value`` lines."""
    return "\n".join(f"- {record.key}: {record.value}" for record in records)


def format_history(turns: Sequence[ConversationTurn]) -> str:
    """Render turns as alternating User/Assistant lines."""
    return "\n".join(
        f"User: {turn.user}\nAssistant: {turn.assistant}" for turn in turns
    )


def build_prompt(
    memories: Sequence[MemoryRecord],
    turns: Sequence[ConversationTurn],
    query: str,
) -> str:
    """Build the full prompt for one query.

    Args:
        memories: Relevant memories, best match first.
        turns: The conversation window in chronological order.
        query: The new user message.

    Returns:
        Complete prompt string.
    """
    return (
        f"{SYSTEM_PROMPT}\n\n"
        f"{MEMORY_HEADER}\n{format_memories(memories)}\n\n"
        f"{HISTORY_HEADER}\n{format_history(turns)}\n\n"
        f"User: {query}"
    )
