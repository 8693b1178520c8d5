"""Assistant orchestration."""

from .assistant import Assistant, AssistantReply
from .prompt import build_prompt

__all__ = ["Assistant", "AssistantReply", "build_prompt"]
