"""Shared fixtures: deterministic collaborators and an isolated event log."""

import hashlib
from pathlib import Path
from typing import Sequence

import numpy as np
import pytest

from personalizer.logging import JSONLLogger, configure_logger


class FakeEmbedder:
    """Deterministic embedder.

    Texts listed in ``vectors`` get that exact vector; any other text gets a
    pseudo-random vector seeded from its hash, so equal texts always embed
    equally and different texts are nearly orthogonal.
    """

    def __init__(self, vectors: dict[str, Sequence[float]] | None = None, dim: int = 32) -> None:
        self.vectors = dict(vectors or {})
        self.dim = dim
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.vectors:
            return [float(x) for x in self.vectors[text]]
        seed = int(hashlib.md5(text.encode()).hexdigest(), 16) % (2**32)
        return np.random.default_rng(seed).standard_normal(self.dim).tolist()


class FakeCompleter:
    """Completer that returns queued responses, then empty strings."""

    def __init__(self, responses: Sequence[str] = ()) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.responses:
            return self.responses.pop(0)
        return ""


@pytest.fixture(autouse=True)
def event_log(tmp_path: Path) -> JSONLLogger:
    """Route the global JSONL logger into the test's temp directory."""
    return configure_logger(tmp_path / "logs")


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def make_completer():
    """Factory for FakeCompleter instances."""
    return FakeCompleter
