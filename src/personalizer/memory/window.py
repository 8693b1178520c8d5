"""Bounded window of recent conversation turns."""

from pathlib import Path

from .models import ConversationTurn
from .persistence import JSONFile

DEFAULT_HISTORY_LIMIT = 5


class ConversationWindow:
    """Keeps the last ``limit`` turns, oldest evicted first.

    The window is replayed verbatim into prompts, so order is chronological.
    Only the last ``limit`` turns are ever written to disk.
    """

    def __init__(
        self, path: Path | str | JSONFile, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.file = path if isinstance(path, JSONFile) else JSONFile(path)
        self.limit = limit
        self._turns: list[ConversationTurn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def load(self) -> int:
        """Load turns from disk. Returns the number of turns kept."""
        data = self.file.read(default=[])
        turns = [ConversationTurn.from_dict(item) for item in data]
        self._turns = turns[-self.limit:]
        return len(self._turns)

    def save(self) -> None:
        self.file.write([turn.to_dict() for turn in self._turns[-self.limit:]])

    def append(self, turn: ConversationTurn) -> None:
        """Add a turn at the end, evicting the oldest beyond the limit.

        If the write fails the window is left as it was.
        """
        previous = self._turns
        self._turns = [*previous, turn][-self.limit:]
        try:
            self.save()
        except OSError:
            self._turns = previous
            raise

    def get_turns(self) -> list[ConversationTurn]:
        """Get the turns in chronological order."""
        return list(self._turns)

    def clear(self) -> None:
        previous = self._turns
        self._turns = []
        try:
            self.save()
        except OSError:
            self._turns = previous
            raise
