"""JSONL event logging for memory and conversation activity."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    session_id: str | None = None
    memory_id: int | None = None
    key: str | None = None
    category: str | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured logs in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "logs.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".personalizer" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._session_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_session_id(self, session_id: str | None) -> None:
        """Set the session id attached to all subsequent logs."""
        self._session_id = session_id

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        session_id: str | None = None,
        memory_id: int | None = None,
        key: str | None = None,
        category: str | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            session_id=session_id or self._session_id,
            memory_id=memory_id,
            key=key,
            category=category,
            duration_ms=duration_ms,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_memory_insert(
        self,
        memory_id: int,
        key: str,
        category: str | None = None,
        *,
        source: str = "auto",
    ) -> None:
        """Log a stored memory."""
        self.log(
            "memory_insert",
            memory_id=memory_id,
            key=key,
            category=category,
            source=source,
        )

    def log_memory_skip(self, key: str, duplicate_of: int) -> None:
        """Log a memory skipped as a duplicate."""
        self.log("memory_skip", key=key, duplicate_of=duplicate_of)

    def log_memory_delete(self, memory_id: int, key: str) -> None:
        """Log a deleted memory."""
        self.log("memory_delete", memory_id=memory_id, key=key)

    def log_reply(
        self,
        *,
        duration_ms: float,
        memories_used: int,
        has_reply: bool,
    ) -> None:
        """Log a completed assistant turn."""
        self.log(
            "assistant_reply",
            duration_ms=duration_ms,
            memories_used=memories_used,
            has_reply=has_reply,
        )

    def log_extraction(self, status: str, stored: int, skipped: int, declined: int) -> None:
        """Log the outcome of fact extraction for one turn."""
        self.log(
            "extraction",
            status=status,
            stored=stored,
            skipped=skipped,
            declined=declined,
        )


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
