"""JSON file persistence for the memory and history collections."""

import json
import os
from pathlib import Path
from typing import Any


class JSONFile:
    """A JSON document on disk that is always rewritten as a whole.

    Writes go to a temporary sibling file which then replaces the target,
    so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def read(self, default: Any = None) -> Any:
        """Load the document, or return ``default`` if the file is missing.

        Raises:
            json.JSONDecodeError: If the file exists but is not valid JSON.
        """
        if not self.path.exists():
            return default
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def write(self, data: Any) -> None:
        """Atomically replace the document with ``data``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        finally:
            if tmp.exists():
                tmp.unlink()
