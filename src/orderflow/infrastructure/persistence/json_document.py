"""A JSON file holding one document, with a transactional unit of work.

Reads outside a transaction go straight to the file.  Inside
``transaction()`` every read and write works on one in-memory copy which
is written back atomically (temp file + rename) when the outermost block
exits cleanly, and discarded when it raises.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path


class JsonDocument:

    def __init__(self, file_path: Path, empty: Callable[[], dict]) -> None:
        self._file_path = file_path
        self._empty = empty
        self._lock = threading.RLock()
        self._working: dict | None = None
        self._ensure_file()

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        with self._lock:
            if self._working is not None:
                # Nested: join the outer unit of work
                yield self._working
                return
            self._working = self._read()
            try:
                yield self._working
                self._write(self._working)
            finally:
                self._working = None

    def read(self) -> dict:
        """Return a snapshot of the document (the pending copy inside a transaction)."""
        with self._lock:
            if self._working is not None:
                return self._working
            return self._read()

    # --- File helpers ---------------------------------------------------------

    def _read(self) -> dict:
        data = json.loads(self._file_path.read_text(encoding="utf-8"))
        document = self._empty()
        document.update(data)
        return document

    def _write(self, data: dict) -> None:
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._write(self._empty())
