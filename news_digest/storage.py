"""Durable stores for the cached digest snapshot."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol


class SnapshotStore(Protocol):
    """Anything that can hold one JSON-compatible snapshot record."""

    def read(self) -> Optional[Dict[str, Any]]:
        ...

    def write(self, record: Dict[str, Any]) -> None:
        ...


class JsonFileStore:
    """Keep the snapshot as a single pretty-printed JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> Optional[Dict[str, Any]]:
        """Return the stored record, ``None`` when there is no file.

        Undecodable content raises ``ValueError``.
        """

        if not self.path.exists():
            return None
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("snapshot must be a JSON object")
        return raw

    def write(self, record: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(record, ensure_ascii=False, indent=2), encoding="utf-8")


class MemoryStore:
    """In-process store; nothing survives a restart."""

    def __init__(self, record: Optional[Dict[str, Any]] = None) -> None:
        self._record = copy.deepcopy(record)

    def read(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._record)

    def write(self, record: Dict[str, Any]) -> None:
        self._record = copy.deepcopy(record)


__all__ = ["JsonFileStore", "MemoryStore", "SnapshotStore"]
