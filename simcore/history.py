import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import config


@dataclass
class HistoryEntry:
    kind: str                  # "M/M/1", "M/G/3", "MMS" ...
    params: Dict[str, Any]
    result: Any
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)


class ResultHistory:
    """In-memory list of past results, newest first, capped at `limit` entries."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = config.HISTORY_LIMIT if limit is None else limit
        self._entries: List[HistoryEntry] = []

    def add(self, kind: str, params: Dict[str, Any], result: Any) -> HistoryEntry:
        entry = HistoryEntry(kind=kind, params=dict(params), result=result)
        self._entries = ([entry] + self._entries)[: self.limit]
        return entry

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def delete(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) < before

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)
