"""
In-memory artifact cache

Keyed by the normalized document text so repeated uploads of the same
document skip the generation call. Lives for the lifetime of the process.
"""
import hashlib
import threading
from typing import Any, Dict, Optional


class ResponseCache:
    def __init__(self):
        self._entries: Dict[str, Any] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_hash(text: str) -> str:
        """Create consistent hash from normalized text"""
        return hashlib.sha256((text or "").encode("utf-8")).hexdigest()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(self.make_hash(key))

    def set(self, key: str, artifact: Any) -> None:
        with self._lock:
            self._entries[self.make_hash(key)] = artifact

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self.make_hash(key) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
