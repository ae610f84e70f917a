"""
In-memory key-value backend.

Backend used by the test suite and throwaway demos.
``available`` can be flipped to simulate an outage.
"""

from __future__ import annotations

import hashlib
from typing import Any, Dict

from ..errors import BackendUnavailable


class MemoryBackend:
    def __init__(self, initial: Dict[str, bytes] | None = None, available: bool = True):
        self._data: Dict[str, bytes] = dict(initial or {})
        self.available = available

    def is_available(self) -> bool:
        return self.available

    def get_data(self, key: str) -> bytes:
        if not self.available:
            raise BackendUnavailable("memory backend is offline")
        return self._data.get(key, b"")

    def set_data(self, key: str, value: bytes) -> Dict[str, Any]:
        if not self.available:
            raise BackendUnavailable("memory backend is offline")
        self._data[key] = bytes(value)
        return {"ok": True, "tx": f"mem-{hashlib.sha256(key.encode() + value).hexdigest()[:16]}"}

    def keys(self):
        return list(self._data.keys())
