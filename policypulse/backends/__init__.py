"""
Key-value backends for PolicyPulse.

- memory : MemoryBackend (tests / throwaway demo)
- json   : JSONFileBackend (default; single JSON document on disk)
- http   : HTTPBackend (requests-based gateway client)
"""

from __future__ import annotations

from typing import Any, Dict

from .base import KeyValueBackend
from .http import HTTPBackend
from .json_file import JSONFileBackend
from .memory import MemoryBackend

__all__ = [
    "KeyValueBackend",
    "HTTPBackend",
    "JSONFileBackend",
    "MemoryBackend",
    "build_backend",
]


def build_backend(cfg: Dict[str, Any]) -> KeyValueBackend:
    """Pick the backend driver named in cfg["backend"]["driver"]."""
    section = cfg.get("backend", {}) or {}
    driver = str(section.get("driver", "json")).lower()

    if driver == "memory":
        return MemoryBackend()
    if driver == "json":
        return JSONFileBackend(section.get("path") or "policypulse_store.json")
    if driver == "http":
        return HTTPBackend(
            api_url=str(section.get("api_url") or "http://127.0.0.1:8545"),
            timeout_sec=float(section.get("timeout_sec", 10.0)),
        )
    raise ValueError(f"unknown backend driver: {driver!r}")
