from __future__ import annotations

import logging
from typing import List

from ..backends.base import KeyValueBackend
from ..errors import DecodeError
from .codec import decode_index, encode_index

log = logging.getLogger(__name__)

INDEX_KEY = "proposal_keys"


class IndexManager:
    """
    Owns the well-known ``proposal_keys`` key, the authoritative list of
    which records exist. Nothing else writes that key.
    """

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def read_index(self) -> List[str]:
        """Return the ordered record keys; an empty or unreadable index is []."""
        data = self.backend.get_data(INDEX_KEY)
        if not data:
            return []
        try:
            return decode_index(data)
        except DecodeError as e:
            log.error("Error parsing proposal keys: %s", e)
            return []

    def append_key(self, key: str) -> List[str]:
        """
        Append ``key`` unless already present and write the index back.

        Re-reads then writes the whole value: a concurrent appender that
        lands between the two calls is overwritten (last writer wins).
        """
        keys = self.read_index()
        if key in keys:
            return keys
        keys.append(key)
        self.backend.set_data(INDEX_KEY, encode_index(keys))
        log.info("Index now holds %d key(s)", len(keys))
        return keys
