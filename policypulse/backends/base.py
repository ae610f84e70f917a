from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueBackend(Protocol):
    """
    The key-value primitive PolicyPulse is layered on.

    - is_available() -> bool
    - get_data(key) -> bytes      (b"" means absent)
    - set_data(key, value) -> ack (may raise Rejected / BackendUnavailable)

    Keys are independent: there are no multi-key transactions and no
    compare-and-swap.
    """

    def is_available(self) -> bool: ...

    def get_data(self, key: str) -> bytes: ...

    def set_data(self, key: str, value: bytes) -> Any: ...
