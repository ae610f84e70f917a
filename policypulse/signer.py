"""
Signer: the write capability attached to a PolicyPulse client.

A Signer carries the wallet address used as proposal author and an optional
``approve(key, value) -> bool`` callback standing in for the wallet's
confirmation prompt. Wallet connection and account management live outside
this package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .backends.base import KeyValueBackend
from .errors import Rejected, SignerRequired

log = logging.getLogger(__name__)

Approver = Callable[[str, bytes], bool]


@dataclass
class Signer:
    address: str
    approve: Optional[Approver] = None

    def authorize(self, key: str, value: bytes) -> None:
        if self.approve is not None and not self.approve(key, value):
            log.info("Write to %s declined by %s", key, self.address)
            raise Rejected()


class SignedBackend:
    """Backend view whose writes go through a signer's authorization."""

    def __init__(self, backend: KeyValueBackend, signer: Optional[Signer]):
        if signer is None or not signer.address:
            raise SignerRequired()
        self.backend = backend
        self.signer = signer

    def is_available(self) -> bool:
        return self.backend.is_available()

    def get_data(self, key: str) -> bytes:
        return self.backend.get_data(key)

    def set_data(self, key: str, value: bytes) -> Any:
        self.signer.authorize(key, value)
        return self.backend.set_data(key, value)
