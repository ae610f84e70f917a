"""
Transaction status shown to the user while a write is in flight.

pending -> success | error. Terminal states auto-clear after a fixed delay
(2 s on success, 3 s on error by default); expiry is evaluated lazily in
current(), so no timer thread is involved.
"""

from __future__ import annotations

import time
from typing import Callable, Literal, Optional

from pydantic import BaseModel

StatusKind = Literal["pending", "success", "error"]

DEFAULT_SUCCESS_CLEAR_SEC = 2.0
DEFAULT_ERROR_CLEAR_SEC = 3.0


class TransactionStatus(BaseModel):
    visible: bool = False
    status: StatusKind = "pending"
    message: str = ""
    expires_at: Optional[float] = None


HIDDEN = TransactionStatus()


class StatusBoard:
    def __init__(
        self,
        success_clear_sec: float = DEFAULT_SUCCESS_CLEAR_SEC,
        error_clear_sec: float = DEFAULT_ERROR_CLEAR_SEC,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.success_clear_sec = float(success_clear_sec)
        self.error_clear_sec = float(error_clear_sec)
        self.clock = clock
        self._status = HIDDEN

    def pending(self, message: str) -> TransactionStatus:
        self._status = TransactionStatus(visible=True, status="pending", message=message)
        return self._status

    def success(self, message: str) -> TransactionStatus:
        self._status = TransactionStatus(
            visible=True,
            status="success",
            message=message,
            expires_at=self.clock() + self.success_clear_sec,
        )
        return self._status

    def error(self, message: str) -> TransactionStatus:
        self._status = TransactionStatus(
            visible=True,
            status="error",
            message=message,
            expires_at=self.clock() + self.error_clear_sec,
        )
        return self._status

    def clear(self) -> None:
        self._status = HIDDEN

    def current(self) -> TransactionStatus:
        s = self._status
        if s.expires_at is not None and self.clock() >= s.expires_at:
            self._status = HIDDEN
        return self._status
