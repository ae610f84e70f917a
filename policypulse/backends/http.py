"""
HTTP key-value gateway client for PolicyPulse.

Talks to a gateway fronting the key-value store of record:

- GET  {base}/available   -> {"available": true}
- GET  {base}/data/{key}  -> raw bytes (404 means absent)
- PUT  {base}/data/{key}  -> {"ok": true, "tx": "..."}

Connection errors, timeouts and 5xx map to BackendUnavailable; 401/403 map
to Rejected (the gateway or the signer declined the write).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..errors import BackendUnavailable, Rejected

log = logging.getLogger(__name__)


def _normalize_base_url(api_url: str) -> str:
    # Accept raw host:port or full http://host:port
    if api_url.startswith("127.") or api_url.startswith("localhost"):
        api_url = f"http://{api_url}"
    return api_url.rstrip("/")


class HTTPBackend:
    def __init__(
        self,
        api_url: str = "http://127.0.0.1:8545",
        timeout_sec: float = 10.0,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base = _normalize_base_url(api_url)
        self.timeout = float(timeout_sec)
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    # --- HTTP helpers ---
    def _url(self, key: str) -> str:
        return f"{self.base}/data/{quote(key, safe='')}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendUnavailable(f"{method} {url} failed: {e}") from e
        if r.status_code in (401, 403):
            raise Rejected(f"Transaction rejected by user ({r.status_code})")
        if r.status_code >= 500:
            raise BackendUnavailable(f"{method} {url} -> HTTP {r.status_code}")
        return r

    # --- Operations ---
    def is_available(self) -> bool:
        try:
            r = self._request("GET", f"{self.base}/available")
            r.raise_for_status()
            return bool(r.json().get("available", False))
        except (BackendUnavailable, Rejected, requests.HTTPError, ValueError) as e:
            log.warning("Backend %s availability check failed: %s", self.base, e)
            return False

    def get_data(self, key: str) -> bytes:
        r = self._request("GET", self._url(key))
        if r.status_code == 404:
            return b""
        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise BackendUnavailable(str(e)) from e
        return r.content

    def set_data(self, key: str, value: bytes) -> Dict[str, Any]:
        r = self._request(
            "PUT",
            self._url(key),
            data=bytes(value),
            headers={"Content-Type": "application/octet-stream"},
        )
        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            raise BackendUnavailable(str(e)) from e
        try:
            ack = r.json()
        except ValueError:
            ack = {}
        if not isinstance(ack, dict):
            ack = {}
        ack.setdefault("ok", True)
        return ack

    def close(self) -> None:
        self.session.close()
