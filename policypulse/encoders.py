# policypulse/encoders.py
from __future__ import annotations

"""
Content encoders for PolicyPulse.

An encoder is any callable ``encode(payload: dict) -> str``. The repository
treats it as a black box: nothing downstream decodes ``content`` and no
algebraic (homomorphic) property is assumed.

- placeholder_encode : "FHE-" + base64(JSON), the format existing records use
- AESGCMSealer       : AES-GCM sealed payload ("SEAL-" + url-safe base64),
                       for deployments that want real confidentiality
"""

import base64
import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

log = logging.getLogger(__name__)

Encoder = Callable[[Dict[str, Any]], str]

PLACEHOLDER_PREFIX = "FHE-"
SEAL_PREFIX = "SEAL-"


def _payload_bytes(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def placeholder_encode(payload: Dict[str, Any]) -> str:
    return PLACEHOLDER_PREFIX + base64.b64encode(_payload_bytes(payload)).decode("ascii")


# ---------------------------------------------------------------------------
# AES-GCM sealing
# ---------------------------------------------------------------------------


def generate_key(length: int = 32) -> bytes:
    if length not in (16, 24, 32):
        raise ValueError("AES-GCM key length must be 16, 24, or 32 bytes")
    return os.urandom(length)


class AESGCMSealer:
    """
    Seal a draft with AES-GCM.

    Token layout: SEAL- || urlsafe_b64(nonce(12) || ciphertext+tag).
    The associated data, when given, is bound to the token but not stored.
    """

    def __init__(self, key: bytes, aad: Optional[bytes] = None):
        if not isinstance(key, (bytes, bytearray)):
            raise TypeError("key must be bytes")
        self._aes = AESGCM(bytes(key))
        self.aad = aad

    def __call__(self, payload: Dict[str, Any]) -> str:
        nonce = os.urandom(12)
        ct = self._aes.encrypt(nonce, _payload_bytes(payload), self.aad)
        return SEAL_PREFIX + base64.urlsafe_b64encode(nonce + ct).decode("ascii")

    def open(self, token: str) -> Dict[str, Any]:
        """
        Reverse __call__. Raises cryptography.exceptions.InvalidTag on a
        wrong key or tampered token.
        """
        if not token.startswith(SEAL_PREFIX):
            raise ValueError("not a sealed token")
        blob = base64.urlsafe_b64decode(token[len(SEAL_PREFIX):].encode("ascii"))
        if len(blob) < 12:
            raise ValueError("token is too short to contain nonce + ciphertext")
        pt = self._aes.decrypt(blob[:12], blob[12:], self.aad)
        return json.loads(pt.decode("utf-8"))


def build_encoder(cfg: Dict[str, Any]) -> Encoder:
    section = cfg.get("encoder", {}) or {}
    kind = str(section.get("kind", "placeholder")).lower()

    if kind == "placeholder":
        return placeholder_encode
    if kind == "aesgcm":
        raw = section.get("seal_key")
        if raw:
            key = base64.urlsafe_b64decode(str(raw).encode("ascii"))
        else:
            log.warning("No seal key configured; using an ephemeral AES-GCM key")
            key = generate_key()
        return AESGCMSealer(key)
    raise ValueError(f"unknown encoder kind: {kind!r}")
