import base64
import json

import pytest
from cryptography.exceptions import InvalidTag

from policypulse.encoders import AESGCMSealer, build_encoder, generate_key, placeholder_encode


def test_placeholder_format():
    token = placeholder_encode({"title": "", "category": "Economy", "content": "tax"})
    assert token.startswith("FHE-")
    assert json.loads(base64.b64decode(token[4:]))["content"] == "tax"


def test_sealer_hides_and_restores_payload():
    sealer = AESGCMSealer(generate_key())
    token = sealer({"content": "secret plan"})
    assert token.startswith("SEAL-")
    assert "secret plan" not in token
    assert sealer.open(token) == {"content": "secret plan"}


def test_sealer_is_randomized():
    sealer = AESGCMSealer(generate_key())
    assert sealer({"a": 1}) != sealer({"a": 1})


def test_sealer_wrong_key_fails():
    token = AESGCMSealer(generate_key())({"a": 1})
    with pytest.raises(InvalidTag):
        AESGCMSealer(generate_key()).open(token)


def test_generate_key_length_check():
    with pytest.raises(ValueError):
        generate_key(20)


def test_build_encoder():
    assert build_encoder({}) is placeholder_encode
    key = base64.urlsafe_b64encode(generate_key()).decode()
    enc = build_encoder({"encoder": {"kind": "aesgcm", "seal_key": key}})
    assert isinstance(enc, AESGCMSealer)
    with pytest.raises(ValueError):
        build_encoder({"encoder": {"kind": "rot13"}})
