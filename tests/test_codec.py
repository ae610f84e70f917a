import json

import pytest

from policypulse.errors import DecodeError
from policypulse.runtime import (
    ProposalRecord,
    decode_index,
    decode_record,
    encode_index,
    encode_record,
    merge_record,
)


def _record(**over):
    base = dict(
        id="1700000000000-abc1234",
        content="FHE-eyJ4IjoxfQ==",
        timestamp=1700000000,
        author="0xabc",
        category="Healthcare",
        upvotes=4,
        downvotes=1,
    )
    base.update(over)
    return ProposalRecord(**base)


def test_record_round_trip():
    r = _record()
    assert decode_record(encode_record(r), r.id) == r


def test_encoding_keeps_integers_and_omits_id():
    raw = json.loads(encode_record(_record()).decode("utf-8"))
    assert set(raw) == {"content", "timestamp", "author", "category", "upvotes", "downvotes"}
    assert raw["timestamp"] == 1700000000
    assert isinstance(raw["upvotes"], int)


def test_encoding_is_canonical():
    a = encode_record(_record())
    b = encode_record(_record())
    assert a == b
    assert b" " not in a


def test_missing_counters_default_to_zero():
    payload = json.dumps(
        {"content": "FHE-x", "timestamp": 5, "author": "0xabc", "category": "Economy"}
    ).encode()
    r = decode_record(payload, "k1")
    assert (r.upvotes, r.downvotes) == (0, 0)
    assert r.id == "k1"


def test_null_counters_default_to_zero():
    payload = json.dumps(
        {"content": "c", "timestamp": 5, "author": "a", "category": "Economy", "upvotes": None}
    ).encode()
    assert decode_record(payload, "k").upvotes == 0


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"not json",
        b"\xff\xfe",
        b"[1, 2, 3]",
        b'"just a string"',
        b'{"timestamp": 1, "author": "a", "category": "Economy"}',
        b'{"content": "c", "timestamp": "1", "author": "a", "category": "Economy"}',
        b'{"content": "c", "timestamp": 1, "author": "a", "category": "Economy", "upvotes": -1}',
        b'{"content": "c", "timestamp": 1, "author": "a", "category": "Economy", "upvotes": "3"}',
    ],
)
def test_unreadable_records_raise_decode_error(payload):
    with pytest.raises(DecodeError):
        decode_record(payload, "bad")


def test_extra_fields_are_ignored():
    payload = json.dumps(
        {"content": "c", "timestamp": 1, "author": "a", "category": "Economy", "title": "legacy"}
    ).encode()
    assert decode_record(payload, "k").content == "c"


def test_merge_keeps_extra_fields():
    rec = _record(upvotes=4)
    data = json.dumps({"content": rec.content, "timestamp": 1, "title": "Keep me", "upvotes": 3}).encode()
    merged = json.loads(merge_record(data, rec))
    assert merged["title"] == "Keep me"
    assert merged["upvotes"] == 4
    assert merged["timestamp"] == rec.timestamp
    assert "id" not in merged


def test_index_round_trip():
    keys = ["a", "b", "c"]
    assert decode_index(encode_index(keys)) == keys


@pytest.mark.parametrize("payload", [b"", b"{}", b"[1, 2]", b"nope"])
def test_bad_index_raises_decode_error(payload):
    with pytest.raises(DecodeError):
        decode_index(payload)
