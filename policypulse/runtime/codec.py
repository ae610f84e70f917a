# policypulse/runtime/codec.py
from __future__ import annotations

"""
Record and index codec.

Records are stored as canonical JSON (sorted keys, compact separators,
UTF-8). The record id is carried by the key ("proposal_<id>") and is not
repeated inside the payload:

    {"author":"0xabc","category":"Education","content":"FHE-...",
     "downvotes":0,"timestamp":1700000000,"upvotes":3}

The index is a JSON array of record ids.
"""

import json
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from ..errors import DecodeError
from .models import ProposalRecord

REQUIRED_FIELDS = ("content", "timestamp", "author", "category")
COUNTER_FIELDS = ("upvotes", "downvotes")


def _json_dumps(obj: Any) -> bytes:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _json_loads(data: bytes, what: str) -> Any:
    if not data:
        raise DecodeError(f"{what}: empty payload")
    try:
        return json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"{what}: not valid JSON ({e})") from e


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def encode_record(record: ProposalRecord) -> bytes:
    return _json_dumps(record.model_dump(exclude={"id"}))


def merge_record(data: bytes, record: ProposalRecord) -> bytes:
    """
    Re-encode ``record`` on top of the payload it was decoded from, keeping
    any fields this codec does not know about.
    """
    raw = _json_loads(data, f"proposal {record.id}")
    if not isinstance(raw, dict):
        raise DecodeError(f"proposal {record.id}: expected an object, got {type(raw).__name__}")
    raw.update(record.model_dump(exclude={"id"}))
    return _json_dumps(raw)


def decode_record(data: bytes, record_id: str) -> ProposalRecord:
    """
    Decode the payload stored under ``proposal_<record_id>``.

    Raises DecodeError when the bytes are empty, are not a JSON object, miss
    one of the required fields or carry a field of the wrong type. Vote
    counters default to 0 for older payloads that did not store them.
    """
    what = f"proposal {record_id}"
    raw = _json_loads(data, what)
    if not isinstance(raw, dict):
        raise DecodeError(f"{what}: expected an object, got {type(raw).__name__}")

    missing = [f for f in REQUIRED_FIELDS if f not in raw]
    if missing:
        raise DecodeError(f"{what}: missing field(s) {', '.join(missing)}")

    fields: Dict[str, Any] = {f: raw[f] for f in REQUIRED_FIELDS}
    for f in COUNTER_FIELDS:
        value = raw.get(f)
        fields[f] = 0 if value is None else value

    try:
        return ProposalRecord(id=str(record_id), **fields)
    except ValidationError as e:
        raise DecodeError(f"{what}: {e.error_count()} invalid field(s)") from e


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


def encode_index(keys: Iterable[str]) -> bytes:
    return _json_dumps([str(k) for k in keys])


def decode_index(data: bytes) -> List[str]:
    raw = _json_loads(data, "index")
    if not isinstance(raw, list) or not all(isinstance(k, str) for k in raw):
        raise DecodeError("index: expected a list of strings")
    return list(raw)
