"""
ProposalRepository: load / create / vote over a key-value backend.

Storage layout
--------------
- "proposal_keys"      -> JSON array of record ids (owned by IndexManager)
- "proposal_<id>"      -> canonical JSON record (see codec)

Every call here is a blocking round trip to the backend, and the backend may
be mutated by other clients between any two of them. There are no locks and
no multi-key transactions: write ordering is the only safety tool, so
create() always writes the record before it touches the index.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Callable, Dict, List, Optional

from ..backends.base import KeyValueBackend
from ..encoders import Encoder, placeholder_encode
from ..errors import BackendUnavailable, DecodeError, InvalidDraft, NotFound, PolicyPulseError
from ..signer import SignedBackend, Signer
from .codec import decode_record, encode_record, merge_record
from .index import IndexManager
from .models import CATEGORIES, LoadResult, ProposalDraft, ProposalRecord
from .projector import sort_by_recency

log = logging.getLogger(__name__)

RECORD_PREFIX = "proposal_"
_ID_ALPHABET = string.digits + string.ascii_lowercase


def record_key(record_id: str) -> str:
    return f"{RECORD_PREFIX}{record_id}"


def new_proposal_id(now: Optional[float] = None) -> str:
    """<epoch millis>-<7 random base36 chars>; unique across concurrent creators."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{millis}-{suffix}"


def validate_draft(draft: ProposalDraft) -> ProposalDraft:
    if not draft.category or not draft.content.strip():
        raise InvalidDraft("Please fill required fields")
    if draft.category not in CATEGORIES:
        raise InvalidDraft(f"Unknown category: {draft.category}")
    return draft


class ProposalRepository:
    def __init__(
        self,
        backend: KeyValueBackend,
        encoder: Encoder = placeholder_encode,
        signer: Optional[Signer] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.encoder = encoder
        self.signer = signer
        self.clock = clock

    # ------------------------
    # Wiring
    # ------------------------
    def attach_signer(self, signer: Optional[Signer]) -> None:
        self.signer = signer

    def _writer(self, signer: Optional[Signer] = None) -> SignedBackend:
        # Raises SignerRequired when no signer is attached
        return SignedBackend(self.backend, signer or self.signer)

    # ------------------------
    # Reads
    # ------------------------
    def load_report(self) -> LoadResult:
        """
        Rebuild the collection from the index.

        Aborts with BackendUnavailable when the backend reports itself down.
        A key whose payload is missing, unreadable or refused by the backend
        is logged, recorded in ``skipped`` and left out; it never fails the
        whole load.
        """
        if not self.backend.is_available():
            log.error("Backend is not available")
            raise BackendUnavailable("Contract is not available")

        keys = IndexManager(self.backend).read_index()
        records: List[ProposalRecord] = []
        skipped: Dict[str, str] = {}
        seen = set()

        for key in keys:
            if key in seen:
                continue
            seen.add(key)
            try:
                data = self.backend.get_data(record_key(key))
            except PolicyPulseError as e:
                log.error("Error loading proposal %s: %s", key, e)
                skipped[key] = str(e)
                continue
            if not data:
                log.warning("Proposal %s is listed in the index but has no payload", key)
                skipped[key] = "missing payload"
                continue
            try:
                records.append(decode_record(data, key))
            except DecodeError as e:
                log.error("Error parsing proposal data for %s: %s", key, e)
                skipped[key] = str(e)

        result = LoadResult(records=sort_by_recency(records), skipped=skipped, loaded_at=self.clock())
        log.info("Loaded %d proposal(s), skipped %d", len(result.records), len(skipped))
        return result

    def load(self) -> List[ProposalRecord]:
        return self.load_report().records

    # ------------------------
    # Writes
    # ------------------------
    def create(self, draft: ProposalDraft, signer: Optional[Signer] = None) -> str:
        """
        Encode ``draft``, write it as a new record, then add it to the index.

        The record is written first: a failure between the two writes leaves
        an orphaned payload no reader will see, never an index entry that
        points at nothing. Nothing is rolled back on failure.
        """
        validate_draft(draft)
        writer = self._writer(signer)

        content = self.encoder(draft.model_dump())
        now = self.clock()
        pid = new_proposal_id(now)
        record = ProposalRecord(
            id=pid,
            content=content,
            timestamp=int(now),
            author=writer.signer.address,
            category=draft.category,
            upvotes=0,
            downvotes=0,
        )

        writer.set_data(record_key(pid), encode_record(record))
        IndexManager(writer).append_key(pid)
        log.info("Created proposal %s in %s", pid, record.category)
        return pid

    def vote(self, record_id: str, up: bool, signer: Optional[Signer] = None) -> ProposalRecord:
        """
        Add one up (``up=True``) or down vote to a record.

        This is a plain read-modify-write of the whole record with no
        compare-and-swap and no retry. If another client writes the same
        record between our read and our write, its increment is lost. Repeat
        votes are not deduplicated.
        """
        writer = self._writer(signer)
        key = record_key(record_id)

        data = writer.get_data(key)
        if not data:
            raise NotFound(f"Proposal not found: {record_id}")
        try:
            current = decode_record(data, record_id)
        except DecodeError as e:
            raise NotFound(f"Proposal not found: {record_id} ({e})") from e

        if up:
            updated = current.model_copy(update={"upvotes": current.upvotes + 1})
        else:
            updated = current.model_copy(update={"downvotes": current.downvotes + 1})

        writer.set_data(key, merge_record(data, updated))
        log.info("Recorded %s vote on %s", "up" if up else "down", record_id)
        return updated
