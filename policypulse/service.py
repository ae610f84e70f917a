"""
PolicyPulseService: the facade used by the HTTP API and the CLI.

Wraps a ProposalRepository with
- a transaction status board (pending -> success/error, auto-clearing),
- the last loaded snapshot, rebuilt with a full load() after every
  successful write (no incremental patching).

Errors from the repository are re-raised after the status is updated so
callers can map them to their own surface.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .backends import KeyValueBackend, build_backend
from .config import get_error_clear_sec, get_success_clear_sec
from .encoders import build_encoder
from .errors import BackendUnavailable, PolicyPulseError, Rejected
from .runtime.models import ALL_CATEGORIES, LoadResult, ProposalDraft, ProposalRecord, ProposalStats
from .runtime.projector import filter_records, stats
from .runtime.repository import ProposalRepository
from .signer import Signer
from .status import StatusBoard

log = logging.getLogger(__name__)

MSG_SUBMIT_PENDING = "Encrypting policy proposal with FHE..."
MSG_SUBMIT_OK = "Encrypted proposal submitted anonymously!"
MSG_VOTE_PENDING = "Processing anonymous vote with FHE..."
MSG_VOTE_OK = "Vote recorded anonymously!"
MSG_REJECTED = "Transaction rejected by user"


class PolicyPulseService:
    def __init__(self, repository: ProposalRepository, status: Optional[StatusBoard] = None):
        self.repository = repository
        self.status = status or StatusBoard()
        self.snapshot = LoadResult()

    # ----- reads -----
    def refresh(self) -> LoadResult:
        self.snapshot = self.repository.load_report()
        return self.snapshot

    @property
    def proposals(self) -> List[ProposalRecord]:
        return list(self.snapshot.records)

    def view(self, search_text: str = "", category: str = ALL_CATEGORIES) -> List[ProposalRecord]:
        return filter_records(self.snapshot.records, search_text, category)

    def summary(self) -> ProposalStats:
        return stats(self.snapshot.records)

    # ----- writes -----
    def submit(self, draft: ProposalDraft, signer: Optional[Signer] = None) -> str:
        self.status.pending(MSG_SUBMIT_PENDING)
        try:
            pid = self.repository.create(draft, signer)
        except Rejected:
            self.status.error(MSG_REJECTED)
            raise
        except PolicyPulseError as e:
            self.status.error(f"Submission failed: {e}")
            raise
        self.status.success(MSG_SUBMIT_OK)
        self._refresh_after_write()
        return pid

    def cast_vote(self, record_id: str, up: bool, signer: Optional[Signer] = None) -> ProposalRecord:
        self.status.pending(MSG_VOTE_PENDING)
        try:
            updated = self.repository.vote(record_id, up, signer)
        except Rejected:
            self.status.error(MSG_REJECTED)
            raise
        except PolicyPulseError as e:
            self.status.error(f"Voting failed: {e}")
            raise
        self.status.success(MSG_VOTE_OK)
        self._refresh_after_write()
        return updated

    def _refresh_after_write(self) -> None:
        # The write already landed; a failed reload only leaves the snapshot stale.
        try:
            self.refresh()
        except BackendUnavailable as e:
            log.warning("Reload after write failed, snapshot is stale: %s", e)


def build_service(
    cfg: Dict[str, Any],
    backend: Optional[KeyValueBackend] = None,
    signer: Optional[Signer] = None,
) -> PolicyPulseService:
    repo = ProposalRepository(
        backend if backend is not None else build_backend(cfg),
        encoder=build_encoder(cfg),
        signer=signer,
    )
    board = StatusBoard(
        success_clear_sec=get_success_clear_sec(cfg),
        error_clear_sec=get_error_clear_sec(cfg),
    )
    return PolicyPulseService(repo, board)
