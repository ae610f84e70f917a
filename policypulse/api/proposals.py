from __future__ import annotations

"""
Proposals API for PolicyPulse.

Routes
------
- GET  /proposals               recency-ordered list, filtered by ?q= and ?category=
- GET  /proposals/stats         aggregate statistics
- GET  /proposals/status        current transaction status
- POST /proposals               create (header X-Wallet-Address required)
- POST /proposals/{id}/vote     up/down vote (header X-Wallet-Address required)

Reads serve the snapshot rebuilt by a full load on every GET of the list.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from pydantic import BaseModel

from ..errors import (
    BackendUnavailable,
    InvalidDraft,
    NotFound,
    PolicyPulseError,
    Rejected,
    SignerRequired,
)
from ..runtime.models import ALL_CATEGORIES, ProposalDraft, ProposalRecord, ProposalStats
from ..runtime.projector import filter_records
from ..service import PolicyPulseService
from ..signer import Signer
from ..status import TransactionStatus

log = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["proposals"])

_STATUS_CODES = {
    BackendUnavailable: 503,
    NotFound: 404,
    Rejected: 403,
    SignerRequired: 401,
    InvalidDraft: 400,
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class CreateResponse(BaseModel):
    ok: bool = True
    id: str


class VoteRequest(BaseModel):
    up: bool


class ProposalListResponse(BaseModel):
    ok: bool = True
    proposals: List[ProposalRecord]
    skipped: int = 0
    loaded_at: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_service(request: Request) -> PolicyPulseService:
    return request.app.state.service


def _signer(address: Optional[str]) -> Optional[Signer]:
    address = (address or "").strip()
    return Signer(address=address) if address else None


def _http_error(e: PolicyPulseError) -> HTTPException:
    for exc_type, status_code in _STATUS_CODES.items():
        if isinstance(e, exc_type):
            return HTTPException(status_code=status_code, detail={"error": e.code, "message": str(e)})
    return HTTPException(status_code=500, detail={"error": e.code, "message": str(e)})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("", response_model=ProposalListResponse)
def list_proposals(
    q: str = Query("", description="Case-insensitive substring of the content"),
    category: str = Query(ALL_CATEGORIES),
    svc: PolicyPulseService = Depends(get_service),
):
    try:
        snapshot = svc.refresh()
    except PolicyPulseError as e:
        log.error("Error loading proposals: %s", e)
        raise _http_error(e)
    return ProposalListResponse(
        proposals=filter_records(snapshot.records, q, category),
        skipped=len(snapshot.skipped),
        loaded_at=snapshot.loaded_at,
    )


@router.get("/stats", response_model=ProposalStats)
def proposal_stats(svc: PolicyPulseService = Depends(get_service)):
    try:
        svc.refresh()
    except PolicyPulseError as e:
        raise _http_error(e)
    return svc.summary()


@router.get("/status", response_model=TransactionStatus)
def transaction_status(svc: PolicyPulseService = Depends(get_service)):
    return svc.status.current()


@router.post("", response_model=CreateResponse)
def create_proposal(
    draft: ProposalDraft,
    x_wallet_address: Optional[str] = Header(None),
    svc: PolicyPulseService = Depends(get_service),
):
    try:
        pid = svc.submit(draft, _signer(x_wallet_address))
    except PolicyPulseError as e:
        raise _http_error(e)
    return CreateResponse(id=pid)


@router.post("/{proposal_id}/vote", response_model=ProposalRecord)
def vote_proposal(
    proposal_id: str,
    req: VoteRequest,
    x_wallet_address: Optional[str] = Header(None),
    svc: PolicyPulseService = Depends(get_service),
):
    try:
        return svc.cast_vote(proposal_id, req.up, _signer(x_wallet_address))
    except PolicyPulseError as e:
        raise _http_error(e)
