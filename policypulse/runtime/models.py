from __future__ import annotations

import time
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr

CATEGORIES: List[str] = [
    "Education",
    "Healthcare",
    "Infrastructure",
    "Environment",
    "Economy",
    "Security",
]

ALL_CATEGORIES = "all"


class ProposalRecord(BaseModel):
    """
    One policy proposal as stored under ``proposal_<id>``.

    Only ``upvotes`` / ``downvotes`` ever change after creation, and they
    only go up.
    """

    id: StrictStr
    content: StrictStr
    timestamp: StrictInt
    author: StrictStr
    category: StrictStr
    upvotes: StrictInt = Field(default=0, ge=0)
    downvotes: StrictInt = Field(default=0, ge=0)

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes


class ProposalDraft(BaseModel):
    title: str = ""
    category: str = ""
    content: str = ""


class ProposalStats(BaseModel):
    count: int = 0
    total_votes: int = 0
    approval_rate: float = 0.0
    most_discussed: Optional[ProposalRecord] = None


class LoadResult(BaseModel):
    """Snapshot produced by ProposalRepository.load_report()."""

    records: List[ProposalRecord] = Field(default_factory=list)
    # key -> reason the record was dropped
    skipped: Dict[str, str] = Field(default_factory=dict)
    loaded_at: float = Field(default_factory=time.time)
