"""
Pure views over a loaded collection. No I/O, inputs are never mutated.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import ALL_CATEGORIES, ProposalRecord, ProposalStats


def sort_by_recency(records: Iterable[ProposalRecord]) -> List[ProposalRecord]:
    # sorted() is stable, so equal timestamps keep index order
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def filter_records(
    records: Sequence[ProposalRecord],
    search_text: str = "",
    category: str = ALL_CATEGORIES,
) -> List[ProposalRecord]:
    needle = (search_text or "").lower()
    out = []
    for r in records:
        if needle not in r.content.lower():
            continue
        if category != ALL_CATEGORIES and r.category != category:
            continue
        out.append(r)
    return out


def stats(records: Sequence[ProposalRecord]) -> ProposalStats:
    total_votes = 0
    upvotes = 0
    most_discussed: Optional[ProposalRecord] = None

    for r in records:
        total_votes += r.total_votes
        upvotes += r.upvotes
        # strict ">" keeps the first record on ties
        if most_discussed is None or r.total_votes > most_discussed.total_votes:
            most_discussed = r

    return ProposalStats(
        count=len(records),
        total_votes=total_votes,
        approval_rate=(upvotes / total_votes) if total_votes else 0.0,
        most_discussed=most_discussed,
    )


def approval_ratio(record: ProposalRecord) -> float:
    """Share of upvotes for one record; 0 when it has no votes yet."""
    total = record.total_votes
    return record.upvotes / total if total else 0.0
