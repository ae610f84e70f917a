"""
policypulse.runtime

Client-side synchronization and voting protocol over a key-value backend:

- models     : ProposalRecord / ProposalDraft / ProposalStats / LoadResult
- codec      : record and index (de)serialization
- index      : IndexManager, sole owner of the "proposal_keys" key
- repository : ProposalRepository (load / create / vote)
- projector  : pure filter / stats helpers over a loaded collection
"""

from .codec import decode_index, decode_record, encode_index, encode_record, merge_record
from .index import INDEX_KEY, IndexManager
from .models import CATEGORIES, LoadResult, ProposalDraft, ProposalRecord, ProposalStats
from .projector import approval_ratio, filter_records, sort_by_recency, stats
from .repository import ProposalRepository, record_key

__all__ = [
    "CATEGORIES",
    "INDEX_KEY",
    "IndexManager",
    "LoadResult",
    "ProposalDraft",
    "ProposalRecord",
    "ProposalRepository",
    "ProposalStats",
    "approval_ratio",
    "decode_index",
    "decode_record",
    "encode_index",
    "encode_record",
    "filter_records",
    "merge_record",
    "record_key",
    "sort_by_recency",
    "stats",
]
