"""
Error taxonomy for PolicyPulse.

- BackendUnavailable : the key-value backend cannot be reached (load aborts)
- DecodeError        : a record or the index is unreadable (recovered locally)
- NotFound           : vote target is absent
- Rejected           : write declined by the authorizer ("user declined")
- SignerRequired     : no write capability attached
- InvalidDraft       : proposal draft fails basic validation
"""

from __future__ import annotations


class PolicyPulseError(Exception):
    """Base class for all PolicyPulse errors."""

    code = "error"


class BackendUnavailable(PolicyPulseError):
    code = "backend_unavailable"


class DecodeError(PolicyPulseError):
    code = "decode_error"


class NotFound(PolicyPulseError):
    code = "not_found"


class Rejected(PolicyPulseError):
    code = "rejected"

    def __init__(self, message: str = "Transaction rejected by user") -> None:
        super().__init__(message)


class SignerRequired(PolicyPulseError):
    code = "signer_required"

    def __init__(self, message: str = "Please connect wallet first") -> None:
        super().__init__(message)


class InvalidDraft(PolicyPulseError):
    code = "invalid_draft"
