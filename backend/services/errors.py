"""Failure taxonomy for the matching pipeline.

Pipeline-level failures abort the whole request. Per-judgment problems are
recorded as DataQualityWarning and never raised.
"""

from dataclasses import dataclass


class MatchError(Exception):
    """Base for failures surfaced to the caller as an error payload."""

    error_type: str = "match_error"
    retryable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailure(MatchError):
    """Empty or malformed query; rejected before any external call."""

    error_type = "validation_failure"


class AuthFailure(MatchError):
    """Requester identity could not be resolved."""

    error_type = "auth_failure"
    retryable = False


class TransportFailure(MatchError):
    """Network error, timeout or non-2xx talking to the scoring backend.

    `transient` marks failures eligible for the automatic retry
    (timeouts, connection errors, 5xx, 429).
    """

    error_type = "transport_failure"

    def __init__(self, message: str, transient: bool = True) -> None:
        super().__init__(message)
        self.transient = transient


class ScoringFailure(MatchError):
    """Backend answered 2xx but the document is unparseable or mis-shaped.

    `raw` holds the diagnostic for server-side logs only. Never retried
    automatically since the same input yields the same malformed output.
    """

    error_type = "scoring_failure"

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


@dataclass(frozen=True)
class DataQualityWarning:
    candidate_id: str | None
    reason: str
