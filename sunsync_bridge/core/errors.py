"""
Error classification for Home Assistant operations.

Failures are reported as values (see `HASSResult.code`), never raised across
component boundaries. The codes mirror the stages that can fail:

- TRANSPORT: no response, or a non-2xx status
- API: 2xx status whose payload signals an error
- CONNECTIVITY: every resolver strategy exhausted
- VERIFICATION: sentinel entity not visible after a sync
- PARTIAL_FAILURE: one or more readings in a batch failed
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Categorized error codes (E1xx: Home Assistant)."""

    TRANSPORT = "E101"
    API = "E102"
    CONNECTIVITY = "E103"
    VERIFICATION = "E104"
    PARTIAL_FAILURE = "E105"


# A later sync cycle can recover from these without operator action
RETRYABLE_ERRORS = {
    ErrorCode.TRANSPORT,
    ErrorCode.CONNECTIVITY,
}


@dataclass
class HassError:
    """
    Structured error attached to a failed result.

    Attributes:
        code: Error classification code
        message: Human-readable error message
        details: Optional additional context (status, url, ...)
    """

    code: ErrorCode
    message: str
    details: Optional[dict[str, Any]] = None

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_ERRORS

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }
