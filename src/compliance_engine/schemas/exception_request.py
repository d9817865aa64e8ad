"""Pydantic model for exception requests against findings.

An APPROVED exception neutralises the score impact of one VIOLATION or
UNCLEAR finding. At most one request per finding may be active
(REQUESTED or APPROVED) at a time.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ExceptionStatus(str, Enum):
    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


ACTIVE_EXCEPTION_STATUSES = {ExceptionStatus.REQUESTED, ExceptionStatus.APPROVED}


class ExceptionRequest(BaseModel):
    """A request to waive one finding's score impact."""

    exception_id: str = Field(..., description="Exception identifier")
    clause_finding_id: Optional[str] = Field(
        default=None, description="Finding the exception applies to"
    )
    policy_id: Optional[str] = None
    version_id: Optional[str] = None
    title: str = ""
    justification: Optional[str] = None
    status: ExceptionStatus = ExceptionStatus.REQUESTED
    decided_by: Optional[str] = None
    decision_note: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_EXCEPTION_STATUSES


class ExceptionOutcome(BaseModel):
    """Result of a request call; ``already_active`` marks the idempotent no-op."""

    request: ExceptionRequest
    already_active: bool = False
