"""Exception request lifecycle.

REQUESTED -> APPROVED | REJECTED via decide_exception, REQUESTED -> WITHDRAWN
via withdraw_exception. At most one active (REQUESTED or APPROVED) request per
finding; asking again returns the active one.
"""

import logging
import uuid
from typing import Iterable, Optional, Set

from compliance_engine.errors import InvalidTransitionError
from compliance_engine.schemas.decision import ExceptionCounts
from compliance_engine.schemas.exception_request import (
    ExceptionOutcome,
    ExceptionRequest,
    ExceptionStatus,
)
from compliance_engine.schemas.findings import Finding

logger = logging.getLogger(__name__)


def request_exception(
    existing: Iterable[ExceptionRequest],
    finding: Finding,
    policy_id: Optional[str] = None,
    *,
    version_id: Optional[str] = None,
    title: str = "",
    justification: Optional[str] = None,
    exception_id: Optional[str] = None,
) -> ExceptionOutcome:
    """Open an exception request for a VIOLATION or UNCLEAR finding.

    Args:
        existing: Requests already recorded for the version.
        finding: Finding to waive.
        policy_id: Policy the finding was scored under.
        version_id: Contract version of the finding.
        title: Short label for the request.
        justification: Business reason.
        exception_id: Identifier to use; generated when omitted.

    Returns:
        ExceptionOutcome with the new request, or the active one and
        ``already_active=True``.

    Raises:
        InvalidTransitionError: If the finding is not VIOLATION or UNCLEAR.
    """
    if not finding.is_issue:
        raise InvalidTransitionError(
            f"Exceptions can only be requested for VIOLATION or UNCLEAR findings "
            f"(finding {finding.finding_id} is {finding.compliance_status.value})"
        )

    for request in existing:
        if request.clause_finding_id == finding.finding_id and request.is_active:
            logger.info(
                f"Finding {finding.finding_id} already has active exception "
                f"{request.exception_id} ({request.status.value})"
            )
            return ExceptionOutcome(request=request, already_active=True)

    request = ExceptionRequest(
        exception_id=exception_id or f"exc-{uuid.uuid4().hex[:12]}",
        clause_finding_id=finding.finding_id,
        policy_id=policy_id,
        version_id=version_id,
        title=title or f"Exception for {finding.clause_category}",
        justification=justification,
    )
    logger.info(f"Requested exception {request.exception_id} for finding {finding.finding_id}")
    return ExceptionOutcome(request=request)


def decide_exception(
    request: ExceptionRequest,
    approve: bool,
    decided_by: Optional[str] = None,
    note: Optional[str] = None,
) -> ExceptionRequest:
    """Approve or reject a pending request."""
    if request.status != ExceptionStatus.REQUESTED:
        raise InvalidTransitionError(
            f"Exception {request.exception_id} is not pending decision "
            f"(status: {request.status.value})"
        )
    status = ExceptionStatus.APPROVED if approve else ExceptionStatus.REJECTED
    logger.info(f"Exception {request.exception_id} {status.value.lower()} by {decided_by or 'unknown'}")
    return request.model_copy(
        update={"status": status, "decided_by": decided_by, "decision_note": note}
    )


def withdraw_exception(request: ExceptionRequest) -> ExceptionRequest:
    """Withdraw a pending request."""
    if request.status != ExceptionStatus.REQUESTED:
        raise InvalidTransitionError(
            f"Only REQUESTED exceptions can be withdrawn "
            f"(current: {request.status.value})"
        )
    logger.info(f"Exception {request.exception_id} withdrawn")
    return request.model_copy(update={"status": ExceptionStatus.WITHDRAWN})


def approved_finding_ids(requests: Iterable[ExceptionRequest]) -> Set[str]:
    """Finding ids covered by an APPROVED exception."""
    return {
        r.clause_finding_id
        for r in requests
        if r.status == ExceptionStatus.APPROVED and r.clause_finding_id
    }


def count_exceptions(
    requests: Iterable[ExceptionRequest], policy_id: Optional[str] = None
) -> ExceptionCounts:
    """Count open and approved requests, restricted to a policy when given."""
    open_count = 0
    approved_count = 0
    for r in requests:
        if policy_id is not None and r.policy_id != policy_id:
            continue
        if r.status == ExceptionStatus.REQUESTED:
            open_count += 1
        elif r.status == ExceptionStatus.APPROVED:
            approved_count += 1
    return ExceptionCounts(open=open_count, approved=approved_count)
