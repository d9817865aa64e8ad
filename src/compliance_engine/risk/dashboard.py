"""Portfolio dashboard row for one (version, policy)."""

import logging
from typing import Iterable, Optional, Sequence

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.risk.overrides import effective_score, is_overridden
from compliance_engine.schemas.findings import (
    ComplianceRecord,
    ComplianceStatus,
    Finding,
    PolicyStatus,
)
from compliance_engine.schemas.risk import DashboardRow, RiskBreakdown
from compliance_engine.schemas.rules import RISK_CATEGORIES

logger = logging.getLogger(__name__)


def dashboard_row(
    compliance: ComplianceRecord,
    findings: Sequence[Finding],
    overridden_finding_ids: Iterable[str] = (),
    config: Optional[EngineConfig] = None,
) -> DashboardRow:
    """Summarise a version's findings for a portfolio listing.

    Unlike the risk aggregator the status looks at counts directly: any
    violation or unclear finding (overridden or not) keeps the row in review.
    """
    config = config or DEFAULT_CONFIG
    overridden = frozenset(overridden_finding_ids)
    effective = effective_score(compliance.raw_score, findings, overridden)

    violation_count = sum(
        1 for f in findings if f.compliance_status == ComplianceStatus.VIOLATION
    )
    unclear_count = sum(1 for f in findings if f.compliance_status == ComplianceStatus.UNCLEAR)

    breakdown = {}
    for category in RISK_CATEGORIES:
        in_category = [f for f in findings if f.risk_category == category]
        breakdown[category.value] = RiskBreakdown(
            violations=sum(
                1 for f in in_category if f.compliance_status == ComplianceStatus.VIOLATION
            ),
            unclear=sum(
                1 for f in in_category if f.compliance_status == ComplianceStatus.UNCLEAR
            ),
        )

    if effective < config.no_go_score_threshold:
        status = PolicyStatus.NON_COMPLIANT
    elif violation_count or unclear_count:
        status = PolicyStatus.NEEDS_REVIEW
    else:
        status = PolicyStatus.COMPLIANT

    logger.debug(
        f"Dashboard row {compliance.version_id}/{compliance.policy_id}: "
        f"effective={effective} status={status.value}"
    )
    return DashboardRow(
        version_id=compliance.version_id,
        policy_id=compliance.policy_id,
        effective_score=effective,
        status=status,
        violation_count=violation_count,
        unclear_count=unclear_count,
        overridden_count=sum(1 for f in findings if is_overridden(f, overridden)),
        risk_breakdown=breakdown,
    )
