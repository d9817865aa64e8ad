"""Risk aggregation: findings regrouped by risk category with overrides applied.

Cluster levels, first match wins:
1. Non-overridden CRITICAL violation -> HIGH
2. Any violation -> MEDIUM
3. Any unclear finding -> NEEDS_REVIEW
4. Otherwise -> OK

Overall status is NON_COMPLIANT below the no-go threshold (60), NEEDS_REVIEW
when any cluster is not OK, else COMPLIANT.
"""

import logging
from typing import AbstractSet, Iterable, List, Optional, Sequence

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.errors import MissingAnalysisError
from compliance_engine.risk.overrides import effective_score, is_overridden
from compliance_engine.schemas.findings import (
    ComplianceRecord,
    ComplianceStatus,
    Finding,
    PolicyStatus,
)
from compliance_engine.schemas.risk import ClusterLevel, RiskAggregation, RiskCluster, TopDriver
from compliance_engine.schemas.rules import RISK_CATEGORIES, RiskCategory, Severity, severity_rank

logger = logging.getLogger(__name__)

VIOLATION_REASON = "Policy violation."
UNCLEAR_REASON = "Needs review."


def aggregate_risk(
    compliance: Optional[ComplianceRecord],
    findings: Sequence[Finding],
    overridden_finding_ids: Iterable[str] = (),
    *,
    version_id: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> RiskAggregation:
    """Aggregate one policy's findings for a version into risk clusters.

    Args:
        compliance: The version's compliance record for the policy.
        findings: Findings of that policy for the version.
        overridden_finding_ids: Finding ids with an APPROVED exception.
        version_id: Version the findings belong to, reported when the
            compliance record is missing.
        config: Thresholds; defaults to the production configuration.

    Returns:
        RiskAggregation with five clusters in fixed order and global drivers.

    Raises:
        MissingAnalysisError: If the version was never analysed.
    """
    if compliance is None:
        raise MissingAnalysisError(version_id)

    config = config or DEFAULT_CONFIG
    overridden = frozenset(overridden_finding_ids)
    findings = list(findings)

    effective = effective_score(compliance.raw_score, findings, overridden)
    clusters = [
        _build_cluster(category, findings, overridden, config)
        for category in RISK_CATEGORIES
    ]
    drivers = rank_drivers(findings, overridden)

    if effective < config.no_go_score_threshold:
        overall = PolicyStatus.NON_COMPLIANT
    elif any(c.level != ClusterLevel.OK for c in clusters):
        overall = PolicyStatus.NEEDS_REVIEW
    else:
        overall = PolicyStatus.COMPLIANT

    logger.info(
        f"Aggregated risk for version {compliance.version_id or '<inline>'}: "
        f"raw={compliance.raw_score} effective={effective} status={overall.value} "
        f"({len(drivers)} drivers, {len(overridden)} overrides)"
    )
    return RiskAggregation(
        version_id=compliance.version_id,
        policy_id=compliance.policy_id,
        overall_status=overall,
        raw_score=compliance.raw_score,
        effective_score=effective,
        clusters=clusters,
        top_drivers=drivers,
        findings=findings,
        overridden_finding_ids=sorted(
            f.finding_id for f in findings if is_overridden(f, overridden)
        ),
    )


def rank_drivers(
    findings: Iterable[Finding],
    overridden_finding_ids: AbstractSet[str],
    limit: Optional[int] = None,
) -> List[TopDriver]:
    """VIOLATION and UNCLEAR findings sorted by weight, heaviest first.

    The sort is stable so equal weights keep rule order.
    """
    issues = [f for f in findings if f.is_issue]
    issues.sort(key=lambda f: -f.weight)
    if limit is not None:
        issues = issues[:limit]
    return [_to_driver(f, overridden_finding_ids) for f in issues]


def _build_cluster(
    category: RiskCategory,
    findings: List[Finding],
    overridden: AbstractSet[str],
    config: EngineConfig,
) -> RiskCluster:
    in_category = [f for f in findings if f.risk_category == category]
    violations = [f for f in in_category if f.compliance_status == ComplianceStatus.VIOLATION]
    unclear = [f for f in in_category if f.compliance_status == ComplianceStatus.UNCLEAR]
    open_violations = [f for f in violations if not is_overridden(f, overridden)]

    if any(f.severity == Severity.CRITICAL for f in open_violations):
        level = ClusterLevel.HIGH
    elif violations:
        level = ClusterLevel.MEDIUM
    elif unclear:
        level = ClusterLevel.NEEDS_REVIEW
    else:
        level = ClusterLevel.OK

    severities = [f.severity for f in in_category if f.severity is not None]
    max_severity = min(severities, key=severity_rank) if severities else None

    return RiskCluster(
        risk_category=category,
        level=level,
        violation_count=len(violations),
        unclear_count=len(unclear),
        overridden_count=sum(1 for f in in_category if is_overridden(f, overridden)),
        max_severity=max_severity,
        total_weight=sum(f.weight for f in open_violations),
        top_drivers=rank_drivers(in_category, overridden, config.cluster_driver_limit),
    )


def _to_driver(finding: Finding, overridden: AbstractSet[str]) -> TopDriver:
    if finding.recommendation:
        reason = finding.recommendation
    elif finding.compliance_status == ComplianceStatus.VIOLATION:
        reason = VIOLATION_REASON
    else:
        reason = UNCLEAR_REASON
    return TopDriver(
        finding_id=finding.finding_id,
        key=finding.key,
        clause_category=finding.clause_category,
        risk_category=finding.risk_category,
        severity=finding.severity,
        weight=finding.weight,
        status=finding.compliance_status,
        overridden=is_overridden(finding, overridden),
        recommendation=finding.recommendation,
        reason=reason,
    )
