"""Deal desk decision engine.

Derives a GO / NEEDS_REVIEW / NO_GO outcome from a risk aggregation and the
exception state of the (version, policy). Outcome rules, first match wins:
1. Non-overridden CRITICAL violation -> NO_GO
2. Effective score below the no-go threshold -> NO_GO
3. Non-overridden violation -> NEEDS_REVIEW
4. Any UNCLEAR finding -> NEEDS_REVIEW
5. Open exception request -> NEEDS_REVIEW
6. Otherwise -> GO

The rationale is plain markdown built only from the inputs, so the same
inputs always render the same bytes.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.risk.overrides import is_overridden
from compliance_engine.schemas.decision import (
    DealDecision,
    DealOutcome,
    DecisionCounts,
    DecisionDriver,
    DecisionPreview,
    DecisionStatus,
    DecisionTransition,
    ExceptionCounts,
)
from compliance_engine.schemas.findings import ComplianceStatus, Finding
from compliance_engine.schemas.risk import RiskAggregation, RiskBreakdown
from compliance_engine.schemas.rules import Severity

logger = logging.getLogger(__name__)

UNGROUPED_RISK = "OTHER"
MISSING_RISK_LABEL = "n/a"


def compute_decision(
    aggregation: RiskAggregation,
    exception_counts: Optional[ExceptionCounts] = None,
    config: Optional[EngineConfig] = None,
) -> DecisionPreview:
    """Compute the decision preview for one (version, policy).

    Args:
        aggregation: Output of aggregate_risk for the version and policy.
        exception_counts: Open and approved exception requests for the policy.
        config: Thresholds; defaults to the production configuration.

    Returns:
        DecisionPreview with outcome, counts, drivers and rationale.
    """
    config = config or DEFAULT_CONFIG
    exception_counts = exception_counts or ExceptionCounts()
    overridden = frozenset(aggregation.overridden_finding_ids)
    findings = aggregation.findings

    open_violations = [
        f
        for f in findings
        if f.compliance_status == ComplianceStatus.VIOLATION
        and not is_overridden(f, overridden)
    ]
    unclear = [f for f in findings if f.compliance_status == ComplianceStatus.UNCLEAR]
    counts = DecisionCounts(
        violations=len(open_violations),
        critical_violations=sum(1 for f in open_violations if f.severity == Severity.CRITICAL),
        unclear=len(unclear),
        overridden=sum(1 for f in findings if is_overridden(f, overridden)),
        open_exceptions=exception_counts.open,
        approved_exceptions=exception_counts.approved,
    )

    outcome = _decide(counts, aggregation.effective_score, config)

    drivers = [
        DecisionDriver(
            clause_category=d.clause_category,
            risk_category=d.risk_category,
            severity=d.severity,
            weight=d.weight,
            status=d.status,
            recommendation=d.recommendation,
        )
        for d in aggregation.top_drivers[: config.decision_driver_limit]
    ]

    violations_by_risk = _group_by_risk(open_violations)
    unclear_by_risk = _group_by_risk(unclear)
    breakdown: Dict[str, RiskBreakdown] = {}
    for risk in list(violations_by_risk) + list(unclear_by_risk):
        breakdown[risk] = RiskBreakdown(
            violations=len(violations_by_risk.get(risk, [])),
            unclear=len(unclear_by_risk.get(risk, [])),
        )

    rationale = render_rationale(
        aggregation, counts, drivers, violations_by_risk, unclear_by_risk
    )

    logger.info(
        f"Decision for version {aggregation.version_id or '<inline>'}: {outcome.value} "
        f"(effective={aggregation.effective_score}, violations={counts.violations}, "
        f"unclear={counts.unclear}, open_exceptions={counts.open_exceptions})"
    )
    return DecisionPreview(
        version_id=aggregation.version_id,
        policy_id=aggregation.policy_id,
        effective_score=aggregation.effective_score,
        raw_score=aggregation.raw_score,
        outcome=outcome,
        counts=counts,
        top_drivers=drivers,
        rationale_markdown=rationale,
        risk_breakdown=breakdown,
    )


def render_rationale(
    aggregation: RiskAggregation,
    counts: DecisionCounts,
    drivers: List[DecisionDriver],
    violations_by_risk: Dict[str, List[str]],
    unclear_by_risk: Dict[str, List[str]],
) -> str:
    """Render the markdown rationale. No timestamps or other volatile data."""
    lines = [
        f"- Effective score: **{aggregation.effective_score}/100** (raw {aggregation.raw_score})"
    ]
    if counts.violations:
        lines.append(f"- Violations: {counts.violations} ({_format_groups(violations_by_risk)})")
    if counts.critical_violations:
        lines.append(f"- Critical violations: {counts.critical_violations}")
    if counts.unclear:
        lines.append(f"- Unclear: {counts.unclear} ({_format_groups(unclear_by_risk)})")
    lines.append(f"- Approved exceptions: {counts.approved_exceptions}")
    lines.append(f"- Open exception requests: {counts.open_exceptions}")

    if drivers:
        lines.append("")
        lines.append("**Top drivers:**")
        for d in drivers:
            risk = d.risk_category.value if d.risk_category else MISSING_RISK_LABEL
            lines.append(f"- {d.clause_category} ({risk}): {d.recommendation or d.status.value}")

    return "\n".join(lines)


def draft_decision(
    existing: Optional[DealDecision], preview: DecisionPreview
) -> DecisionTransition:
    """Save a preview as the DRAFT decision unless the stored one is FINAL."""
    if existing is not None and existing.is_final:
        logger.info(
            f"Decision for version {existing.version_id} is FINAL; draft not applied"
        )
        return DecisionTransition(decision=existing, changed=False, already_final=True)

    decision = DealDecision(
        version_id=preview.version_id,
        policy_id=preview.policy_id,
        status=DecisionStatus.DRAFT,
        outcome=preview.outcome,
        rationale=preview.rationale_markdown,
    )
    return DecisionTransition(decision=decision, changed=decision != existing)


def finalize_decision(
    existing: Optional[DealDecision],
    preview: DecisionPreview,
    finalized_by: Optional[str] = None,
    finalized_at: Optional[str] = None,
) -> DecisionTransition:
    """Move a decision to FINAL.

    FINAL is terminal: finalising an already-FINAL decision returns it
    unchanged and flags the no-op instead of recomputing it.

    Args:
        existing: Stored decision, if any.
        preview: Freshly computed preview to finalise.
        finalized_by: Who finalised the decision.
        finalized_at: ISO timestamp; defaults to now (UTC).

    Returns:
        DecisionTransition carrying the FINAL decision.
    """
    if existing is not None and existing.is_final:
        logger.info(
            f"Decision for version {existing.version_id} already FINAL; finalize is a no-op"
        )
        return DecisionTransition(decision=existing, changed=False, already_final=True)

    decision = DealDecision(
        version_id=preview.version_id,
        policy_id=preview.policy_id,
        status=DecisionStatus.FINAL,
        outcome=preview.outcome,
        rationale=preview.rationale_markdown,
        finalized_by=finalized_by,
        finalized_at=finalized_at or datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        f"Finalized decision for version {decision.version_id}: {decision.outcome.value}"
    )
    return DecisionTransition(decision=decision, changed=True)


def _decide(counts: DecisionCounts, effective_score: int, config: EngineConfig) -> DealOutcome:
    if counts.critical_violations:
        return DealOutcome.NO_GO
    if effective_score < config.no_go_score_threshold:
        return DealOutcome.NO_GO
    if counts.violations:
        return DealOutcome.NEEDS_REVIEW
    if counts.unclear:
        return DealOutcome.NEEDS_REVIEW
    if counts.open_exceptions:
        return DealOutcome.NEEDS_REVIEW
    return DealOutcome.GO


def _group_by_risk(findings: List[Finding]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for f in findings:
        risk = f.risk_category.value if f.risk_category else UNGROUPED_RISK
        groups.setdefault(risk, []).append(f.clause_category)
    return groups


def _format_groups(groups: Dict[str, List[str]]) -> str:
    return "; ".join(f"{risk}: {', '.join(clauses)}" for risk, clauses in groups.items())
