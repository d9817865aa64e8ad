"""Policy scorer: runs every rule of a policy and derives the raw score.

Score = max(0, max_score - sum of deductions), capped at critical_score_cap
when any rule produced a critical violation. Status thresholds come from
EngineConfig (80 / 50 by default).
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.errors import DuplicateRuleError, MissingEvidenceError
from compliance_engine.policy.rule_evaluator import evaluate_rule
from compliance_engine.schemas.evidence import EvidenceItem
from compliance_engine.schemas.findings import (
    ComplianceStatus,
    Finding,
    PolicyScore,
    PolicyStatus,
    RuleEvaluation,
    UnclearReason,
)
from compliance_engine.schemas.rules import Rule, RuleType

logger = logging.getLogger(__name__)


class EvaluationMode(str, Enum):
    """How the scorer treats a version with no evidence at all."""

    # Refuse to score without extracted evidence
    EVIDENCE = "EVIDENCE"
    # Score whatever is given; REQUIRED rules then violate
    DETERMINISTIC = "DETERMINISTIC"


def score_to_status(score: int, config: Optional[EngineConfig] = None) -> PolicyStatus:
    """Map a 0-100 score onto the tri-state policy status."""
    config = config or DEFAULT_CONFIG
    if score >= config.compliant_min_score:
        return PolicyStatus.COMPLIANT
    if score >= config.needs_review_min_score:
        return PolicyStatus.NEEDS_REVIEW
    return PolicyStatus.NON_COMPLIANT


def finding_id_for(version_id: str, rule: Rule) -> str:
    """Deterministic finding id so re-evaluation replaces the same record."""
    return f"{version_id}:{rule.key}"


def score_policy(
    rules: Sequence[Rule],
    evidence_by_category: Optional[Mapping[str, EvidenceItem]],
    *,
    version_id: str = "",
    policy_id: str = "",
    mode: EvaluationMode = EvaluationMode.EVIDENCE,
    config: Optional[EngineConfig] = None,
    evaluated_at: Optional[str] = None,
) -> PolicyScore:
    """Score all rules of a policy against one version's evidence.

    Args:
        rules: Policy rules, evaluated in order.
        evidence_by_category: Evidence keyed by clause category.
        version_id: Contract version being scored.
        policy_id: Policy the rules belong to.
        mode: EVIDENCE refuses to score a version without any evidence.
        config: Thresholds; defaults to the production configuration.
        evaluated_at: Timestamp stamped on findings; defaults to now (UTC).

    Returns:
        PolicyScore with findings in rule order, raw score and status.

    Raises:
        MissingEvidenceError: In EVIDENCE mode when there is no evidence.
        DuplicateRuleError: When two rules share a rule key.
    """
    config = config or DEFAULT_CONFIG

    if not rules:
        logger.info(f"Policy {policy_id or '<inline>'} has no rules; version {version_id} scores 100")
        return PolicyScore(
            version_id=version_id,
            policy_id=policy_id,
            findings=[],
            raw_score=config.max_score,
            status=score_to_status(config.max_score, config),
        )

    _check_unique_keys(rules)

    if mode == EvaluationMode.EVIDENCE and not evidence_by_category:
        raise MissingEvidenceError(version_id or None)

    evidence: Dict[str, EvidenceItem] = dict(evidence_by_category or {})
    evaluated_at = evaluated_at or datetime.now(timezone.utc).isoformat()

    findings: List[Finding] = []
    total_deduction = 0
    has_critical = False
    violations = 0

    for rule in rules:
        item = evidence.get(rule.clause_category)
        unclear_reason = None

        if item is None and rule.rule_type != RuleType.REQUIRED:
            result = RuleEvaluation(compliance_status=ComplianceStatus.NOT_APPLICABLE)
        elif item is not None and item.confidence < config.low_confidence_threshold:
            result = RuleEvaluation(compliance_status=ComplianceStatus.UNCLEAR)
            unclear_reason = UnclearReason.LOW_CONFIDENCE
            logger.debug(
                f"Rule {rule.key}: confidence {item.confidence:.2f} below "
                f"{config.low_confidence_threshold}; marked UNCLEAR"
            )
        else:
            result = evaluate_rule(rule, item, config)

        total_deduction += result.deduction
        has_critical = has_critical or result.is_critical
        if result.compliance_status == ComplianceStatus.VIOLATION:
            violations += 1

        findings.append(
            _build_finding(version_id, rule, item, result, unclear_reason, evaluated_at)
        )

    score = max(0, config.max_score - total_deduction)
    if has_critical and score > config.critical_score_cap:
        score = config.critical_score_cap
    status = score_to_status(score, config)

    logger.info(
        f"Scored version {version_id or '<inline>'} against policy {policy_id or '<inline>'}: "
        f"{score}/100 {status.value} ({violations} violations, critical={has_critical})"
    )
    return PolicyScore(
        version_id=version_id,
        policy_id=policy_id,
        findings=findings,
        raw_score=score,
        status=status,
        violations_count=violations,
        has_critical_violation=has_critical,
    )


def _build_finding(
    version_id: str,
    rule: Rule,
    item: Optional[EvidenceItem],
    result: RuleEvaluation,
    unclear_reason: Optional[UnclearReason],
    evaluated_at: str,
) -> Finding:
    is_violation = result.compliance_status == ComplianceStatus.VIOLATION
    return Finding(
        finding_id=finding_id_for(version_id, rule),
        rule_id=rule.id,
        clause_category=rule.clause_category,
        compliance_status=result.compliance_status,
        severity=rule.severity,
        risk_category=rule.risk_category,
        weight=rule.weight,
        recommendation=rule.recommendation if is_violation else None,
        excerpt=item.excerpt if item else None,
        value=item.value if item else None,
        confidence=item.confidence if item else None,
        unclear_reason=unclear_reason,
        evaluated_at=evaluated_at,
    )


def _check_unique_keys(rules: Sequence[Rule]) -> None:
    # One finding per (rule, version); a shared key would collide on finding_id
    seen = set()
    for rule in rules:
        if rule.key in seen:
            raise DuplicateRuleError(rule.key)
        seen.add(rule.key)
