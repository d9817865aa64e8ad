"""Builders for compliance engine unit tests."""

from typing import Any, Optional

from compliance_engine.schemas import (
    ComplianceRecord,
    ComplianceStatus,
    EvidenceItem,
    Finding,
    PolicyStatus,
    RiskCategory,
    Rule,
    RuleType,
    Severity,
)


def make_rule(
    rule_type: Any = RuleType.REQUIRED,
    clause_category: str = "TERMINATION",
    weight: int = 10,
    rule_id: Optional[str] = None,
    **kwargs: Any,
) -> Rule:
    """Build a rule; the id defaults to a slug of the clause category."""
    return Rule(
        id=rule_id if rule_id is not None else f"r-{clause_category.lower()}",
        clause_category=clause_category,
        rule_type=rule_type,
        weight=weight,
        **kwargs,
    )


def make_evidence(
    clause_category: str = "TERMINATION",
    value: Any = None,
    confidence: float = 0.9,
    excerpt: Optional[str] = "The parties agree...",
) -> EvidenceItem:
    return EvidenceItem(
        clause_category=clause_category,
        value=value,
        confidence=confidence,
        excerpt=excerpt,
    )


def make_finding(
    finding_id: str = "v1:r-termination",
    status: ComplianceStatus = ComplianceStatus.VIOLATION,
    weight: int = 10,
    risk_category: Optional[RiskCategory] = RiskCategory.LEGAL,
    severity: Optional[Severity] = Severity.MEDIUM,
    clause_category: str = "TERMINATION",
    rule_id: Optional[str] = None,
    **kwargs: Any,
) -> Finding:
    """Build a finding; the rule id defaults to the part after the version prefix."""
    return Finding(
        finding_id=finding_id,
        rule_id=rule_id if rule_id is not None else finding_id.split(":", 1)[-1],
        clause_category=clause_category,
        compliance_status=status,
        weight=weight,
        risk_category=risk_category,
        severity=severity,
        **kwargs,
    )


def make_record(
    raw_score: int = 90,
    version_id: str = "v1",
    policy_id: str = "p1",
    status: PolicyStatus = PolicyStatus.COMPLIANT,
) -> ComplianceRecord:
    return ComplianceRecord(
        version_id=version_id, policy_id=policy_id, raw_score=raw_score, status=status
    )
