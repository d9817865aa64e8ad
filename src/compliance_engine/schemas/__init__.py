"""Pydantic schemas for rules, evidence, findings and engine outputs."""

from compliance_engine.schemas.compare import (
    ChangeItem,
    ChangeType,
    CompareDriver,
    DeltaLabel,
    FindingSnapshot,
    ScoreDelta,
    VersionCompareResult,
    VersionScores,
    VersionSide,
)
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
from compliance_engine.schemas.evidence import MAX_EXCERPT_CHARS, EvidenceItem
from compliance_engine.schemas.exception_request import (
    ExceptionOutcome,
    ExceptionRequest,
    ExceptionStatus,
)
from compliance_engine.schemas.findings import (
    ComplianceRecord,
    ComplianceStatus,
    Finding,
    PolicyScore,
    PolicyStatus,
    RuleEvaluation,
    UnclearReason,
)
from compliance_engine.schemas.risk import (
    ClusterLevel,
    DashboardRow,
    RiskAggregation,
    RiskBreakdown,
    RiskCluster,
    TopDriver,
)
from compliance_engine.schemas.rules import (
    CLAUSE_TAXONOMY,
    RISK_CATEGORIES,
    Policy,
    RiskCategory,
    Rule,
    RuleType,
    Severity,
    rule_key,
)

__all__ = [
    "CLAUSE_TAXONOMY",
    "MAX_EXCERPT_CHARS",
    "RISK_CATEGORIES",
    "ChangeItem",
    "ChangeType",
    "ClusterLevel",
    "CompareDriver",
    "ComplianceRecord",
    "ComplianceStatus",
    "DashboardRow",
    "DealDecision",
    "DealOutcome",
    "DecisionCounts",
    "DecisionDriver",
    "DecisionPreview",
    "DecisionStatus",
    "DecisionTransition",
    "DeltaLabel",
    "EvidenceItem",
    "ExceptionCounts",
    "ExceptionOutcome",
    "ExceptionRequest",
    "ExceptionStatus",
    "Finding",
    "FindingSnapshot",
    "Policy",
    "PolicyScore",
    "PolicyStatus",
    "RiskAggregation",
    "RiskBreakdown",
    "RiskCategory",
    "RiskCluster",
    "Rule",
    "RuleEvaluation",
    "RuleType",
    "ScoreDelta",
    "Severity",
    "TopDriver",
    "UnclearReason",
    "VersionCompareResult",
    "VersionScores",
    "VersionSide",
    "rule_key",
]
