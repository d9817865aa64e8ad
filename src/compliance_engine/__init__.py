"""
Compliance Engine - deterministic contract compliance scoring.

Turns neutral clause evidence into per-rule findings, a 0-100 score, risk
clusters, a go/no-go deal decision and a diff between contract versions.
"""

__version__ = "0.1.0"

from compliance_engine.compare import compare_versions
from compliance_engine.config import EngineConfig, default_policy, load_evidence, load_policy
from compliance_engine.dealdesk import compute_decision, draft_decision, finalize_decision
from compliance_engine.errors import (
    ComplianceEngineError,
    DuplicateRuleError,
    InvalidTransitionError,
    MissingAnalysisError,
    MissingEvidenceError,
    PolicyLoadError,
)
from compliance_engine.exception_workflow import (
    approved_finding_ids,
    count_exceptions,
    decide_exception,
    request_exception,
    withdraw_exception,
)
from compliance_engine.policy import EvaluationMode, evaluate_rule, resolve_evidence, score_policy
from compliance_engine.risk import aggregate_risk, dashboard_row

__all__ = [
    "ComplianceEngineError",
    "DuplicateRuleError",
    "EngineConfig",
    "EvaluationMode",
    "InvalidTransitionError",
    "MissingAnalysisError",
    "MissingEvidenceError",
    "PolicyLoadError",
    "aggregate_risk",
    "approved_finding_ids",
    "compare_versions",
    "compute_decision",
    "count_exceptions",
    "dashboard_row",
    "decide_exception",
    "default_policy",
    "draft_decision",
    "evaluate_rule",
    "finalize_decision",
    "load_evidence",
    "load_policy",
    "request_exception",
    "resolve_evidence",
    "score_policy",
    "withdraw_exception",
]
