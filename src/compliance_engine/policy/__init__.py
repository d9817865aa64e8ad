"""Rule evaluation and policy scoring."""

from compliance_engine.policy.evidence_resolver import EvidenceSet, resolve_evidence
from compliance_engine.policy.policy_scorer import (
    EvaluationMode,
    finding_id_for,
    score_policy,
    score_to_status,
)
from compliance_engine.policy.rule_evaluator import evaluate_rule
from compliance_engine.policy.value_coercion import (
    NumericComparable,
    StringSetComparable,
    Unparseable,
    coerce_allowed_values,
    coerce_number,
)

__all__ = [
    "EvaluationMode",
    "EvidenceSet",
    "NumericComparable",
    "StringSetComparable",
    "Unparseable",
    "coerce_allowed_values",
    "coerce_number",
    "evaluate_rule",
    "finding_id_for",
    "resolve_evidence",
    "score_policy",
    "score_to_status",
]
