"""Deterministic evaluation of one rule against one evidence item.

Rule types:
1. REQUIRED -> VIOLATION when the clause is absent or below required confidence
2. FORBIDDEN -> VIOLATION when the clause is present at forbidden confidence
3. MIN_VALUE / MAX_VALUE -> numeric comparison of the extracted value
4. ALLOWED_VALUES -> case-insensitive membership in the expected set
5. Anything else -> NOT_APPLICABLE

Value rules with an absent clause violate; a null value, low confidence or a
value that cannot be coerced leaves the finding UNCLEAR with no deduction.
"""

import logging
from typing import Optional

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.policy.value_coercion import (
    NumericComparable,
    StringSetComparable,
    coerce_allowed_values,
    coerce_number,
    coerce_string,
)
from compliance_engine.schemas.evidence import EvidenceItem
from compliance_engine.schemas.findings import ComplianceStatus, RuleEvaluation
from compliance_engine.schemas.rules import Rule, RuleType, Severity, VALUE_RULE_TYPES

logger = logging.getLogger(__name__)


def evaluate_rule(
    rule: Rule,
    evidence: Optional[EvidenceItem],
    config: Optional[EngineConfig] = None,
) -> RuleEvaluation:
    """Evaluate a single rule.

    Args:
        rule: The policy rule.
        evidence: Resolved evidence for the rule's clause category, or None.
        config: Thresholds; defaults to the production configuration.

    Returns:
        RuleEvaluation with status, deduction and criticality.
    """
    config = config or DEFAULT_CONFIG

    if rule.rule_type == RuleType.REQUIRED:
        status = _evaluate_required(evidence, config)
    elif rule.rule_type == RuleType.FORBIDDEN:
        status = _evaluate_forbidden(evidence, config)
    elif rule.rule_type in VALUE_RULE_TYPES:
        status = _evaluate_value(rule, evidence, config)
    else:
        logger.debug(f"Rule {rule.key}: unknown rule type {rule.rule_type!r}")
        status = ComplianceStatus.NOT_APPLICABLE

    is_violation = status == ComplianceStatus.VIOLATION
    result = RuleEvaluation(
        compliance_status=status,
        deduction=rule.weight if is_violation else 0,
        is_critical=is_violation and rule.severity == Severity.CRITICAL,
    )
    logger.debug(
        f"Rule {rule.key} ({_type_name(rule)}): {status.value}, "
        f"deduction={result.deduction}, critical={result.is_critical}"
    )
    return result


def _evaluate_required(
    evidence: Optional[EvidenceItem], config: EngineConfig
) -> ComplianceStatus:
    if evidence is None or evidence.confidence < config.required_confidence:
        return ComplianceStatus.VIOLATION
    return ComplianceStatus.COMPLIANT


def _evaluate_forbidden(
    evidence: Optional[EvidenceItem], config: EngineConfig
) -> ComplianceStatus:
    if evidence is None:
        return ComplianceStatus.NOT_APPLICABLE
    if evidence.confidence >= config.forbidden_confidence:
        return ComplianceStatus.VIOLATION
    return ComplianceStatus.COMPLIANT


def _evaluate_value(
    rule: Rule, evidence: Optional[EvidenceItem], config: EngineConfig
) -> ComplianceStatus:
    if evidence is None:
        return ComplianceStatus.VIOLATION
    if evidence.value is None or evidence.confidence < config.required_confidence:
        return ComplianceStatus.UNCLEAR

    if rule.rule_type == RuleType.ALLOWED_VALUES:
        return _compare_allowed(rule, evidence)
    return _compare_numeric(rule, evidence)


def _compare_numeric(rule: Rule, evidence: EvidenceItem) -> ComplianceStatus:
    found = coerce_number(evidence.value)
    expected = coerce_number(rule.expected_value)
    if not isinstance(found, NumericComparable) or not isinstance(
        expected, NumericComparable
    ):
        logger.debug(f"Rule {rule.key}: uncoercible value {evidence.value!r}")
        return ComplianceStatus.UNCLEAR

    if rule.rule_type == RuleType.MIN_VALUE:
        ok = found.number >= expected.number
    else:
        ok = found.number <= expected.number
    return ComplianceStatus.COMPLIANT if ok else ComplianceStatus.VIOLATION


def _compare_allowed(rule: Rule, evidence: EvidenceItem) -> ComplianceStatus:
    allowed = coerce_allowed_values(rule.expected_value)
    if not isinstance(allowed, StringSetComparable):
        logger.debug(f"Rule {rule.key}: expected value is not a set of strings")
        return ComplianceStatus.UNCLEAR
    if not allowed.values:
        return ComplianceStatus.COMPLIANT

    found = coerce_string(evidence.value)
    if found is None:
        logger.debug(f"Rule {rule.key}: uncoercible value {evidence.value!r}")
        return ComplianceStatus.UNCLEAR
    if found in allowed.values:
        return ComplianceStatus.COMPLIANT
    return ComplianceStatus.VIOLATION


def _type_name(rule: Rule) -> str:
    if isinstance(rule.rule_type, RuleType):
        return rule.rule_type.value
    return str(rule.rule_type)
