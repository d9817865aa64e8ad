"""Tests for policy scoring."""

import pytest
from pydantic import ValidationError

from compliance_engine.config import EngineConfig
from compliance_engine.errors import DuplicateRuleError, MissingEvidenceError
from compliance_engine.policy import EvaluationMode, score_policy, score_to_status
from compliance_engine.schemas import (
    ComplianceStatus,
    PolicyStatus,
    RuleType,
    Severity,
    UnclearReason,
)

from engine_test_helpers import make_evidence, make_rule

FIXED_TIME = "2026-01-01T00:00:00+00:00"


def _evidence(*items):
    return {item.clause_category: item for item in items}


class TestEmptyPolicy:
    def test_zero_rules_scores_full(self):
        result = score_policy([], None)
        assert result.raw_score == 100
        assert result.status == PolicyStatus.COMPLIANT
        assert result.findings == []

    def test_zero_rules_checked_before_evidence(self):
        """No rules means no evidence is needed, even in EVIDENCE mode."""
        result = score_policy([], {}, mode=EvaluationMode.EVIDENCE)
        assert result.raw_score == 100


class TestMissingEvidence:
    @pytest.mark.parametrize("evidence", [None, {}])
    def test_evidence_mode_refuses(self, evidence):
        with pytest.raises(MissingEvidenceError) as exc_info:
            score_policy([make_rule()], evidence, version_id="v9")
        assert exc_info.value.version_id == "v9"
        assert "v9" in str(exc_info.value)

    def test_deterministic_mode_scores_without_evidence(self):
        rules = [make_rule(weight=10), make_rule(clause_category="LIABILITY", weight=15)]
        result = score_policy(rules, None, mode=EvaluationMode.DETERMINISTIC)
        assert result.raw_score == 75
        assert all(f.compliance_status == ComplianceStatus.VIOLATION for f in result.findings)


class TestRuleKeys:
    def test_rules_sharing_a_key_are_rejected(self):
        rules = [
            make_rule(RuleType.REQUIRED, rule_id="", weight=10),
            make_rule(RuleType.MIN_VALUE, rule_id="", expected_value=30, weight=20),
        ]
        with pytest.raises(DuplicateRuleError) as exc_info:
            score_policy(rules, _evidence(make_evidence(value=15)), version_id="v1")
        assert exc_info.value.rule_key == "TERMINATION"

    def test_duplicates_rejected_in_deterministic_mode(self):
        rules = [make_rule(rule_id="r1"), make_rule(rule_id="r1", clause_category="SLA")]
        with pytest.raises(DuplicateRuleError):
            score_policy(rules, None, mode=EvaluationMode.DETERMINISTIC)

    def test_same_clause_with_distinct_ids(self):
        rules = [
            make_rule(RuleType.REQUIRED, rule_id="notice-present", weight=10),
            make_rule(RuleType.MIN_VALUE, rule_id="notice-min", expected_value=30, weight=20),
        ]
        result = score_policy(rules, _evidence(make_evidence(value=15)), version_id="v1")
        ids = [f.finding_id for f in result.findings]
        assert ids == ["v1:notice-present", "v1:notice-min"]
        assert len(set(ids)) == len(ids)
        assert result.raw_score == 80

    def test_unknown_clause_category_rejected(self):
        with pytest.raises(ValidationError, match="Unknown clause category"):
            make_rule(clause_category="WARRANTY")

    def test_clause_category_normalized(self):
        assert make_rule(clause_category=" sla ").clause_category == "SLA"


class TestScoring:
    def test_min_value_compliant_scenario(self):
        rule = make_rule(RuleType.MIN_VALUE, expected_value=30, weight=10)
        result = score_policy(
            [rule], _evidence(make_evidence(value={"noticeDays": 45}, confidence=0.8))
        )
        assert result.findings[0].compliance_status == ComplianceStatus.COMPLIANT
        assert result.raw_score == 100

    def test_min_value_violation_scenario(self):
        rule = make_rule(RuleType.MIN_VALUE, expected_value=30, weight=10)
        result = score_policy(
            [rule], _evidence(make_evidence(value={"noticeDays": 15}, confidence=0.8))
        )
        assert result.findings[0].compliance_status == ComplianceStatus.VIOLATION
        assert result.raw_score == 90
        assert result.status == PolicyStatus.COMPLIANT
        assert result.violations_count == 1

    def test_non_required_without_evidence_is_not_applicable(self):
        rules = [
            make_rule(RuleType.MIN_VALUE, clause_category="PAYMENT_TERMS", expected_value=30),
            make_rule(RuleType.REQUIRED, clause_category="LIABILITY"),
        ]
        result = score_policy(rules, _evidence(make_evidence("LIABILITY")))
        assert result.findings[0].compliance_status == ComplianceStatus.NOT_APPLICABLE
        assert result.findings[1].compliance_status == ComplianceStatus.COMPLIANT
        assert result.raw_score == 100

    def test_score_never_below_zero(self):
        rules = [make_rule(rule_id=f"r{i}", weight=40) for i in range(5)]
        result = score_policy(rules, _evidence(make_evidence("OTHER")))
        assert result.raw_score == 0
        assert result.status == PolicyStatus.NON_COMPLIANT

    def test_critical_violation_caps_score(self):
        rules = [
            make_rule(clause_category="LIABILITY", weight=1, severity=Severity.CRITICAL),
            make_rule(clause_category="TERMINATION", weight=5),
        ]
        result = score_policy(rules, _evidence(make_evidence("TERMINATION")))
        assert result.raw_score == 40
        assert result.has_critical_violation is True
        assert result.status == PolicyStatus.NON_COMPLIANT

    def test_critical_cap_does_not_raise_lower_score(self):
        rules = [
            make_rule(clause_category="LIABILITY", weight=50, severity=Severity.CRITICAL),
            make_rule(clause_category="SLA", weight=30),
        ]
        result = score_policy(rules, _evidence(make_evidence("OTHER")))
        assert result.raw_score == 20

    def test_custom_critical_cap(self):
        rules = [make_rule(clause_category="LIABILITY", weight=1, severity=Severity.CRITICAL)]
        config = EngineConfig(critical_score_cap=25)
        result = score_policy(rules, _evidence(make_evidence("OTHER")), config=config)
        assert result.raw_score == 25

    @pytest.mark.parametrize(
        "score,status",
        [
            (100, PolicyStatus.COMPLIANT),
            (80, PolicyStatus.COMPLIANT),
            (79, PolicyStatus.NEEDS_REVIEW),
            (50, PolicyStatus.NEEDS_REVIEW),
            (49, PolicyStatus.NON_COMPLIANT),
            (0, PolicyStatus.NON_COMPLIANT),
        ],
    )
    def test_status_thresholds(self, score, status):
        assert score_to_status(score) == status

    @pytest.mark.parametrize("weights", [[1], [10, 20], [33, 33, 33], [99, 2], [5] * 30])
    def test_score_in_range(self, weights):
        rules = [make_rule(rule_id=f"r{i}", weight=w) for i, w in enumerate(weights)]
        result = score_policy(rules, _evidence(make_evidence("OTHER")))
        assert 0 <= result.raw_score <= 100
        assert result.raw_score == max(0, 100 - sum(weights))


class TestLowConfidence:
    def test_low_confidence_marks_unclear_without_deduction(self):
        rule = make_rule(RuleType.REQUIRED, weight=20)
        result = score_policy([rule], _evidence(make_evidence(confidence=0.6)))
        finding = result.findings[0]
        assert finding.compliance_status == ComplianceStatus.UNCLEAR
        assert finding.unclear_reason == UnclearReason.LOW_CONFIDENCE
        assert result.raw_score == 100

    def test_low_confidence_applies_to_every_rule_type(self):
        rules = [
            make_rule(RuleType.FORBIDDEN, clause_category="SLA"),
            make_rule(RuleType.MAX_VALUE, clause_category="PAYMENT_TERMS", expected_value=1),
        ]
        evidence = _evidence(
            make_evidence("SLA", confidence=0.7),
            make_evidence("PAYMENT_TERMS", value=90, confidence=0.7),
        )
        result = score_policy(rules, evidence)
        assert [f.unclear_reason for f in result.findings] == [UnclearReason.LOW_CONFIDENCE] * 2
        assert result.raw_score == 100

    def test_threshold_from_config(self):
        config = EngineConfig(low_confidence_threshold=0.5)
        result = score_policy([make_rule()], _evidence(make_evidence(confidence=0.6)), config=config)
        assert result.findings[0].compliance_status == ComplianceStatus.COMPLIANT
        assert result.findings[0].unclear_reason is None

    def test_at_threshold_is_evaluated(self):
        result = score_policy([make_rule()], _evidence(make_evidence(confidence=0.75)))
        assert result.findings[0].compliance_status == ComplianceStatus.COMPLIANT


class TestFindings:
    def test_findings_follow_rule_order(self):
        rules = [
            make_rule(clause_category="SLA"),
            make_rule(clause_category="LIABILITY"),
            make_rule(clause_category="SCOPE"),
        ]
        result = score_policy(rules, _evidence(make_evidence("LIABILITY")))
        assert [f.clause_category for f in result.findings] == ["SLA", "LIABILITY", "SCOPE"]

    def test_finding_ids_are_deterministic(self):
        rules = [make_rule(rule_id="r1"), make_rule(rule_id="", clause_category="SLA")]
        result = score_policy(rules, _evidence(make_evidence()), version_id="v2")
        assert [f.finding_id for f in result.findings] == ["v2:r1", "v2:SLA"]

    def test_recommendation_kept_only_on_violation(self):
        rules = [
            make_rule(clause_category="LIABILITY", recommendation="Cap liability."),
            make_rule(clause_category="TERMINATION", recommendation="Add notice."),
            make_rule(clause_category="SLA", recommendation="Define SLA."),
        ]
        evidence = _evidence(
            make_evidence("TERMINATION"), make_evidence("SLA", confidence=0.6)
        )
        result = score_policy(rules, evidence)
        assert result.findings[0].recommendation == "Cap liability."
        assert result.findings[1].recommendation is None
        assert result.findings[2].recommendation is None

    def test_finding_carries_evidence_and_rule_metadata(self):
        rule = make_rule(
            RuleType.MIN_VALUE,
            expected_value=30,
            severity=Severity.HIGH,
            risk_category="OPERATIONAL",
        )
        item = make_evidence(value={"noticeDays": 60}, confidence=0.8, excerpt="sixty days")
        finding = score_policy([rule], _evidence(item)).findings[0]
        assert finding.value == {"noticeDays": 60}
        assert finding.excerpt == "sixty days"
        assert finding.confidence == 0.8
        assert finding.severity == Severity.HIGH
        assert finding.risk_category.value == "OPERATIONAL"

    def test_idempotent(self):
        rules = [
            make_rule(clause_category="LIABILITY", severity=Severity.CRITICAL),
            make_rule(RuleType.MIN_VALUE, expected_value=30),
        ]
        evidence = _evidence(make_evidence(value=10))
        first = score_policy(rules, evidence, version_id="v1", evaluated_at=FIXED_TIME)
        second = score_policy(rules, evidence, version_id="v1", evaluated_at=FIXED_TIME)
        assert first == second

    def test_status_and_score_independent_of_timestamp(self):
        rules = [make_rule(), make_rule(clause_category="SLA")]
        evidence = _evidence(make_evidence())
        first = score_policy(rules, evidence)
        second = score_policy(rules, evidence, evaluated_at=FIXED_TIME)
        assert first.raw_score == second.raw_score
        assert [f.compliance_status for f in first.findings] == [
            f.compliance_status for f in second.findings
        ]

    def test_compliance_record(self):
        result = score_policy([make_rule()], None, version_id="v1", policy_id="p1",
                              mode=EvaluationMode.DETERMINISTIC)
        record = result.compliance_record()
        assert record.version_id == "v1"
        assert record.policy_id == "p1"
        assert record.raw_score == 90
        assert record.status == PolicyStatus.COMPLIANT
