"""Tests for the portfolio dashboard row."""

from compliance_engine.risk import dashboard_row
from compliance_engine.schemas import ComplianceStatus, PolicyStatus, RiskCategory

from engine_test_helpers import make_finding, make_record


class TestDashboardRow:
    def test_clean_row(self):
        row = dashboard_row(make_record(100), [make_finding(status=ComplianceStatus.COMPLIANT)])
        assert row.status == PolicyStatus.COMPLIANT
        assert row.effective_score == 100
        assert set(row.risk_breakdown) == {c.value for c in RiskCategory}

    def test_counts_and_breakdown(self):
        findings = [
            make_finding("v1:a", risk_category=RiskCategory.DATA),
            make_finding("v1:b", status=ComplianceStatus.UNCLEAR, risk_category=RiskCategory.DATA),
            make_finding("v1:c", risk_category=RiskCategory.LEGAL),
        ]
        row = dashboard_row(make_record(80), findings, {"v1:c"})
        assert row.violation_count == 2
        assert row.unclear_count == 1
        assert row.overridden_count == 1
        assert row.effective_score == 90
        assert row.risk_breakdown["DATA"].violations == 1
        assert row.risk_breakdown["DATA"].unclear == 1
        assert row.risk_breakdown["SECURITY"].violations == 0
        assert row.status == PolicyStatus.NEEDS_REVIEW

    def test_overridden_violation_still_needs_review(self):
        row = dashboard_row(make_record(90), [make_finding("v1:a")], {"v1:a"})
        assert row.effective_score == 100
        assert row.status == PolicyStatus.NEEDS_REVIEW

    def test_low_score_is_non_compliant(self):
        row = dashboard_row(make_record(59, status=PolicyStatus.NEEDS_REVIEW), [])
        assert row.status == PolicyStatus.NON_COMPLIANT
