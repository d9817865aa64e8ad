"""Pydantic models for per-rule findings and the per-policy compliance record."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from compliance_engine.schemas.rules import RiskCategory, Severity, rule_key


class ComplianceStatus(str, Enum):
    """Verdict of one rule against one contract version."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    UNCLEAR = "UNCLEAR"
    NOT_APPLICABLE = "NOT_APPLICABLE"


ISSUE_STATUSES = {ComplianceStatus.VIOLATION, ComplianceStatus.UNCLEAR}


class UnclearReason(str, Enum):
    """Why a finding was left UNCLEAR."""

    LOW_CONFIDENCE = "LOW_CONFIDENCE"


class PolicyStatus(str, Enum):
    """Tri-state status derived from a score."""

    COMPLIANT = "COMPLIANT"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    NON_COMPLIANT = "NON_COMPLIANT"


class RuleEvaluation(BaseModel):
    """Raw output of evaluating one rule."""

    compliance_status: ComplianceStatus
    deduction: int = Field(default=0, ge=0)
    is_critical: bool = False


class Finding(BaseModel):
    """Compliance verdict for one rule against one contract version."""

    finding_id: str = Field(..., description="Stable id, unique per (version, rule)")
    rule_id: str = Field(default="", description="Rule that produced the finding")
    clause_category: str = Field(..., description="Clause taxonomy tag")
    compliance_status: ComplianceStatus
    severity: Optional[Severity] = None
    risk_category: Optional[RiskCategory] = None
    weight: int = Field(default=1, gt=0, description="Weight of the originating rule")
    recommendation: Optional[str] = Field(
        default=None, description="Rule recommendation, kept for violations only"
    )
    excerpt: Optional[str] = None
    value: Any = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    unclear_reason: Optional[UnclearReason] = None
    evaluated_at: Optional[str] = Field(
        default=None, description="ISO timestamp; metadata only"
    )

    @property
    def key(self) -> str:
        return rule_key(self.rule_id, self.clause_category)

    @property
    def is_issue(self) -> bool:
        """True for VIOLATION and UNCLEAR findings."""
        return self.compliance_status in ISSUE_STATUSES


class ComplianceRecord(BaseModel):
    """Score and status for one (contract version, policy) pair."""

    version_id: str = ""
    policy_id: str = ""
    raw_score: int = Field(..., ge=0, le=100)
    status: PolicyStatus


class PolicyScore(BaseModel):
    """Full output of scoring one policy against one version."""

    version_id: str = ""
    policy_id: str = ""
    findings: List[Finding] = Field(default_factory=list)
    raw_score: int = Field(..., ge=0, le=100)
    status: PolicyStatus
    violations_count: int = 0
    has_critical_violation: bool = False

    def compliance_record(self) -> ComplianceRecord:
        return ComplianceRecord(
            version_id=self.version_id,
            policy_id=self.policy_id,
            raw_score=self.raw_score,
            status=self.status,
        )
