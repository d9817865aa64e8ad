"""Pydantic models for deal decisions.

A decision preview is recomputed on demand. A persisted DealDecision moves
DRAFT -> FINAL once; FINAL is terminal.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from compliance_engine.schemas.findings import ComplianceStatus
from compliance_engine.schemas.risk import RiskBreakdown
from compliance_engine.schemas.rules import RiskCategory, Severity


class DealOutcome(str, Enum):
    """Go/no-go outcome for a contract version under a policy."""

    GO = "GO"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    NO_GO = "NO_GO"


class DecisionStatus(str, Enum):
    """Lifecycle of a persisted deal decision."""

    DRAFT = "DRAFT"
    FINAL = "FINAL"


class ExceptionCounts(BaseModel):
    """Exception request counts for a (version, policy)."""

    open: int = Field(default=0, ge=0, description="REQUESTED exceptions")
    approved: int = Field(default=0, ge=0, description="APPROVED exceptions")


class DecisionCounts(BaseModel):
    violations: int = 0
    critical_violations: int = 0
    unclear: int = 0
    overridden: int = 0
    open_exceptions: int = 0
    approved_exceptions: int = 0


class DecisionDriver(BaseModel):
    clause_category: str
    risk_category: Optional[RiskCategory] = None
    severity: Optional[Severity] = None
    weight: int
    status: ComplianceStatus
    recommendation: Optional[str] = None


class DecisionPreview(BaseModel):
    """Outcome, counts and rationale computed from an aggregation."""

    version_id: str = ""
    policy_id: str = ""
    effective_score: int = Field(..., ge=0, le=100)
    raw_score: int = Field(..., ge=0, le=100)
    outcome: DealOutcome
    status_suggestion: DecisionStatus = DecisionStatus.DRAFT
    counts: DecisionCounts
    top_drivers: List[DecisionDriver] = Field(default_factory=list)
    rationale_markdown: str
    risk_breakdown: Dict[str, RiskBreakdown] = Field(default_factory=dict)


class DealDecision(BaseModel):
    """Persisted decision record for one (version, policy)."""

    version_id: str = ""
    policy_id: str = ""
    status: DecisionStatus = DecisionStatus.DRAFT
    outcome: DealOutcome
    rationale: str
    finalized_by: Optional[str] = None
    finalized_at: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.status == DecisionStatus.FINAL


class DecisionTransition(BaseModel):
    """Result of a draft/finalize call.

    ``already_final`` marks the idempotent no-op where the stored decision was
    FINAL and has been returned unchanged.
    """

    decision: DealDecision
    changed: bool
    already_final: bool = False
