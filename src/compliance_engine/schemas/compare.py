"""Pydantic models for comparing two contract versions under one policy."""

from enum import Enum
from typing import Any, List, Optional, Set

from pydantic import BaseModel, Field

from compliance_engine.schemas.findings import ComplianceRecord, ComplianceStatus, Finding
from compliance_engine.schemas.rules import RiskCategory, Severity


class ChangeType(str, Enum):
    ADDED = "ADDED"
    REMOVED = "REMOVED"
    MODIFIED = "MODIFIED"
    UNCHANGED = "UNCHANGED"


class DeltaLabel(str, Enum):
    IMPROVED = "IMPROVED"
    WORSENED = "WORSENED"
    UNCHANGED = "UNCHANGED"


class VersionSide(BaseModel):
    """One side of a comparison: a version's analysis plus its overrides."""

    version_id: str
    compliance: Optional[ComplianceRecord] = Field(
        default=None, description="None when the version was never analysed"
    )
    findings: List[Finding] = Field(default_factory=list)
    overridden_finding_ids: Set[str] = Field(default_factory=set)


class FindingSnapshot(BaseModel):
    """State of one finding on one side of the comparison."""

    status: ComplianceStatus
    overridden: bool = False
    value: Any = None
    excerpt: Optional[str] = None
    confidence: Optional[float] = None


class ChangeItem(BaseModel):
    """Per-rule-key difference between the two versions."""

    key: str
    clause_category: str
    rule_id: Optional[str] = None
    severity: Optional[Severity] = None
    risk_category: Optional[RiskCategory] = None
    weight: int
    change_type: ChangeType
    from_snapshot: Optional[FindingSnapshot] = None
    to_snapshot: Optional[FindingSnapshot] = None
    recommendation: Optional[str] = None
    delta_impact: int = Field(
        default=0, description="Positive when the change reduced risk"
    )
    why: str


class CompareDriver(BaseModel):
    key: str
    clause_category: str
    delta_impact: int
    reason: str


class VersionScores(BaseModel):
    version_id: str
    raw_score: int = Field(..., ge=0, le=100)
    effective_score: int = Field(..., ge=0, le=100)


class ScoreDelta(BaseModel):
    raw: int
    effective: int
    label: DeltaLabel


class VersionCompareResult(BaseModel):
    from_version: VersionScores
    to_version: VersionScores
    delta: ScoreDelta
    changes: List[ChangeItem] = Field(default_factory=list)
    top_drivers: List[CompareDriver] = Field(default_factory=list)
