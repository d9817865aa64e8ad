"""Pydantic models for risk aggregation.

Clusters are derived on read from a policy's findings and the set of
overridden finding ids. They are never persisted.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from compliance_engine.schemas.findings import ComplianceStatus, Finding, PolicyStatus
from compliance_engine.schemas.rules import RiskCategory, Severity


class ClusterLevel(str, Enum):
    """Risk level of one category cluster."""

    OK = "OK"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TopDriver(BaseModel):
    """A VIOLATION or UNCLEAR finding ranked by weight."""

    finding_id: str
    key: str
    clause_category: str
    risk_category: Optional[RiskCategory] = None
    severity: Optional[Severity] = None
    weight: int
    status: ComplianceStatus
    overridden: bool = False
    recommendation: Optional[str] = None
    reason: str


class RiskCluster(BaseModel):
    """Roll-up of one risk category for a (version, policy)."""

    risk_category: RiskCategory
    level: ClusterLevel
    violation_count: int = 0
    unclear_count: int = 0
    overridden_count: int = 0
    max_severity: Optional[Severity] = None
    total_weight: int = Field(
        default=0, description="Summed weight of non-overridden violations"
    )
    top_drivers: List[TopDriver] = Field(default_factory=list)


class RiskAggregation(BaseModel):
    """Aggregated risk view of one policy's findings for one version."""

    version_id: str = ""
    policy_id: str = ""
    overall_status: PolicyStatus
    raw_score: int = Field(..., ge=0, le=100)
    effective_score: int = Field(..., ge=0, le=100)
    clusters: List[RiskCluster] = Field(default_factory=list)
    top_drivers: List[TopDriver] = Field(default_factory=list)
    findings: List[Finding] = Field(
        default_factory=list, description="Findings the aggregation was built from"
    )
    overridden_finding_ids: List[str] = Field(
        default_factory=list, description="Sorted ids of overridden findings"
    )

    def cluster(self, risk_category: RiskCategory) -> RiskCluster:
        for cluster in self.clusters:
            if cluster.risk_category == risk_category:
                return cluster
        raise KeyError(risk_category)


class RiskBreakdown(BaseModel):
    """Violation and unclear counts for one risk category."""

    violations: int = 0
    unclear: int = 0


class DashboardRow(BaseModel):
    """Compact per-(version, policy) summary used by portfolio views."""

    version_id: str = ""
    policy_id: str = ""
    effective_score: int = Field(..., ge=0, le=100)
    status: PolicyStatus
    violation_count: int = 0
    unclear_count: int = 0
    overridden_count: int = 0
    risk_breakdown: Dict[str, RiskBreakdown] = Field(default_factory=dict)
