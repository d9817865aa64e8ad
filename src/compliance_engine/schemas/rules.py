"""Pydantic models for policy rules.

A rule describes one deterministic check against a single clause category.
Rules are immutable for the duration of an evaluation and owned by a Policy.
"""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

# ── Constants ────────────────────────────────────────────────────────

CLAUSE_TAXONOMY = (
    "TERMINATION",
    "LIABILITY",
    "INTELLECTUAL_PROPERTY",
    "PAYMENT_TERMS",
    "DATA_PRIVACY",
    "CONFIDENTIALITY",
    "GOVERNING_LAW",
    "SLA",
    "SCOPE",
    "OTHER",
)

FALLBACK_CLAUSE_CATEGORY = "OTHER"


# ── Enums ────────────────────────────────────────────────────────────

class RuleType(str, Enum):
    """Kind of check a rule performs."""

    REQUIRED = "REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    MIN_VALUE = "MIN_VALUE"
    MAX_VALUE = "MAX_VALUE"
    ALLOWED_VALUES = "ALLOWED_VALUES"


VALUE_RULE_TYPES = {RuleType.MIN_VALUE, RuleType.MAX_VALUE, RuleType.ALLOWED_VALUES}


class Severity(str, Enum):
    """Rule severity."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Most severe first
SEVERITY_ORDER: List[Severity] = [
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
]


def severity_rank(severity: Optional[Severity]) -> int:
    """Rank a severity, lower is more severe. None ranks last."""
    if severity is None:
        return len(SEVERITY_ORDER)
    return SEVERITY_ORDER.index(Severity(severity))


class RiskCategory(str, Enum):
    """Risk category a rule rolls up into."""

    LEGAL = "LEGAL"
    FINANCIAL = "FINANCIAL"
    OPERATIONAL = "OPERATIONAL"
    DATA = "DATA"
    SECURITY = "SECURITY"


RISK_CATEGORIES: List[RiskCategory] = list(RiskCategory)


# ── Models ───────────────────────────────────────────────────────────

def rule_key(rule_id: Optional[str], clause_category: str) -> str:
    """Canonical join key: rule id, falling back to the clause category."""
    return rule_id or clause_category


class Rule(BaseModel):
    """One policy check."""

    id: str = Field(default="", description="Rule identifier")
    clause_category: str = Field(..., description="Clause taxonomy tag the rule checks")
    rule_type: Union[RuleType, str] = Field(
        ..., description="REQUIRED, FORBIDDEN, MIN_VALUE, MAX_VALUE or ALLOWED_VALUES"
    )
    expected_value: Any = Field(
        default=None, description="Threshold or allowed set for value rules"
    )
    weight: int = Field(default=1, gt=0, description="Score deduction on violation")
    severity: Optional[Severity] = Field(default=None, description="Rule severity")
    risk_category: Optional[RiskCategory] = Field(
        default=None, description="Risk category for aggregation"
    )
    recommendation: Optional[str] = Field(
        default=None, description="Remediation text shown for violations"
    )
    policy_id: Optional[str] = Field(default=None, description="Owning policy")

    model_config = {"frozen": True}

    @field_validator("clause_category", mode="before")
    @classmethod
    def normalize_clause_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in CLAUSE_TAXONOMY:
                raise ValueError(
                    f"Unknown clause category '{v}'; expected one of {', '.join(CLAUSE_TAXONOMY)}"
                )
        return v

    @field_validator("rule_type", mode="before")
    @classmethod
    def normalize_rule_type(cls, v: Any) -> Any:
        """Map known rule types onto the enum; keep unknown ones as plain strings."""
        if isinstance(v, RuleType):
            return v
        if isinstance(v, str):
            upper = v.strip().upper()
            try:
                return RuleType(upper)
            except ValueError:
                return upper
        return v

    @property
    def key(self) -> str:
        return rule_key(self.id, self.clause_category)


class Policy(BaseModel):
    """A named, ordered set of rules."""

    policy_id: str = Field(..., min_length=1, description="Policy identifier")
    name: str = Field(default="", description="Human-readable policy name")
    description: Optional[str] = Field(default=None)
    rules: List[Rule] = Field(default_factory=list)

    @field_validator("rules")
    @classmethod
    def validate_unique_keys(cls, v: List[Rule]) -> List[Rule]:
        seen = set()
        for rule in v:
            if rule.key in seen:
                raise ValueError(f"Duplicate rule key '{rule.key}'")
            seen.add(rule.key)
        return v
