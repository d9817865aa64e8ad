"""Scoring thresholds and caps for the compliance engine.

All evaluation strictness lives here so alternate policies can be tested
without code changes. Defaults match the production scoring model.
"""

import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_LOW_CONFIDENCE_THRESHOLD = 0.75


class EngineConfig(BaseModel):
    """Thresholds injected into the evaluator, scorer, aggregator and decision engine.

    Attributes:
        required_confidence: Minimum confidence for REQUIRED and value rules.
        forbidden_confidence: Confidence at which a FORBIDDEN clause counts as present.
        low_confidence_threshold: Evidence below this is recorded UNCLEAR
            (LOW_CONFIDENCE) and never reaches the evaluator.
        critical_score_cap: Score ceiling when any CRITICAL rule is violated.
        compliant_min_score: Lowest score mapped to COMPLIANT.
        needs_review_min_score: Lowest score mapped to NEEDS_REVIEW.
        no_go_score_threshold: Effective scores below this are NO_GO / NON_COMPLIANT.

    Example:
        >>> config = EngineConfig(low_confidence_threshold=0.6)
    """

    required_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    forbidden_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    low_confidence_threshold: float = Field(
        default=DEFAULT_LOW_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0
    )

    max_score: int = Field(default=100, gt=0)
    critical_score_cap: int = Field(default=40, ge=0, le=100)
    compliant_min_score: int = Field(default=80, ge=0, le=100)
    needs_review_min_score: int = Field(default=50, ge=0, le=100)
    no_go_score_threshold: int = Field(default=60, ge=0, le=100)

    cluster_driver_limit: int = Field(default=3, ge=0)
    decision_driver_limit: int = Field(default=5, ge=0)
    compare_driver_limit: int = Field(default=5, ge=0)

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def validate_score_bands(self) -> "EngineConfig":
        if self.needs_review_min_score > self.compliant_min_score:
            raise ValueError(
                "needs_review_min_score must not exceed compliant_min_score"
            )
        return self

    @classmethod
    def from_env(cls, prefix: str = "COMPLIANCE_") -> "EngineConfig":
        """Create config from environment variables.

        Environment variables:
            CONFIDENCE_THRESHOLD: Low-confidence threshold (0..1)
            {prefix}REQUIRED_CONFIDENCE: Evaluator threshold for REQUIRED/value rules
            {prefix}FORBIDDEN_CONFIDENCE: Evaluator threshold for FORBIDDEN rules
            {prefix}CRITICAL_SCORE_CAP: Score cap on CRITICAL violations
            {prefix}NO_GO_SCORE_THRESHOLD: Effective score below which outcome is NO_GO

        Malformed or out-of-range values are ignored with a warning.

        Args:
            prefix: Environment variable prefix (default: COMPLIANCE_)

        Returns:
            EngineConfig with values from environment
        """
        kwargs: Dict[str, Any] = {}

        threshold = _read_unit_interval("CONFIDENCE_THRESHOLD")
        if threshold is not None:
            kwargs["low_confidence_threshold"] = threshold

        for field_name in ("required_confidence", "forbidden_confidence"):
            value = _read_unit_interval(f"{prefix}{field_name.upper()}")
            if value is not None:
                kwargs[field_name] = value

        for field_name in ("critical_score_cap", "no_go_score_threshold"):
            raw = os.getenv(f"{prefix}{field_name.upper()}")
            if raw:
                try:
                    kwargs[field_name] = int(raw)
                except ValueError:
                    logger.warning(f"Ignoring non-integer {prefix}{field_name.upper()}={raw!r}")

        return cls(**kwargs)


def _read_unit_interval(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}")
        return None
    if not 0.0 <= value <= 1.0:
        logger.warning(f"Ignoring out-of-range {name}={raw!r}; expected 0..1")
        return None
    return value


DEFAULT_CONFIG = EngineConfig()
