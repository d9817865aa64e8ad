"""Typed failures surfaced by the compliance engine.

Only precondition failures raise. Value coercion problems degrade to an
UNCLEAR finding, and idempotent no-ops are reported on result objects.
"""

from typing import Optional


class ComplianceEngineError(Exception):
    """Base class for all engine errors."""

    pass


class MissingEvidenceError(ComplianceEngineError):
    """Evidence-backed scoring was requested but the version has no evidence."""

    def __init__(self, version_id: Optional[str] = None):
        self.version_id = version_id
        label = version_id or "<unknown>"
        super().__init__(
            f"No clause evidence for version {label}; run extraction before analysis"
        )


class MissingAnalysisError(ComplianceEngineError):
    """A version has no compliance record for the requested policy."""

    def __init__(self, version_id: Optional[str] = None, policy_id: Optional[str] = None):
        self.version_id = version_id
        self.policy_id = policy_id
        label = version_id or "<unknown>"
        message = f"Missing analysis for version {label}"
        if policy_id:
            message += f" (policy {policy_id})"
        super().__init__(message)


class InvalidTransitionError(ComplianceEngineError):
    """A lifecycle move that the current state does not allow."""

    pass


class PolicyLoadError(ComplianceEngineError):
    """A policy or evidence file could not be read or validated."""

    pass


class DuplicateRuleError(ComplianceEngineError):
    """Two rules in one evaluation share a rule key."""

    def __init__(self, rule_key: str):
        self.rule_key = rule_key
        super().__init__(
            f"Duplicate rule key '{rule_key}'; give each rule on the same clause its own id"
        )
