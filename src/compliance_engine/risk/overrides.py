"""Approved-exception overrides shared by aggregation, dashboard and diff."""

from typing import AbstractSet, Iterable

from compliance_engine.schemas.findings import Finding

MAX_SCORE = 100


def is_overridden(finding: Finding, overridden_finding_ids: AbstractSet[str]) -> bool:
    """A finding is overridden only if it is an issue with an approved exception."""
    return finding.is_issue and finding.finding_id in overridden_finding_ids


def effective_score(
    raw_score: int,
    findings: Iterable[Finding],
    overridden_finding_ids: AbstractSet[str],
) -> int:
    """Credit back the weight of every overridden finding, clamped to 100."""
    score = raw_score
    for finding in findings:
        if is_overridden(finding, overridden_finding_ids):
            score = min(MAX_SCORE, score + finding.weight)
    return score
