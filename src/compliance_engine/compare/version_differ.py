"""Structural diff of two contract versions analysed under one policy.

Findings are joined on the canonical rule key (rule id, falling back to the
clause category). A key present on one side only is ADDED or REMOVED; a key
on both sides is MODIFIED when status, override, value or excerpt differ.
"""

import logging
from typing import Dict, List, Optional, Tuple

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.errors import MissingAnalysisError
from compliance_engine.risk.overrides import effective_score, is_overridden
from compliance_engine.schemas.compare import (
    ChangeItem,
    ChangeType,
    CompareDriver,
    DeltaLabel,
    FindingSnapshot,
    ScoreDelta,
    VersionCompareResult,
    VersionScores,
    VersionSide,
)
from compliance_engine.schemas.findings import ComplianceStatus, Finding
from compliance_engine.utils.canonical import stable_json

logger = logging.getLogger(__name__)

# Narrative only: explains a move into or out of UNCLEAR. Scoring uses the
# EngineConfig thresholds and does not read this value.
NARRATIVE_CONFIDENCE_THRESHOLD = 0.75

VALUE_PREVIEW_CHARS = 50
MISSING_STATUS_LABEL = "n/a"


def compare_versions(
    from_side: VersionSide,
    to_side: VersionSide,
    config: Optional[EngineConfig] = None,
) -> VersionCompareResult:
    """Compare two analysed versions of a contract under the same policy.

    Args:
        from_side: Older version with its findings and overrides.
        to_side: Newer version with its findings and overrides.
        config: Limits; defaults to the production configuration.

    Returns:
        VersionCompareResult with per-key changes, score delta and drivers.

    Raises:
        MissingAnalysisError: If either side has no compliance record.
    """
    for side in (from_side, to_side):
        if side.compliance is None:
            raise MissingAnalysisError(side.version_id)

    config = config or DEFAULT_CONFIG
    from_by_key = _index(from_side.findings)
    to_by_key = _index(to_side.findings)
    keys = list(dict.fromkeys(list(from_by_key) + list(to_by_key)))

    changes = [
        _diff_key(
            key,
            from_by_key.get(key),
            to_by_key.get(key),
            from_side,
            to_side,
        )
        for key in keys
    ]

    movers = [c for c in changes if c.delta_impact != 0]
    movers.sort(key=lambda c: -abs(c.delta_impact))
    drivers = [
        CompareDriver(
            key=c.key,
            clause_category=c.clause_category,
            delta_impact=c.delta_impact,
            reason="Improved" if c.delta_impact > 0 else "Worsened",
        )
        for c in movers[: config.compare_driver_limit]
    ]

    from_scores = _scores(from_side)
    to_scores = _scores(to_side)
    effective_delta = to_scores.effective_score - from_scores.effective_score
    if effective_delta > 0:
        label = DeltaLabel.IMPROVED
    elif effective_delta < 0:
        label = DeltaLabel.WORSENED
    else:
        label = DeltaLabel.UNCHANGED

    logger.info(
        f"Compared {from_side.version_id} -> {to_side.version_id}: {label.value} "
        f"(effective {effective_delta:+d}, {sum(1 for c in changes if c.change_type != ChangeType.UNCHANGED)} changed keys)"
    )
    return VersionCompareResult(
        from_version=from_scores,
        to_version=to_scores,
        delta=ScoreDelta(
            raw=to_scores.raw_score - from_scores.raw_score,
            effective=effective_delta,
            label=label,
        ),
        changes=changes,
        top_drivers=drivers,
    )


def _index(findings: List[Finding]) -> Dict[str, Finding]:
    by_key: Dict[str, Finding] = {}
    for finding in findings:
        by_key[finding.key] = finding
    return by_key


def _scores(side: VersionSide) -> VersionScores:
    raw = side.compliance.raw_score
    return VersionScores(
        version_id=side.version_id,
        raw_score=raw,
        effective_score=effective_score(raw, side.findings, side.overridden_finding_ids),
    )


def _snapshot(finding: Optional[Finding], side: VersionSide) -> Optional[FindingSnapshot]:
    if finding is None:
        return None
    return FindingSnapshot(
        status=finding.compliance_status,
        overridden=is_overridden(finding, side.overridden_finding_ids),
        value=finding.value,
        excerpt=finding.excerpt,
        confidence=finding.confidence,
    )


def _impact(finding: Optional[Finding], snapshot: Optional[FindingSnapshot]) -> int:
    """Weight at risk: only non-overridden violations count."""
    if finding is None or snapshot is None:
        return 0
    if snapshot.status == ComplianceStatus.VIOLATION and not snapshot.overridden:
        return finding.weight
    return 0


def _diff_key(
    key: str,
    from_finding: Optional[Finding],
    to_finding: Optional[Finding],
    from_side: VersionSide,
    to_side: VersionSide,
) -> ChangeItem:
    base = from_finding or to_finding
    from_snap = _snapshot(from_finding, from_side)
    to_snap = _snapshot(to_finding, to_side)

    if from_snap is None:
        change_type = ChangeType.ADDED
    elif to_snap is None:
        change_type = ChangeType.REMOVED
    elif _differs(from_snap, to_snap):
        change_type = ChangeType.MODIFIED
    else:
        change_type = ChangeType.UNCHANGED

    recommendation = None
    if from_finding and from_finding.recommendation:
        recommendation = from_finding.recommendation
    elif to_finding and to_finding.recommendation:
        recommendation = to_finding.recommendation

    return ChangeItem(
        key=key,
        clause_category=base.clause_category,
        rule_id=base.rule_id or None,
        severity=(from_finding and from_finding.severity) or (to_finding and to_finding.severity),
        risk_category=(from_finding and from_finding.risk_category)
        or (to_finding and to_finding.risk_category),
        weight=base.weight,
        change_type=change_type,
        from_snapshot=from_snap,
        to_snapshot=to_snap,
        recommendation=recommendation,
        delta_impact=_impact(from_finding, from_snap) - _impact(to_finding, to_snap),
        why=explain_change(change_type, from_snap, to_snap),
    )


def _differs(a: FindingSnapshot, b: FindingSnapshot) -> bool:
    return (
        a.status != b.status
        or a.overridden != b.overridden
        or stable_json(a.value) != stable_json(b.value)
        or (a.excerpt or "") != (b.excerpt or "")
    )


def explain_change(
    change_type: ChangeType,
    from_snap: Optional[FindingSnapshot],
    to_snap: Optional[FindingSnapshot],
) -> str:
    """Human-readable explanation of one change item."""
    if change_type == ChangeType.ADDED:
        return f"Clause added in new version: {_status_label(to_snap)}"
    if change_type == ChangeType.REMOVED:
        return f"Clause removed in new version (was: {_status_label(from_snap)})"
    if change_type == ChangeType.UNCHANGED:
        return "Unchanged"

    parts: List[str] = []
    from_status = from_snap.status if from_snap else None
    to_status = to_snap.status if to_snap else None
    if from_status != to_status:
        parts.append(
            f"Compliance changed: {_status_label(from_snap)} → {_status_label(to_snap)}"
        )
        if to_status == ComplianceStatus.UNCLEAR:
            parts.append(f"Confidence below threshold ({NARRATIVE_CONFIDENCE_THRESHOLD})")
        elif from_status == ComplianceStatus.UNCLEAR:
            parts.append(f"Confidence now above threshold ({NARRATIVE_CONFIDENCE_THRESHOLD})")

    from_overridden = bool(from_snap and from_snap.overridden)
    to_overridden = bool(to_snap and to_snap.overridden)
    if from_overridden != to_overridden:
        if to_overridden:
            parts.append("Approved exception applied in new version")
        else:
            parts.append("Override no longer applied in new version")

    old_value, new_value = _values(from_snap, to_snap)
    if old_value and new_value and old_value != new_value:
        parts.append(f"Value changed: {_preview(old_value)} → {_preview(new_value)}")

    return ". ".join(parts) if parts else "Content or status changed"


def _values(
    from_snap: Optional[FindingSnapshot], to_snap: Optional[FindingSnapshot]
) -> Tuple[str, str]:
    return (
        stable_json(from_snap.value) if from_snap else "",
        stable_json(to_snap.value) if to_snap else "",
    )


def _preview(text: str) -> str:
    if len(text) > VALUE_PREVIEW_CHARS:
        return text[:VALUE_PREVIEW_CHARS] + "…"
    return text


def _status_label(snapshot: Optional[FindingSnapshot]) -> str:
    return snapshot.status.value if snapshot else MISSING_STATUS_LABEL
