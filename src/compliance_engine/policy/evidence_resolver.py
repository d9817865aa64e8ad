"""Normalisation of neutral clause extractions into evidence keyed by category."""

import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional

from compliance_engine.schemas.evidence import MAX_EXCERPT_CHARS, EvidenceItem
from compliance_engine.schemas.rules import CLAUSE_TAXONOMY, FALLBACK_CLAUSE_CATEGORY

logger = logging.getLogger(__name__)

# Accepted spellings, first match wins
_CATEGORY_KEYS = ("clause_category", "clauseCategory", "clauseType", "clause_type")
_VALUE_KEYS = ("value", "extractedValue", "extracted_value")
_EXCERPT_KEYS = ("excerpt", "extractedText", "extracted_text")
_LOCATION_KEYS = ("source_location", "sourceLocation")

EvidenceSet = Dict[str, EvidenceItem]


def resolve_evidence(raw_items: Iterable[Any]) -> EvidenceSet:
    """Build an evidence set from raw extraction items.

    Unknown clause categories collapse to OTHER and only the first item per
    category is kept. Non-mapping items are skipped.

    Args:
        raw_items: Extraction dicts (or EvidenceItem instances).

    Returns:
        Evidence keyed by clause category, in first-seen order.
    """
    evidence: EvidenceSet = {}
    for raw in raw_items:
        if isinstance(raw, EvidenceItem):
            item = raw
        elif isinstance(raw, Mapping):
            item = _normalize_item(raw)
        else:
            logger.debug(f"Skipping non-object extraction item: {raw!r}")
            continue

        if item.clause_category in evidence:
            logger.debug(f"Duplicate extraction for {item.clause_category}; keeping first")
            continue
        evidence[item.clause_category] = item

    return evidence


def normalize_category(raw: Any) -> str:
    """Map a raw clause tag onto the taxonomy, OTHER when unknown."""
    if isinstance(raw, str):
        category = raw.strip().upper()
        if category in CLAUSE_TAXONOMY:
            return category
    return FALLBACK_CLAUSE_CATEGORY


def _normalize_item(raw: Mapping[str, Any]) -> EvidenceItem:
    excerpt = _first(raw, _EXCERPT_KEYS)
    location = _first(raw, _LOCATION_KEYS)
    return EvidenceItem(
        clause_category=normalize_category(_first(raw, _CATEGORY_KEYS)),
        value=_first(raw, _VALUE_KEYS),
        excerpt=excerpt[:MAX_EXCERPT_CHARS] if isinstance(excerpt, str) else None,
        confidence=_clamp_confidence(raw.get("confidence")),
        source_location=dict(location) if isinstance(location, Mapping) else None,
    )


def _first(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _clamp_confidence(value: Optional[Any]) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, float(value)))
