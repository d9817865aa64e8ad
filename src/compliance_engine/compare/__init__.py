"""Version comparison."""

from compliance_engine.compare.version_differ import (
    NARRATIVE_CONFIDENCE_THRESHOLD,
    compare_versions,
    explain_change,
)

__all__ = ["NARRATIVE_CONFIDENCE_THRESHOLD", "compare_versions", "explain_change"]
