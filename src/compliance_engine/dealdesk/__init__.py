"""Deal desk decisions."""

from compliance_engine.dealdesk.decision_engine import (
    compute_decision,
    draft_decision,
    finalize_decision,
    render_rationale,
)

__all__ = [
    "compute_decision",
    "draft_decision",
    "finalize_decision",
    "render_rationale",
]
