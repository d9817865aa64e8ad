"""Risk aggregation over scored findings."""

from compliance_engine.risk.aggregator import aggregate_risk, rank_drivers
from compliance_engine.risk.dashboard import dashboard_row
from compliance_engine.risk.overrides import effective_score, is_overridden

__all__ = [
    "aggregate_risk",
    "dashboard_row",
    "effective_score",
    "is_overridden",
    "rank_drivers",
]
