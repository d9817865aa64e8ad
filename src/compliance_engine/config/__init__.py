"""Engine configuration and policy loading."""

from compliance_engine.config.engine_config import DEFAULT_CONFIG, EngineConfig
from compliance_engine.config.policy_loader import (
    default_policy,
    load_evidence,
    load_policy,
)

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "default_policy",
    "load_evidence",
    "load_policy",
]
