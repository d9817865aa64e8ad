"""Policy and evidence file loading.

Policies are YAML (or JSON, which is a YAML subset) documents validated into
``Policy`` models. Evidence files hold a list of neutral clause extractions,
optionally wrapped in ``{"version_id": ..., "extractions": [...]}``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from compliance_engine.errors import PolicyLoadError
from compliance_engine.policy.evidence_resolver import resolve_evidence
from compliance_engine.schemas.evidence import EvidenceItem
from compliance_engine.schemas.rules import Policy

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path(__file__).with_name("default_policy.yaml")


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise PolicyLoadError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyLoadError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise PolicyLoadError(f"Failed to read {path}: {e}") from e


def load_policy(path: Path) -> Policy:
    """Load and validate a policy file.

    Rules inherit the policy id unless they declare their own.

    Args:
        path: Path to a YAML or JSON policy document.

    Returns:
        Validated Policy.

    Raises:
        PolicyLoadError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)
    data = _read_document(path)
    if not isinstance(data, dict):
        raise PolicyLoadError(f"Policy file {path} must contain a mapping")

    policy_id = data.get("policy_id")
    rules = data.get("rules") or []
    if isinstance(rules, list):
        data["rules"] = [
            {**rule, "policy_id": rule.get("policy_id") or policy_id}
            if isinstance(rule, dict)
            else rule
            for rule in rules
        ]

    try:
        policy = Policy.model_validate(data)
    except ValidationError as e:
        raise PolicyLoadError(f"Invalid policy in {path}: {e}") from e

    logger.info(f"Loaded policy '{policy.policy_id}' with {len(policy.rules)} rules from {path}")
    return policy


def default_policy() -> Policy:
    """Return the bundled Company Standard policy."""
    return load_policy(DEFAULT_POLICY_PATH)


def load_evidence(path: Path) -> Tuple[Optional[str], Dict[str, EvidenceItem]]:
    """Load a neutral extraction file and resolve it by clause category.

    Args:
        path: Path to a JSON/YAML list of extractions, or a mapping with
            ``version_id`` and ``extractions`` keys.

    Returns:
        Tuple of (version_id or None, evidence keyed by clause category).

    Raises:
        PolicyLoadError: If the file is missing or has an unexpected shape.
    """
    path = Path(path)
    data = _read_document(path)
    version_id = None
    if isinstance(data, dict):
        version_id = data.get("version_id")
        data = data.get("extractions")
    if data is None:
        data = []
    if not isinstance(data, list):
        raise PolicyLoadError(f"Evidence file {path} must contain a list of extractions")

    evidence = resolve_evidence(data)
    logger.info(f"Loaded {len(evidence)} evidence items from {path}")
    return version_id, evidence
