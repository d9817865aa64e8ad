"""Shared helpers for CLI commands."""

import logging
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from rich.logging import RichHandler

from compliance_engine.config import EngineConfig, default_policy, load_evidence, load_policy
from compliance_engine.policy import EvaluationMode, EvidenceSet, score_policy
from compliance_engine.schemas import PolicyScore
from compliance_engine.schemas.rules import Policy

logger = logging.getLogger(__name__)

DEFAULT_POLICY_NAME = "default"


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=None,  # Use default stderr
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def init_command(ctx) -> EngineConfig:
    """Load .env (or --env-file), configure logging and build the engine config."""
    env_file = ctx.obj.get("env_file")
    if env_file is not None:
        load_dotenv(env_file, override=True)
    else:
        load_dotenv()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    return EngineConfig.from_env()


def resolve_policy(policy: str) -> Policy:
    """Load a policy file, or the bundled policy for ``default``."""
    if policy == DEFAULT_POLICY_NAME:
        return default_policy()
    return load_policy(Path(policy))


def read_evidence(path: Path, version_id: Optional[str] = None) -> Tuple[str, EvidenceSet]:
    """Load evidence; the version id falls back to the file's, then its stem."""
    file_version_id, evidence = load_evidence(path)
    return version_id or file_version_id or path.stem, evidence


def score_file(
    policy: Policy,
    evidence_path: Path,
    config: EngineConfig,
    *,
    version_id: Optional[str] = None,
    deterministic: bool = False,
) -> PolicyScore:
    """Score one evidence file against a policy."""
    resolved_id, evidence = read_evidence(evidence_path, version_id)
    return score_policy(
        policy.rules,
        evidence,
        version_id=resolved_id,
        policy_id=policy.policy_id,
        mode=EvaluationMode.DETERMINISTIC if deterministic else EvaluationMode.EVIDENCE,
        config=config,
    )
