"""Compare command: diff two contract versions under one policy."""

from pathlib import Path
from typing import List

import typer

from compliance_engine.cli._app import app
from compliance_engine.cli._common import init_command, resolve_policy, score_file
from compliance_engine.cli._console import (
    output_json,
    output_table,
    print_err,
    print_ok,
    styled,
)
from compliance_engine.compare import compare_versions
from compliance_engine.errors import ComplianceEngineError
from compliance_engine.schemas import ChangeType, VersionSide


@app.command("compare", help="Compare two contract versions under one policy.")
def compare_cmd(
    ctx: typer.Context,
    policy: str = typer.Argument(..., help="Policy YAML/JSON file, or 'default'"),
    from_evidence: Path = typer.Argument(..., help="Evidence file of the older version"),
    to_evidence: Path = typer.Argument(..., help="Evidence file of the newer version"),
    from_approved: List[str] = typer.Option(
        [], "--from-approved", help="Approved finding id on the older version (repeatable)"
    ),
    to_approved: List[str] = typer.Option(
        [], "--to-approved", help="Approved finding id on the newer version (repeatable)"
    ),
    show_unchanged: bool = typer.Option(
        False, "--all", help="Also list unchanged rules"
    ),
):
    """Score both versions and report what changed between them."""
    config = init_command(ctx)

    try:
        rules = resolve_policy(policy)
        sides = []
        for path, overrides in ((from_evidence, from_approved), (to_evidence, to_approved)):
            scored = score_file(rules, path, config)
            sides.append(
                VersionSide(
                    version_id=scored.version_id,
                    compliance=scored.compliance_record(),
                    findings=scored.findings,
                    overridden_finding_ids=set(overrides),
                )
            )
        result = compare_versions(sides[0], sides[1], config)
    except ComplianceEngineError as e:
        print_err(str(e))
        raise SystemExit(1)

    if output_json(result.model_dump(mode="json"), ctx=ctx):
        return

    output_table(
        [
            {
                "Rule": c.key,
                "Change": c.change_type.value,
                "Impact": f"{c.delta_impact:+d}",
                "Why": c.why,
            }
            for c in result.changes
            if show_unchanged or c.change_type != ChangeType.UNCHANGED
        ],
        title=f"{result.from_version.version_id} -> {result.to_version.version_id}",
    )
    print_ok(
        f"Effective {result.from_version.effective_score} -> "
        f"{result.to_version.effective_score} ({result.delta.effective:+d}) "
        f"{styled(result.delta.label.value)}"
    )
