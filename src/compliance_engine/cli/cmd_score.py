"""Score command: evaluate one evidence file against a policy."""

from pathlib import Path

import typer

from compliance_engine.cli._app import app
from compliance_engine.cli._common import init_command, resolve_policy, score_file
from compliance_engine.cli._console import (
    console,
    output_json,
    output_table,
    print_err,
    print_ok,
    styled,
)
from compliance_engine.errors import ComplianceEngineError


@app.command("score", help="Score clause evidence against a policy.")
def score_cmd(
    ctx: typer.Context,
    policy: str = typer.Argument(..., help="Policy YAML/JSON file, or 'default'"),
    evidence: Path = typer.Argument(..., help="Clause evidence JSON/YAML file"),
    version_id: str = typer.Option(None, "--version-id", help="Contract version id"),
    deterministic: bool = typer.Option(
        False, "--deterministic", help="Score even when no evidence was extracted"
    ),
):
    """Score one contract version and list its findings."""
    config = init_command(ctx)

    try:
        rules = resolve_policy(policy)
        result = score_file(
            rules, evidence, config, version_id=version_id, deterministic=deterministic
        )
    except ComplianceEngineError as e:
        print_err(str(e))
        raise SystemExit(1)

    if output_json(result.model_dump(mode="json"), ctx=ctx):
        return

    output_table(
        [
            {
                "Rule": f.key,
                "Clause": f.clause_category,
                "Status": styled(f.compliance_status.value),
                "Weight": str(f.weight),
                "Confidence": "" if f.confidence is None else f"{f.confidence:.2f}",
            }
            for f in result.findings
        ],
        title=f"Findings: {rules.name or rules.policy_id}",
    )
    print_ok(
        f"{result.version_id}: score {result.raw_score}/100 "
        f"{styled(result.status.value)} ({result.violations_count} violations)"
    )
    if result.has_critical_violation:
        console.print("  [red]Critical violation: score capped[/red]")
