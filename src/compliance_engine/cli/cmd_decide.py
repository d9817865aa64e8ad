"""Decide command: score, aggregate risk and compute the deal decision."""

from pathlib import Path
from typing import List

import typer

from compliance_engine.cli._app import app
from compliance_engine.cli._common import init_command, resolve_policy, score_file
from compliance_engine.cli._console import (
    output_json,
    output_panel,
    output_table,
    print_err,
    print_ok,
    styled,
)
from compliance_engine.dealdesk import compute_decision
from compliance_engine.errors import ComplianceEngineError
from compliance_engine.risk import aggregate_risk
from compliance_engine.schemas import ExceptionCounts


@app.command("decide", help="Compute the go/no-go deal decision for a contract version.")
def decide_cmd(
    ctx: typer.Context,
    policy: str = typer.Argument(..., help="Policy YAML/JSON file, or 'default'"),
    evidence: Path = typer.Argument(..., help="Clause evidence JSON/YAML file"),
    approved: List[str] = typer.Option(
        [], "--approved", help="Finding id with an approved exception (repeatable)"
    ),
    open_exceptions: int = typer.Option(
        0, "--open-exceptions", min=0, help="Number of pending exception requests"
    ),
    version_id: str = typer.Option(None, "--version-id", help="Contract version id"),
):
    """Score, aggregate and decide for one contract version."""
    config = init_command(ctx)

    try:
        rules = resolve_policy(policy)
        scored = score_file(rules, evidence, config, version_id=version_id)
        aggregation = aggregate_risk(
            scored.compliance_record(),
            scored.findings,
            approved,
            version_id=scored.version_id,
            config=config,
        )
        preview = compute_decision(
            aggregation,
            ExceptionCounts(open=open_exceptions, approved=len(aggregation.overridden_finding_ids)),
            config,
        )
    except ComplianceEngineError as e:
        print_err(str(e))
        raise SystemExit(1)

    data = {
        "aggregation": aggregation.model_dump(mode="json", exclude={"findings"}),
        "decision": preview.model_dump(mode="json"),
    }
    if output_json(data, ctx=ctx):
        return

    output_table(
        [
            {
                "Risk": c.risk_category.value,
                "Level": styled(c.level.value),
                "Violations": str(c.violation_count),
                "Unclear": str(c.unclear_count),
                "Overridden": str(c.overridden_count),
                "Weight": str(c.total_weight),
            }
            for c in aggregation.clusters
        ],
        title="Risk clusters",
    )
    output_panel(preview.rationale_markdown, title="Rationale")
    print_ok(f"{preview.version_id}: {styled(preview.outcome.value)}")
