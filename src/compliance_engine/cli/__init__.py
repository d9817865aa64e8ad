"""CLI package, Typer-based command-line interface.

Usage:
    python -m compliance_engine.cli --help
    compliance-engine score default evidence.json
"""

from compliance_engine.cli._app import app

# Register command modules (side-effect imports)
import compliance_engine.cli.cmd_score  # noqa: F401
import compliance_engine.cli.cmd_decide  # noqa: F401
import compliance_engine.cli.cmd_compare  # noqa: F401

__all__ = ["app"]
