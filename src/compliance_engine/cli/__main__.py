"""Allow ``python -m compliance_engine.cli``."""

from compliance_engine.cli import app

app()
