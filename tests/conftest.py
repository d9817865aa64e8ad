"""
Pytest fixtures shared by the compliance engine tests.
"""

import json

import pytest

DEFAULT_POLICY_CLAUSES = [
    "LIABILITY",
    "DATA_PRIVACY",
    "GOVERNING_LAW",
    "INTELLECTUAL_PROPERTY",
    "TERMINATION",
    "CONFIDENTIALITY",
    "PAYMENT_TERMS",
]


@pytest.fixture
def evidence_file(tmp_path):
    """Factory writing an extraction file that covers the default policy clauses."""

    def _write(name: str = "v1.json", confidence: float = 0.9, skip: tuple = ()):
        items = [
            {
                "clauseType": c,
                "extractedValue": {"present": True},
                "extractedText": f"{c.title()} clause text.",
                "confidence": confidence,
            }
            for c in DEFAULT_POLICY_CLAUSES
            if c not in skip
        ]
        data = {"version_id": name.rsplit(".", 1)[0], "extractions": items}
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def policy_file(tmp_path):
    """A small YAML policy with one CRITICAL rule and one value rule."""
    path = tmp_path / "policy.yaml"
    path.write_text(
        "policy_id: strict\n"
        "name: Strict\n"
        "rules:\n"
        "  - id: liability-cap\n"
        "    clause_category: LIABILITY\n"
        "    rule_type: REQUIRED\n"
        "    severity: CRITICAL\n"
        "    risk_category: FINANCIAL\n"
        "    weight: 10\n"
        "    recommendation: Add a liability cap.\n"
        "  - id: notice-period\n"
        "    clause_category: TERMINATION\n"
        "    rule_type: MIN_VALUE\n"
        "    expected_value: 30\n"
        "    severity: MEDIUM\n"
        "    risk_category: OPERATIONAL\n"
        "    weight: 10\n",
        encoding="utf-8",
    )
    return path
