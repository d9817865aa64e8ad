"""Canonical serialisation used for structural value equality."""

import json
from typing import Any


def stable_json(value: Any) -> str:
    """Serialise a value so that equal structures produce equal strings.

    None becomes the empty string, strings are returned as-is and everything
    else is dumped as JSON with object keys sorted.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)
