"""
JSON output for the CLI.

Report models are dumped in JSON mode first, so enums, paths and other
non-JSON field values arrive as plain strings.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel


def dumps(obj: Any) -> str:
    """Compact single-line JSON without ASCII escaping; a trailing newline is added."""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(mode="json")
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":")) + "\n"


__all__ = ["dumps"]
