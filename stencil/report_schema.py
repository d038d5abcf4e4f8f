"""
JSON documents printed by the CLI.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CheckReport(BaseModel):
    """Result of `stencil check`: the template parsed and reads these variables."""
    ok: bool = True
    template: Optional[str] = None
    variables: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)


class AstReport(BaseModel):
    """Result of `stencil ast --json`."""
    template: Optional[str] = None
    nodes: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = ["CheckReport", "AstReport"]
