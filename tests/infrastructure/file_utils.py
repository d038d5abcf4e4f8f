"""
Utilities for creating files and directories in tests.
"""

from __future__ import annotations

from pathlib import Path


def write(p: Path, text: str, encoding: str = "utf-8") -> Path:
    """
    Writes text to a file, creating parent directories when needed.

    Args:
        p: File path
        text: Content to write
        encoding: File encoding

    Returns:
        Path of the written file
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding=encoding)
    return p
