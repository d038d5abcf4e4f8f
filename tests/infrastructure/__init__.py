"""
Shared test infrastructure for stencil.

Modules:
- file_utils: creating files and directories
- cli_utils: running the CLI as a subprocess
"""

from .file_utils import write
from .cli_utils import run_cli, jload

__all__ = ["write", "run_cli", "jload"]
