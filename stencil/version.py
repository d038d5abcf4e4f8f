from __future__ import annotations

from importlib import metadata
from typing import List

# Name on the package index; the import package is "stencil"
DIST_NAME = "stencil-templates"
UNKNOWN_VERSION = "0.0.0"


def _candidate_dists() -> List[str]:
    """Distributions that install the `stencil` import package, the declared one first."""
    found = metadata.packages_distributions().get(__package__ or "stencil", [])
    return [DIST_NAME] + [dist for dist in found if dist != DIST_NAME]


def tool_version() -> str:
    """
    Version shown by `stencil --version`.

    Falls back to 0.0.0 when running from a source tree that was never installed.
    """
    for dist in _candidate_dists():
        try:
            return metadata.version(dist)
        except metadata.PackageNotFoundError:
            continue
    return UNKNOWN_VERSION


__all__ = ["tool_version", "DIST_NAME"]
