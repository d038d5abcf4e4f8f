"""
Configuration loading for stencil.
"""

from __future__ import annotations

from .model import DEFAULT_CFG_FILE, StencilConfig
from .load import load_config, load_vars

__all__ = [
    "DEFAULT_CFG_FILE",
    "StencilConfig",
    "load_config",
    "load_vars",
]
