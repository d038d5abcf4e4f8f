from __future__ import annotations

import codecs
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..template.template import NullPolicy

DEFAULT_CFG_FILE = "stencil.yaml"


class StencilConfig(BaseModel):
    """
    Contents of stencil.yaml.

    Every key is optional; an absent file is equivalent to an empty one.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Encoding of template and variable files
    encoding: str = "utf-8"
    null_policy: NullPolicy = NullPolicy.ERROR
    # Default bindings, overridden by --vars files and --var pairs
    vars: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"unknown encoding {value!r}")
        return value


__all__ = ["StencilConfig", "DEFAULT_CFG_FILE"]
