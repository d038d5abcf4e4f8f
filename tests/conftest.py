import textwrap
from pathlib import Path

import pytest

from stencil.template import adapters as adapters_module
from stencil.template.adapters import AdapterRegistry

from tests.infrastructure.file_utils import write


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Minimal project: stencil.yaml with defaults, a template and a variables file."""
    root = tmp_path
    write(
        root / "stencil.yaml",
        textwrap.dedent("""
        null_policy: error
        vars:
          name: World
          greeting: Hello
        """).strip() + "\n",
    )
    write(root / "hello.tpl", "$greeting, ${name}! ## salutation\nBye.\n")
    write(
        root / "vars.yaml",
        textwrap.dedent("""
        name: Stencil
        items: [one, two, three]
        """).strip() + "\n",
    )
    return root


@pytest.fixture
def registry(monkeypatch) -> AdapterRegistry:
    """Fresh process-wide adapter registry, restored after the test."""
    fresh = AdapterRegistry()
    monkeypatch.setattr(adapters_module, "_default_registry", fresh)
    return fresh
