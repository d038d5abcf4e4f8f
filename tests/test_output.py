"""Tests for CLI JSON output and version lookup."""

import json
from importlib import metadata

from stencil import version as version_module
from stencil.jsonic import dumps
from stencil.report_schema import CheckReport
from stencil.version import DIST_NAME, tool_version


class TestDumps:

    def test_report_model_is_dumped_directly(self):
        report = CheckReport(template="a.tpl", variables=["x"], references=["$x"])
        text = dumps(report)
        assert text.endswith("}\n")
        assert json.loads(text) == report.model_dump(mode="json")

    def test_single_line_without_ascii_escapes(self):
        text = dumps({"text": "Grüße", "items": [1, 2]})
        assert text == '{"text":"Grüße","items":[1,2]}\n'


class TestToolVersion:

    def test_declared_distribution_is_tried_first(self, monkeypatch):
        monkeypatch.setattr(
            version_module.metadata, "packages_distributions",
            lambda: {"stencil": ["other-dist", DIST_NAME]},
        )
        assert version_module._candidate_dists() == [DIST_NAME, "other-dist"]

    def test_falls_back_to_other_distribution(self, monkeypatch):
        monkeypatch.setattr(
            version_module.metadata, "packages_distributions",
            lambda: {"stencil": ["stencil-fork"]},
        )

        def fake_version(dist):
            if dist == "stencil-fork":
                return "1.2.3"
            raise metadata.PackageNotFoundError(dist)

        monkeypatch.setattr(version_module.metadata, "version", fake_version)
        assert tool_version() == "1.2.3"

    def test_uninstalled_source_tree(self, monkeypatch):
        monkeypatch.setattr(version_module.metadata, "packages_distributions", lambda: {})

        def not_found(dist):
            raise metadata.PackageNotFoundError(dist)

        monkeypatch.setattr(version_module.metadata, "version", not_found)
        assert tool_version() == "0.0.0"
