"""Tests for the citekit command line."""

import json
import logging

import pytest
from typer.testing import CliRunner

from citekit import __version__
from citekit.cli import app
from citekit.logging import setup_logging

runner = CliRunner()


@pytest.fixture
def document_file(tmp_path):
    """A document JSON file in the shape accepted by Manuscript.from_dict."""
    document = {
        "title": "CLI Test",
        "paragraphs": [
            {
                "id": "para-1",
                "paragraph_number": "P1",
                "content": "See [cite:c1:p1] and [cite:c2:p2].",
                "section_type": "introduction",
            }
        ],
        "citations": [
            {
                "id": "c1",
                "paper_id": "p1",
                "paragraph_id": "para-1",
                "citation_order": 0,
                "paper": {"id": "p1", "title": "First paper", "authors": "Smith J", "year": 2020, "venue": "Nature"},
            },
            {
                "id": "c2",
                "paper_id": "p2",
                "paragraph_id": "para-1",
                "citation_order": 1,
                "paper": {"id": "p2", "title": "Second paper", "authors": "Doe A", "year": 2019, "venue": "Science"},
            },
        ],
    }
    path = tmp_path / "document.json"
    path.write_text(json.dumps(document))
    return path


@pytest.fixture
def orphan_document_file(tmp_path):
    document = {
        "title": "Broken",
        "paragraphs": [{"id": "a", "paragraph_number": "P1", "content": "Lost [cite:c9:p9]."}],
        "citations": [],
    }
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(document))
    return path


@pytest.fixture
def style_file(tmp_path):
    style = {
        "id": "lab-style",
        "name": "Lab",
        "displayName": "Lab Style",
        "sort": {"mode": "alphabetical"},
        "authorRules": {"maxAuthors": 2, "etAlAfter": 2},
        "template": "{authors} {year}. {title} {journal}.",
    }
    path = tmp_path / "style.json"
    path.write_text(json.dumps(style))
    return path


class TestStyleCommands:
    def test_styles_lists_catalog(self):
        result = runner.invoke(app, ["styles"])
        assert result.exit_code == 0
        assert "nature" in result.output
        assert "vancouver" in result.output

    def test_show_style(self):
        result = runner.invoke(app, ["show-style", "nature"])
        assert result.exit_code == 0
        assert '"etAlAfter": 5' in result.output

    def test_show_unknown_style_shows_fallback(self):
        result = runner.invoke(app, ["show-style", "no-such-style"])
        assert result.exit_code == 0
        assert '"id": "vancouver"' in result.output


class TestImportStyle:
    """Tests for the import-style command."""

    def test_import_file(self, style_file, tmp_path):
        output = tmp_path / "imported.json"
        result = runner.invoke(app, ["import-style", "--file", str(style_file), "--output", str(output)])

        assert result.exit_code == 0
        saved = json.loads(output.read_text())
        assert saved["id"] == "lab-style"
        assert saved["isSystem"] is False

    def test_import_prints_json(self, style_file):
        result = runner.invoke(app, ["import-style", "--file", str(style_file)])
        assert result.exit_code == 0
        assert '"displayName": "Lab Style"' in result.output

    def test_invalid_style_exits_with_error(self, style_file):
        data = json.loads(style_file.read_text())
        data["template"] = "{authors} {journal}"
        style_file.write_text(json.dumps(data))

        result = runner.invoke(app, ["import-style", "--file", str(style_file)])
        assert result.exit_code == 1
        assert "{year}" in result.output

    def test_requires_one_source(self):
        result = runner.invoke(app, ["import-style"])
        assert result.exit_code == 1
        assert "exactly one" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["import-style", "--file", str(tmp_path / "nope.json")])
        assert result.exit_code == 1


class TestRender:
    def test_render_to_stdout(self, document_file):
        result = runner.invoke(app, ["render", str(document_file), "--style", "nature"])
        assert result.exit_code == 0
        assert "See [1] and [2]." in result.output
        assert "## References" in result.output

    def test_render_to_file(self, document_file, tmp_path):
        output = tmp_path / "manuscript.md"
        result = runner.invoke(
            app, ["render", str(document_file), "--style", "harvard", "--order", "alphabetical", "--output", str(output)]
        )

        assert result.exit_code == 0
        content = output.read_text()
        assert content.startswith("# CLI Test\n\n## Introduction")
        assert "(Smith, J, 2020)" in content
        assert "Render Summary" in result.output

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        result = runner.invoke(app, ["render", str(path)])
        assert result.exit_code == 1
        assert "JSON" in result.output


class TestLoggingOptions:
    def test_log_file_receives_warnings(self, orphan_document_file, tmp_path):
        log_path = tmp_path / "render.log"
        try:
            result = runner.invoke(
                app, ["--log-file", str(log_path), "--log-format", "json", "render", str(orphan_document_file)]
            )
        finally:
            setup_logging(level=logging.WARNING)

        assert result.exit_code == 0
        entries = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert any(
            e["level"] == "WARNING" and "unknown citations" in e["message"] for e in entries
        )


class TestValidate:
    def test_valid_document(self, document_file):
        result = runner.invoke(app, ["validate", str(document_file)])
        assert result.exit_code == 0
        assert "All citations resolve" in result.output

    def test_orphans_fail(self, orphan_document_file):
        result = runner.invoke(app, ["validate", str(orphan_document_file)])
        assert result.exit_code == 1
        assert "[cite:c9:p9]" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"citekit v{__version__}" in result.output
