"""Tests for the mermaid-extract command line tool."""

import json

import pytest

from mermaid_viewer.cli import main


MARKDOWN = (
    "# Login Flow\n"
    "```mermaid\ngraph TD\nA-->B\n```\n"
    "\n"
    "```mmd Broken\ngraph TD\nA[oops --> B\n```\n"
)


@pytest.fixture
def readme(tmp_path):
    path = tmp_path / "README.md"
    path.write_text(MARKDOWN, encoding="utf-8")
    return path


def test_writes_diagram_files_and_manifest(readme, tmp_path, capsys):
    output = tmp_path / "out"

    main([str(readme), str(output)])

    assert (output / "readme_01.mmd").read_text() == "graph TD\nA-->B\n"
    assert (output / "readme_02.mmd").read_text() == "graph TD\nA[oops --> B\n"

    manifest = json.loads((output / "manifest.json").read_text())
    assert manifest["original_file"] == "README.md"
    assert manifest["processing_info"]["total_diagrams"] == 2
    assert manifest["diagrams"][0] == {
        "index": 0,
        "title": "Login Flow",
        "file": "readme_01.mmd",
        "startLine": 1,
        "endLine": 4
    }
    assert manifest["diagrams"][1]["title"] == "Broken"
    assert "Extracted 2 diagram(s)" in capsys.readouterr().out


def test_flags_and_validation(readme, tmp_path, capsys):
    output = tmp_path / "out"

    main(["--input", str(readme), "--output", str(output), "--validate"])

    manifest = json.loads((output / "manifest.json").read_text())
    assert manifest["diagrams"][0]["validation"]["isValid"] is True
    assert manifest["diagrams"][1]["validation"]["isValid"] is False
    assert "failed validation: [1]" in capsys.readouterr().err


def test_json_output(readme, capsys):
    main([str(readme), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert [d["title"] for d in payload] == ["Login Flow", "Broken"]
    assert payload[1]["startLine"] == 6
    assert payload[1]["rawBlock"].startswith("```mmd Broken")


def test_mermaid_file_is_one_diagram(tmp_path, capsys):
    source = tmp_path / "Checkout.mmd"
    source.write_text("sequenceDiagram\nA->>B: pay\n", encoding="utf-8")

    main([str(source), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert len(payload) == 1
    assert payload[0]["title"] == "Checkout"
    assert payload[0]["content"] == "sequenceDiagram\nA->>B: pay"


def test_missing_input_file_exits(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "missing.md"), str(tmp_path / "out")])

    assert exc_info.value.code == 1


def test_output_directory_required_without_json(readme):
    with pytest.raises(SystemExit) as exc_info:
        main([str(readme)])

    assert exc_info.value.code == 1
