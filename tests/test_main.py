# tests/test_main.py
"""Command line tests for `docblock.main`.

Each test runs in a temporary working directory, since `run` configures file
logging relative to it.
"""

import json
from pathlib import Path

import pytest

from docblock import main


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def swift_file(tmp_path: Path) -> Path:
    path = tmp_path / "shape.swift"
    path.write_text("/// Summary\nfunc area() {}\n", encoding="utf-8")
    return path


def test_prints_continued_document(js_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(js_file), "1", "20"]) == main.EXIT_OK

    out = capsys.readouterr().out
    assert out.splitlines()[:5] == ["/**", " * Adds two numbers.", " * ", "", " */"]
    assert js_file.read_text(encoding="utf-8").count("\n") == 6


def test_outside_block_prints_plain_break(js_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(js_file), "4", "17"]) == main.EXIT_OK

    lines = capsys.readouterr().out.splitlines()
    assert lines[4:6] == ["    return a + b;", "    "]


def test_in_place(js_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(js_file), "0", "3", "--in-place"]) == main.EXIT_OK

    assert capsys.readouterr().out == ""
    assert js_file.read_text(encoding="utf-8").startswith("/**\n * \n\n * Adds two numbers.\n")


def test_explain(js_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(js_file), "1", "20", "--explain"]) == main.EXIT_OK

    report = json.loads(capsys.readouterr().out)
    assert report["context"]["is_in_doc_block"] is True
    assert report["context"]["state"] == "in-block-content"
    assert report["context"]["strategy"] == "scopes"
    assert report["context"]["documentation_target"]["name"] == "add"
    assert report["continuation"] == {"insertion_text": "\n * \n", "cursor_line": 2, "cursor_character": 3}
    # Explaining never edits the file.
    assert js_file.read_text(encoding="utf-8").count("\n") == 6


def test_explain_outside_block(js_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(js_file), "2", "3", "--explain"]) == main.EXIT_OK

    report = json.loads(capsys.readouterr().out)
    assert report["context"]["is_in_doc_block"] is False
    assert report["continuation"] is None


def test_repeat_leaves_block_on_bare_line(swift_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(swift_file), "0", "11", "--repeat", "2"]) == main.EXIT_OK

    assert capsys.readouterr().out == "/// Summary\n/// \n\nfunc area() {}\n"


def test_language_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("/** doc\n", encoding="utf-8")

    assert main.run([str(path), "0", "7", "--language", "java"]) == main.EXIT_OK
    assert capsys.readouterr().out == "/** doc\n * \n\n"


def test_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "doc.kt"
    source.write_text("/** doc\n", encoding="utf-8")
    config = tmp_path / "docblock.toml"
    config.write_text(
        "[logging]\n"
        "log_to_console = false\n"
        "\n"
        "[comment_formats.kotlin]\n"
        'block_start = "/**"\n'
        'block_prefix = " * "\n'
        'block_end = " */"\n',
        encoding="utf-8",
    )

    assert main.run([str(source), "0", "7", "--config", str(config)]) == main.EXIT_OK
    assert capsys.readouterr().out == "/** doc\n * \n\n"


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.run([str(tmp_path / "missing.js"), "0", "0"]) == main.EXIT_IO_ERROR
    assert "cannot read" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["0", "0"],
        ["{file}", "x", "y"],
        ["{file}", "-1", "0"],
        ["{file}", "9", "0"],
        ["{file}", "0", "99"],
        ["{file}", "0", "0", "--repeat", "0"],
    ],
)
def test_usage_errors(js_file: Path, argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    argv = [arg.replace("{file}", str(js_file)) for arg in argv]
    assert main.run(argv) == main.EXIT_USAGE
    assert capsys.readouterr().err
