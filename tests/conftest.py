# tests/conftest.py
"""Pytest configuration with shared fixtures for the docblock tests."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Generator

import pytest

from docblock.core.CommentFormats import FormatCatalog
from docblock.utils.logging_config import TRACE_LOGGER


# --- Logging isolation ---
@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo `setup_logging` after each test.

    `setup_logging` attaches file and console handlers to the root logger and
    may disable the trace logger; later tests relying on `caplog` need the
    default state back.
    """
    root = logging.getLogger()
    level = root.level
    trace_state = (TRACE_LOGGER.disabled, TRACE_LOGGER.propagate, list(TRACE_LOGGER.handlers))
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    for handler in TRACE_LOGGER.handlers:
        if handler not in trace_state[2]:
            handler.close()
    TRACE_LOGGER.disabled, TRACE_LOGGER.propagate, TRACE_LOGGER.handlers = trace_state


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory and clear docblock environment variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DOCBLOCK_CONFIG", raising=False)
    monkeypatch.delenv("DOCBLOCK_TRACE", raising=False)
    return home


# --- Configuration fixtures ---
@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a baseline configuration with logging kept off the console.

    Returns:
        dict[str, dict[str, Any]]: Application configuration dictionary.
    """
    return {
        "logging": {"log_to_console": False, "file_level": "DEBUG"},
        "docblock": {
            "use_scope_provider": True,
            "lookup_declarations": True,
            "exit_after_continuations": 1,
        },
        "editor": {"tab_size": 4, "use_spaces": True},
        "comment_formats": {},
    }


@pytest.fixture
def catalog() -> FormatCatalog:
    return FormatCatalog()


# --- Sample documents ---
@pytest.fixture
def js_source() -> str:
    """A JavaScript file with a documented function."""
    return (
        "/**\n"
        " * Adds two numbers.\n"
        " */\n"
        "function add(a, b) {\n"
        "    return a + b;\n"
        "}\n"
    )


@pytest.fixture
def py_source() -> str:
    """A Python module with a documented function."""
    return (
        "def greet(name):\n"
        '    """Return a greeting.\n'
        "\n"
        "    Args:\n"
        '    """\n'
        '    return f"Hello, {name}"\n'
    )


@pytest.fixture
def js_file(tmp_path: Path, js_source: str) -> Path:
    path = tmp_path / "add.js"
    path.write_text(js_source, encoding="utf-8")
    return path
