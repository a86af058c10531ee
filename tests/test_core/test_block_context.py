# tests/test_core/test_block_context.py
"""Block Context Resolver Tests
==============================

Unit tests for `docblock.core.BlockContext`.

This suite validates:

1. **Text classification** (`match_markers`, `classify_line`)
   - Marker precedence start > prefix > end.
   - Cursor before/after the closing marker, and before the marker itself.
   - Line-doc dialects without an end marker.

2. **Strategy chain** (`resolve_context`)
   - Documentation scopes decide "inside", any other scope decides "outside".
   - Missing or failing scope queries fall back to text matching.
   - Unsupported languages never enter a block.

3. **Advisory declarations** and **purity** of repeated resolutions.
"""

import logging

import pytest

from docblock.core.BlockContext import (
    TEXT_ONLY_STRATEGIES,
    BlockState,
    LineClassification,
    classify_line,
    find_closing_marker,
    match_markers,
    resolve_context,
)
from docblock.core.CommentFormats import C_STYLE, DOCSTRING, TRIPLE_SLASH
from docblock.core.Positions import DocumentationTarget, Position, Range
from tests.stubs import StubHost


def _target() -> DocumentationTarget:
    return DocumentationTarget(
        kind="function",
        name="add",
        detail="function add(a, b) {",
        range=Range(Position(3, 0), Position(3, 20)),
    )


class TestMatchMarkers:
    """Marker location and precedence."""

    def test_start_marker_wins_over_end_marker(self) -> None:
        match = match_markers("/** a */ b", C_STYLE)
        assert match.classification is LineClassification.LEADING
        assert (match.index, match.end) == (0, 3)

    def test_prefix_wins_over_end_marker(self) -> None:
        match = match_markers(" * text */", C_STYLE)
        assert match.classification is LineClassification.CONTENT
        assert match.index == 0

    def test_end_marker_alone(self) -> None:
        match = match_markers("   */", C_STYLE)
        assert match.classification is LineClassification.TRAILING
        assert match.index == 2

    def test_trimmed_prefix_line_is_content(self) -> None:
        match = match_markers("   *", C_STYLE)
        assert match.classification is LineClassification.CONTENT
        assert match.index == 2
        assert match.marker == " *"

    def test_code_without_markers(self) -> None:
        match = match_markers("const x = 1;", C_STYLE)
        assert match.classification is LineClassification.NONE
        assert not match.found

    def test_empty_prefix_never_matches(self) -> None:
        assert match_markers("    Args:", DOCSTRING).classification is LineClassification.NONE

    @pytest.mark.parametrize(
        "line, fmt, expected",
        [('    """Summary.', DOCSTRING, 4), (" */ /** next", C_STYLE, 0), ("/** a */", C_STYLE, 5)],
    )
    def test_closing_marker_is_first_occurrence(self, line: str, fmt, expected: int) -> None:
        assert find_closing_marker(line, fmt) == expected

    def test_no_closing_marker_for_line_docs(self) -> None:
        assert find_closing_marker("/// Summary", TRIPLE_SLASH) == -1


class TestClassifyLine:
    """Text-only classification against a cursor position."""

    def test_opening_line_at_end(self) -> None:
        context = classify_line("  /** foo", C_STYLE, Position(0, 9), "javascript")
        assert context.is_in_doc_block
        assert context.indentation == "  "
        assert context.line_classification is LineClassification.LEADING
        assert context.marker_range == Range(Position(0, 2), Position(0, 5))
        assert context.state is BlockState.LEADING

    def test_content_line_mid_text(self) -> None:
        context = classify_line("   * @param x description", C_STYLE, Position(4, 13))
        assert context.is_in_doc_block
        assert context.indentation == "  "
        assert context.state is BlockState.CONTENT

    @pytest.mark.parametrize("character, inside", [(1, True), (2, True), (3, False)])
    def test_closing_line(self, character: int, inside: bool) -> None:
        context = classify_line(" */", C_STYLE, Position(2, character))
        assert context.is_in_doc_block is inside
        assert context.line_classification is LineClassification.TRAILING
        expected = BlockState.TRAILING_BEFORE_CLOSE if inside else BlockState.TRAILING_AFTER_CLOSE
        assert context.state is expected

    @pytest.mark.parametrize("line", ["/** a */ b", " * text */", "    /** one liner */"])
    def test_cursor_after_block_closed_on_same_line(self, line: str) -> None:
        end = line.index("*/") + 2
        assert classify_line(line, C_STYLE, Position(0, end)).is_in_doc_block is False
        assert classify_line(line, C_STYLE, Position(0, len(line))).is_in_doc_block is False

    def test_cursor_inside_block_closed_on_same_line(self) -> None:
        assert classify_line("/** a */ b", C_STYLE, Position(0, 4)).is_in_doc_block is True

    @pytest.mark.parametrize("character", [0, 2, 4])
    def test_multi_line_marker_at_or_after_cursor_is_inside(self, character: int) -> None:
        context = classify_line("    /** doc", C_STYLE, Position(0, character))
        assert context.is_in_doc_block is True
        assert context.indentation == "    "
        assert context.line_classification is LineClassification.LEADING

    @pytest.mark.parametrize("character", [0, 2])
    def test_line_doc_marker_after_cursor_is_outside(self, character: int) -> None:
        assert classify_line("  /// Summary", TRIPLE_SLASH, Position(0, character)).is_in_doc_block is False

    @pytest.mark.parametrize("line", ["/// Summary", "    /// - Parameter x: value", "/// "])
    def test_line_docs_are_inside_after_marker(self, line: str) -> None:
        context = classify_line(line, TRIPLE_SLASH, Position(0, len(line)), "swift")
        assert context.is_in_doc_block
        assert context.indentation == line[: line.index("///")]

    def test_plain_code_is_outside(self) -> None:
        context = classify_line("    return a + b;", C_STYLE, Position(0, 10))
        assert context.is_in_doc_block is False
        assert context.indentation == "    "
        assert context.marker_range is None
        assert context.state is BlockState.OUTSIDE

    @pytest.mark.parametrize(
        "line, fmt, character",
        [
            ('"""', DOCSTRING, 3),
            ('    """Summary', DOCSTRING, 14),
            ('    """One line."""', DOCSTRING, 19),
            (" */ /** next", C_STYLE, 12),
        ],
    )
    def test_cursor_past_first_end_marker_is_outside(self, line: str, fmt, character: int) -> None:
        """Without scopes, the first end marker on the line decides, even when it opens a docstring."""
        context = classify_line(line, fmt, Position(0, character))
        assert context.is_in_doc_block is False
        assert context.line_classification is LineClassification.LEADING

    def test_cursor_inside_docstring_opener(self) -> None:
        assert classify_line('    """Summary', DOCSTRING, Position(0, 6)).is_in_doc_block is True

    def test_to_dict(self) -> None:
        data = classify_line("  /** foo", C_STYLE, Position(0, 9), "javascript").to_dict()
        assert data["state"] == "in-block-leading"
        assert data["line_classification"] == "leading"
        assert data["position"] == {"line": 0, "character": 9}
        assert data["marker_range"]["start"] == {"line": 0, "character": 2}
        assert data["strategy"] == "text"
        assert data["documentation_target"] is None


class TestResolveContext:
    """The strategy chain over a host."""

    @pytest.mark.asyncio
    async def test_documentation_scope_means_inside(self) -> None:
        host = StubHost(["    Args:"], language="python", scopes={"comment.block.documentation"})
        context = await resolve_context(host, "python", Position(0, 9))
        assert context.is_in_doc_block
        assert context.strategy == "scopes"
        assert context.indentation == "    "
        assert context.line_classification is LineClassification.NONE
        assert context.state is BlockState.CONTENT

    @pytest.mark.asyncio
    async def test_language_suffixed_scope_names_match(self) -> None:
        host = StubHost(["/// Summary"], language="swift", scopes={"comment.line.documentation.swift"})
        context = await resolve_context(host, "swift", Position(0, 11))
        assert context.is_in_doc_block
        assert context.strategy == "scopes"

    @pytest.mark.asyncio
    async def test_other_scope_is_authoritative_outside(self) -> None:
        host = StubHost(["const y = a * b;"], scopes={"source.js", "keyword.operator"})
        context = await resolve_context(host, "javascript", Position(0, 16))
        assert context.is_in_doc_block is False
        assert context.strategy == "scopes"
        # Text matching alone would have taken ` * ` for a content prefix.
        assert classify_line("const y = a * b;", C_STYLE, Position(0, 16)).is_in_doc_block

    @pytest.mark.asyncio
    async def test_scope_strategy_indents_under_marker(self) -> None:
        host = StubHost(["  /** foo"], scopes={"comment.block.documentation"})
        context = await resolve_context(host, "javascript", Position(0, 9))
        assert context.indentation == "  "
        assert context.line_classification is LineClassification.LEADING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scopes", [None, set()])
    async def test_no_scopes_falls_back_to_text(self, scopes) -> None:
        host = StubHost(["  /** foo"], scopes=scopes)
        context = await resolve_context(host, "javascript", Position(0, 9))
        assert context.is_in_doc_block
        assert context.strategy == "text"
        assert host.scope_queries == 1

    @pytest.mark.asyncio
    async def test_scope_failure_falls_back_to_text(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="docblock")
        host = StubHost([" */"], scopes=RuntimeError("language service down"))
        context = await resolve_context(host, "javascript", Position(0, 3))
        assert context.is_in_doc_block is False
        assert context.strategy == "text"
        assert "falling back to text analysis" in caplog.text

    @pytest.mark.asyncio
    async def test_text_only_chain_skips_scope_query(self) -> None:
        host = StubHost(["  /** foo"], scopes={"source.js"})
        context = await resolve_context(host, "javascript", Position(0, 9), strategies=TEXT_ONLY_STRATEGIES)
        assert context.is_in_doc_block
        assert host.scope_queries == 0

    @pytest.mark.asyncio
    async def test_empty_chain_still_decides(self) -> None:
        host = StubHost(["  /** foo"])
        context = await resolve_context(host, "javascript", Position(0, 9), strategies=())
        assert context.is_in_doc_block
        assert context.strategy == "text"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line", ["/** doc", " * content", "/// swift style"])
    async def test_unsupported_language_is_always_outside(self, line: str) -> None:
        host = StubHost([line], language="ruby", scopes={"comment.block.documentation"})
        context = await resolve_context(host, "ruby", Position(0, len(line)))
        assert context.is_in_doc_block is False
        assert context.strategy == "catalog"
        assert context.line_classification is LineClassification.NONE
        assert host.scope_queries == 0
        assert host.declaration_queries == 0

    @pytest.mark.asyncio
    async def test_line_outside_document_raises(self) -> None:
        host = StubHost(["/** doc"])
        with pytest.raises(IndexError):
            await resolve_context(host, "javascript", Position(5, 0))

    @pytest.mark.asyncio
    async def test_trace_logger_records_decisions(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="docblock.trace")
        host = StubHost(["  /** foo"])
        await resolve_context(host, "javascript", Position(0, 9))
        assert "in-block-leading via text" in caplog.text


class TestDocumentationTarget:
    """Advisory declaration lookup."""

    @pytest.mark.asyncio
    async def test_target_attached_inside_block(self) -> None:
        host = StubHost(["/**", " * Adds.", " */", "function add(a, b) {"], declaration=_target())
        context = await resolve_context(host, "javascript", Position(1, 8))
        assert context.documentation_target == _target()
        assert context.to_dict()["documentation_target"]["name"] == "add"

    @pytest.mark.asyncio
    async def test_target_not_queried_outside_block(self) -> None:
        host = StubHost(["let a = 1;"], declaration=_target())
        context = await resolve_context(host, "javascript", Position(0, 10))
        assert context.documentation_target is None
        assert host.declaration_queries == 0

    @pytest.mark.asyncio
    async def test_target_lookup_can_be_disabled(self) -> None:
        host = StubHost([" * Adds."], declaration=_target())
        context = await resolve_context(host, "javascript", Position(0, 8), lookup_declarations=False)
        assert context.is_in_doc_block
        assert context.documentation_target is None
        assert host.declaration_queries == 0

    @pytest.mark.asyncio
    async def test_target_failure_is_ignored(self) -> None:
        host = StubHost([" * Adds."], declaration=LookupError("no symbols"))
        context = await resolve_context(host, "javascript", Position(0, 8))
        assert context.is_in_doc_block
        assert context.documentation_target is None


class TestPurity:
    """Identical inputs give identical contexts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "line, character, scopes",
        [
            ("  /** foo", 9, None),
            ("   * @param x description", 13, {"comment.block.documentation"}),
            (" */", 3, None),
            ("code();", 7, {"source"}),
        ],
    )
    async def test_resolution_is_idempotent(self, line: str, character: int, scopes) -> None:
        host = StubHost([line], scopes=scopes)
        first = await resolve_context(host, "javascript", Position(0, character))
        second = await resolve_context(host, "javascript", Position(0, character))
        assert first == second
        assert host.lines == [line]
