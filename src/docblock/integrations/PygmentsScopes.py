# docblock/integrations/PygmentsScopes.py
"""PygmentsScopes Module
=====================
Derives TextMate-style scope names for a document position from a Pygments
token stream, so that a host without a language server can still answer the
"which scopes are active here" query.

Pygments does not tell documentation comments apart from ordinary ones, so the
provider merges adjacent comment tokens into spans and names each span from its
opening text:

- `String.Doc` tokens (Python docstrings) -> `comment.block.documentation`
- block comments opening with the block-doc marker (`/**`) ->
  `comment.block.documentation`; other block comments -> `comment.block`
- line comments opening with `///` or `//!` -> `comment.line.documentation`;
  other line comments -> `comment.line`
- anything else -> `source`

A block that is still being typed has no terminator yet, and most lexers then
stop treating it as a comment. The document is therefore lexed with the
block's closing marker appended after the last line; tokens before an
unterminated block are unaffected by that suffix.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from pygments.lexer import Lexer
from pygments.token import Comment, String, _TokenType

from docblock.core.CommentFormats import CommentFormat


logger = logging.getLogger("docblock")

SOURCE_SCOPE = "source"
BLOCK_DOC_SCOPE = "comment.block.documentation"
LINE_DOC_SCOPE = "comment.line.documentation"
BLOCK_SCOPE = "comment.block"
LINE_SCOPE = "comment.line"
DOCSTRING_SCOPE = "string.quoted.docstring"

LINE_DOC_MARKERS = ("///", "//!")

# Preprocessor lines and shebangs are lexed as comments but are not comments.
_NOT_COMMENTS = (Comment.Preproc, Comment.PreprocFile, Comment.Hashbang)


@dataclass(frozen=True)
class CommentSpan:
    start: int
    end: int
    text: str
    is_block: bool
    is_docstring: bool = False


def _is_comment(ttype: _TokenType) -> bool:
    return ttype in Comment and not any(ttype in excluded for excluded in _NOT_COMMENTS)


class PygmentsScopeProvider:
    """Answers scope queries for one document with a Pygments lexer.

    Attributes:
        lexer: The Pygments lexer of the document's language.
        fmt: Comment format of the document, used to recognise documentation
            openers and to close an unterminated block. Optional.
    """

    def __init__(self, lexer: Lexer, fmt: Optional[CommentFormat] = None) -> None:
        self.lexer = lexer
        self.fmt = fmt

    def _prepare_source(self, text: str) -> str:
        source = text if text.endswith("\n") else text + "\n"
        if self.fmt is not None and self.fmt.multi_line and self.fmt.block_end:
            source += self.fmt.block_end.strip() + "\n"
        return source

    def comment_spans(self, text: str) -> Iterator[CommentSpan]:
        """Yields merged comment spans of `text`, in document order."""
        source = self._prepare_source(text)
        start = end = -1
        parts: list[str] = []
        is_block = False

        for index, ttype, value in self.lexer.get_tokens_unprocessed(source):
            if _is_comment(ttype):
                # A line comment that swallowed its newline ends the span.
                if parts and end == index and not parts[-1].endswith("\n"):
                    parts.append(value)
                    end += len(value)
                    continue
                if parts:
                    yield CommentSpan(start, end, "".join(parts), is_block)
                start, end = index, index + len(value)
                parts, is_block = [value], ttype in Comment.Multiline
                continue

            if parts:
                yield CommentSpan(start, end, "".join(parts), is_block)
                parts = []

            if ttype in String.Doc:
                yield CommentSpan(index, index + len(value), value, True, is_docstring=True)

        if parts:
            yield CommentSpan(start, end, "".join(parts), is_block)

    def scope_for_span(self, span: CommentSpan) -> set[str]:
        if span.is_docstring:
            return {BLOCK_DOC_SCOPE, DOCSTRING_SCOPE}

        if span.is_block:
            opener = "/**"
            if self.fmt is not None and self.fmt.multi_line and self.fmt.block_start:
                opener = self.fmt.block_start
            text = span.text.lstrip()
            if text.startswith(opener) and not text.startswith(opener + "/"):
                return {BLOCK_DOC_SCOPE}
            return {BLOCK_SCOPE}

        markers = LINE_DOC_MARKERS
        if self.fmt is not None and not self.fmt.multi_line:
            markers = markers + (self.fmt.block_start,)
        if span.text.lstrip().startswith(markers):
            return {LINE_DOC_SCOPE}
        return {LINE_SCOPE}

    def scopes_at(self, text: str, offset: int) -> set[str]:
        """Returns the scope names active at character `offset` of `text`.

        A position right after a line comment (its end of line) still belongs
        to that comment. Offsets past the end of the text yield an empty set.
        """
        if offset < 0 or offset > len(text):
            return set()

        for span in self.comment_spans(text):
            if span.start > offset:
                break
            if span.start <= offset < span.end:
                return self.scope_for_span(span)
            if not span.is_block and offset == span.end:
                return self.scope_for_span(span)
        return {SOURCE_SCOPE}
