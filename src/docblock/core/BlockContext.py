# docblock/core/BlockContext.py
"""BlockContext Module
===================
Resolves whether the cursor sits inside a documentation block and what role the
current line plays in it.

Detection runs an ordered chain of strategies. Each strategy either returns a
definitive `DocContext` or None ("inconclusive"), in which case the next one is
tried:

1. `ScopeStrategy` asks the host which scopes are active at the cursor. A
   documentation scope means "inside"; any other scope means "outside". This is
   the only strategy that can see that a block closed earlier on the same line
   or that a ` * ` belongs to code rather than to a comment.
2. `TextMatchStrategy` locates the block markers in the line text. It always
   decides, so the chain never runs dry.

Marker precedence on a line carrying several markers is start > prefix > end.
For a line such as `/** a */ b` the start marker wins; the end marker is still
consulted to decide whether the cursor has already left the block.

The resolver is stateless: identical inputs give identical contexts.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence

from docblock.core.CommentFormats import DEFAULT_CATALOG, CommentFormat, FormatCatalog
from docblock.core.Positions import DocumentationTarget, Position, Range


if TYPE_CHECKING:
    from docblock.core.EditorHost import BaseEditorHost


logger = logging.getLogger("docblock")
TRACE_LOGGER = logging.getLogger("docblock.trace")

DOC_SCOPES = ("comment.block.documentation", "comment.line.documentation")

_LEADING_WS = re.compile(r"^\s*")


class LineClassification(str, Enum):
    LEADING = "leading"
    CONTENT = "content"
    TRAILING = "trailing"
    NONE = "none"


class BlockState(str, Enum):
    OUTSIDE = "outside-block"
    LEADING = "in-block-leading"
    CONTENT = "in-block-content"
    TRAILING_BEFORE_CLOSE = "in-block-trailing-before-close"
    TRAILING_AFTER_CLOSE = "in-block-trailing-after-close"


@dataclass(frozen=True)
class LineMatch:
    """The block marker a line matched, and where."""

    classification: LineClassification
    index: int = -1
    marker: str = ""

    @property
    def end(self) -> int:
        return self.index + len(self.marker)

    @property
    def found(self) -> bool:
        return self.classification is not LineClassification.NONE


NO_MATCH = LineMatch(LineClassification.NONE)


@dataclass(frozen=True)
class DocContext:
    """Result of resolving the cursor against a documentation block.

    Attributes:
        is_in_doc_block: Whether a line break here should continue the block.
        indentation: Literal text to reproduce before the prefix on the new line.
        line_classification: Which marker the current line matched.
        marker_range: Range of the matched marker on the current line, if any.
        language_id: Language of the document.
        position: The cursor position the context was resolved for.
        line_text: Text of the cursor line at resolution time.
        documentation_target: Advisory declaration the block documents.
        strategy: Name of the strategy that decided membership.
    """

    is_in_doc_block: bool
    indentation: str
    line_classification: LineClassification
    marker_range: Optional[Range]
    language_id: Optional[str]
    position: Position
    line_text: str = ""
    documentation_target: Optional[DocumentationTarget] = None
    strategy: str = ""

    @property
    def state(self) -> BlockState:
        if self.line_classification is LineClassification.TRAILING:
            if self.is_in_doc_block:
                return BlockState.TRAILING_BEFORE_CLOSE
            return BlockState.TRAILING_AFTER_CLOSE
        if not self.is_in_doc_block:
            return BlockState.OUTSIDE
        if self.line_classification is LineClassification.LEADING:
            return BlockState.LEADING
        return BlockState.CONTENT

    def to_dict(self) -> dict:
        return {
            "is_in_doc_block": self.is_in_doc_block,
            "state": self.state.value,
            "indentation": self.indentation,
            "line_classification": self.line_classification.value,
            "marker_range": self.marker_range.to_dict() if self.marker_range else None,
            "language_id": self.language_id,
            "position": self.position.to_dict(),
            "documentation_target": (
                self.documentation_target.to_dict() if self.documentation_target else None
            ),
            "strategy": self.strategy,
        }


def leading_whitespace(line_text: str) -> str:
    match = _LEADING_WS.match(line_text)
    return match.group(0) if match else ""


def match_markers(line_text: str, fmt: CommentFormat) -> LineMatch:
    """Classifies a line by the first block marker it contains.

    The start marker takes precedence over the content prefix, which takes
    precedence over the end marker, regardless of their offsets. Absent or
    empty markers never match.

    A line holding nothing but whitespace and the right-trimmed prefix (a
    blank ` *` line whose trailing space was stripped) counts as content.
    """
    candidates = (
        (LineClassification.LEADING, fmt.block_start),
        (LineClassification.CONTENT, fmt.block_prefix),
        (LineClassification.TRAILING, fmt.block_end),
    )
    for classification, marker in candidates:
        if not marker:
            continue
        index = line_text.find(marker)
        if index >= 0:
            return LineMatch(classification, index, marker)

    bare_prefix = fmt.block_prefix.rstrip()
    if bare_prefix.strip() and line_text.strip() == bare_prefix.strip():
        index = line_text.find(bare_prefix)
        if index >= 0:
            return LineMatch(LineClassification.CONTENT, index, bare_prefix)

    return NO_MATCH


def find_closing_marker(line_text: str, fmt: CommentFormat) -> int:
    """Returns the first offset of the end marker on this line, or -1.

    With symmetric markers (docstring quotes) the opener is its own first
    occurrence, so an opening line reads as closed once the cursor is past it.
    Scope detection is what tells such a line apart.
    """
    if not fmt.block_end:
        return -1
    return line_text.find(fmt.block_end)


def _marker_range(position: Position, match: LineMatch) -> Optional[Range]:
    if not match.found:
        return None
    return Range(
        Position(position.line, match.index),
        Position(position.line, match.end),
    )


def _indentation_for(line_text: str, match: LineMatch, position: Position) -> str:
    # Align under the marker when it precedes the cursor.
    if match.found and match.index < position.character:
        return line_text[: match.index]
    return leading_whitespace(line_text)


## ==================== Detection strategies ====================
class DetectionStrategy:
    """One link of the detection chain."""

    name = "base"

    async def detect(
        self,
        host: "BaseEditorHost",
        fmt: CommentFormat,
        line_text: str,
        position: Position,
        language_id: Optional[str],
    ) -> Optional[DocContext]:
        """Returns a definitive context, or None when this strategy cannot decide."""
        raise NotImplementedError


class ScopeStrategy(DetectionStrategy):
    """Decides membership from the scopes the host reports at the cursor."""

    name = "scopes"

    async def detect(
        self,
        host: "BaseEditorHost",
        fmt: CommentFormat,
        line_text: str,
        position: Position,
        language_id: Optional[str],
    ) -> Optional[DocContext]:
        try:
            scopes = await host.query_scopes_at(position)
        except Exception:
            logger.debug("Scope-based detection failed, falling back to text analysis.", exc_info=True)
            return None

        if not scopes:
            return None

        in_block = any(doc_scope in scope for scope in scopes for doc_scope in DOC_SCOPES)
        match = match_markers(line_text, fmt)
        return DocContext(
            is_in_doc_block=in_block,
            indentation=_indentation_for(line_text, match, position),
            line_classification=match.classification,
            marker_range=_marker_range(position, match),
            language_id=language_id,
            position=position,
            line_text=line_text,
            strategy=self.name,
        )


class TextMatchStrategy(DetectionStrategy):
    """Decides membership from the block markers found in the line text."""

    name = "text"

    async def detect(
        self,
        host: "BaseEditorHost",
        fmt: CommentFormat,
        line_text: str,
        position: Position,
        language_id: Optional[str],
    ) -> Optional[DocContext]:
        return classify_line(line_text, fmt, position, language_id)


def classify_line(
    line_text: str,
    fmt: CommentFormat,
    position: Position,
    language_id: Optional[str] = None,
) -> DocContext:
    """Text-only classification of the cursor against the markers of `fmt`."""
    match = match_markers(line_text, fmt)
    if not match.found:
        return DocContext(
            is_in_doc_block=False,
            indentation=leading_whitespace(line_text),
            line_classification=LineClassification.NONE,
            marker_range=None,
            language_id=language_id,
            position=position,
            line_text=line_text,
            strategy=TextMatchStrategy.name,
        )

    if fmt.multi_line:
        in_block = True
        closing = find_closing_marker(line_text, fmt)
        if closing >= 0 and position.character >= closing + len(fmt.block_end or ""):
            in_block = False
    else:
        # Line docs have no closing state; the marker only has to precede the cursor.
        in_block = match.index < position.character

    return DocContext(
        is_in_doc_block=in_block,
        indentation=line_text[: match.index],
        line_classification=match.classification,
        marker_range=_marker_range(position, match),
        language_id=language_id,
        position=position,
        line_text=line_text,
        strategy=TextMatchStrategy.name,
    )


DEFAULT_STRATEGIES: tuple[DetectionStrategy, ...] = (ScopeStrategy(), TextMatchStrategy())
TEXT_ONLY_STRATEGIES: tuple[DetectionStrategy, ...] = (TextMatchStrategy(),)


async def _find_documentation_target(
    host: "BaseEditorHost", position: Position
) -> Optional[DocumentationTarget]:
    try:
        return await host.query_declaration_near(position)
    except Exception:
        logger.debug("Symbol detection failed, continuing without a target.", exc_info=True)
        return None


async def resolve_context(
    host: "BaseEditorHost",
    language_id: Optional[str],
    position: Position,
    *,
    catalog: Optional[FormatCatalog] = None,
    strategies: Optional[Sequence[DetectionStrategy]] = None,
    lookup_declarations: bool = True,
) -> DocContext:
    """Resolves the documentation-block context at `position`.

    Args:
        host: Supplies the line text and answers the advisory queries.
        language_id: Language of the document. An unsupported language yields
            an "outside" context whatever the line contains.
        position: Cursor position to resolve.
        catalog: Format catalog; the built-in one when omitted.
        strategies: Detection chain; scopes first, then text matching, when
            omitted. Text matching is appended if the chain lacks a final
            decisive strategy.
        lookup_declarations: Whether to ask the host for the documented
            declaration once the cursor is known to be inside a block.

    Returns:
        The resolved `DocContext`.
    """
    fmt = (catalog or DEFAULT_CATALOG).lookup(language_id)
    line_text = host.read_line(position.line)

    if fmt is None:
        TRACE_LOGGER.debug("resolve %s@%s: unsupported language", language_id, position)
        return DocContext(
            is_in_doc_block=False,
            indentation=leading_whitespace(line_text),
            line_classification=LineClassification.NONE,
            marker_range=None,
            language_id=language_id,
            position=position,
            line_text=line_text,
            strategy="catalog",
        )

    context: Optional[DocContext] = None
    for strategy in strategies if strategies is not None else DEFAULT_STRATEGIES:
        context = await strategy.detect(host, fmt, line_text, position, language_id)
        if context is not None:
            break
    if context is None:
        context = classify_line(line_text, fmt, position, language_id)

    if context.is_in_doc_block and lookup_declarations:
        target = await _find_documentation_target(host, position)
        if target is not None:
            context = replace(context, documentation_target=target)

    TRACE_LOGGER.debug(
        "resolve %s@%s: %s via %s, line=%r",
        language_id,
        position,
        context.state.value,
        context.strategy,
        line_text,
    )
    return context
