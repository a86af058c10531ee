# docblock/integrations/Declarations.py
"""Declarations Module
===================
A lightweight, regex-based answer to "which declaration does the documentation
block at this position belong to".

Two conventions are supported:

- Docstring languages (Python): the documentation follows the declaration, so
  the search goes upwards for the nearest `def`/`class` that is indented less
  than the docstring line.
- Everything else: the documentation precedes the declaration, so the search
  goes downwards past the rest of the comment, blank lines and annotations,
  and inspects the first code line.

Both searches are limited to a small window. The result is advisory only.
"""

import logging
import re
from typing import Optional, Sequence

from docblock.core.Positions import DocumentationTarget, Position, Range


logger = logging.getLogger("docblock")

SEARCH_WINDOW = 20

# Matched against stripped lines, hence no leading `^\s*`.
PYTHON_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"async\s+def\s+(\w+)"), "function"),
    (re.compile(r"def\s+(\w+)"), "function"),
    (re.compile(r"class\s+(\w+)"), "class"),
]

_MODIFIERS = (
    r"(?:(?:export|default|public|private|protected|internal|fileprivate|open|"
    r"static|final|abstract|sealed|override|mutating|async|inline|extern|virtual|"
    r"synchronized|declare|@\w+(?:\([^)]*\))?)\s+)*"
)

C_FAMILY_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(_MODIFIERS + r"(?:typedef\s+)?(class|interface|struct|enum|protocol|extension|actor|namespace)\s+(\w+)"), ""),
    (re.compile(_MODIFIERS + r"func\s+(\w+)"), "function"),
    (re.compile(_MODIFIERS + r"function\s*\*?\s*(\w+)\s*\("), "function"),
    (re.compile(_MODIFIERS + r"(?:const|let|var)\s+(\w+)\s*(?::[^=]+)?=\s*(?:async\s+)?(?:function\b|\([^)]*\)\s*(?::[^=]+)?=>|\w+\s*=>)"), "function"),
    (re.compile(_MODIFIERS + r"(?:const|let|var)\s+(\w+)"), "variable"),
    (re.compile(_MODIFIERS + r"type\s+(\w+)\s*="), "type"),
    (re.compile(r"[-+]\s*\([^)]*\)\s*(\w+)"), "method"),
    (re.compile(_MODIFIERS + r"[\w:<>\[\],.*&\s]*?[\s*&](\w+)\s*\("), "function"),
]

_CONTROL_KEYWORDS = frozenset(
    {"if", "for", "while", "switch", "return", "catch", "else", "do", "sizeof", "new", "throw"}
)

_COMMENT_LINE_STARTS = ("*", "/*", "//", "#", "@")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _target(lines: Sequence[str], y: int, kind: str, name: str) -> DocumentationTarget:
    line = lines[y]
    return DocumentationTarget(
        kind=kind,
        name=name,
        detail=line.strip() or None,
        range=Range(Position(y, _indent_of(line)), Position(y, len(line))),
    )


class DeclarationFinder:
    """Finds the declaration a documentation block documents.

    Attributes:
        docstring_languages: Languages whose documentation follows the
            declaration it documents.
        window: Maximum number of lines inspected.
    """

    def __init__(self, docstring_languages: Sequence[str] = ("python",), window: int = SEARCH_WINDOW) -> None:
        self.docstring_languages = frozenset(lang.lower() for lang in docstring_languages)
        self.window = window

    def find(
        self, lines: Sequence[str], position: Position, language_id: Optional[str]
    ) -> Optional[DocumentationTarget]:
        if not (0 <= position.line < len(lines)):
            return None
        if language_id and language_id.lower() in self.docstring_languages:
            return self._find_preceding_definition(lines, position.line)
        return self._find_following_declaration(lines, position.line)

    def _find_preceding_definition(self, lines: Sequence[str], start_y: int) -> Optional[DocumentationTarget]:
        """Searches upwards for the `def`/`class` owning a docstring on `start_y`."""
        doc_indent = _indent_of(lines[start_y])
        for y in range(start_y - 1, max(-1, start_y - self.window), -1):
            full_line = lines[y]
            stripped = full_line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if _indent_of(full_line) >= doc_indent:
                # Still inside the docstring (or the body above it).
                continue
            for pattern, kind in PYTHON_PATTERNS:
                match = pattern.match(stripped)
                if match:
                    return _target(lines, y, kind, match.group(1))
            # Dedented code that is not a definition: the docstring has no owner.
            return None
        return None

    def _find_following_declaration(self, lines: Sequence[str], start_y: int) -> Optional[DocumentationTarget]:
        """Searches downwards for the first code line after a comment on `start_y`."""
        for y in range(start_y + 1, min(len(lines), start_y + 1 + self.window)):
            stripped = lines[y].strip()
            if not stripped or stripped.startswith(_COMMENT_LINE_STARTS):
                continue
            return self._match_declaration(lines, y, stripped)
        return None

    def _match_declaration(self, lines: Sequence[str], y: int, stripped: str) -> Optional[DocumentationTarget]:
        first_word = re.split(r"\W", stripped, maxsplit=1)[0]
        if first_word in _CONTROL_KEYWORDS:
            return None
        for pattern, kind in C_FAMILY_PATTERNS:
            match = pattern.match(stripped)
            if not match:
                continue
            if not kind:
                # Type declarations name their own kind.
                return _target(lines, y, match.group(1), match.group(2))
            name = match.group(1)
            if name in _CONTROL_KEYWORDS:
                continue
            return _target(lines, y, kind, name)
        logger.debug("No declaration recognised on line %d: %r", y, stripped)
        return None
