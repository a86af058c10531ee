# docblock/core/Positions.py
"""Immutable cursor positions and ranges.

Lines and characters are 0-based, characters counted in code points of the
line text. A moved cursor is always a new `Position`; nothing here is mutated
in place.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, order=True)
class Position:
    line: int
    character: int

    def translate(self, line_delta: int = 0, character_delta: int = 0) -> "Position":
        return Position(self.line + line_delta, self.character + character_delta)

    def with_character(self, character: int) -> "Position":
        return Position(self.line, character)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def contains(self, position: Position) -> bool:
        return self.start <= position <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class DocumentationTarget:
    """Best-effort description of the declaration a documentation block belongs to.

    Attributes:
        kind: Declaration kind, e.g. 'function', 'class', 'method'.
        name: Declared identifier.
        detail: The declaration line, stripped, when available.
        range: Range of the declaration line.
    """

    kind: str
    name: str
    detail: Optional[str]
    range: Range

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "detail": self.detail,
            "range": self.range.to_dict(),
        }
