# docblock/core/EditorHost.py
"""EditorHost Module
=================
Defines `BaseEditorHost`, the contract between the documentation-block core and
the text-editing surface that embeds it.

The core only ever reads one line of text and the cursor position, optionally
asks the host two advisory questions (which scopes are active at a position,
which declaration follows it), and finally applies a single edit and moves the
cursor. Everything else (rendering, key handling, document lifecycle) stays
with the host.

The two advisory queries are coroutines because real hosts answer them from
language services that may suspend. Hosts without such services keep the
default implementations, which report "unavailable" and let the core fall back
to plain text matching.
"""

from typing import Optional

from docblock.core.Positions import DocumentationTarget, Position


class BaseEditorHost:
    """Base class for hosts driving the documentation-block core.

    Subclasses must implement the text access and editing methods. The advisory
    queries are optional.
    """

    def language_id(self) -> Optional[str]:
        """Returns the language identifier of the current document."""
        raise NotImplementedError

    def document_id(self) -> str:
        """Returns a stable identity for the current document (path or buffer name)."""
        raise NotImplementedError

    def read_line(self, line: int) -> str:
        """Returns the text of `line` without its line terminator.

        Raises:
            IndexError: If `line` is outside the document.
        """
        raise NotImplementedError

    def cursor_position(self) -> Position:
        raise NotImplementedError

    async def query_scopes_at(self, position: Position) -> Optional[set[str]]:
        """Returns the scope names active at `position`, or None when unavailable."""
        return None

    async def query_declaration_near(self, position: Position) -> Optional[DocumentationTarget]:
        """Returns the declaration a block at `position` most likely documents."""
        return None

    def apply_edit(self, text: str, position: Position) -> bool:
        """Inserts `text` at `position`. Returns True when the edit was applied."""
        raise NotImplementedError

    def set_cursor(self, position: Position) -> None:
        raise NotImplementedError

    def insert_line_break(self) -> bool:
        """Performs the host's default line break at the cursor."""
        raise NotImplementedError
