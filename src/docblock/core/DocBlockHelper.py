# docblock/core/DocBlockHelper.py
"""DocBlockHelper Module
=====================
This module defines the `DocBlockHelper` class, the line-break entry point of
the documentation-block core. It is designed to be owned by a host editor,
which delegates its Enter key to `handle_line_break`.

Key Features:
-------------
- Language-aware: looks the current language up in the format catalog and
  stays out of the way for unsupported languages.
- Context-sensitive: resolves whether the cursor is inside a documentation
  block before touching the buffer.
- All-or-nothing: either the full continuation is inserted and the cursor
  moved, or the host's default line break is performed.

Intended Usage:
---------------
    helper = DocBlockHelper(buffer, config=config)
    await helper.handle_line_break()

Classes:
--------
- `DocBlockHelper`: Composes context resolution, continuation and the edit.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from docblock.core.BlockContext import (
    DEFAULT_STRATEGIES,
    TEXT_ONLY_STRATEGIES,
    DocContext,
    resolve_context,
)
from docblock.core.CommentFormats import DEFAULT_CATALOG, FormatCatalog
from docblock.core.Continuation import Continuation, compute_continuation
from docblock.core.Positions import Position


if TYPE_CHECKING:
    from docblock.core.EditorHost import BaseEditorHost


logger = logging.getLogger("docblock")


## ================= DocBlockHelper Class ====================
class DocBlockHelper:
    """Continues documentation blocks when the user breaks a line.

    Attributes:
        host: The editor surface providing text access and edits.
        catalog: Comment formats by language.
        use_scope_provider: Whether the host's scope query is consulted before
            text matching (`[docblock].use_scope_provider`).
        lookup_declarations: Whether the documented declaration is looked up
            (`[docblock].lookup_declarations`).
    """

    def __init__(
        self,
        host: "BaseEditorHost",
        catalog: Optional[FormatCatalog] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> None:
        self.host = host
        self.config = config or {}
        self.catalog = catalog or (
            FormatCatalog.from_config(self.config) if self.config else DEFAULT_CATALOG
        )
        settings = self.config.get("docblock", {})
        self.use_scope_provider: bool = bool(settings.get("use_scope_provider", True))
        self.lookup_declarations: bool = bool(settings.get("lookup_declarations", True))

    async def resolve(self, position: Optional[Position] = None) -> DocContext:
        """Resolves the context at `position` (the cursor when omitted)."""
        if position is None:
            position = self.host.cursor_position()
        return await resolve_context(
            self.host,
            self.host.language_id(),
            position,
            catalog=self.catalog,
            strategies=DEFAULT_STRATEGIES if self.use_scope_provider else TEXT_ONLY_STRATEGIES,
            lookup_declarations=self.lookup_declarations,
        )

    async def plan(self) -> tuple[DocContext, Optional[Continuation]]:
        """Resolves the cursor context and, when inside a block, the continuation.

        Does not modify the buffer.
        """
        context = await self.resolve()
        fmt = self.catalog.lookup(context.language_id)
        if fmt is None or not context.is_in_doc_block:
            return context, None
        return context, compute_continuation(fmt, context)

    async def handle_line_break(self) -> bool:
        """Handles the line-break key.

        Returns:
            True if a documentation continuation was applied, False if the
            host's default line break was performed instead.
        """
        try:
            context, continuation = await self.plan()
        except IndexError:
            logger.error("handle_line_break: cursor outside the document.", exc_info=True)
            return self._default_line_break()

        if continuation is None:
            logger.debug(
                "handle_line_break: %s at %s, default line break.",
                context.state.value,
                context.position,
            )
            return self._default_line_break()

        return self.apply_continuation(context, continuation)

    def apply_continuation(self, context: DocContext, continuation: Continuation) -> bool:
        """Applies `continuation` at the context position and moves the cursor."""
        try:
            applied = self.host.apply_edit(continuation.insertion_text, context.position)
        except Exception:
            logger.error("Failed to apply documentation continuation.", exc_info=True)
            applied = False

        if not applied:
            logger.warning("Documentation continuation was not applied, default line break.")
            return self._default_line_break()

        try:
            self.host.set_cursor(continuation.cursor)
        except Exception:
            # The edit itself stays applied.
            logger.error("Failed to move the cursor after the documentation continuation.", exc_info=True)
        logger.debug(
            "Continued %s block at %s with %r.",
            context.language_id,
            context.position,
            continuation.insertion_text,
        )
        return True

    def _default_line_break(self) -> bool:
        self.host.insert_line_break()
        return False
