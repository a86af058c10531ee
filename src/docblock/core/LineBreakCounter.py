# docblock/core/LineBreakCounter.py
"""LineBreakCounter Module
=======================
An optional decorator over `DocBlockHelper.handle_line_break` that lets the user
leave a documentation block by breaking a line twice in a row.

The decorator counts consecutive continuations per document. Any change to the
document that the decorator did not make itself resets that document's count,
so typing text between two line breaks keeps the block going. When the cursor
is at the end of a bare continuation line (nothing but indentation and prefix)
and the count has reached `exit_after_continuations`, the line break falls
through to the host's default behaviour instead.

The counts live in an explicit map keyed by document identity; the host
integration forwards document open/close/change notifications.
"""

import logging
from typing import Optional

from docblock.core.BlockContext import DocContext
from docblock.core.CommentFormats import CommentFormat
from docblock.core.Continuation import is_cursor_at_line_end
from docblock.core.DocBlockHelper import DocBlockHelper


logger = logging.getLogger("docblock")


def is_bare_continuation_line(context: DocContext, fmt: CommentFormat) -> bool:
    """True when the cursor ends a line holding only indentation and the block prefix."""
    bare = (context.indentation + fmt.block_prefix).rstrip()
    return (
        bool(bare.strip())
        and context.line_text.rstrip() == bare
        and is_cursor_at_line_end(context)
    )


class LineBreakCounter:
    """Per-document continuation counter wrapped around a `DocBlockHelper`.

    Attributes:
        helper: The wrapped helper; its host provides the document identity.
        exit_after_continuations: Number of consecutive continuations after
            which a break on a bare continuation line leaves the block. Zero
            disables the behaviour.
    """

    def __init__(self, helper: DocBlockHelper, exit_after_continuations: Optional[int] = None) -> None:
        self.helper = helper
        if exit_after_continuations is None:
            exit_after_continuations = helper.config.get("docblock", {}).get("exit_after_continuations", 1)
        self.exit_after_continuations = max(0, int(exit_after_continuations))
        self._counts: dict[str, int] = {}
        self._applying = False

    # ---- document lifecycle notifications ----
    def document_opened(self, document_id: str) -> None:
        self._counts[document_id] = 0

    def document_closed(self, document_id: str) -> None:
        self._counts.pop(document_id, None)

    def document_changed(self, document_id: str) -> None:
        """Resets the count for user edits; edits made by the continuation itself are ignored."""
        if self._applying:
            return
        if self._counts.get(document_id):
            logger.debug("LineBreakCounter: document '%s' changed, count reset.", document_id)
        if document_id in self._counts:
            self._counts[document_id] = 0

    def count(self, document_id: str) -> int:
        return self._counts.get(document_id, 0)

    def tracked_documents(self) -> list[str]:
        return sorted(self._counts)

    # ---- decorated entry point ----
    async def handle_line_break(self) -> bool:
        host = self.helper.host
        document_id = host.document_id()

        try:
            context, continuation = await self.helper.plan()
        except IndexError:
            logger.error("LineBreakCounter: cursor outside the document.", exc_info=True)
            self._reset(document_id)
            host.insert_line_break()
            return False

        if continuation is None:
            self._reset(document_id)
            host.insert_line_break()
            return False

        fmt = self.helper.catalog.lookup(context.language_id)
        if (
            fmt is not None
            and self.exit_after_continuations
            and self.count(document_id) >= self.exit_after_continuations
            and is_bare_continuation_line(context, fmt)
        ):
            logger.debug(
                "LineBreakCounter: leaving %s block in '%s' after %d continuations.",
                context.language_id,
                document_id,
                self.count(document_id),
            )
            self._reset(document_id)
            host.insert_line_break()
            return False

        self._applying = True
        try:
            applied = self.helper.apply_continuation(context, continuation)
        finally:
            self._applying = False

        if applied and document_id in self._counts:
            self._counts[document_id] += 1
        else:
            self._reset(document_id)
        return applied

    def _reset(self, document_id: str) -> None:
        if document_id in self._counts:
            self._counts[document_id] = 0
