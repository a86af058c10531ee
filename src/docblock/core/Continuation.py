# docblock/core/Continuation.py
"""Continuation engine: the text a line break inserts inside a documentation block.

Given a resolved `DocContext` and the block's `CommentFormat`, computes the
insertion text and the cursor position after the edit:

- Cursor in the middle of the line: `"\\n" + indentation + prefix`. The text to
  the right of the cursor ends up after the new prefix.
- Cursor at end of line in a multi-line block: the same, plus a trailing
  `"\\n"` so the next keystroke does not run into existing text.
- The cursor always lands on the prefixed line, right after the prefix.
"""

from dataclasses import dataclass

from docblock.core.BlockContext import DocContext
from docblock.core.CommentFormats import CommentFormat
from docblock.core.Positions import Position


@dataclass(frozen=True)
class Continuation:
    insertion_text: str
    cursor_line: int
    cursor_character: int

    @property
    def cursor(self) -> Position:
        return Position(self.cursor_line, self.cursor_character)

    def to_dict(self) -> dict:
        return {
            "insertion_text": self.insertion_text,
            "cursor_line": self.cursor_line,
            "cursor_character": self.cursor_character,
        }


def is_cursor_at_line_end(context: DocContext) -> bool:
    return context.position.character >= len(context.line_text)


def compute_continuation(fmt: CommentFormat, context: DocContext) -> Continuation:
    """Computes the insertion text and the post-edit cursor for a line break.

    Args:
        fmt: Comment format of the block being continued.
        context: Context resolved at the cursor; expected to be inside a block.

    Returns:
        The `Continuation` to apply at `context.position`.
    """
    new_line = context.indentation + fmt.block_prefix
    # Line-doc dialects have no block to keep open below the cursor.
    add_trailing_line = fmt.multi_line and is_cursor_at_line_end(context)

    insertion = "\n" + new_line
    if add_trailing_line:
        insertion += "\n"

    return Continuation(
        insertion_text=insertion,
        cursor_line=context.position.line + 1,
        cursor_character=len(new_line),
    )
