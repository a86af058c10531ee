# src/docblock/core/__init__.py
"""Public facade for docblock.core: re-export main classes from CamelCase modules.

`TextBuffer` is imported from its own module (`docblock.core.TextBuffer`), since
it depends on `docblock.integrations`, which in turn imports from this package.
"""

# Re-export classes/symbols from CamelCase modules
from .BlockContext import (  # noqa: F401
    BlockState,
    DocContext,
    LineClassification,
    classify_line,
    resolve_context,
)
from .CommentFormats import CommentFormat, FormatCatalog, lookup  # noqa: F401
from .Continuation import Continuation, compute_continuation  # noqa: F401
from .DocBlockHelper import DocBlockHelper  # noqa: F401
from .EditorHost import BaseEditorHost  # noqa: F401
from .LineBreakCounter import LineBreakCounter  # noqa: F401
from .Positions import DocumentationTarget, Position, Range  # noqa: F401


__all__ = [
    "BaseEditorHost",
    "BlockState",
    "CommentFormat",
    "Continuation",
    "DocBlockHelper",
    "DocContext",
    "DocumentationTarget",
    "FormatCatalog",
    "LineBreakCounter",
    "LineClassification",
    "Position",
    "Range",
    "classify_line",
    "compute_continuation",
    "lookup",
    "resolve_context",
]
