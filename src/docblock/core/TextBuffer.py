# docblock/core/TextBuffer.py
"""TextBuffer Module
=================
An in-memory document with a cursor, implementing `BaseEditorHost` so the
documentation-block core can run outside a full editor (command line, tests,
scripting).

The buffer keeps its text as a list of lines, like the editor it is modelled
on, and provides:

- File loading with chardet-guided encoding detection and saving back with the
  same encoding and trailing-newline convention.
- Language detection through Pygments (by filename, then by content), mapped
  onto the comment-format catalog through the lexer's aliases.
- Scope queries answered by `PygmentsScopeProvider`, declaration queries by
  `DeclarationFinder`.
- A default line break that keeps the current indentation and adds one level
  after a line opening a block (`:` in Python, `{` in C-family languages).
"""

import logging
import re
from pathlib import Path
from typing import Callable, Optional, Union

import chardet
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename, guess_lexer
from pygments.util import ClassNotFound

from docblock.core.CommentFormats import DEFAULT_CATALOG, FormatCatalog
from docblock.core.EditorHost import BaseEditorHost
from docblock.core.Positions import DocumentationTarget, Position
from docblock.integrations.Declarations import DeclarationFinder
from docblock.integrations.PygmentsScopes import PygmentsScopeProvider


logger = logging.getLogger("docblock")

CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75

BRACE_LANGUAGES = frozenset(
    {"java", "c", "cpp", "c++", "objective-c", "swift", "javascript", "typescript", "csharp", "go", "php", "rust"}
)

ChangeListener = Callable[[str], None]


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """Decodes file contents, returning `(text, encoding)`.

    The chardet guess is tried first when it is confident enough, then UTF-8
    and Latin-1; UTF-8 with replacement characters is the last resort.
    """
    if not raw:
        return "", "utf-8"

    result = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
    guess = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logger.debug("Chardet detected encoding '%s' with confidence %.2f.", guess, confidence)

    attempts: list[str] = []
    if guess and confidence >= CHARDET_MIN_CONFIDENCE:
        attempts.append(guess)
    for fallback in ("utf-8", "latin-1"):
        if fallback not in attempts:
            attempts.append(fallback)

    for encoding in attempts:
        try:
            return raw.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError):
            logger.debug("Decoding with '%s' failed, trying the next encoding.", encoding)
    return raw.decode("utf-8", errors="replace"), "utf-8"


class TextBuffer(BaseEditorHost):
    """A list-of-lines document with a single cursor.

    Attributes:
        text: The lines of the document, without terminators.
        cursor_y: Cursor line (0-based).
        cursor_x: Cursor character within the line (0-based).
        filename: Path the buffer was loaded from or will be saved to.
        encoding: Encoding used when saving.
        trailing_newline: Whether the document ends with a line terminator.
        modified: Whether the buffer changed since it was loaded.
        config: Application configuration (`[editor]` controls indentation).
    """

    def __init__(
        self,
        text: Union[str, list[str]] = "",
        filename: Optional[str] = None,
        language: Optional[str] = None,
        catalog: Optional[FormatCatalog] = None,
        config: Optional[dict] = None,
    ) -> None:
        if isinstance(text, str):
            self.trailing_newline = text.endswith("\n")
            # splitlines() drops the empty string after a final terminator.
            self.text: list[str] = text.splitlines() or [""]
        else:
            self.trailing_newline = False
            self.text = list(text) or [""]
        self.filename = filename
        self.encoding = "utf-8"
        self.cursor_y = 0
        self.cursor_x = 0
        self.modified = False
        self.config = config or {}
        self.catalog = catalog or DEFAULT_CATALOG
        self._forced_language = language.lower() if language else None
        self._lexer: Optional[Lexer] = None
        self.current_language: Optional[str] = None
        self._declarations = DeclarationFinder()
        self._change_listeners: list[ChangeListener] = []

    # ---- loading and saving ----
    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        language: Optional[str] = None,
        catalog: Optional[FormatCatalog] = None,
        config: Optional[dict] = None,
    ) -> "TextBuffer":
        """Loads a file, detecting its encoding.

        Raises:
            OSError: If the file cannot be read.
        """
        path = Path(path)
        raw = path.read_bytes()
        content, encoding = decode_bytes(raw)
        buffer = cls(content, filename=str(path), language=language, catalog=catalog, config=config)
        buffer.encoding = encoding
        logger.info("Loaded '%s' (%d lines, %s).", path, len(buffer.text), encoding)
        return buffer

    def to_string(self) -> str:
        content = "\n".join(self.text)
        return content + "\n" if self.trailing_newline else content

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Writes the buffer to `path` (its own filename when omitted).

        Raises:
            ValueError: If neither `path` nor a filename is known.
            OSError: If the file cannot be written.
        """
        target = path or self.filename
        if not target:
            raise ValueError("No filename to save the buffer to.")
        target_path = Path(target)
        target_path.write_text(self.to_string(), encoding=self.encoding, newline="\n")
        self.modified = False
        logger.info("Saved '%s'.", target_path)
        return target_path

    # ---- language detection ----
    def detect_language(self) -> None:
        """Determines the Pygments lexer and the catalog language of the buffer."""
        self._lexer = self._determine_lexer()
        names = [self._lexer.name.lower(), *(alias.lower() for alias in self._lexer.aliases)]
        if self._forced_language:
            self.current_language = self._forced_language
        else:
            self.current_language = self.catalog.resolve_language(*names) or names[0]
        logger.debug("Language of '%s': %s.", self.document_id(), self.current_language)

    def _determine_lexer(self) -> Lexer:
        """Filename first, then content, then a plain text lexer."""
        if self._forced_language:
            try:
                return get_lexer_by_name(self._forced_language, stripnl=False)
            except ClassNotFound:
                logger.debug("Pygments: no lexer named '%s'.", self._forced_language)

        if self.filename:
            try:
                lexer = get_lexer_for_filename(self.filename, stripnl=False)
                logger.debug("Pygments: detected '%s' by filename.", lexer.name)
                return lexer
            except ClassNotFound:
                logger.debug("Pygments: no lexer for filename '%s'.", self.filename)

        content_sample = "\n".join(self.text[:200])[:10000]
        if content_sample.strip():
            try:
                lexer = guess_lexer(content_sample, stripnl=False)
                logger.debug("Pygments: guessed '%s' by content.", lexer.name)
                return lexer
            except ClassNotFound:
                logger.debug("Pygments: content guess failed.")

        return TextLexer()

    # ---- BaseEditorHost ----
    def language_id(self) -> Optional[str]:
        if self.current_language is None:
            self.detect_language()
        return self.current_language

    def document_id(self) -> str:
        return self.filename or f"<buffer-{id(self):x}>"

    def read_line(self, line: int) -> str:
        if not (0 <= line < len(self.text)):
            raise IndexError(f"line {line} out of range (buffer size {len(self.text)})")
        return self.text[line]

    def cursor_position(self) -> Position:
        return Position(self.cursor_y, self.cursor_x)

    def offset_of(self, position: Position) -> int:
        """Character offset of `position` in the text joined with newlines."""
        line = max(0, min(position.line, len(self.text) - 1))
        offset = sum(len(row) + 1 for row in self.text[:line])
        return offset + max(0, min(position.character, len(self.text[line])))

    async def query_scopes_at(self, position: Position) -> Optional[set[str]]:
        if self._lexer is None:
            self.detect_language()
        if self._lexer is None or isinstance(self._lexer, TextLexer):
            return None
        provider = PygmentsScopeProvider(self._lexer, self.catalog.lookup(self.language_id()))
        return provider.scopes_at("\n".join(self.text), self.offset_of(position))

    async def query_declaration_near(self, position: Position) -> Optional[DocumentationTarget]:
        return self._declarations.find(self.text, position, self.language_id())

    def apply_edit(self, text: str, position: Position) -> bool:
        try:
            return self.insert_text_at_position(text, position.line, position.character)
        except IndexError:
            logger.error("apply_edit: cannot insert at %s.", position, exc_info=True)
            return False

    def set_cursor(self, position: Position) -> None:
        self.cursor_y = min(max(position.line, 0), len(self.text) - 1)
        self.cursor_x = min(max(position.character, 0), len(self.text[self.cursor_y]))

    def insert_line_break(self) -> bool:
        """Inserts a newline with auto-indentation at the cursor."""
        if self.cursor_y >= len(self.text):
            logger.error("insert_line_break: cursor_y (%d) is out of bounds.", self.cursor_y)
            self.cursor_y = len(self.text) - 1
            self.cursor_x = len(self.text[self.cursor_y])

        current_line = self.text[self.cursor_y]
        indent_match = re.match(r"^\s*", current_line)
        indent = indent_match.group(0) if indent_match else ""

        editor_config = self.config.get("editor", {})
        tab_size = editor_config.get("tab_size", 4)
        extra_indent = " " * tab_size if editor_config.get("use_spaces", True) else "\t"

        before_cursor = current_line[: self.cursor_x].rstrip()
        language = self.language_id()
        if language == "python" and before_cursor.endswith(":"):
            indent += extra_indent
        elif language in BRACE_LANGUAGES and before_cursor.endswith("{"):
            indent += extra_indent

        return self.insert_text_at_position("\n" + indent, self.cursor_y, self.cursor_x)

    # ---- editing primitives ----
    def add_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def _notify_changed(self) -> None:
        for listener in self._change_listeners:
            listener(self.document_id())

    def insert_text_at_position(self, text: str, row: int, col: int) -> bool:
        """Low-level insertion of `text` at (row, col); the cursor ends after the text.

        Returns:
            True if text was non-empty and thus inserted, False otherwise.

        Raises:
            IndexError: If `row` is out of bounds.
        """
        if not text:
            return False

        if not (0 <= row < len(self.text)):
            raise IndexError(f"insert_text_at_position: invalid row index {row} (buffer size {len(self.text)})")

        line_len = len(self.text[row])
        if not (0 <= col <= line_len):
            logger.warning("insert_text_at_position: column %d out of bounds for line %d. Clamping.", col, row)
            col = max(0, min(col, line_len))

        lines_to_insert = text.split("\n")
        prefix = self.text[row][:col]
        suffix = self.text[row][col:]

        if len(lines_to_insert) == 1:
            self.text[row] = prefix + text + suffix
            self.cursor_y = row
            self.cursor_x = col + len(text)
        else:
            self.text[row] = prefix + lines_to_insert[0]
            self.text[row + 1 : row + 1] = lines_to_insert[1:-1] + [lines_to_insert[-1] + suffix]
            self.cursor_y = row + len(lines_to_insert) - 1
            self.cursor_x = len(lines_to_insert[-1])

        self.modified = True
        self._notify_changed()
        return True
