# docblock/core/CommentFormats.py
"""CommentFormats Module
=====================
Comment format definitions for the languages whose documentation blocks can
be continued on a line break.

Each language identifier maps to an immutable `CommentFormat` describing the
three block markers (start, per-line prefix, end), the informational inline
comment prefix, and whether the dialect is a structured multi-line block or a
line-doc style where every line repeats the same marker.

Key Features:
-------------
- Built-in catalog for C-family block docs (`/** ... */`), triple-slash line
  docs (`///`) and quoted-string docstrings (`\"\"\"`).
- `FormatCatalog` built from the `[comment_formats]` configuration section,
  which may add languages, override fields of built-in entries and register
  aliases (e.g. Pygments lexer aliases such as `js` or `c++`).
- Lookups never raise: an unknown language yields None, meaning the feature is
  inactive for that language.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional


logger = logging.getLogger("docblock")


@dataclass(frozen=True)
class CommentFormat:
    """Comment markers of one documentation dialect.

    Attributes:
        block_start: Marker opening a documentation block.
        block_prefix: Marker prefixed to each interior content line.
        block_end: Marker closing the block, or None for line-doc dialects.
        inline_prefix: Marker of ordinary line comments. Informational only.
        multi_line: True for start/content/end dialects, False when every
            documentation line independently repeats the same marker.
    """

    block_start: str
    block_prefix: str
    block_end: Optional[str]
    inline_prefix: str
    multi_line: bool

    @property
    def markers(self) -> tuple[str, str, Optional[str]]:
        return self.block_start, self.block_prefix, self.block_end


C_STYLE = CommentFormat(
    block_start="/**",
    block_prefix=" * ",
    block_end=" */",
    inline_prefix="//",
    multi_line=True,
)

TRIPLE_SLASH = CommentFormat(
    block_start="///",
    block_prefix="/// ",
    block_end=None,  # No explicit end for line-doc comments
    inline_prefix="//",
    multi_line=False,
)

DOCSTRING = CommentFormat(
    block_start='"""',
    block_prefix="",
    block_end='"""',
    inline_prefix="#",
    multi_line=True,
)

# Keys are the editor-facing language identifiers.
FORMATS: dict[str, CommentFormat] = {
    "javascript": C_STYLE,
    "typescript": C_STYLE,
    "swift": TRIPLE_SLASH,
    "objective-c": C_STYLE,
    "c": C_STYLE,
    "cpp": C_STYLE,
    "java": C_STYLE,
    "python": DOCSTRING,
}

# Alternative identifiers (mostly Pygments aliases) resolved onto FORMATS keys.
ALIASES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "objectivec": "objective-c",
    "obj-c": "objective-c",
    "objc": "objective-c",
    "c++": "cpp",
    "py": "python",
    "python3": "python",
    "py3": "python",
}

_FIELDS = ("block_start", "block_prefix", "block_end", "inline_prefix", "multi_line")


class FormatCatalog:
    """Language identifier -> `CommentFormat` mapping.

    The catalog is filled once at construction and only read afterwards, so
    `lookup` stays a pure dictionary access.
    """

    def __init__(
        self,
        formats: Optional[dict[str, CommentFormat]] = None,
        aliases: Optional[dict[str, str]] = None,
    ) -> None:
        self._formats: dict[str, CommentFormat] = dict(FORMATS if formats is None else formats)
        self._aliases: dict[str, str] = dict(ALIASES if aliases is None else aliases)

    @classmethod
    def from_config(cls, config: Optional[dict[str, Any]] = None) -> "FormatCatalog":
        """Builds a catalog from the built-in formats and the `[comment_formats]` section.

        A table for a known language overrides only the fields it names; a
        table for a new language must define `block_start` and
        `block_prefix`. The optional `aliases` table maps extra identifiers
        onto catalog keys. Invalid entries are logged and skipped.

        Example:
            [comment_formats.kotlin]
            block_start = "/**"
            block_prefix = " * "
            block_end = " */"
            inline_prefix = "//"
            multi_line = true
        """
        catalog = cls()
        section = (config or {}).get("comment_formats", {})
        if not isinstance(section, dict):
            logger.warning("Ignoring [comment_formats]: expected a table, got %r.", type(section).__name__)
            return catalog

        for lang, entry in section.items():
            if lang == "aliases":
                catalog._add_aliases(entry)
                continue
            if not isinstance(entry, dict):
                logger.warning("Ignoring comment format for '%s': expected a table.", lang)
                continue
            catalog._add_format(lang.lower(), entry)
        return catalog

    def _add_format(self, lang: str, entry: dict[str, Any]) -> None:
        unknown = set(entry) - set(_FIELDS)
        if unknown:
            logger.warning("Comment format '%s' has unknown keys: %s", lang, ", ".join(sorted(unknown)))

        fields = {key: entry[key] for key in _FIELDS if key in entry}
        # An empty block_end in TOML means "no terminator".
        if fields.get("block_end") == "":
            fields["block_end"] = None

        base = self._formats.get(lang)
        try:
            if base is not None:
                fmt = replace(base, **fields)
            else:
                fmt = CommentFormat(
                    block_start=str(fields["block_start"]),
                    block_prefix=str(fields["block_prefix"]),
                    block_end=fields.get("block_end"),
                    inline_prefix=str(fields.get("inline_prefix", "")),
                    multi_line=bool(fields.get("multi_line", fields.get("block_end") is not None)),
                )
        except KeyError as e:
            logger.warning("Ignoring comment format for '%s': missing %s.", lang, e)
            return

        if not fmt.block_start:
            logger.warning("Ignoring comment format for '%s': empty block_start.", lang)
            return
        self._formats[lang] = fmt
        logger.debug("Registered comment format for '%s'.", lang)

    def _add_aliases(self, entry: Any) -> None:
        if not isinstance(entry, dict):
            logger.warning("Ignoring [comment_formats.aliases]: expected a table.")
            return
        for alias, target in entry.items():
            self._aliases[str(alias).lower()] = str(target).lower()

    def lookup(self, language_id: Optional[str]) -> Optional[CommentFormat]:
        """Returns the comment format for a language identifier, or None if unsupported."""
        if not language_id:
            return None
        key = language_id.lower()
        fmt = self._formats.get(key)
        if fmt is None:
            fmt = self._formats.get(self._aliases.get(key, ""))
        return fmt

    def resolve_language(self, *candidates: str) -> Optional[str]:
        """Returns the first catalog key matching one of `candidates` (names or aliases)."""
        for name in candidates:
            if not name:
                continue
            key = name.lower()
            if key in self._formats:
                return key
            target = self._aliases.get(key)
            if target in self._formats:
                return target
        return None

    def languages(self) -> list[str]:
        return sorted(self._formats)

    def __contains__(self, language_id: object) -> bool:
        return isinstance(language_id, str) and self.lookup(language_id) is not None


DEFAULT_CATALOG = FormatCatalog()


def lookup(language_id: Optional[str]) -> Optional[CommentFormat]:
    """Gets the comment format for a language from the built-in catalog."""
    return DEFAULT_CATALOG.lookup(language_id)
