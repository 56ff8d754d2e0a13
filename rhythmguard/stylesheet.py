"""Minimal stylesheet document model.

This is not a CSS parser. It scans a stylesheet for ``property: value``
declarations, tolerating block and ``//`` line comments, strings,
parenthesized values (for example ``url(data:...;)``), nested blocks and
at-rules, and records where each value sits in the source so findings can
carry exact offsets and fixes can be spliced back into otherwise untouched
text.
"""

import re
from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass, field

from .value_parser import ParsedValue, parse_value

_PROPERTY_RE = re.compile(r"^(?:--[\w-]+|-?[A-Za-z_][\w-]*)$")
_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")


@dataclass
class Declaration:
    """A ``property: value`` pair with its value's source range."""

    prop: str
    value: str
    value_start: int
    value_end: int
    important: bool = False
    dirty: bool = False
    _parsed: ParsedValue | None = field(default=None, repr=False, compare=False)

    @property
    def is_custom_property(self) -> bool:
        return self.prop.startswith("--")

    @property
    def parsed(self) -> ParsedValue:
        """Parsed value tree, shared by every rule in one lint pass."""
        if self._parsed is None:
            self._parsed = parse_value(self.value)
        return self._parsed

    def commit(self) -> None:
        """Serialize the (possibly edited) value tree back into ``value``."""
        if self._parsed is None:
            return
        new_value = str(self._parsed)
        if new_value != self.value:
            self.value = new_value
            self.dirty = True


class Stylesheet:
    """Declarations of a stylesheet plus the text they came from."""

    def __init__(self, text: str, declarations: list[Declaration]):
        self.text = text
        self.declarations = declarations
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    @classmethod
    def parse(cls, text: str) -> "Stylesheet":
        """Scan ``text`` for declarations.

        Args:
            text: Stylesheet source.

        Returns:
            Stylesheet with declarations in document order.
        """
        declarations: list[Declaration] = []
        length = len(text)
        pos = 0
        segment_start = 0
        parens: list[bool] = []
        quote: str | None = None

        while pos < length:
            char = text[pos]

            if quote:
                if char == "\\":
                    pos += 2
                    continue
                if char == quote:
                    quote = None
                pos += 1
                continue

            if text.startswith("/*", pos):
                end = text.find("*/", pos + 2)
                pos = length if end == -1 else end + 2
                continue

            if text.startswith("//", pos) and not any(parens):
                pos = _line_comment_end(text, pos, length)
                continue

            if char in "'\"":
                quote = char
            elif char == "(":
                parens.append(_opens_url(text, pos))
            elif char == ")":
                if parens:
                    parens.pop()
            elif not parens and char in ";{}":
                if char != "{":
                    declaration = cls._read_declaration(text, segment_start, pos)
                    if declaration:
                        declarations.append(declaration)
                segment_start = pos + 1
            pos += 1

        declaration = cls._read_declaration(text, segment_start, length)
        if declaration:
            declarations.append(declaration)

        return cls(text, declarations)

    @staticmethod
    def _read_declaration(text: str, start: int, end: int) -> Declaration | None:
        colon = _find_top_level(text, start, end, ":")
        if colon == -1:
            return None

        prop = _LINE_COMMENT_RE.sub("", _COMMENT_RE.sub("", text[start:colon])).strip()
        if not _PROPERTY_RE.match(prop):
            return None

        comment = _find_top_level(text, colon + 1, end, "//")
        if comment != -1:
            end = comment
        raw = text[colon + 1 : end]
        value_start = colon + 1 + (len(raw) - len(raw.lstrip()))
        value = raw.strip()

        important = False
        match = _IMPORTANT_RE.search(value)
        if match:
            important = True
            value = value[: match.start()]

        return Declaration(
            prop=prop,
            value=value,
            value_start=value_start,
            value_end=value_start + len(value),
            important=important,
        )

    def walk_decls(self) -> Iterator[Declaration]:
        yield from self.declarations

    def line_column(self, offset: int) -> tuple[int, int]:
        """Convert a character offset to a 1-based (line, column) pair."""
        line_index = bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def to_string(self) -> str:
        """Return the source with updated declaration values spliced in."""
        result = self.text
        for declaration in sorted(
            self.declarations, key=lambda d: d.value_start, reverse=True
        ):
            if declaration.dirty:
                result = (
                    result[: declaration.value_start]
                    + declaration.value
                    + result[declaration.value_end :]
                )
        return result

    def __str__(self) -> str:
        return self.to_string()


def _opens_url(text: str, pos: int) -> bool:
    return text[max(0, pos - 3) : pos].lower() == "url"


def _line_comment_end(text: str, pos: int, end: int) -> int:
    newline = text.find("\n", pos + 2, end)
    return end if newline == -1 else newline


def _find_top_level(text: str, start: int, end: int, target: str) -> int:
    """Offset of the first ``target`` (``":"`` or ``"//"``) outside strings,
    block comments and parentheses, or -1."""
    parens: list[bool] = []
    quote: str | None = None
    pos = start
    while pos < end:
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 2
                continue
            if char == quote:
                quote = None
        elif text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            pos = end if close == -1 else close + 2
            continue
        elif text.startswith("//", pos) and not any(parens):
            if target == "//":
                return pos
            pos = _line_comment_end(text, pos, end)
            continue
        elif char in "'\"":
            quote = char
        elif char == "(":
            parens.append(_opens_url(text, pos))
        elif char == ")":
            if parens:
                parens.pop()
        elif char == target and not parens:
            return pos
        pos += 1
    return -1
