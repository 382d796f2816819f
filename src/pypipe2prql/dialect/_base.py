"""Abstract base class for target SQL dialects."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable
from io import StringIO


class DialectName(enum.StrEnum):
    POSTGRES = "postgres"
    BIGQUERY = "bigquery"


WriteFunc = Callable[[], None]
"""Callback that writes a sub-expression to the shared StringIO buffer."""


class Dialect(ABC):
    """Abstract base class defining the dialect interface.

    PRQL itself is dialect-neutral; what differs is the SQL spliced into raw
    expressions (s-strings) and the compiler target. Methods receive a
    StringIO writer and callback functions for sub-expressions.
    """

    name: DialectName

    # --- Identifiers ---

    @abstractmethod
    def write_identifier(self, w: StringIO, name: str) -> None:
        """Write a PRQL identifier. Embedded quote characters are not escaped."""

    @abstractmethod
    def write_raw_identifier(self, w: StringIO, name: str) -> None:
        """Write an identifier inside a raw SQL expression."""

    # --- Literals ---

    @abstractmethod
    def write_string_literal(self, w: StringIO, value: str) -> None:
        """Write a single-quoted SQL string literal inside a raw expression."""

    @abstractmethod
    def read_string_literal(self, text: str) -> str:
        """Undo write_string_literal."""

    # --- Raw expressions ---

    @abstractmethod
    def write_pattern_match(
        self,
        w: StringIO,
        write_target: WriteFunc,
        write_pattern: WriteFunc,
        negated: bool,
    ) -> None: ...

    # --- Compilation ---

    @abstractmethod
    def compile_target(self) -> str:
        """prqlc target name, e.g. ``sql.postgres``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def strip_single_quotes(text: str) -> str:
    """Return the body of a single-quoted literal."""
    if len(text) < 2 or not (text.startswith("'") and text.endswith("'")):
        raise ValueError(f"not a single-quoted literal: {text!r}")
    return text[1:-1]


_S_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "{": "{{", "}": "}}"}


def escape_s_string(text: str) -> str:
    """Escape text for the body of a PRQL ``s"..."`` string.

    The compiler unescapes backslashes and double quotes, and reads single
    braces as interpolations, so all four are escaped.
    """
    return "".join(_S_STRING_ESCAPES.get(ch, ch) for ch in text)


def unescape_s_string(text: str) -> str:
    """Undo escape_s_string."""
    out = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\" or ch in "{}":
            escaped = next(chars, None)
            if escaped is None or (ch != "\\" and escaped != ch):
                raise ValueError(f"malformed s-string text: {text!r}")
            ch = escaped
        out.append(ch)
    return "".join(out)
