"""BigQuery dialect implementation."""

from __future__ import annotations

import re
from io import StringIO

from pypipe2prql.dialect._base import (
    Dialect,
    DialectName,
    WriteFunc,
    escape_s_string,
    strip_single_quotes,
    unescape_s_string,
)

# BigQuery string literals interpret backslash escapes, so quotes and
# backslashes are escaped in SQL before the s-string layer doubles them again.
_SQL_ESCAPE_RE = re.compile(r"([\\'])")
_SQL_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


class BigQueryDialect(Dialect):
    """BigQuery dialect for pipeline translation."""

    name = DialectName.BIGQUERY

    # --- Identifiers ---

    def write_identifier(self, w: StringIO, name: str) -> None:
        w.write(f"`{name}`")

    def write_raw_identifier(self, w: StringIO, name: str) -> None:
        w.write(f"`{escape_s_string(name)}`")

    # --- Literals ---

    def write_string_literal(self, w: StringIO, value: str) -> None:
        escaped = _SQL_ESCAPE_RE.sub(r"\\\1", value)
        w.write(f"'{escape_s_string(escaped)}'")

    def read_string_literal(self, text: str) -> str:
        sql = unescape_s_string(strip_single_quotes(text))
        return _SQL_UNESCAPE_RE.sub(r"\1", sql)

    # --- Raw expressions ---

    def write_pattern_match(
        self,
        w: StringIO,
        write_target: WriteFunc,
        write_pattern: WriteFunc,
        negated: bool,
    ) -> None:
        if negated:
            w.write("NOT ")
        w.write("REGEXP_CONTAINS(")
        write_target()
        w.write(",")
        write_pattern()
        w.write(")")

    # --- Compilation ---

    def compile_target(self) -> str:
        return "sql.bigquery"
