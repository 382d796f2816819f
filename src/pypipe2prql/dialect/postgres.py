"""PostgreSQL dialect implementation."""

from __future__ import annotations

from io import StringIO

from pypipe2prql.dialect._base import (
    Dialect,
    DialectName,
    WriteFunc,
    escape_s_string,
    strip_single_quotes,
    unescape_s_string,
)


class PostgresDialect(Dialect):
    """PostgreSQL dialect for pipeline translation."""

    name = DialectName.POSTGRES

    # --- Identifiers ---

    def write_identifier(self, w: StringIO, name: str) -> None:
        w.write(f"`{name}`")

    def write_raw_identifier(self, w: StringIO, name: str) -> None:
        # Double quotes must be escaped for the enclosing s"..." string
        w.write(f'\\"{escape_s_string(name)}\\"')

    # --- Literals ---

    def write_string_literal(self, w: StringIO, value: str) -> None:
        escaped = value.replace("'", "''")
        w.write(f"'{escape_s_string(escaped)}'")

    def read_string_literal(self, text: str) -> str:
        return unescape_s_string(strip_single_quotes(text)).replace("''", "'")

    # --- Raw expressions ---

    def write_pattern_match(
        self,
        w: StringIO,
        write_target: WriteFunc,
        write_pattern: WriteFunc,
        negated: bool,
    ) -> None:
        write_target()
        if negated:
            w.write(" NOT SIMILAR TO ")
        else:
            w.write(" SIMILAR TO ")
        write_pattern()

    # --- Compilation ---

    def compile_target(self) -> str:
        return "sql.postgres"
