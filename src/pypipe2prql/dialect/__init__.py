"""Target SQL dialects for pipeline translation."""

from io import StringIO

from pypipe2prql.dialect._base import Dialect, DialectName
from pypipe2prql.dialect.bigquery import BigQueryDialect
from pypipe2prql.dialect.postgres import PostgresDialect

__all__ = [
    "Dialect",
    "DialectName",
    "BigQueryDialect",
    "PostgresDialect",
    "get_dialect",
    "quote_identifier",
    "quote_literal",
]

_REGISTRY: dict[str, type[Dialect]] = {
    DialectName.POSTGRES: PostgresDialect,
    DialectName.BIGQUERY: BigQueryDialect,
}


def get_dialect(name: str) -> Dialect:
    """Get a dialect instance by name.

    Args:
        name: Dialect name ("postgres" or "bigquery").

    Returns:
        A Dialect instance.

    Raises:
        ValueError: If the dialect name is unknown.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ValueError(
            f"unknown dialect: {name!r}. "
            f"Available: {', '.join(sorted(_REGISTRY))}"
        )
    return cls()


def quote_identifier(name: str, dialect: Dialect) -> str:
    """Return ``name`` as a PRQL identifier for ``dialect``."""
    w = StringIO()
    dialect.write_identifier(w, name)
    return w.getvalue()


def quote_literal(text: str, dialect: Dialect) -> str:
    """Return ``text`` as a SQL string literal, escaped for use inside a PRQL s-string."""
    w = StringIO()
    dialect.write_string_literal(w, text)
    return w.getvalue()
