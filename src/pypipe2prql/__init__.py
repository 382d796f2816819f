"""pypipe2prql - Convert JSON pipeline descriptions to PRQL and SQL."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pypipe2prql")
except PackageNotFoundError:  # source checkout without installed metadata
    __version__ = "0.0.0.dev0"

from typing import Any

from pypipe2prql._compiler import compile_prql
from pypipe2prql._converter import Converter
from pypipe2prql._errors import (
    CompilationError,
    InvalidPipelineError,
    TranslationError,
    UnsupportedValueTypeError,
)
from pypipe2prql.dialect import (
    BigQueryDialect,
    Dialect,
    DialectName,
    PostgresDialect,
    get_dialect,
    quote_identifier,
    quote_literal,
)
from pypipe2prql.pipeline import Pipeline, Request, parse_pipeline, parse_request

__all__ = [
    "convert",
    "convert_to_sql",
    "to_prql",
    "to_sql",
    "parse_pipeline",
    "parse_request",
    "get_dialect",
    "quote_identifier",
    "quote_literal",
    "Pipeline",
    "Request",
    "CompilationError",
    "InvalidPipelineError",
    "TranslationError",
    "UnsupportedValueTypeError",
    "Dialect",
    "DialectName",
    "BigQueryDialect",
    "PostgresDialect",
]


def _resolve_dialect(dialect: Dialect | str | None) -> Dialect:
    if dialect is None:
        return PostgresDialect()
    if isinstance(dialect, Dialect):
        return dialect
    return get_dialect(dialect)


def convert(
    pipeline: Pipeline | Any,
    *,
    dialect: Dialect | str | None = None,
    max_depth: int | None = None,
    max_output_length: int | None = None,
) -> str:
    """Convert a pipeline to PRQL text.

    Args:
        pipeline: A Pipeline, or its JSON form (list of step objects, or
            JSON text).
        dialect: Dialect instance or name. Defaults to PostgreSQL.
        max_depth: Maximum condition nesting depth. Defaults to 100.
        max_output_length: Maximum PRQL output length. Defaults to 50000.

    Returns:
        The PRQL program, steps joined with " | ".

    Raises:
        InvalidPipelineError: If the pipeline cannot be decoded.
        TranslationError: If rendering fails.
    """
    dialect = _resolve_dialect(dialect)
    if not isinstance(pipeline, Pipeline):
        pipeline = parse_pipeline(pipeline)

    kwargs: dict[str, Any] = {}
    if max_depth is not None:
        kwargs["max_depth"] = max_depth
    if max_output_length is not None:
        kwargs["max_output_length"] = max_output_length

    converter = Converter(dialect, **kwargs)
    converter.visit(pipeline)
    return converter.result


def convert_to_sql(
    pipeline: Pipeline | Any,
    *,
    dialect: Dialect | str | None = None,
    max_depth: int | None = None,
    max_output_length: int | None = None,
    pretty: bool = False,
) -> str:
    """Convert a pipeline to PRQL, then compile it to SQL.

    Args:
        pipeline: A Pipeline, or its JSON form.
        dialect: Dialect instance or name. Defaults to PostgreSQL.
        max_depth: Maximum condition nesting depth.
        max_output_length: Maximum PRQL output length.
        pretty: Ask prqlc for formatted SQL.

    Returns:
        The SQL text produced by prqlc.

    Raises:
        CompilationError: If prqlc rejects the PRQL.
    """
    dialect = _resolve_dialect(dialect)
    prql = convert(
        pipeline,
        dialect=dialect,
        max_depth=max_depth,
        max_output_length=max_output_length,
    )
    return compile_prql(prql, dialect, pretty=pretty)


def _as_request(request: Request | Any) -> Request:
    if isinstance(request, Request):
        return request
    return parse_request(request)


def to_prql(
    request: Request | Any,
    *,
    max_depth: int | None = None,
    max_output_length: int | None = None,
) -> str:
    """Translate a ``{"pipeline": [...], "dialect": ...}`` request to PRQL."""
    request = _as_request(request)
    return convert(
        request.pipeline,
        dialect=request.dialect,
        max_depth=max_depth,
        max_output_length=max_output_length,
    )


def to_sql(
    request: Request | Any,
    *,
    max_depth: int | None = None,
    max_output_length: int | None = None,
    pretty: bool = False,
) -> str:
    """Translate a request to SQL in the request's dialect."""
    request = _as_request(request)
    return convert_to_sql(
        request.pipeline,
        dialect=request.dialect,
        max_depth=max_depth,
        max_output_length=max_output_length,
        pretty=pretty,
    )
