"""PRQL-to-SQL compilation through the prqlc compiler."""

from __future__ import annotations

import logging

import prqlc

from pypipe2prql._errors import ERR_MSG_COMPILATION_FAILED, CompilationError
from pypipe2prql.dialect._base import Dialect

logger = logging.getLogger(__name__)


def compile_prql(
    prql: str,
    dialect: Dialect,
    *,
    pretty: bool = False,
    signature_comment: bool = False,
) -> str:
    """Compile PRQL text to SQL for the dialect's target.

    Raises:
        CompilationError: If prqlc rejects the query. The compiler's
            diagnostics are kept unchanged on the error.
    """
    target = dialect.compile_target()
    options = prqlc.CompileOptions(
        format=pretty,
        target=target,
        signature_comment=signature_comment,
    )
    logger.debug("compiling PRQL for target %s", target)
    try:
        return prqlc.compile(prql, options)
    except (SyntaxError, ValueError) as e:
        logger.warning("prqlc rejected query for target %s", target)
        raise CompilationError(ERR_MSG_COMPILATION_FAILED, str(e), wrapped=e) from e
