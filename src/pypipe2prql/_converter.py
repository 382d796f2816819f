"""Core Converter class - renders pipeline models as PRQL text."""

from __future__ import annotations

import json
import math
from collections.abc import Callable, Sequence
from io import StringIO
from typing import Any

from pypipe2prql._constants import (
    DEFAULT_MAX_PRQL_OUTPUT_LENGTH,
    DEFAULT_MAX_RECURSION_DEPTH,
    STEP_SEPARATOR,
)
from pypipe2prql._errors import (
    ERR_MSG_UNSUPPORTED_CONDITION,
    ERR_MSG_UNSUPPORTED_STEP,
    ERR_MSG_UNSUPPORTED_VALUE_TYPE,
    MaxDepthExceededError,
    MaxOutputLengthExceededError,
    UnsupportedConditionError,
    UnsupportedStepError,
    UnsupportedValueTypeError,
)
from pypipe2prql._operators import (
    AGGREGATION_FUNCTIONS,
    COMPARISON_OPERATORS,
    INCLUSION_OPERATORS,
    NULLABILITY_OPERATORS,
)
from pypipe2prql.dialect._base import Dialect, escape_s_string
from pypipe2prql.pipeline import (
    AggregateStep,
    Aggregation,
    AndCondition,
    ComparisonCondition,
    DomainStep,
    FilterStep,
    InclusionCondition,
    MatchesCondition,
    NullabilityCondition,
    OrCondition,
    Pipeline,
)


def _scalar_text(value: Any) -> str:
    """Render a scalar as JSON text (strings double-quoted, null as ``null``)."""
    if value is None or isinstance(value, (str, bool, int)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, float) and math.isfinite(value):
        return json.dumps(value)
    raise UnsupportedValueTypeError(
        ERR_MSG_UNSUPPORTED_VALUE_TYPE,
        f"cannot render value {value!r} of type {type(value).__name__}",
    )


class Converter:
    """Renders a pipeline, a step or a condition into a PRQL string.

    One instance is used for one translation; the text accumulates in an
    internal buffer exposed as ``result``.
    """

    def __init__(
        self,
        dialect: Dialect,
        max_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
        max_output_length: int = DEFAULT_MAX_PRQL_OUTPUT_LENGTH,
    ) -> None:
        self._w = StringIO()
        self._dialect = dialect
        self._max_depth = max_depth
        self._max_output_length = max_output_length
        self._depth = 0

    @property
    def result(self) -> str:
        return self._w.getvalue()

    def _check_limits(self) -> None:
        if self._depth > self._max_depth:
            raise MaxDepthExceededError(
                "maximum condition depth exceeded",
                f"depth {self._depth} exceeds limit {self._max_depth}",
            )
        if self._w.tell() > self._max_output_length:
            raise MaxOutputLengthExceededError(
                "maximum PRQL output length exceeded",
                f"output length exceeds limit {self._max_output_length}",
            )

    def _visit_child(self, node: Any) -> None:
        """Visit a nested node, incrementing depth."""
        self._depth += 1
        try:
            self._check_limits()
            self.visit(node)
        finally:
            self._depth -= 1

    def _write_joined(
        self, items: Sequence[Any], sep: str, write_item: Callable[[Any], None]
    ) -> None:
        for i, item in enumerate(items):
            if i:
                self._w.write(sep)
            write_item(item)

    def _write_identifier(self, name: str) -> None:
        self._dialect.write_identifier(self._w, name)

    # --- Dispatch ---

    def visit(self, node: Any) -> None:
        if isinstance(node, Pipeline):
            self._visit_pipeline(node)
        elif isinstance(node, (DomainStep, AggregateStep, FilterStep)):
            self._visit_step(node)
        else:
            self._visit_condition(node)
        self._check_limits()

    def _visit_pipeline(self, pipeline: Pipeline) -> None:
        self._write_joined(pipeline.steps, STEP_SEPARATOR, self._visit_step)

    def _visit_step(self, step: Any) -> None:
        if isinstance(step, DomainStep):
            self._visit_domain(step)
        elif isinstance(step, AggregateStep):
            self._visit_aggregate(step)
        elif isinstance(step, FilterStep):
            self._visit_filter(step)
        else:
            raise UnsupportedStepError(
                ERR_MSG_UNSUPPORTED_STEP,
                f"no PRQL rendering for step {type(step).__name__}",
            )

    # --- Steps ---

    def _visit_domain(self, step: DomainStep) -> None:
        self._w.write("from ")
        if step.table:
            self._write_identifier(step.domain)
        else:
            # Custom query, embedded as an s-string
            self._w.write(f's"{escape_s_string(step.domain)}"')

    def _visit_filter(self, step: FilterStep) -> None:
        self._w.write("filter ")
        self._visit_child(step.condition)

    def _visit_aggregate(self, step: AggregateStep) -> None:
        w = self._w
        if not step.on:
            # Without groups, keeping granularity is a derive, which the
            # compiler turns into an unbounded window (OVER ()).
            w.write("derive { " if step.keep_original_granularity else "aggregate { ")
            self._write_aggregations(step.aggregations)
            w.write(" }")
            return

        w.write("group { ")
        self._write_joined(step.on, ", ", self._write_identifier)
        if step.keep_original_granularity:
            w.write(" } ( window rows:.. ( derive { ")
            self._write_aggregations(step.aggregations)
            w.write(" } ) )")
        else:
            w.write(" } ( aggregate { ")
            self._write_aggregations(step.aggregations)
            w.write(" } )")

    def _write_aggregations(self, aggregations: Sequence[Aggregation]) -> None:
        pairs = [
            (agg.function, column, new_column)
            for agg in aggregations
            for column, new_column in zip(agg.columns, agg.new_columns)
        ]
        self._write_joined(pairs, ", ", self._write_aggregation_pair)

    def _write_aggregation_pair(self, pair: tuple[str, str, str]) -> None:
        function, column, new_column = pair
        self._write_identifier(new_column)
        self._w.write(f" = {AGGREGATION_FUNCTIONS[function]} ")
        self._write_identifier(column)

    # --- Conditions ---

    def _visit_condition(self, condition: Any) -> None:
        if isinstance(condition, ComparisonCondition):
            self._visit_comparison(condition)
        elif isinstance(condition, NullabilityCondition):
            self._visit_nullability(condition)
        elif isinstance(condition, InclusionCondition):
            self._visit_inclusion(condition)
        elif isinstance(condition, MatchesCondition):
            self._visit_matches(condition)
        elif isinstance(condition, AndCondition):
            self._write_joined(condition.and_, " && ", self._visit_child)
        elif isinstance(condition, OrCondition):
            self._w.write("(")
            self._write_joined(condition.or_, " || ", self._visit_child)
            self._w.write(")")
        else:
            raise UnsupportedConditionError(
                ERR_MSG_UNSUPPORTED_CONDITION,
                f"no PRQL rendering for condition {type(condition).__name__}",
            )

    def _visit_comparison(self, condition: ComparisonCondition) -> None:
        value = _scalar_text(condition.value)
        self._write_identifier(condition.column)
        self._w.write(f" {COMPARISON_OPERATORS[condition.operator]} {value}")

    def _visit_nullability(self, condition: NullabilityCondition) -> None:
        self._write_identifier(condition.column)
        self._w.write(f" {NULLABILITY_OPERATORS[condition.operator]} null")

    def _write_raw_value(self, value: Any) -> None:
        if isinstance(value, str):
            self._dialect.write_string_literal(self._w, value)
        else:
            self._w.write(_scalar_text(value))

    def _visit_inclusion(self, condition: InclusionCondition) -> None:
        # PRQL has no IN operator, so the test is written as raw SQL
        w = self._w
        w.write('s"')
        self._dialect.write_raw_identifier(w, condition.column)
        w.write(f" {INCLUSION_OPERATORS[condition.operator]} (")
        self._write_joined(condition.value, ", ", self._write_raw_value)
        w.write(')"')

    def _visit_matches(self, condition: MatchesCondition) -> None:
        w = self._w
        w.write('s"')
        self._dialect.write_pattern_match(
            w,
            lambda: self._dialect.write_raw_identifier(w, condition.column),
            lambda: self._dialect.write_string_literal(w, condition.value),
            negated=condition.operator == "notmatches",
        )
        w.write('"')
