"""Aggregate step tests: the grouping x granularity matrix."""

import pytest

from pypipe2prql import convert
from pypipe2prql.dialect.bigquery import BigQueryDialect
from pypipe2prql.dialect.postgres import PostgresDialect

ALL_DIALECTS = [
    pytest.param(PostgresDialect(), id="postgres"),
    pytest.param(BigQueryDialect(), id="bigquery"),
]

AGGS = (
    "`City` = min `City`, `Price_sum` = sum `Price`, "
    "`Somme des quantités` = sum `Quantity`"
)


def _aggregate(dialect, aggregations, **step):
    return convert(
        [{"name": "aggregate", "aggregations": aggregations, **step}],
        dialect=dialect,
    )


class TestAggregateMatrix:
    @pytest.mark.parametrize("dialect", ALL_DIALECTS)
    def test_no_group_no_keep(self, dialect, sample_aggregations):
        assert _aggregate(dialect, sample_aggregations) == f"aggregate {{ {AGGS} }}"

    @pytest.mark.parametrize("dialect", ALL_DIALECTS)
    def test_no_group_keep(self, dialect, sample_aggregations):
        result = _aggregate(dialect, sample_aggregations, keepOriginalGranularity=True)
        assert result == f"derive {{ {AGGS} }}"

    @pytest.mark.parametrize("dialect", ALL_DIALECTS)
    def test_group_no_keep(self, dialect, sample_aggregations):
        result = _aggregate(dialect, sample_aggregations, on=["col", "other col"])
        assert result == (
            f"group {{ `col`, `other col` }} ( aggregate {{ {AGGS} }} )"
        )

    @pytest.mark.parametrize("dialect", ALL_DIALECTS)
    def test_group_keep(self, dialect, sample_aggregations):
        result = _aggregate(
            dialect,
            sample_aggregations,
            on=["col", "other col"],
            keepOriginalGranularity=True,
        )
        assert result == (
            f"group {{ `col`, `other col` }} ( window rows:.. ( derive {{ {AGGS} }} ) )"
        )

    @pytest.mark.parametrize("dialect", ALL_DIALECTS)
    def test_explicit_false_keep(self, dialect, sample_aggregations):
        result = _aggregate(dialect, sample_aggregations, on=[], keepOriginalGranularity=False)
        assert result == f"aggregate {{ {AGGS} }}"


class TestAggregationFunctions:
    @pytest.mark.parametrize(
        "function,token",
        [
            ("min", "min"),
            ("max", "max"),
            ("count", "count"),
            ("avg", "avg"),
            ("sum", "sum"),
            ("count distinct", "count_distinct"),
            ("first", "min"),
            ("last", "max"),
        ],
    )
    def test_function_token(self, function, token):
        aggregations = [{"columns": ["a"], "newcolumns": ["b"], "aggfunction": function}]
        assert _aggregate("postgres", aggregations) == f"aggregate {{ `b` = {token} `a` }}"

    def test_columns_paired_by_position(self):
        aggregations = [
            {"columns": ["x", "y", "z"], "newcolumns": ["z2", "y2", "x2"], "aggfunction": "avg"}
        ]
        assert _aggregate("postgres", aggregations) == (
            "aggregate { `z2` = avg `x`, `y2` = avg `y`, `x2` = avg `z` }"
        )

    def test_empty_pairing(self):
        aggregations = [
            {"columns": [], "newcolumns": [], "aggfunction": "sum"},
            {"columns": ["a"], "newcolumns": ["b"], "aggfunction": "sum"},
        ]
        assert _aggregate("postgres", aggregations) == "aggregate { `b` = sum `a` }"


class TestEmptyAggregations:
    @pytest.mark.parametrize(
        "step,expected",
        [
            pytest.param({}, "aggregate {  }", id="no-group-no-keep"),
            pytest.param({"keepOriginalGranularity": True}, "derive {  }", id="no-group-keep"),
            pytest.param({"on": ["g"]}, "group { `g` } ( aggregate {  } )", id="group-no-keep"),
            pytest.param(
                {"on": ["g"], "keepOriginalGranularity": True},
                "group { `g` } ( window rows:.. ( derive {  } ) )",
                id="group-keep",
            ),
        ],
    )
    def test_rendered_as_is(self, step, expected):
        assert _aggregate("postgres", [], **step) == expected
