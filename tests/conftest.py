"""Shared test fixtures."""

import pytest

from pypipe2prql.dialect.bigquery import BigQueryDialect
from pypipe2prql.dialect.postgres import PostgresDialect


@pytest.fixture
def pg_dialect():
    return PostgresDialect()


@pytest.fixture
def bigquery_dialect():
    return BigQueryDialect()


@pytest.fixture
def albums_domain():
    return {"name": "domain", "domain": "al bums", "table": True}


@pytest.fixture
def sample_aggregations():
    return [
        {"columns": ["City"], "newcolumns": ["City"], "aggfunction": "first"},
        {
            "columns": ["Price", "Quantity"],
            "newcolumns": ["Price_sum", "Somme des quantités"],
            "aggfunction": "sum",
        },
    ]
