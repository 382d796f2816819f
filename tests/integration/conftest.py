"""Fixtures for tests that run the real prqlc compiler."""

from __future__ import annotations

import pytest

pytest.importorskip("prqlc")

from pypipe2prql.dialect.bigquery import BigQueryDialect
from pypipe2prql.dialect.postgres import PostgresDialect

DIALECTS = [
    pytest.param(PostgresDialect(), id="postgres"),
    pytest.param(BigQueryDialect(), id="bigquery"),
]


@pytest.fixture(params=DIALECTS)
def dialect(request):
    return request.param


@pytest.fixture
def albums_request():
    """Build a request on the "al bums" table followed by ``steps``."""

    def build(dialect, *steps):
        return {
            "pipeline": [{"name": "domain", "domain": "al bums", "table": True}, *steps],
            "dialect": dialect.name,
        }

    return build
