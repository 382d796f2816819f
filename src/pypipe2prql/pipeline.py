"""Pipeline request models.

A request is decoded once into these frozen models, rendered once, and
discarded. Steps are tagged by their ``name`` field. Conditions may carry an
explicit ``kind`` tag; untagged conditions are accepted in the legacy shape,
where the variant follows from the ``and``/``or`` keys or from the leaf's
``operator``, and anything ambiguous is rejected.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    Tag,
    ValidationError,
    model_validator,
)

from pypipe2prql._errors import ERR_MSG_INVALID_PIPELINE, InvalidPipelineError
from pypipe2prql._operators import (
    COMPARISON_OPERATORS,
    INCLUSION_OPERATORS,
    MATCHES_OPERATORS,
    NULLABILITY_OPERATORS,
)
from pypipe2prql.dialect._base import DialectName

Column = StrictStr
"""A column name, used as-is."""

Scalar = Union[
    StrictStr,
    StrictBool,
    StrictInt,
    Annotated[StrictFloat, AllowInfNan(False)],
    None,
]


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class AggregationFunction(enum.StrEnum):
    MIN = "min"
    MAX = "max"
    COUNT = "count"
    AVG = "avg"
    SUM = "sum"
    COUNT_DISTINCT = "count distinct"
    FIRST = "first"
    LAST = "last"


# --- Conditions ---


class ComparisonCondition(_Model):
    kind: Literal["comparison"] = "comparison"
    column: Column
    operator: Literal["eq", "ne", "gt", "gte", "lt", "lte"]
    value: Scalar


class NullabilityCondition(_Model):
    kind: Literal["nullability"] = "nullability"
    column: Column
    operator: Literal["isnull", "notnull"]


class InclusionCondition(_Model):
    kind: Literal["inclusion"] = "inclusion"
    column: Column
    operator: Literal["in", "nin"]
    value: tuple[Scalar, ...]


class MatchesCondition(_Model):
    kind: Literal["matches"] = "matches"
    column: Column
    operator: Literal["matches", "notmatches"]
    value: StrictStr


class AndCondition(_Model):
    kind: Literal["and"] = "and"
    and_: tuple[Condition, ...] = Field(alias="and", min_length=1)


class OrCondition(_Model):
    kind: Literal["or"] = "or"
    or_: tuple[Condition, ...] = Field(alias="or", min_length=1)


_COMPOSITE_KEYS = ("and", "or")


def _legacy_condition_kind(value: Mapping[str, Any]) -> str | None:
    composite = [key for key in _COMPOSITE_KEYS if key in value]
    if composite:
        # {"and": [...], "or": [...]} or a composite mixed with leaf fields
        if len(value) != 1:
            return None
        return composite[0]

    operator = value.get("operator")
    if not isinstance(operator, str):
        return None
    if operator in COMPARISON_OPERATORS:
        return "comparison"
    if operator in NULLABILITY_OPERATORS:
        return "nullability"
    if operator in INCLUSION_OPERATORS:
        return "inclusion"
    if operator in MATCHES_OPERATORS:
        return "matches"
    return None


def _condition_kind(value: Any) -> str | None:
    if isinstance(value, BaseModel):
        return getattr(value, "kind", None)
    if not isinstance(value, Mapping):
        return None
    if "kind" in value:
        kind = value["kind"]
        return kind if isinstance(kind, str) else None
    return _legacy_condition_kind(value)


Condition = Annotated[
    Union[
        Annotated[ComparisonCondition, Tag("comparison")],
        Annotated[NullabilityCondition, Tag("nullability")],
        Annotated[InclusionCondition, Tag("inclusion")],
        Annotated[MatchesCondition, Tag("matches")],
        Annotated[AndCondition, Tag("and")],
        Annotated[OrCondition, Tag("or")],
    ],
    Discriminator(_condition_kind),
]

AndCondition.model_rebuild()
OrCondition.model_rebuild()


# --- Steps ---


class DomainStep(_Model):
    """Select the pipeline's source: a table, or a raw SQL query if ``table`` is false."""

    name: Literal["domain"] = "domain"
    domain: StrictStr
    table: StrictBool = True


class Aggregation(_Model):
    """Apply one function to ``columns``, storing results in ``new_columns``.

    Columns are paired by position.
    """

    columns: tuple[Column, ...]
    new_columns: tuple[Column, ...] = Field(alias="newcolumns")
    function: AggregationFunction = Field(alias="aggfunction")

    @model_validator(mode="after")
    def check_pairing(self) -> Aggregation:
        if len(self.columns) != len(self.new_columns):
            raise ValueError(
                f"{len(self.columns)} columns but {len(self.new_columns)} new columns"
            )
        return self


class AggregateStep(_Model):
    name: Literal["aggregate"] = "aggregate"
    on: tuple[Column, ...] = ()
    aggregations: tuple[Aggregation, ...]
    keep_original_granularity: StrictBool = Field(False, alias="keepOriginalGranularity")


class FilterStep(_Model):
    name: Literal["filter"] = "filter"
    condition: Condition


Step = Annotated[
    Union[DomainStep, AggregateStep, FilterStep],
    Field(discriminator="name"),
]


class Pipeline(RootModel[tuple[Step, ...]]):
    model_config = ConfigDict(frozen=True)

    @property
    def steps(self) -> tuple[Step, ...]:
        return self.root


class Request(_Model):
    pipeline: Pipeline
    dialect: DialectName


def _validate(model: type[BaseModel], data: Any) -> Any:
    # Wire input is matched on the JSON names only
    try:
        if isinstance(data, (str, bytes, bytearray)):
            return model.model_validate_json(data, by_alias=True, by_name=False)
        return model.model_validate(data, by_alias=True, by_name=False)
    except ValidationError as e:
        raise InvalidPipelineError(ERR_MSG_INVALID_PIPELINE, str(e), wrapped=e) from e


def parse_request(data: Any) -> Request:
    """Decode a ``{"pipeline": [...], "dialect": ...}`` request.

    Args:
        data: A mapping, or the request as JSON text.

    Raises:
        InvalidPipelineError: If the request does not match the expected shape.
    """
    return _validate(Request, data)


def parse_pipeline(data: Any) -> Pipeline:
    """Decode a list of pipeline steps (or its JSON text)."""
    return _validate(Pipeline, data)
