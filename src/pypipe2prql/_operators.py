"""Pipeline operator -> PRQL token mappings."""

# Comparison operator -> PRQL operator
COMPARISON_OPERATORS: dict[str, str] = {
    "eq": "==",
    "ne": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}

# Nullability operator -> PRQL comparison against null
NULLABILITY_OPERATORS: dict[str, str] = {
    "isnull": "==",
    "notnull": "!=",
}

INCLUSION_OPERATORS: dict[str, str] = {
    "in": "IN",
    "nin": "NOT IN",
}

MATCHES_OPERATORS = {"matches", "notmatches"}

# Aggregation function -> PRQL function.
# PRQL has no first/last aggregation: min/max stand in for them, which is only
# correct when any representative value of the group will do.
AGGREGATION_FUNCTIONS: dict[str, str] = {
    "min": "min",
    "max": "max",
    "count": "count",
    "avg": "avg",
    "sum": "sum",
    "count distinct": "count_distinct",
    "first": "min",
    "last": "max",
}
