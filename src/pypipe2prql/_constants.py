"""Resource limit constants for pipeline-to-PRQL translation."""

DEFAULT_MAX_RECURSION_DEPTH = 100
"""Maximum condition tree nesting depth (CWE-674 prevention)."""

DEFAULT_MAX_PRQL_OUTPUT_LENGTH = 50000
"""Maximum generated PRQL string length."""

STEP_SEPARATOR = " | "
"""Token joining rendered pipeline steps."""
