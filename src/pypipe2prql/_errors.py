"""Exception hierarchy for pipeline-to-PRQL translation."""


class TranslationError(Exception):
    """Base exception for pipeline translation errors.

    Provides dual messaging: a sanitized user-facing message and
    internal details for logging (CWE-209 prevention).
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class InvalidPipelineError(TranslationError):
    """Raised when the request does not match any known step or condition shape."""


class UnsupportedStepError(TranslationError):
    """Raised when a pipeline step type is not supported."""


class UnsupportedConditionError(TranslationError):
    """Raised when a condition type is not supported."""


class UnsupportedValueTypeError(TranslationError):
    """Raised when a condition value has an unsupported type."""


class MaxDepthExceededError(TranslationError):
    """Raised when condition nesting exceeds the depth limit."""


class MaxOutputLengthExceededError(TranslationError):
    """Raised when PRQL output length limit is exceeded."""


class CompilationError(TranslationError):
    """Raised when the PRQL compiler rejects a translated pipeline.

    ``diagnostics`` holds the compiler's message untouched.
    """

    def __init__(
        self,
        user_message: str,
        diagnostics: str,
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message, diagnostics, wrapped)
        self.diagnostics = diagnostics


# Sanitized user-facing error message constants
ERR_MSG_INVALID_PIPELINE = "invalid pipeline description"
ERR_MSG_UNSUPPORTED_STEP = "unsupported pipeline step"
ERR_MSG_UNSUPPORTED_CONDITION = "unsupported condition type"
ERR_MSG_UNSUPPORTED_VALUE_TYPE = "unsupported value type"
ERR_MSG_COMPILATION_FAILED = "PRQL compilation failed"
