"""Error classification for activity analysis failures.

Classifier and reward errors are mapped to a category, and each category to a
structured response (code, message, recovery suggestion, severity) that the
HTTP layer returns to the client.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class ErrorCategory(Enum):
    """Categories of errors that can occur during activity analysis."""

    SERVICE_QUOTA_EXCEEDED = "service_quota_exceeded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    NETWORK_ERROR = "network_error"
    INVALID_CLASSIFIER_OUTPUT = "invalid_classifier_output"
    UNKNOWN_MATCH_TYPE = "unknown_match_type"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """How urgently an error needs operator attention."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Machine-readable codes returned in error envelopes."""

    ERR_SERVICE_QUOTA_EXCEEDED = "ERR_SERVICE_QUOTA_EXCEEDED"
    ERR_RATE_LIMIT_EXCEEDED = "ERR_RATE_LIMIT_EXCEEDED"
    ERR_AUTHENTICATION_FAILED = "ERR_AUTHENTICATION_FAILED"
    ERR_NETWORK_ERROR = "ERR_NETWORK_ERROR"
    ERR_INVALID_CLASSIFIER_OUTPUT = "ERR_INVALID_CLASSIFIER_OUTPUT"
    ERR_UNKNOWN_MATCH_TYPE = "ERR_UNKNOWN_MATCH_TYPE"
    ERR_INVALID_REQUEST = "ERR_INVALID_REQUEST"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error with a user-facing message and recovery suggestion."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


@dataclass(frozen=True)
class _ErrorRule:
    category: ErrorCategory
    phrases: tuple[str, ...]
    exception_types: frozenset[str] = frozenset()


# Evaluated in order; the first matching rule wins
_ERROR_RULES: tuple[_ErrorRule, ...] = (
    _ErrorRule(ErrorCategory.UNKNOWN_MATCH_TYPE, (), frozenset({"UnknownMatchTypeError"})),
    _ErrorRule(
        ErrorCategory.SERVICE_QUOTA_EXCEEDED,
        ("quota exceeded", "insufficient credits", "credit limit", "credits exhausted", "out of credits", "402"),
    ),
    _ErrorRule(
        ErrorCategory.RATE_LIMIT_EXCEEDED,
        ("rate limit", "too many requests", "rate_limit_exceeded", "throttled", "429"),
    ),
    _ErrorRule(
        ErrorCategory.AUTHENTICATION_FAILED,
        (
            "authentication failed",
            "invalid api key",
            "unauthorized",
            "invalid token",
            "api key",
            "credential not configured",
            "401",
        ),
        frozenset({"AuthenticationError", "PermissionError"}),
    ),
    _ErrorRule(
        ErrorCategory.NETWORK_ERROR,
        ("connection", "timeout", "timed out", "network", "502", "503", "504", "unreachable", "circuit breaker"),
        frozenset({"ConnectionError", "TimeoutError", "CircuitOpenError"}),
    ),
    _ErrorRule(
        ErrorCategory.INVALID_CLASSIFIER_OUTPUT,
        ("validation error", "for output validation", "invalid json", "no json"),
        frozenset({"UnexpectedModelBehavior", "ValidationError", "JSONDecodeError", "NonFiniteRewardError"}),
    ),
)


_RESPONSES: dict[ErrorCategory, ErrorResponse] = {
    ErrorCategory.UNKNOWN_MATCH_TYPE: ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN_MATCH_TYPE,
        message="The activity analysis produced an unsupported match type.",
        suggestion="This is a configuration problem. Please contact support.",
        severity=ErrorSeverity.HIGH,
    ),
    ErrorCategory.SERVICE_QUOTA_EXCEEDED: ErrorResponse(
        code=ErrorCode.ERR_SERVICE_QUOTA_EXCEEDED,
        message="The AI service quota has been exceeded.",
        suggestion="Please try again later or contact support.",
        severity=ErrorSeverity.HIGH,
    ),
    ErrorCategory.RATE_LIMIT_EXCEEDED: ErrorResponse(
        code=ErrorCode.ERR_RATE_LIMIT_EXCEEDED,
        message="Too many requests.",
        suggestion="Please wait a moment and try again.",
        severity=ErrorSeverity.MEDIUM,
    ),
    ErrorCategory.AUTHENTICATION_FAILED: ErrorResponse(
        code=ErrorCode.ERR_AUTHENTICATION_FAILED,
        message="Service authentication failed.",
        suggestion="Please contact support.",
        severity=ErrorSeverity.CRITICAL,
    ),
    ErrorCategory.NETWORK_ERROR: ErrorResponse(
        code=ErrorCode.ERR_NETWORK_ERROR,
        message="Network error occurred.",
        suggestion="Please check your connection and try again.",
        severity=ErrorSeverity.MEDIUM,
    ),
    ErrorCategory.INVALID_CLASSIFIER_OUTPUT: ErrorResponse(
        code=ErrorCode.ERR_INVALID_CLASSIFIER_OUTPUT,
        message="The AI response could not be parsed.",
        suggestion="Try describing your activities again, one per sentence.",
        severity=ErrorSeverity.MEDIUM,
    ),
    ErrorCategory.UNKNOWN: ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    ),
}


def _matches(rule: _ErrorRule, error_str: str, exception_type: str) -> bool:
    return exception_type in rule.exception_types or any(phrase in error_str for phrase in rule.phrases)


def classify_agent_error(exception: Exception) -> tuple[ErrorCategory, str]:
    """Classify an activity analysis error and return a user-friendly message.

    Args:
        exception: The exception raised while classifying or rewarding activities

    Returns:
        Tuple of (ErrorCategory, user_friendly_message), the message being the
        category's response message followed by its suggestion
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    category = next(
        (rule.category for rule in _ERROR_RULES if _matches(rule, error_str, exception_type)),
        ErrorCategory.UNKNOWN,
    )
    response = _RESPONSES[category]
    return category, f"{response.message} {response.suggestion}"


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return its structured response (a fresh copy per call)."""
    category, _ = classify_agent_error(exception)
    return _RESPONSES[category].model_copy()
