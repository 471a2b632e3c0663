"""
core/parallel/decorators.py - Error classification and retry policy

Classifies backend errors (botocore, requests, our own APICallError),
decides whether they are retryable, and computes exponential backoff delays.

Components:
- RetryConfig: retry settings (exponential backoff + full jitter)
- categorize_error: exception -> ErrorCategory
- get_error_code: extract an error code from an exception
- is_retryable: retry decision
"""

import logging
import random
from dataclasses import dataclass

from botocore.exceptions import (
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout as RequestsTimeout

from core.exceptions import (
    AuthenticationError,
    CollectionCancelledError,
    ConnectivityError,
    SourceError,
    is_access_denied,
    is_not_found,
    is_throttling,
)

from .types import ErrorCategory

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Retry settings

    Attributes:
        max_retries: maximum number of retries (0 disables retrying)
        base_delay: base delay in seconds
        max_delay: maximum delay in seconds
        exponential_base: backoff base
        jitter: randomize the delay
    """

    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """Delay before the next attempt

        Args:
            attempt: current attempt (0-based)

        Returns:
            delay in seconds
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            # Full jitter: [0, delay]
            delay = random.uniform(0, delay)

        return delay


RETRYABLE_ERROR_CODES: set[str] = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
    "RateLimitExceeded",
    "ServiceUnavailable",
    "ServiceUnavailableException",
    "InternalError",
    "InternalServiceError",
    "RequestTimeout",
    "RequestTimeoutException",
}

RETRYABLE_STATUS_CODES: set[int] = {429, 500, 502, 503, 504}

_NETWORK_ERRORS = (
    EndpointConnectionError,
    RequestsConnectionError,
    ConnectivityError,
    ConnectionError,
)

_TIMEOUT_ERRORS = (
    ConnectTimeoutError,
    ReadTimeoutError,
    RequestsTimeout,
    TimeoutError,
)


def _status_code(error: Exception) -> int | None:
    status = getattr(error, "status_code", None)
    if status is not None:
        return status
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return getattr(response, "status_code", None)


def categorize_error(error: Exception) -> ErrorCategory:
    """Classify an exception

    Args:
        error: exception to classify

    Returns:
        error category
    """
    if isinstance(error, CollectionCancelledError):
        return ErrorCategory.CANCELLED
    if isinstance(error, NoCredentialsError):
        return ErrorCategory.ACCESS_DENIED

    cause = getattr(error, "cause", None)
    if isinstance(error, (AuthenticationError, ConnectivityError)) and isinstance(cause, Exception):
        # Auth / connectivity wrappers keep the backend error as cause
        category = categorize_error(cause)
        if category != ErrorCategory.UNKNOWN:
            return category
        return ErrorCategory.ACCESS_DENIED if isinstance(error, AuthenticationError) else ErrorCategory.NETWORK

    if is_throttling(error):
        return ErrorCategory.THROTTLING

    code = get_error_code(error)
    if code in ("ExpiredToken", "ExpiredTokenException"):
        return ErrorCategory.EXPIRED_TOKEN
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND
    if "Timeout" in code:
        return ErrorCategory.TIMEOUT

    status = _status_code(error)
    if status is not None and status >= 500:
        return ErrorCategory.SERVICE_ERROR

    # Timeout classes are subclasses of the connection classes in both libraries
    if isinstance(error, _TIMEOUT_ERRORS):
        return ErrorCategory.TIMEOUT
    if isinstance(error, _NETWORK_ERRORS):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN


def get_error_code(error: Exception) -> str:
    """Extract an error code

    botocore errors yield their ``Code``, APICallError its ``error_code``,
    everything else the exception class name.
    """
    error_code = getattr(error, "error_code", None)
    if isinstance(error_code, str) and error_code:
        return error_code

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code
    return error.__class__.__name__


def is_retryable(error: Exception) -> bool:
    """Whether a failed call may be retried

    Throttling, 5xx responses, timeouts and network errors are retryable.
    Authentication, not-found and cancellation never are.
    """
    if isinstance(error, (CollectionCancelledError, AuthenticationError, NoCredentialsError)):
        return False

    cause = getattr(error, "cause", None)
    if isinstance(error, SourceError) and isinstance(cause, Exception):
        return isinstance(error, ConnectivityError) or is_retryable(cause)

    if get_error_code(error) in RETRYABLE_ERROR_CODES:
        return True

    status = _status_code(error)
    if status is not None:
        return status in RETRYABLE_STATUS_CODES

    return isinstance(error, _NETWORK_ERRORS + _TIMEOUT_ERRORS)
