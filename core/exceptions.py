"""
core/exceptions.py - Unified exception hierarchy

Exception classes shared by the collection engine, the data sources and the CLI.

Hierarchy:
    InventoryError (base)
    ├── ConfigError (configuration / arguments)
    ├── SourceError (backend failure for one target)
    │   ├── AuthenticationError
    │   └── ConnectivityError
    ├── APICallError (a single failed backend call)
    ├── EnrichmentError (optional enrichment failed, non-fatal)
    ├── TargetCollectionError (collector wrapper, one per failed target)
    └── CollectionCancelledError

Usage:
    from core.exceptions import APICallError

    try:
        page = tagging.get_resources(**kwargs)
    except ClientError as e:
        raise APICallError.from_client_error("resourcegroupstaggingapi", "get_resources", e)
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional

# =============================================================================
# Base
# =============================================================================


class InventoryError(Exception):
    """Base class of every custom exception

    Attributes:
        message: error message
        cause: underlying exception (for chaining)
        details: extra structured context
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(InventoryError):
    """Invalid configuration or arguments"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"config error [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# Backend failures
# =============================================================================


class SourceError(InventoryError):
    """Terminal backend failure for one collection target"""

    def __init__(
        self,
        source: str,
        target: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"{source} [{target}]: {message}"
        super().__init__(full_message, cause)
        self.source = source
        self.target = target
        self.details["source"] = source
        self.details["target"] = target


class AuthenticationError(SourceError):
    """The backend rejected the supplied credentials"""


class ConnectivityError(SourceError):
    """The backend could not be reached"""


class APICallError(InventoryError):
    """A single failed backend API call

    Wraps botocore ClientError and requests HTTPError so callers can
    classify failures without knowing which backend produced them.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} failed ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.status_code = status_code
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
                "status_code": status_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "APICallError":
        """Build from a botocore.exceptions.ClientError"""
        error_code = None
        error_message = None
        status_code = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")
            status_code = client_error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            status_code=status_code,
            cause=client_error,
        )

    @classmethod
    def from_http_error(
        cls,
        service: str,
        operation: str,
        http_error: Exception,
    ) -> "APICallError":
        """Build from a requests.HTTPError (or anything carrying a response)"""
        response = getattr(http_error, "response", None)
        status_code = getattr(response, "status_code", None)
        error_message = None
        error_code = f"HTTP{status_code}" if status_code else None

        # GitHub answers an exhausted rate limit with 403, not 429
        headers = getattr(response, "headers", None)
        if status_code in (403, 429) and isinstance(headers, Mapping):
            if headers.get("X-RateLimit-Remaining") == "0":
                error_code = "RateLimitExceeded"

        if response is not None:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                error_message = payload.get("message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            status_code=status_code,
            cause=http_error,
        )


class EnrichmentError(InventoryError):
    """Optional enrichment of a single record failed

    Never raised out of a data source; collected and logged instead.
    """

    def __init__(
        self,
        target: str,
        path: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"enrichment failed [{target}:{path}]: {message}"
        super().__init__(full_message, cause)
        self.target = target
        self.path = path
        self.details["target"] = target
        self.details["path"] = path


# =============================================================================
# Collection
# =============================================================================


class TargetCollectionError(InventoryError):
    """Collection from one target failed

    Raised by single-source collection, reported (not raised) by
    multi-target collection.
    """

    def __init__(
        self,
        source: str,
        target: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"failed to collect from {source} [{target}]", cause)
        self.source = source
        self.target = target
        self.details["source"] = source
        self.details["target"] = target


class CollectionCancelledError(InventoryError):
    """The shared collection context was cancelled or its deadline passed"""

    def __init__(self, message: str = "collection cancelled"):
        super().__init__(message)


# =============================================================================
# Helpers
# =============================================================================

_ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedAccess",
    "UnrecognizedClientException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "ExpiredTokenException",
}

_THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
    "RateLimitExceeded",
}

_NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchEntity",
}


def _error_code(error: Exception) -> str:
    if isinstance(error, APICallError):
        return error.error_code or ""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code", "")
    return ""


def _status_code(error: Exception) -> Optional[int]:
    if isinstance(error, APICallError):
        return error.status_code
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return getattr(response, "status_code", None)


def is_access_denied(error: Exception) -> bool:
    """Check whether the error means the credentials were rejected"""
    if isinstance(error, AuthenticationError):
        return True
    code = _error_code(error)
    if code in _ACCESS_DENIED_CODES:
        return True
    # AWS errors always carry a code; bare status codes come from HTTP backends
    if code and not code.startswith("HTTP"):
        return False
    return _status_code(error) in (401, 403)


def is_throttling(error: Exception) -> bool:
    """Check whether the error is a throttling / rate limit error"""
    if _error_code(error) in _THROTTLING_CODES:
        return True
    return _status_code(error) == 429


def is_not_found(error: Exception) -> bool:
    """Check whether the error means the resource does not exist"""
    if _error_code(error) in _NOT_FOUND_CODES:
        return True
    return _status_code(error) == 404


def format_error_for_user(error: Exception) -> str:
    """Format an exception as a short user-facing message

    Args:
        error: exception

    Returns:
        message for the console
    """
    if isinstance(error, InventoryError):
        return str(error)

    if hasattr(error, "response") and isinstance(error.response, dict):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "AccessDenied": "Access denied. Check the IAM policy of the credentials.",
            "ExpiredToken": "The security token has expired. Refresh the credentials.",
            "InvalidClientTokenId": "The access key is invalid.",
            "Throttling": "Too many requests. Try again later.",
        }

        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
