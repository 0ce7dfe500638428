"""
Unbound Python SDK - Exceptions

This module contains all custom exceptions used by the SDK.
"""

from typing import Optional, Dict, Any


class UnboundError(Exception):
    """
    Base exception for all Unbound SDK errors.

    Attributes:
        message: Human-readable error message
        code: Error code if available
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', code='{self.code}')"


class ValidationError(UnboundError):
    """
    Raised when call arguments do not match the declared parameter schema.

    Validation errors are raised before any network activity takes place.

    Attributes:
        parameter: Name of the offending parameter
    """

    def __init__(
        self,
        message: str = "Validation failed",
        parameter: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.parameter = parameter


class MissingRequiredParameterError(ValidationError):
    """Raised when a required parameter is absent."""

    def __init__(self, parameter: str) -> None:
        super().__init__(
            f"Missing required parameter {parameter}",
            parameter=parameter,
        )


class InvalidParameterTypeError(ValidationError):
    """
    Raised when a parameter has the wrong type.

    Attributes:
        expected: Declared type (or list of accepted types)
        actual: Type category of the value that was passed
    """

    def __init__(self, parameter: str, expected: Any, actual: str) -> None:
        if isinstance(expected, (list, tuple, set, frozenset)):
            expected_text = " or ".join(str(t) for t in expected)
        else:
            expected_text = str(expected)
        super().__init__(
            f"Invalid type for parameter {parameter}: expected {expected_text}, got {actual}",
            parameter=parameter,
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class TransportError(UnboundError):
    """
    Raised by transport plugins when the transport mechanism itself fails.

    Transports return API responses (including error statuses) normally and
    only raise for mechanism failures such as a dropped socket. The client
    recovers from these by falling back to HTTP.
    """

    def __init__(self, message: str = "Transport failed", transport: Optional[str] = None) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.transport = transport


class APIError(UnboundError):
    """
    Raised when the API answers with a non-OK HTTP status.

    This is the only error category meant for end-user inspection. All
    structured fields are first-class attributes; ``name`` renders them in
    the platform's log format.

    Attributes:
        kind: Error category, always ``"http"`` for API errors
        method: HTTP method of the failed request
        endpoint: Endpoint path of the failed request
        status: HTTP status code
        status_text: HTTP reason phrase
        request_id: Value of the ``x-request-id`` response header
        body: Decoded error body, if any
    """

    kind = "http"

    def __init__(
        self,
        message: str = "API Error occurred.",
        method: Optional[str] = None,
        endpoint: Optional[str] = None,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        request_id: Optional[str] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message, code="API_ERROR")
        self.method = method
        self.endpoint = endpoint
        self.status = status
        self.status_text = status_text
        self.request_id = request_id
        self.body = body

    @property
    def name(self) -> str:
        return (
            f"API :: Error :: https :: {self.method} :: {self.endpoint} :: "
            f"{self.request_id} :: {self.status} :: {self.status_text}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the structured error fields."""
        return {
            "kind": self.kind,
            "name": self.name,
            "message": self.message,
            "method": self.method,
            "endpoint": self.endpoint,
            "status": self.status,
            "statusText": self.status_text,
            "requestId": self.request_id,
        }

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


class AuthenticationError(APIError):
    """
    Raised when the API rejects the credentials (401) or denies access (403).

    This can occur when:
    - The bearer token is missing, invalid or expired
    - The token lacks permission for the namespace
    """


class NotFoundError(APIError):
    """Raised when the requested resource does not exist (404)."""


class ConflictError(APIError):
    """Raised on a resource conflict (409)."""


class RateLimitError(APIError):
    """
    Raised when the API rate limit is exceeded (429).

    Attributes:
        retry_after: Number of seconds to wait before retrying
    """

    def __init__(self, *args: Any, retry_after: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        try:
            self.retry_after = int(retry_after) if retry_after else None
        except ValueError:
            self.retry_after = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.retry_after:
            return f"{base}. Retry after {self.retry_after} seconds."
        return base


class ServerError(APIError):
    """
    Raised when the API fails with a 5xx status.

    Use ``request_id`` when reporting the failure.
    """


class ExtensionError(UnboundError):
    """
    Raised when an extension or plugin cannot be attached, or when an
    operation requires an extension that has not been installed.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="EXTENSION_ERROR")


class SttStreamError(UnboundError):
    """
    Raised (and emitted on the ``error`` event) when a transcription stream
    cannot be initialized or an audio frame cannot be written.
    """

    def __init__(self, message: str, session_id: Optional[str] = None) -> None:
        super().__init__(message, code="STT_STREAM_ERROR")
        self.session_id = session_id


class SttStreamClosedError(SttStreamError):
    """Emitted when audio is written to a stream that has already closed."""

    def __init__(self, session_id: Optional[str] = None) -> None:
        super().__init__("Stream is closed", session_id=session_id)
