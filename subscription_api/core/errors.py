"""
Domain error taxonomy.

Every failure that leaves a component is one of these. The exception
handlers in ``subscription_api.exception_handlers`` turn them into the
uniform ``{"apiStatus", "message", "statusCode"}`` envelope.
"""
from typing import Any, Dict, Optional


class StatusCode:
    """Application-level codes returned in the ``statusCode`` field."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    DEVICE_MISMATCH = "DEVICE_MISMATCH"
    DEVICE_ID_REQUIRED = "DEVICE_ID_REQUIRED"
    SUBSCRIBER_ID_NOT_FOUND = "SUBSCRIBER_ID_NOT_FOUND"
    MASKED_ID_NOT_FOUND = "MASKED_ID_NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class GatewayError(Exception):
    """Base class for errors rendered by the boundary formatter."""

    status_code: int = 500
    code: str = StatusCode.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    def to_body(self) -> Dict[str, Any]:
        return {
            "apiStatus": "error",
            "message": self.message,
            "statusCode": self.code,
        }


class ValidationError(GatewayError):
    status_code = 400
    code = StatusCode.VALIDATION_ERROR


class Unauthorized(GatewayError):
    status_code = 401
    code = StatusCode.UNAUTHORIZED


class DeviceMismatch(Unauthorized):
    code = StatusCode.DEVICE_MISMATCH

    def __init__(self, message: str = "This account is logged in on another device"):
        super().__init__(message)


class DeviceIdRequired(Unauthorized):
    code = StatusCode.DEVICE_ID_REQUIRED

    def __init__(self, message: str = "Device ID is required", status_code: Optional[int] = None):
        super().__init__(message, status_code=status_code)


class NotFound(GatewayError):
    status_code = 404
    code = "NOT_FOUND"


class SubscriberIdNotFound(NotFound):
    # Reported as 401 to match the subscriber-id lookup contract clients rely on
    status_code = 401
    code = StatusCode.SUBSCRIBER_ID_NOT_FOUND

    def __init__(self, message: str = "Subscriber id not found in database"):
        super().__init__(message)


class MaskedIdNotFound(NotFound):
    code = StatusCode.MASKED_ID_NOT_FOUND

    def __init__(self, message: str = "Subscriber id not found in database"):
        super().__init__(message)


class UpstreamError(GatewayError):
    """A provider answered, but not with its success sentinel."""

    code = StatusCode.UPSTREAM_ERROR

    def __init__(self, message: str, status_code: int = 400, body: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=status_code)
        self.body = body or {}

    def to_body(self) -> Dict[str, Any]:
        body = {"apiStatus": "error", "message": self.message, "statusCode": self.code}
        body.update(self.body)
        return body


class UpstreamUnavailable(GatewayError):
    """Timeout or connection failure talking to a provider."""

    status_code = 504
    code = StatusCode.UPSTREAM_UNAVAILABLE


class ProviderNotConfigured(GatewayError):
    status_code = 500
    code = StatusCode.PROVIDER_NOT_CONFIGURED

    def __init__(self, message: str = "Service provider not configured"):
        super().__init__(message)


class PersistenceRetryExhausted(GatewayError):
    """Identity mapping could not be saved after the bounded retry loop."""

    def __init__(self, subscriber_id: str, attempts: int):
        super().__init__(f"Identity mapping not persisted after {attempts} attempts")
        self.subscriber_id = subscriber_id
        self.attempts = attempts
