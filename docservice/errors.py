"""Error kinds raised by document services."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Raised when a service is constructed with missing or invalid options."""


class ServiceError(Exception):
    """Base class for errors a host can serialize uniformly."""

    name = "GeneralError"
    code = 500
    class_name = "general-error"

    def __init__(
        self,
        message: str = "",
        data: Optional[dict[str, Any]] = None,
        errors: Optional[list[Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.data = data
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "message": self.message,
            "code": self.code,
            "className": self.class_name,
            "data": self.data,
            "errors": self.errors,
        }


class BadRequest(ServiceError):
    name = "BadRequest"
    code = 400
    class_name = "bad-request"


class ValidationError(BadRequest):
    """Payload failed schema checks; carries one entry per violated constraint."""

    def __init__(self, message: str, violations: list[Any]) -> None:
        super().__init__(
            message,
            errors=[v.model_dump() for v in violations],
        )
        self.violations = violations


class NotFound(ServiceError):
    name = "NotFound"
    code = 404
    class_name = "not-found"


class StoreError(ServiceError):
    """The underlying document store reported a failure."""

    name = "GeneralError"
    code = 500
    class_name = "general-error"
