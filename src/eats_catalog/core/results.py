"""
Tagged results and errors returned by the catalog services.

Workflows raise ``CatalogError`` subclasses internally; the service boundary
turns them (and any unexpected fault) into a ``ServiceResult`` so callers
check ``ok`` instead of catching exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

INTERNAL_SERVER_ERROR_MESSAGE = "Internal server error, please try again later."
BAD_REQUEST_MESSAGE = "Bad request, required fields are missing."
NOT_FOUND_MESSAGE = "Not found."
UNAUTHORIZED_MESSAGE = "You are not allowed to do this."


class ErrorCode(str, Enum):
    """Error kinds a catalog operation can fail with."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class ErrorInfo:
    """Error payload of a failed result."""

    code: ErrorCode
    message: str


@dataclass
class ServiceResult(Generic[T]):
    """Success or failure of a service call.

    Attributes:
        ok: True on success
        data: Payload, only meaningful when ok is True
        error: Failure detail, set when ok is False
    """

    ok: bool
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        result: dict[str, Any] = {"ok": self.ok}
        if self.ok:
            data = self.data
            if isinstance(data, list):
                data = [_dump(item) for item in data]
            else:
                data = _dump(data)
            result["data"] = data
        else:
            result["error"] = {"code": self.error.code.value, "message": self.error.message}
        return result


def _dump(value: Any) -> Any:
    return value.model_dump(mode="json") if hasattr(value, "model_dump") else value


class CatalogError(Exception):
    """Base error for rejected catalog requests."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_SERVER_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_result(self) -> ServiceResult:
        return ServiceResult(ok=False, error=ErrorInfo(code=self.code, message=self.message))


class ValidationError(CatalogError):
    """A required field is missing or malformed."""

    code = ErrorCode.BAD_REQUEST
    default_message = BAD_REQUEST_MESSAGE


class NotFoundError(CatalogError):
    """The entity is absent, or hidden from this caller."""

    code = ErrorCode.NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


class AuthorizationError(CatalogError):
    """The caller does not own the entity."""

    code = ErrorCode.UNAUTHORIZED
    default_message = UNAUTHORIZED_MESSAGE


def success(data: Any = None) -> ServiceResult:
    return ServiceResult(ok=True, data=data)


def internal_server_error() -> ServiceResult:
    return ServiceResult(
        ok=False,
        error=ErrorInfo(
            code=ErrorCode.INTERNAL_SERVER_ERROR,
            message=INTERNAL_SERVER_ERROR_MESSAGE,
        ),
    )
