"""Application exception hierarchy rendered as RFC 7807 problem details."""

from __future__ import annotations

from typing import Any

_DEFAULT_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def default_title(status_code: int) -> str:
    """Return the canonical title for an HTTP status code."""
    return _DEFAULT_TITLES.get(status_code, "Error")


class AppException(Exception):
    """Base application exception.

    Every HTTP-facing error raised by the service derives from this class and
    is turned into a problem detail response by the global exception handlers.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (RFC 7807 ``type``).
        title: Short, human-readable summary of the problem type.
        instance: URI reference identifying this occurrence.
        extra: Additional fields merged into the response body.

    Example:
        raise AppException(
            status_code=404,
            detail="Event 3f0c... not found",
            type="event-not-found",
            extra={"event_id": "3f0c..."},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)


class ConflictException(AppException):
    """Raised when a write collides with existing state.

    Example:
        raise ConflictException(
            detail="User already exists",
            type="user-exists",
            extra={"email": "a@x.com"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "conflict",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=409,
            detail=detail,
            type=type,
            title="Conflict",
            instance=instance,
            extra=extra,
        )


class UnauthorizedException(AppException):
    """Raised when credentials are missing or wrong."""

    def __init__(
        self,
        detail: str,
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


class StoreError(AppException):
    """Raised when a primary database read or write fails.

    Aborts the request before any notification is dispatched. The underlying
    driver error is chained as ``__cause__`` and never exposed to clients.
    """

    def __init__(
        self,
        detail: str = "The data store is unavailable",
        type: str = "store-unavailable",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=503,
            detail=detail,
            type=type,
            title="Service Unavailable",
            instance=instance,
            extra=extra,
        )
