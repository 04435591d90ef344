"""Application errors carrying an HTTP status and an error code."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Iterable

from .entity import (
    BAD_REQUEST_MSG,
    DATA_NOT_FOUND_MSG,
    GENERAL_ERROR_MESSAGE,
    INVALID_AUTH_CODE,
    INVALID_AUTH_MSG,
    INVALID_PAYLOAD_CODE,
    INVALID_PAYLOAD_MSG,
    INVALID_TOKEN_CODE,
    INVALID_TOKEN_MSG,
    USER_NOT_FOUND_MSG,
    ErrorResponse,
)


class AppError(Exception):
    """An error that maps onto an HTTP response."""

    def __init__(self, message: str, err_code: str, http_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.err_code = err_code
        self.http_code = int(http_code)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, {self.err_code!r}, {self.http_code!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.message, self.err_code, self.http_code) == (
            other.message,
            other.err_code,
            other.http_code,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.err_code, self.http_code))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.message:
            out["message"] = self.message
        if self.err_code:
            out["code"] = self.err_code
        out["http_code"] = self.http_code
        return out


class PayloadError(AppError):
    """An invalid-payload error with per-field details."""

    def __init__(
        self,
        message: str,
        err_code: str,
        http_code: int,
        meta: Iterable[ErrorResponse] | None = None,
    ) -> None:
        super().__init__(message, err_code, http_code)
        self.meta = list(meta or [])

    def __eq__(self, other: object) -> bool:
        result = super().__eq__(other)
        if result is NotImplemented or not result:
            return result
        return self.meta == other.meta

    def __hash__(self) -> int:
        return super().__hash__()

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.meta:
            out["meta"] = [item.to_dict() for item in self.meta]
        return out


class ValidationFailed(Exception):
    """Raised when a request fails struct validation."""

    def __init__(self, errors: Iterable[ErrorResponse], code: str = INVALID_PAYLOAD_CODE) -> None:
        self.errors = list(errors)
        self.code = code
        detail = json.dumps([e.to_dict() for e in self.errors], separators=(",", ":"))
        super().__init__(f"{detail}XX: {code}")


def err_record_not_found() -> AppError:
    return AppError(DATA_NOT_FOUND_MSG, BAD_REQUEST_MSG, HTTPStatus.NOT_FOUND)


def err_user_not_found() -> AppError:
    return AppError(USER_NOT_FOUND_MSG, BAD_REQUEST_MSG, HTTPStatus.NOT_FOUND)


def err_invalid_email_or_password() -> AppError:
    return AppError(INVALID_AUTH_MSG, INVALID_AUTH_CODE, HTTPStatus.UNAUTHORIZED)


def err_invalid_token() -> AppError:
    return AppError(INVALID_TOKEN_MSG, INVALID_TOKEN_CODE, HTTPStatus.UNAUTHORIZED)


def err_invalid_payload(meta: Iterable[ErrorResponse] | None) -> PayloadError:
    return PayloadError(
        INVALID_PAYLOAD_MSG,
        INVALID_PAYLOAD_CODE,
        HTTPStatus.UNPROCESSABLE_ENTITY,
        meta,
    )


def err_general_invalid() -> AppError:
    return AppError(GENERAL_ERROR_MESSAGE, BAD_REQUEST_MSG, HTTPStatus.UNPROCESSABLE_ENTITY)


def err_invalid_request() -> AppError:
    return AppError(INVALID_PAYLOAD_MSG, BAD_REQUEST_MSG, HTTPStatus.UNPROCESSABLE_ENTITY)


def custom_error(message: str, err_code: str, http_code: int) -> AppError:
    return AppError(message, err_code, http_code)