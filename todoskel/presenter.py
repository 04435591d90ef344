"""Turns results and errors into JSON response bodies with HTTP statuses."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from http import HTTPStatus
from typing import Any

from .entity import BAD_REQUEST_CODE, INVALID_PAYLOAD_CODE, SUCCESS_CODE
from .errors import AppError, ValidationFailed, custom_error, err_general_invalid, err_invalid_payload


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return _to_json(value.value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict) and not isinstance(value, type):
        return _to_json(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class JsonPresenter:
    """Builds (status, body) pairs for HTTP responses."""

    def build_success(self, data: Any, message: str, code: int) -> tuple[int, dict[str, Any]]:
        body: dict[str, Any] = {}
        if data is not None:
            body["data"] = _to_json(data)
        if message:
            body["message"] = message
        body["code"] = SUCCESS_CODE
        return int(HTTPStatus.OK), body

    def build_error(self, error: BaseException) -> tuple[int, dict[str, Any]]:
        if isinstance(error, ValidationFailed) and error.code == INVALID_PAYLOAD_CODE:
            return err_general_invalid().http_code, err_invalid_payload(error.errors).to_dict()
        if isinstance(error, AppError):
            return error.http_code, error.to_dict()
        fallback = custom_error(str(error), BAD_REQUEST_CODE, HTTPStatus.UNPROCESSABLE_ENTITY)
        return err_general_invalid().http_code, fallback.to_dict()