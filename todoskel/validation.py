"""Struct validation of request dataclasses with Indonesian messages."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterator

from .entity import ErrorResponse

_REQUIRED = "required"


def _go_name(name: str) -> str:
    return "".join("ID" if part == "id" else part.capitalize() for part in name.split("_"))


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)) and len(value) == 0:
        return True
    return False


def _failures(data: Any) -> Iterator[tuple[str, str, Any]]:
    """Yield (struct field name, display label, value) for each failed required field."""
    if not dataclasses.is_dataclass(data) or isinstance(data, type):
        raise TypeError("validation needs a dataclass instance")
    for f in dataclasses.fields(data):
        if f.metadata.get("validate") != _REQUIRED:
            continue
        value = getattr(data, f.name)
        if _is_empty(value):
            struct_field = _go_name(f.name)
            yield struct_field, f.metadata.get("name") or struct_field, value


def _message(label: str) -> str:
    return f"{label} wajib diisi"


def _encode(errors: list[ErrorResponse]) -> str:
    return json.dumps([e.to_dict() for e in errors], ensure_ascii=False, separators=(",", ":"))


def validate_struct_process(data: Any) -> list[ErrorResponse]:
    """Return one ErrorResponse per field that fails validation."""
    return [
        ErrorResponse(failed_field=struct_field, tag=_REQUIRED, value="", message=_message(label))
        for struct_field, label, _ in _failures(data)
    ]


def validate_struct(data: Any) -> str:
    """Return the JSON-encoded errors followed by "XX", or "" when the data is valid."""
    errors = validate_struct_process(data)
    if not errors:
        return ""
    return _encode(errors) + "XX"


class Validator:
    """Validator that also prints the details of each failure."""

    def validate(self, data: Any) -> list[ErrorResponse]:
        struct = type(data).__name__
        errors: list[ErrorResponse] = []
        for struct_field, label, value in _failures(data):
            message = _message(label)
            kind = type(value).__name__
            for line in (
                f"{struct}.{label}",
                label,
                f"{struct}.{struct_field}",
                struct_field,
                _REQUIRED,
                _REQUIRED,
                kind,
                kind,
                value,
                "",
                message,
            ):
                print(line)
            errors.append(
                ErrorResponse(failed_field=struct_field, tag=_REQUIRED, value="", message=message)
            )
        return errors

    def validate_with_message(self, data: Any) -> str:
        errors = self.validate(data)
        encoded = _encode(errors) if errors else "null"
        return encoded + "XX"