"""Extraction of IDs, bodies and query parameters from an incoming request."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, TypeVar

from .errors import err_invalid_request
from .helper import to_int64

T = TypeVar("T")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_KINDS = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "dict": dict,
    "Dict": dict,
    "list": list,
    "List": list,
}


@dataclass
class RequestContext:
    """What a handler sees of a request: body, path params, locals and query."""

    body: bytes | str = b""
    params: dict[str, str] = field(default_factory=dict)
    locals: dict[str, Any] = field(default_factory=dict)
    query: dict[str, str | list[str]] = field(default_factory=dict)


class _Mismatch(Exception):
    pass


def _target(model: Any) -> Any:
    target = model() if isinstance(model, type) else model
    if not dataclasses.is_dataclass(target):
        raise TypeError("request model must be a dataclass")
    return target


def _kind(f: dataclasses.Field) -> Any:
    """The plain container or scalar type a field is declared with, if any."""
    annotation = f.type
    if isinstance(annotation, str):
        text = annotation.strip()
        if "|" in text or text.startswith(("Optional", "Union", "typing.Optional", "typing.Union")):
            return None
        head = text.split("[", 1)[0].strip()
        head = head.removeprefix("typing.")
        return _KINDS.get(head)
    return getattr(annotation, "__origin__", annotation)


def _lookup(fields: list[dataclasses.Field], key: str) -> dataclasses.Field | None:
    exact = [f for f in fields if f.metadata.get("json", f.name) == key]
    if exact:
        return exact[0]
    folded = key.casefold()
    for f in fields:
        if f.metadata.get("json", f.name).casefold() == folded:
            return f
    return None


def _coerce_json(kind: Any, value: Any) -> Any:
    if kind is str:
        if not isinstance(value, str):
            raise _Mismatch
    elif kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _Mismatch
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise _Mismatch
    elif kind is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _Mismatch
        return float(value)
    elif kind is bool:
        if not isinstance(value, bool):
            raise _Mismatch
    elif kind is dict:
        if not isinstance(value, dict):
            raise _Mismatch
    elif kind is list:
        if not isinstance(value, list):
            raise _Mismatch
    return value


def _coerce_text(kind: Any, text: str) -> Any:
    if kind is int:
        value = int(text, 10)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ValueError(text)
        return value
    if kind is float:
        return float(text)
    if kind is bool:
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(text)
    return text


def _decode_into(target: Any, payload: Mapping[str, Any]) -> None:
    fields = list(dataclasses.fields(target))
    for key, value in payload.items():
        f = _lookup(fields, key)
        if f is None or value is None:
            continue
        setattr(target, f.name, _coerce_json(_kind(f), value))


class RequestParser:
    """Reads typed values out of a RequestContext."""

    def parse_user_id(self, ctx: RequestContext) -> int:
        user_id = self._local_user_id(ctx)
        if user_id == 0:
            raise ValueError("EMPTY USER ID")
        return user_id

    def parse_int_id_from_path(self, ctx: RequestContext) -> int:
        raw = ctx.params.get("id", "")
        if raw == "":
            raise ValueError("PATH PARAM ID EMPTY")
        return to_int64(raw)

    def parse_body(self, ctx: RequestContext, model: type[T] | T) -> T:
        """Decode the JSON body into a dataclass (a class is instantiated, an instance is filled)."""
        target = _target(model)
        try:
            body = ctx.body.decode("utf-8") if isinstance(ctx.body, bytes) else ctx.body
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            raise err_invalid_request() from None
        if payload is None:
            return target
        if not isinstance(payload, dict):
            raise err_invalid_request()
        try:
            _decode_into(target, payload)
        except _Mismatch:
            raise err_invalid_request() from None
        return target

    def parse_body_with_user_id(self, ctx: RequestContext, model: type[T] | T) -> T:
        target = self.parse_body(ctx, model)
        target.set_user_id(self._local_user_id(ctx))
        return target

    def parse_body_with_path_id(self, ctx: RequestContext, model: type[T] | T) -> T:
        target = self.parse_body(ctx, model)
        target.set_id(self.parse_int_id_from_path(ctx))
        return target

    def parse_body_with_path_id_and_user_id(self, ctx: RequestContext, model: type[T] | T) -> T:
        target = self.parse_body_with_path_id(ctx, model)
        target.set_user_id(self._local_user_id(ctx))
        return target

    def parse_query_params(self, ctx: RequestContext, model: type[T] | T) -> T:
        """Fill a dataclass from query parameters, converting to the field types."""
        target = _target(model)
        fields = list(dataclasses.fields(target))
        try:
            for key, raw in ctx.query.items():
                f = _lookup(fields, key)
                if f is None:
                    continue
                values = raw if isinstance(raw, list) else [raw]
                kind = _kind(f)
                if kind is list:
                    setattr(target, f.name, [part for v in values for part in v.split(",")])
                    continue
                if not values or values[-1] == "":
                    continue
                setattr(target, f.name, _coerce_text(kind, values[-1]))
        except ValueError:
            raise err_invalid_request() from None
        return target

    @staticmethod
    def _local_user_id(ctx: RequestContext) -> int:
        user_id = ctx.locals.get("user_id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise TypeError("user_id in request locals is not an integer")
        return user_id