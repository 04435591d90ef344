"""General helpers: dates in Jakarta time, conversions, reflection-like utilities."""

from __future__ import annotations

import base64
import dataclasses
import json
import math
import os
import re
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import bcrypt

from .entity import PRODUCTION_ENV

try:
    _JAKARTA = ZoneInfo("Asia/Jakarta")
except ZoneInfoNotFoundError:
    _JAKARTA = timezone(timedelta(hours=7), "WIB")

_DATE_FMT = "%Y-%m-%d"
_DATETIME_FMT = "%Y-%m-%d %H:%M:%S"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_SEPARATOR = "-------------"


def _as_aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def datetime_now_jakarta() -> datetime:
    return datetime.now(_JAKARTA)


def date_now_jakarta() -> str:
    return datetime_now_jakarta().strftime(_DATE_FMT)


def datetime_now_jakarta_string() -> str:
    return datetime_now_jakarta().strftime(_DATETIME_FMT)


def add_minutes(minutes: int) -> str:
    return (datetime_now_jakarta() + timedelta(minutes=minutes)).strftime(_DATETIME_FMT)


def date_filename() -> str:
    return datetime_now_jakarta().strftime("%Y%m%d%H%M%S")


def parse_date(value: str) -> datetime:
    """Parse a YYYY-MM-DD date into a UTC datetime at midnight."""
    if not _DATE_RE.fullmatch(value):
        raise ValueError(f"cannot parse {value!r} as a date")
    return datetime.strptime(value, _DATE_FMT).replace(tzinfo=timezone.utc)


def convert_to_jakarta_time(moment: datetime) -> str:
    return _as_aware(moment).astimezone(_JAKARTA).strftime(_DATETIME_FMT)


def convert_to_jakarta_date(moment: datetime) -> str:
    return _as_aware(moment).astimezone(_JAKARTA).strftime(_DATE_FMT)


def array_int_to_string(values: Iterable[int], delimiter: str) -> str:
    text = "[" + " ".join(str(v) for v in values) + "]"
    return text.replace(" ", delimiter).strip("[]")


def to_int64(value: Any) -> int:
    """Convert a number or a decimal string to an integer; anything else gives 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        if not _INT_RE.fullmatch(value):
            return 0
        return max(_INT64_MIN, min(_INT64_MAX, int(value)))
    return 0


def to_int(value: Any) -> int:
    return to_int64(value)


def to_int32(value: Any) -> int:
    number = to_int64(value)
    return ((number + 2**31) % 2**32) - 2**31


def to_float64(value: str) -> float:
    if "_" in value or value != value.strip():
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return _jsonable(value.value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict) and not isinstance(value, type):
        return {k: _jsonable(v) for k, v in to_dict().items()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return _as_aware(value).isoformat().replace("+00:00", "Z")
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def _escape_html(text: str) -> str:
    return (
        text.replace("&", "\\u0026")
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def serialize(message: Any) -> bytes:
    """Encode a value as compact JSON followed by a newline."""
    text = json.dumps(
        _jsonable(message), ensure_ascii=False, separators=(",", ":"), allow_nan=False
    )
    return (_escape_html(text) + "\n").encode("utf-8")


def function_name(func: Callable[..., Any]) -> str:
    if not callable(func):
        raise TypeError("value is not callable")
    qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if qualname is None:
        qualname = type(func).__qualname__
    module = getattr(func, "__module__", None)
    return f"{module}.{qualname}" if module else qualname


def check_deadline(deadline: float | datetime | None) -> None:
    """Raise TimeoutError if the deadline (monotonic seconds or datetime) has passed."""
    if deadline is None:
        return
    if isinstance(deadline, datetime):
        expired = _as_aware(deadline) <= datetime.now(timezone.utc)
    else:
        expired = deadline <= time.monotonic()
    if expired:
        raise TimeoutError("context deadline exceeded")


def _is_zero(f: dataclasses.Field, value: Any) -> bool:
    if f.default is not dataclasses.MISSING:
        default = f.default
    elif f.default_factory is not dataclasses.MISSING:
        default = f.default_factory()
    else:
        return value is None or (type(value) in (str, int, float, bool) and not value)
    return type(value) is type(default) and value == default


def struct_to_map(obj: Any, non_zero: bool) -> dict[str, Any]:
    """Map a dataclass instance's public fields to their values, optionally skipping zero ones."""
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError("not struct")
    out: dict[str, Any] = {}
    for f in dataclasses.fields(obj):
        if f.name.startswith("_"):
            continue
        value = getattr(obj, f.name)
        if non_zero and _is_zero(f, value):
            continue
        out[f.name] = value
    return out


def non_zero_cols(obj: Any, non_zero: bool) -> list[str]:
    return sorted(struct_to_map(obj, non_zero))


def now_str_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def _same(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a == b


def in_array(value: Any, items: Iterable[Any]) -> bool:
    return any(_same(value, item) for item in items)


def _dump_quiet() -> bool:
    return os.environ.get("APP_ENV") == PRODUCTION_ENV and os.environ.get("DEBUG_MODE") == "false"


def _pretty(value: Any) -> str:
    try:
        text = json.dumps(_jsonable(value), indent="\t", ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        return ""
    return _escape_html(text)


def dump(value: Any) -> None:
    """Print a value as indented JSON, unless running quietly in production."""
    if _dump_quiet():
        return
    print(_SEPARATOR)
    print(_pretty(value))
    print(_SEPARATOR)


def dump_with_title(value: Any, title: str) -> None:
    if _dump_quiet():
        return
    print(_SEPARATOR)
    print("check: ", title)
    print(_pretty(value))
    print(_SEPARATOR)


def remove_first_char(text: str) -> str:
    if len(text) <= 1:
        return ""
    return text[1:]


def get_data_in_struct(data: Any, ref_column: str, search_value: Any) -> Any:
    """Return the first item whose attribute ref_column equals search_value."""
    if not isinstance(data, (list, tuple)):
        raise TypeError("DATA IS NOT A SLICE")
    for item in data:
        if _same(getattr(item, ref_column), search_value):
            return item
    raise LookupError("DATA NOT FOUND")


def verify_bcrypt_hash(plaintext: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def get_app_env() -> str:
    return os.environ.get("APP_ENV", "")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(value)).normalize(), "f")


def _rfc3339(moment: datetime) -> str:
    moment = _as_aware(moment)
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    offset = moment.utcoffset() or timedelta(0)
    seconds = int(offset.total_seconds())
    if seconds == 0:
        return base + "Z"
    sign = "+" if seconds > 0 else "-"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{base}{sign}{hours:02d}:{minutes:02d}"


def _format_default(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, Enum):
        return to_string(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        parts = (to_string(getattr(value, f.name)) for f in dataclasses.fields(value))
        return "{" + " ".join(parts) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(to_string(v) for v in value) + "]"
    if isinstance(value, dict):
        parts = (f"{to_string(k)}:{to_string(value[k])}" for k in sorted(value, key=str))
        return "map[" + " ".join(parts) + "]"
    return str(value)


def to_string(value: Any) -> str:
    """Render a value as text: plain decimals, true/false, RFC 3339 times."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, datetime):
        return _rfc3339(value)
    return _format_default(value)