"""Domain entities, request and response shapes, and shared constants."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, ClassVar

GENERAL_LOG_FILE_PATH = "/storage/log/general"
WORKER_LOG_FILE_PATH = "/storage/log/worker"

PRODUCTION_ENV = "production"

SUCCESS_CODE = "00"
SUCCESS_MSG = "Success"
INVALID_AUTH_CODE = "01"
INVALID_AUTH_MSG = "Invalid Email or Password"
INVALID_PAYLOAD_CODE = "02"
INVALID_PAYLOAD_MSG = "Invalid Payload Request Data"
INVALID_TOKEN_CODE = "05"
INVALID_TOKEN_MSG = "Invalid Access Token"
BAD_REQUEST_CODE = "30"
BAD_REQUEST_MSG = "Bad Request"
DATA_NOT_FOUND_MSG = "Data not found"
USER_NOT_FOUND_MSG = "User not found"
GENERAL_ERROR_MESSAGE = "Something went wrong. Please try again later."

VALIDATE_CUSTOM_EXAMPLE = "validate_custom_example"

_ACCESS_WIRE_NAME = "access_token"


def _field(
    default: Any = "",
    *,
    key: str | None = None,
    omitempty: bool = False,
    required: bool = False,
    label: str | None = None,
    bson: str | None = None,
    factory: Any = None,
) -> Any:
    """Declare a dataclass field carrying its wire name and validation rules.

    Without a key the wire name is the attribute name.
    """
    metadata = {
        "json": key,
        "omitempty": omitempty,
        "validate": "required" if required else None,
        "name": label,
        "bson": bson,
    }
    metadata = {k: v for k, v in metadata.items() if v not in (None, False)}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)) and len(value) == 0:
        return True
    return False


def _json_dict(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in dataclasses.fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("omitempty") and _is_empty(value):
            continue
        if isinstance(value, Enum):
            value = value.value
        out[f.metadata.get("json", f.name)] = value
    return out


class UserRole(IntEnum):
    ADMIN = 1
    GUEST = 2


class RoleType(IntEnum):
    ADMIN = 1
    USER = 2


def get_role_name(role: int) -> str:
    """Return the display name of a user role."""
    if role == UserRole.ADMIN:
        return "Admin"
    if role == UserRole.GUEST:
        return "Guest"
    return "Unknown"


@dataclass
class LoginReq:
    email: str = _field(key="email", required=True)
    password: str = _field(required=True)


@dataclass
class LoginResponse:
    user_id: int = _field(0, key="user_id")
    name: str = _field(key="name")
    email: str = _field(key="email")
    role_access: int = _field(0, key="role_access")
    token: str = _field(key=_ACCESS_WIRE_NAME)


@dataclass
class CreateUserReq:
    name: str = _field(key="name", required=True, label="Nama")
    email: str = _field(key="email", required=True)
    password: str = _field(required=True)
    reenter_password: str = _field(required=True)
    phone: str = _field(key="phone", required=True, label="Nomor Telepon")
    role_access: int = _field(0, key="role_access", required=True, label="Hak Akses")


@dataclass
class CreateUserResponse:
    user_id: int = _field(0, key="user_id")
    name: str = _field(key="name")
    email: str = _field(key="email")
    role_access: str = _field(key="role_access")
    phone: str = _field(key="phone")
    token: str = _field(key=_ACCESS_WIRE_NAME)


class LogType(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    INFO = "INFO"
    WARNING = "WARNING"
    DEBUG = "DEBUG"


_LOG_STRING_KEYS = {
    "func_name": "func_name",
    "message": "message",
    "error_message": "error_message",
    "process": "process",
    "status": "status",
}


@dataclass
class LogEntry:
    func_name: str = ""
    message: str = ""
    error_message: str = ""
    process: str = ""
    status: LogType | str = ""
    log_fields: dict[str, str] = field(default_factory=dict)

    def load_from_map(self, data: dict[str, Any]) -> None:
        """Fill the entry from a decoded message; keys that are absent are left as they are."""
        for key, attr in _LOG_STRING_KEYS.items():
            if key not in data or data[key] is None:
                continue
            value = data[key]
            if not isinstance(value, str):
                raise ValueError(f"cannot load {key}: expected a string, got {type(value).__name__}")
            if attr == "status":
                try:
                    value = LogType(value)
                except ValueError:
                    pass
            setattr(self, attr, value)

        if "capture_fields" in data:
            fields_value = data["capture_fields"]
            if fields_value is None:
                self.log_fields = {}
                return
            if not isinstance(fields_value, dict):
                raise ValueError("cannot load capture_fields: expected an object")
            merged = dict(self.log_fields or {})
            for k, v in fields_value.items():
                if not isinstance(v, str):
                    raise ValueError(f"cannot load capture_fields[{k}]: expected a string")
                merged[str(k)] = v
            self.log_fields = merged

    def to_dict(self) -> dict[str, Any]:
        status = self.status.value if isinstance(self.status, LogType) else self.status
        return {
            "func_name": self.func_name,
            "message": self.message,
            "error_message": self.error_message,
            "process": self.process,
            "status": status,
            "capture_fields": dict(self.log_fields or {}),
        }


@dataclass
class GeneralResponse:
    code: int = 0
    message: str = ""
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


@dataclass
class ErrorResponse:
    failed_field: str = ""
    tag: str = ""
    value: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "failed_field": self.failed_field,
            "tag": self.tag,
            "value": self.value,
            "message": self.message,
        }


@dataclass
class TodoList:
    TABLE_NAME: ClassVar[str] = "todo_lists"

    title: str = ""
    user_id: int = 0
    description: str = ""
    doing_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int = 0


@dataclass
class TodoListCategory:
    TABLE_NAME: ClassVar[str] = "todo_list_categories"

    name: str = ""
    description: str = ""
    created_at: datetime | None = None
    id: int = 0


@dataclass
class User:
    TABLE_NAME: ClassVar[str] = "users"

    id: int = 0
    email: str = ""
    phone: str = ""
    password: str = _field()
    name: str = ""
    role: int = 0


@dataclass
class LogCollection:
    status: str = _field(key="status", bson="status")
    message: str = _field(key="message", bson="message")
    func_name: str = _field(key="func_name", bson="func_name")
    error_message: str = _field(key="error_message", bson="error_message")
    process: str = _field(key="process_name", bson="process_name")
    log_fields: dict[str, str] = _field(key="log_fields", bson="log_fields", factory=dict)
    created: datetime | None = _field(None, key="created", bson="created")
    execution_time: int = _field(0, key="exec_time", bson="exec_time")


@dataclass
class TodoListReq:
    id: int = _field(0, key="id", omitempty=True)
    user_id: int = _field(0, key="user_id", omitempty=True, required=True)
    title: str = _field(key="title", omitempty=True, required=True, label="Judul")
    description: str = _field(key="description", required=True, label="Deskripsi")
    doing_at: str = _field(key="doing_at", required=True, label="Tanggal Aktifitas")

    def set_id(self, todo_id: int) -> None:
        self.id = todo_id

    def set_user_id(self, user_id: int) -> None:
        self.user_id = user_id


@dataclass
class TodoListResponse:
    id: int = _field(0, key="id", omitempty=True)
    title: str = _field(key="title")
    description: str = _field(key="description")
    doing_at: str = _field(key="doing_at")
    created_at: str = _field(key="created_at")
    updated_at: str = _field(key="updated_at")

    def to_dict(self) -> dict[str, Any]:
        return _json_dict(self)


@dataclass
class TodoListCatReq:
    id: int = _field(0, key="id", omitempty=True)
    name: str = _field(key="name", omitempty=True, required=True, label="name")
    description: str = _field(key="description", required=True, label="deskripsi")

    def set_id(self, category_id: int) -> None:
        self.id = category_id


@dataclass
class TodoListCatResponse:
    id: int = _field(0, key="id", omitempty=True)
    name: str = _field(key="name")
    description: str = _field(key="description")
    created_at: str = _field(key="created_at")

    def to_dict(self) -> dict[str, Any]:
        return _json_dict(self)