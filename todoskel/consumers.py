"""Queue consumers that process log messages."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from .entity import LogCollection, LogEntry, LogType
from .helper import dump, to_int


def _load(payload: dict[str, Any] | None) -> LogEntry:
    params = LogEntry()
    try:
        params.load_from_map(payload or {})
    except ValueError:
        pass
    return params


class LogConsumer:
    """Stores log messages taken from the queue in the log repository."""

    def __init__(self, log_repo: Any) -> None:
        self.log_repo = log_repo

    def process_sync_log(self, payload: dict[str, Any]) -> None:
        params = _load(payload)
        execution_time = (params.log_fields or {}).get("execution_time", "")
        status = params.status.value if isinstance(params.status, LogType) else str(params.status)

        try:
            self.log_repo.create(
                LogCollection(
                    status=status,
                    func_name=params.func_name,
                    error_message=params.error_message,
                    process=params.process,
                    log_fields=dict(params.log_fields or {}),
                    created=datetime.now(timezone.utc) + timedelta(hours=7),
                    execution_time=to_int(execution_time),
                )
            )
        except Exception:
            print("FAILED CREATE LOG TO MONGODB")
            raise

        print("SYNC SUCCESS!")
        print(params)


class ExampleConsumer:
    """Prints each message it receives."""

    def __init__(self, log_repo: Any) -> None:
        self.log_repo = log_repo

    def process(self, payload: dict[str, Any]) -> None:
        params = _load(payload)
        dump(params.to_dict())