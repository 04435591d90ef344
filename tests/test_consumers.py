from datetime import datetime, timedelta, timezone

import pytest

from todoskel.consumers import ExampleConsumer, LogConsumer


class FakeRepo:
    def __init__(self, error=None):
        self.entries = []
        self.error = error

    def create(self, entry):
        if self.error is not None:
            raise self.error
        self.entries.append(entry)
        return len(self.entries)


PAYLOAD = {
    "status": "ERROR",
    "func_name": "fn",
    "error_message": "broken",
    "process": "proc",
    "capture_fields": {"execution_time": "15", "user": "u1"},
}


def test_process_sync_log_stores_entry():
    repo = FakeRepo()
    before = datetime.now(timezone.utc) + timedelta(hours=7)
    LogConsumer(repo).process_sync_log(PAYLOAD)
    after = datetime.now(timezone.utc) + timedelta(hours=7)

    assert len(repo.entries) == 1
    entry = repo.entries[0]
    assert entry.status == "ERROR"
    assert entry.func_name == "fn"
    assert entry.error_message == "broken"
    assert entry.process == "proc"
    assert entry.log_fields == {"execution_time": "15", "user": "u1"}
    assert entry.execution_time == 15
    assert before <= entry.created <= after


def test_process_sync_log_without_execution_time():
    repo = FakeRepo()
    LogConsumer(repo).process_sync_log({"func_name": "fn"})
    assert repo.entries[0].execution_time == 0
    assert repo.entries[0].func_name == "fn"


def test_process_sync_log_raises_repo_error():
    failure = RuntimeError("mongo down")
    consumer = LogConsumer(FakeRepo(error=failure))
    with pytest.raises(RuntimeError) as info:
        consumer.process_sync_log(PAYLOAD)
    assert info.value is failure


def test_example_consumer_prints_and_stores_nothing(capsys, monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("DEBUG_MODE", raising=False)
    repo = FakeRepo()
    assert ExampleConsumer(repo).process(PAYLOAD) is None
    assert repo.entries == []
    assert "fn" in capsys.readouterr().out