import pytest

from todoskel.entity import (
    ErrorResponse,
    GeneralResponse,
    LogEntry,
    LogType,
    TodoListCatReq,
    TodoListCatResponse,
    TodoListReq,
    TodoListResponse,
    UserRole,
    get_role_name,
)


@pytest.mark.parametrize(
    "role, expected",
    [(UserRole.ADMIN, "Admin"), (UserRole.GUEST, "Guest"), (99, "Unknown")],
)
def test_get_role_name(role, expected):
    assert get_role_name(role) == expected


def test_log_entry_round_trip():
    entry = LogEntry(
        func_name="Todo.Create",
        message="msg",
        error_message="boom",
        process="sync",
        status=LogType.ERROR,
        log_fields={"user_id": "7"},
    )
    clone = LogEntry()
    clone.load_from_map(entry.to_dict())
    assert clone == entry


def test_log_entry_to_dict_keys_and_status():
    data = LogEntry(status=LogType.INFO).to_dict()
    assert set(data) == {
        "func_name",
        "message",
        "error_message",
        "process",
        "status",
        "capture_fields",
    }
    assert data["status"] == "INFO"


def test_load_from_map_rejects_wrong_type():
    with pytest.raises(ValueError):
        LogEntry().load_from_map({"message": 5})


def test_load_from_map_merges_fields_and_keeps_absent_keys():
    entry = LogEntry(message="keep", log_fields={"a": "x"})
    entry.load_from_map({"capture_fields": {"b": "y"}, "status": "ERROR"})
    assert entry.message == "keep"
    assert entry.log_fields == {"a": "x", "b": "y"}
    assert entry.status is LogType.ERROR


def test_todo_list_req_setters():
    req = TodoListReq(title="t")
    req.set_id(11)
    req.set_user_id(22)
    assert (req.id, req.user_id, req.title) == (11, 22, "t")


def test_todo_list_cat_req_set_id():
    req = TodoListCatReq(name="n", description="d")
    req.set_id(5)
    assert req.id == 5


def test_todo_list_response_omits_zero_id():
    data = TodoListResponse(title="t", description="d").to_dict()
    assert "id" not in data
    assert data["title"] == "t"
    assert data["updated_at"] == ""


def test_category_response_includes_nonzero_id():
    data = TodoListCatResponse(id=4, name="n", created_at="c").to_dict()
    assert data == {"id": 4, "name": "n", "description": "", "created_at": "c"}


def test_general_response_to_dict():
    resp = GeneralResponse(code=200, message="OK!", data=[1])
    assert resp.to_dict() == {"code": 200, "message": "OK!", "data": [1]}


def test_error_response_to_dict():
    err = ErrorResponse(failed_field="Title", tag="required", value="", message="m")
    assert err.to_dict()["failed_field"] == "Title"
    assert err.to_dict()["tag"] == "required"