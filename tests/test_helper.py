import json
import re
import time
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone

import bcrypt
import pytest

from todoskel.entity import TodoListCatReq, TodoListReq
from todoskel.helper import (
    add_minutes,
    array_int_to_string,
    check_deadline,
    convert_to_jakarta_date,
    convert_to_jakarta_time,
    date_filename,
    date_now_jakarta,
    datetime_now_jakarta,
    datetime_now_jakarta_string,
    dump,
    dump_with_title,
    function_name,
    get_app_env,
    get_data_in_struct,
    in_array,
    non_zero_cols,
    now_str_utc,
    parse_date,
    remove_first_char,
    serialize,
    struct_to_map,
    to_float64,
    to_int,
    to_int32,
    to_int64,
    to_string,
    verify_bcrypt_hash,
)


def test_parse_date_and_errors():
    parsed = parse_date("2024-03-15")
    assert (parsed.year, parsed.month, parsed.day) == (2024, 3, 15)
    assert parsed.utcoffset() == timedelta(0)
    for bad in ("2024-3-15", "nope", ""):
        with pytest.raises(ValueError):
            parse_date(bad)


def test_jakarta_date_round_trip():
    assert convert_to_jakarta_date(parse_date("2024-03-15")) == "2024-03-15"


def test_convert_to_jakarta_time_naive_is_utc():
    aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert convert_to_jakarta_time(aware) == "2024-01-01 07:00:00"
    assert convert_to_jakarta_time(aware.replace(tzinfo=None)) == convert_to_jakarta_time(aware)


def test_now_functions_are_consistent():
    now = datetime_now_jakarta()
    assert now.utcoffset() == timedelta(hours=7)
    assert date_now_jakarta() == now.strftime("%Y-%m-%d")
    stamp = datetime.strptime(datetime_now_jakarta_string(), "%Y-%m-%d %H:%M:%S")
    assert abs(stamp - now.replace(tzinfo=None)) < timedelta(seconds=5)


def test_add_minutes_offsets_now():
    later = datetime.strptime(add_minutes(60), "%Y-%m-%d %H:%M:%S")
    diff = later - datetime_now_jakarta().replace(tzinfo=None)
    assert timedelta(minutes=59) < diff < timedelta(minutes=61)


def test_date_filename_format():
    value = date_filename()
    assert re.fullmatch(r"[0-9]{14}", value)
    parsed = datetime.strptime(value, "%Y%m%d%H%M%S")
    assert abs(parsed - datetime_now_jakarta().replace(tzinfo=None)) < timedelta(seconds=5)


def test_now_str_utc_format():
    parsed = datetime.strptime(now_str_utc(), "%Y-%m-%dT%H:%M:%S")
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    assert abs(parsed - now) < timedelta(seconds=5)


def test_array_int_to_string_splits_back():
    values = [4, 8, 15, 16]
    assert array_int_to_string(values, "|").split("|") == [str(v) for v in values]
    assert array_int_to_string([], ",") == ""


@pytest.mark.parametrize(
    "value, expected",
    [("42", 42), (-9, -9), (7.9, 7), ("abc", 0), (True, 0), (None, 0), ("1_0", 0)],
)
def test_to_int64(value, expected):
    assert to_int64(value) == expected
    assert to_int(value) == expected


def test_to_int32_wraps_like_fixed_width():
    assert to_int32(5) == 5
    assert to_int32(2**31) == -(2**31)


def test_to_float64():
    assert to_float64("1.5") == 1.5
    assert to_float64("x") == 0.0
    assert to_float64(" 1") == 0.0


def test_serialize_round_trip_and_escaping():
    data = {"b": 1, "a": "<tag>"}
    raw = serialize(data)
    assert raw.endswith(b"\n")
    assert json.loads(raw) == data
    assert b"<" not in raw
    assert raw.startswith(b'{"a"')


def test_serialize_rejects_unserializable():
    with pytest.raises(TypeError):
        serialize(object())


def test_function_name():
    assert function_name(parse_date).endswith(".parse_date")
    with pytest.raises(TypeError):
        function_name(3)


def test_check_deadline():
    assert check_deadline(time.monotonic() + 60) is None
    with pytest.raises(TimeoutError):
        check_deadline(time.monotonic() - 1)
    with pytest.raises(TimeoutError):
        check_deadline(datetime.now(timezone.utc) - timedelta(seconds=1))


def test_struct_to_map_and_non_zero_cols():
    req = TodoListReq(title="t")
    assert struct_to_map(req, True) == {"title": "t"}
    full = struct_to_map(req, False)
    assert set(full) == {f.name for f in fields(TodoListReq)}
    assert non_zero_cols(req, False) == sorted(full)
    assert non_zero_cols(req, True) == ["title"]


def test_struct_to_map_rejects_non_struct():
    with pytest.raises(TypeError):
        struct_to_map(5, True)


def test_in_array_is_type_strict():
    assert in_array(2, [1, 2]) is True
    assert in_array(1, [1.0]) is False
    assert in_array(True, [1]) is False


def test_dump_prints_json(capsys, monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    dump({"name": "todo"})
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == lines[-1] == "-------------"
    assert json.loads("\n".join(lines[1:-1])) == {"name": "todo"}


def test_dump_with_title(capsys, monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    dump_with_title([1], "items")
    out = capsys.readouterr().out
    assert "check: " in out
    assert "items" in out


def test_dump_quiet_in_production(capsys, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("DEBUG_MODE", "false")
    dump({"a": 1})
    dump_with_title({"a": 1}, "t")
    assert capsys.readouterr().out == ""


def test_remove_first_char():
    assert remove_first_char("abc") == "bc"
    assert remove_first_char("a") == ""
    assert remove_first_char("") == ""


@dataclass
class _Item:
    key: int
    label: str


def test_get_data_in_struct():
    items = [_Item(1, "one"), _Item(2, "two")]
    assert get_data_in_struct(items, "key", 2) is items[1]
    with pytest.raises(LookupError):
        get_data_in_struct(items, "key", 3)
    with pytest.raises(TypeError):
        get_data_in_struct({"key": 1}, "key", 1)


def test_verify_bcrypt_hash():
    hashed = bcrypt.hashpw(b"password", bcrypt.gensalt(rounds=4)).decode()
    assert verify_bcrypt_hash("password", hashed) is True
    assert verify_bcrypt_hash("secret", hashed) is False
    assert verify_bcrypt_hash("password", "garbage") is False


def test_get_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    assert get_app_env() == "staging"


@pytest.mark.parametrize("value", [0.1, 1.5, -2.25, 1e20, 123456.789])
def test_to_string_float_round_trip(value):
    text = to_string(value)
    assert "e" not in text
    assert float(text) == value


def test_to_string_scalars():
    assert to_string("abc") == "abc"
    assert to_string(42) == "42"
    assert to_string(True) == "true"
    assert to_string(1.0) == "1"


def test_to_string_datetime_round_trip():
    utc_moment = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    text = to_string(utc_moment)
    assert text.endswith("Z")
    assert datetime.fromisoformat(text.replace("Z", "+00:00")) == utc_moment
    local = utc_moment.astimezone(timezone(timedelta(hours=7)))
    assert datetime.fromisoformat(to_string(local)) == utc_moment


def test_to_string_struct():
    assert to_string(TodoListCatReq(id=3, name="n", description="d")) == "{3 n d}"