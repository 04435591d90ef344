import random
import sqlite3
import uuid
from datetime import datetime, timezone

import pytest

from todoskel.entity import RoleType, TodoList, TodoListCategory, User
from todoskel.errors import AppError, err_user_not_found
from todoskel.repository import (
    TodoListCategoryRepository,
    TodoListRepository,
    UserRepository,
    create_schema,
)
from todoskel.transaction import db_transaction


def stubbed_todo_lists():
    now = datetime.now(timezone.utc)
    return [
        TodoList(
            title=str(uuid.uuid4()),
            description=str(uuid.uuid4()),
            doing_at=now,
            created_at=now,
            updated_at=now,
            user_id=random.randint(1, 2**62),
            id=random.randint(1, 2**62),
        )
    ]


def stubbed_todo_list():
    return stubbed_todo_lists()[0]


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def todos(connection):
    return TodoListRepository(connection)


@pytest.fixture
def categories(connection):
    return TodoListCategoryRepository(connection)


@pytest.fixture
def users(connection):
    return UserRepository(connection)


def test_create_and_get_by_id_round_trip(todos):
    stub = stubbed_todo_list()
    todos.create(None, stub, False)
    assert todos.get_by_id(stub.id) == stub


def test_create_assigns_id_and_timestamps(todos):
    todo = TodoList(title="write", user_id=3, description="tests")
    todos.create(None, todo, False)
    assert todo.id > 0
    assert todo.created_at is not None
    assert todo.updated_at is not None
    assert todos.get_by_id(todo.id) == todo


def test_create_non_zero_skips_empty_columns(todos):
    todo = TodoList(title="only title", user_id=7)
    todos.create(None, todo, True)
    fetched = todos.get_by_id(todo.id)
    assert fetched.title == "only title"
    assert fetched.description == ""
    assert fetched.doing_at is None


def test_get_by_id_missing_returns_none(todos):
    assert todos.get_by_id(12345) is None


def test_get_by_user_id_filters(todos):
    mine = TodoList(title="a", user_id=1, description="x")
    other = TodoList(title="b", user_id=2, description="y")
    todos.create(None, mine, False)
    todos.create(None, other, False)
    assert todos.get_by_user_id(1) == [mine]
    assert todos.get_by_user_id(99) == []


def test_update_with_changes_only_touches_non_empty_fields(todos):
    stub = stubbed_todo_list()
    todos.create(None, stub, False)
    before = stub.updated_at
    description = stub.description
    todos.update(None, stub, TodoList(title="changed"))
    fetched = todos.get_by_id(stub.id)
    assert fetched.title == "changed"
    assert fetched.description == description
    assert fetched.updated_at >= before
    assert stub.title == "changed"


def test_update_without_changes_writes_every_field(todos):
    stub = stubbed_todo_list()
    todos.create(None, stub, False)
    stub.title = "t2"
    stub.description = "d2"
    todos.update(None, stub, None)
    assert todos.get_by_id(stub.id) == stub


def test_update_without_id_is_rejected(todos):
    with pytest.raises(ValueError):
        todos.update(None, TodoList(title="x"), TodoList(title="y"))


def test_delete_by_id(todos):
    stub = stubbed_todo_list()
    todos.create(None, stub, False)
    todos.delete_by_id(None, stub.id)
    assert todos.get_by_id(stub.id) is None


def test_lock_and_update_inside_transaction(todos):
    stub = stubbed_todo_list()
    todos.create(None, stub, False)

    def work(trx):
        locked = todos.lock_by_id(trx, stub.id)
        todos.update(trx, locked, TodoList(title="locked"))
        return locked

    locked = db_transaction(todos, work)
    assert locked.id == stub.id
    assert todos.get_by_id(stub.id).title == "locked"


def test_failed_transaction_is_rolled_back(todos):
    def work(trx):
        todos.create(trx, TodoList(title="gone", user_id=4, description="d"), False)
        raise RuntimeError("fail")

    with pytest.raises(RuntimeError):
        db_transaction(todos, work)
    assert todos.get_by_user_id(4) == []


def test_lock_by_id_missing_returns_none(todos):
    assert todos.lock_by_id(None, 77) is None


def test_category_create_get_all_and_get_by_id(categories):
    first = TodoListCategory(name="home", description="chores")
    second = TodoListCategory(name="work", description="tasks")
    categories.create(None, first, False)
    categories.create(None, second, False)
    assert categories.get_all() == [first, second]
    assert categories.get_by_id(second.id) == second
    assert categories.get_by_id(999) is None


def test_category_update_and_delete(categories):
    category = TodoListCategory(name="home", description="chores")
    categories.create(None, category, False)
    categories.update(None, category, TodoListCategory(description="cleaning"))
    fetched = categories.get_by_id(category.id)
    assert fetched.name == "home"
    assert fetched.description == "cleaning"
    categories.delete_by_id(None, category.id)
    assert categories.get_all() == []


def test_category_lock_inside_transaction(categories):
    category = TodoListCategory(name="n", description="d")
    categories.create(None, category, False)
    locked = db_transaction(categories, lambda trx: categories.lock_by_id(trx, category.id))
    assert locked == category


def test_user_create_and_get_by_email(users):
    password = "password"
    user = User(email="someone@example.com", name="Someone", password=password, role=2)
    users.create(None, user)
    assert user.id > 0
    assert users.get_by_email("someone@example.com") == user


def test_user_not_found_by_email(users):
    with pytest.raises(AppError) as info:
        users.get_by_email("missing@example.com")
    assert info.value == err_user_not_found()


def test_user_get_by_email_and_role(users):
    user = User(email="admin@example.com", name="Admin", role=int(RoleType.ADMIN))
    users.create(None, user)
    assert users.get_by_email_and_role("admin@example.com", RoleType.ADMIN) == user
    with pytest.raises(AppError) as info:
        users.get_by_email_and_role("admin@example.com", RoleType.USER)
    assert info.value == err_user_not_found()


def test_user_lock_by_id(users):
    user = User(email="lock@example.com", name="Lock")
    users.create(None, user)
    assert db_transaction(users, lambda trx: users.lock_by_id(trx, user.id)) == user
    with pytest.raises(AppError):
        users.lock_by_id(None, user.id + 100)