"""Repositories for todo lists, todo list categories and users over a SQL connection."""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, ClassVar, Iterator, Sequence

from .entity import TodoList, TodoListCategory, User
from .errors import err_user_not_found
from .helper import non_zero_cols, struct_to_map
from .transaction import Transaction, TrxSupport

_SCHEMA = """
CREATE TABLE IF NOT EXISTS todo_lists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL DEFAULT 0,
    title TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    doing_at TEXT,
    created_at TEXT,
    updated_at TEXT
);
CREATE TABLE IF NOT EXISTS todo_list_categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    created_at TEXT
);
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    password TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    role INTEGER NOT NULL DEFAULT 0
);
"""


def create_schema(connection: Any) -> None:
    """Create the tables the repositories use, if they do not exist yet."""
    connection.executescript(_SCHEMA)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return int(value)
    return value


class _TableRepository(TrxSupport):
    _model: ClassVar[type]
    _datetime_columns: ClassVar[frozenset[str]] = frozenset()
    _touch_updated_at: ClassVar[bool] = False

    @property
    def _table(self) -> str:
        return self._model.TABLE_NAME

    def _from_row(self, description: Sequence[Any], row: Sequence[Any]) -> Any:
        known = {f.name for f in dataclasses.fields(self._model)}
        values: dict[str, Any] = {}
        for column, value in zip((d[0] for d in description), row):
            if column not in known:
                continue
            if column in self._datetime_columns and isinstance(value, str):
                value = datetime.fromisoformat(value)
            values[column] = value
        return self._model(**values)

    def _fetch_all(self, connection: Any, sql: str, params: Sequence[Any]) -> list[Any]:
        cursor = connection.execute(sql, [_encode(p) for p in params])
        return [self._from_row(cursor.description, row) for row in cursor.fetchall()]

    def _fetch_one(self, connection: Any, sql: str, params: Sequence[Any]) -> Any:
        cursor = connection.execute(sql, [_encode(p) for p in params])
        row = cursor.fetchone()
        return None if row is None else self._from_row(cursor.description, row)

    @contextmanager
    def _writing(self, transaction: Transaction | None) -> Iterator[Any]:
        connection = self.trx(transaction)
        own = transaction is None and not connection.in_transaction
        try:
            yield connection
        except BaseException:
            if own:
                connection.rollback()
            raise
        if own:
            connection.commit()

    def _insert(self, transaction: Transaction | None, obj: Any, columns: Sequence[str]) -> None:
        columns = [c for c in columns if not (c == "id" and not obj.id)]
        if columns:
            placeholders = ", ".join("?" for _ in columns)
            sql = f"INSERT INTO {self._table} ({', '.join(columns)}) VALUES ({placeholders})"
        else:
            sql = f"INSERT INTO {self._table} DEFAULT VALUES"
        with self._writing(transaction) as connection:
            cursor = connection.execute(sql, [_encode(getattr(obj, c)) for c in columns])
            obj.id = cursor.lastrowid

    def _update(self, transaction: Transaction | None, target: Any, changes: Any) -> None:
        if not target.id:
            raise ValueError("WHERE conditions required")
        if changes is not None:
            values = struct_to_map(changes, True)
        else:
            values = struct_to_map(target, False)
        values.pop("id", None)
        if self._touch_updated_at and values.get("updated_at") is None:
            values["updated_at"] = _now()
        if not values:
            return
        assignments = ", ".join(f"{column} = ?" for column in values)
        params = [_encode(v) for v in values.values()] + [target.id]
        with self._writing(transaction) as connection:
            connection.execute(f"UPDATE {self._table} SET {assignments} WHERE id = ?", params)
        for column, value in values.items():
            setattr(target, column, value)

    def _delete(self, transaction: Transaction | None, row_id: int) -> None:
        with self._writing(transaction) as connection:
            connection.execute(f"DELETE FROM {self._table} WHERE id = ?", [row_id])

    def _lock(self, transaction: Transaction | None, row_id: int) -> Any:
        return self._fetch_one(
            self.trx(transaction), f"SELECT * FROM {self._table} WHERE id = ? LIMIT 1", [row_id]
        )


class TodoListRepository(_TableRepository):
    """Storage of todo lists."""

    _model = TodoList
    _datetime_columns = frozenset({"doing_at", "created_at", "updated_at"})
    _touch_updated_at = True

    def get_by_user_id(self, user_id: int) -> list[TodoList]:
        return self._fetch_all(
            self.connection, "SELECT * FROM todo_lists WHERE user_id = ?", [user_id]
        )

    def get_by_id(self, todo_id: int) -> TodoList | None:
        return self._fetch_one(
            self.connection, "SELECT * FROM todo_lists WHERE id = ? LIMIT 1", [todo_id]
        )

    def create(self, transaction: Transaction | None, todo: TodoList, non_zero: bool) -> None:
        """Insert the todo list, filling missing timestamps and its new id."""
        now = _now()
        if todo.created_at is None:
            todo.created_at = now
        if todo.updated_at is None:
            todo.updated_at = now
        self._insert(transaction, todo, non_zero_cols(todo, non_zero))

    def lock_by_id(self, transaction: Transaction | None, todo_id: int) -> TodoList | None:
        return self._lock(transaction, todo_id)

    def update(
        self, transaction: Transaction | None, todo: TodoList, changes: TodoList | None
    ) -> None:
        """Apply the non-empty fields of changes, or every field of todo when changes is None."""
        self._update(transaction, todo, changes)

    def delete_by_id(self, transaction: Transaction | None, todo_id: int) -> None:
        self._delete(transaction, todo_id)


class TodoListCategoryRepository(_TableRepository):
    """Storage of todo list categories."""

    _model = TodoListCategory
    _datetime_columns = frozenset({"created_at"})

    def get_all(self) -> list[TodoListCategory]:
        return self._fetch_all(self.connection, "SELECT * FROM todo_list_categories", [])

    def get_by_id(self, category_id: int) -> TodoListCategory | None:
        return self._fetch_one(
            self.connection,
            "SELECT * FROM todo_list_categories WHERE id = ? LIMIT 1",
            [category_id],
        )

    def create(
        self, transaction: Transaction | None, category: TodoListCategory, non_zero: bool
    ) -> None:
        if category.created_at is None:
            category.created_at = _now()
        self._insert(transaction, category, non_zero_cols(category, non_zero))

    def lock_by_id(
        self, transaction: Transaction | None, category_id: int
    ) -> TodoListCategory | None:
        return self._lock(transaction, category_id)

    def update(
        self,
        transaction: Transaction | None,
        category: TodoListCategory,
        changes: TodoListCategory | None,
    ) -> None:
        self._update(transaction, category, changes)

    def delete_by_id(self, transaction: Transaction | None, category_id: int) -> None:
        self._delete(transaction, category_id)


class UserRepository(_TableRepository):
    """Storage of user accounts."""

    _model = User

    def create(self, transaction: Transaction | None, user: User) -> None:
        self._insert(transaction, user, non_zero_cols(user, False))

    def lock_by_id(self, transaction: Transaction | None, user_id: int) -> User:
        user = self._lock(transaction, user_id)
        if user is None:
            raise err_user_not_found()
        return user

    def get_by_email(self, email: str) -> User:
        user = self._fetch_one(
            self.connection, "SELECT * FROM users WHERE email = ? LIMIT 1", [email]
        )
        if user is None:
            raise err_user_not_found()
        return user

    def get_by_email_and_role(self, email: str, role: int) -> User:
        user = self._fetch_one(
            self.connection,
            "SELECT * FROM users WHERE email = ? AND role = ? LIMIT 1",
            [email, int(role)],
        )
        if user is None:
            raise err_user_not_found()
        return user