"""Business rules for creating, reading, updating and deleting todo lists."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .entity import TodoList, TodoListReq, TodoListResponse
from .errors import ValidationFailed
from .helper import convert_to_jakarta_date, convert_to_jakarta_time, parse_date, to_string
from .logs import log_error
from .transaction import db_transaction
from .validation import validate_struct_process


def _date(moment: datetime | None) -> str:
    return "" if moment is None else convert_to_jakarta_date(moment)


def _time(moment: datetime | None) -> str:
    return "" if moment is None else convert_to_jakarta_time(moment)


def _parse_doing_at(value: str) -> datetime | None:
    try:
        return parse_date(value)
    except ValueError:
        return None


def _response(todo: TodoList, *, with_updated_at: bool = True) -> TodoListResponse:
    return TodoListResponse(
        id=todo.id,
        title=todo.title,
        description=todo.description,
        doing_at=_date(todo.doing_at),
        created_at=_time(todo.created_at),
        updated_at=_time(todo.updated_at) if with_updated_at else "",
    )


class CrudTodoListUsecase:
    """CRUD operations on todo lists, with validation and error logging."""

    def __init__(self, todo_list_repo: Any) -> None:
        self.todo_list_repo = todo_list_repo

    def get_by_user_id(self, user_id: int) -> list[TodoListResponse]:
        func_name = "CrudTodoListUsecase.GetByUserID"
        fields = {"user_id": to_string(user_id)}
        try:
            result = self.todo_list_repo.get_by_user_id(user_id)
        except Exception as error:
            log_error("todoListRepo.GetByUserID", func_name, error, fields, "")
            raise
        return [_response(item) for item in result or []]

    def get_by_id(self, todo_id: int) -> TodoListResponse | None:
        func_name = "CrudTodoListUsecase.GetByID"
        fields = {"user_id": to_string(todo_id)}
        try:
            data = self.todo_list_repo.get_by_id(todo_id)
        except Exception as error:
            log_error("todoListRepo.GetByID", func_name, error, fields, "")
            raise
        if data is None:
            return None
        return _response(data)

    def create(self, request: TodoListReq) -> TodoListResponse:
        """Validate the request and store a new todo list; raise ValidationFailed when invalid."""
        func_name = "CrudTodoListUsecase.Create"
        fields = {"user_id": to_string(request.user_id), "payload": to_string(request)}

        errors = validate_struct_process(request)
        if errors:
            raise ValidationFailed(errors)

        todo = TodoList(
            user_id=request.user_id,
            title=request.title,
            description=request.description,
            doing_at=_parse_doing_at(request.doing_at),
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.todo_list_repo.create(None, todo, False)
        except Exception as error:
            log_error("todoListRepo.Create", func_name, error, fields, "")
            raise
        return _response(todo, with_updated_at=False)

    def update_by_id(self, request: TodoListReq) -> None:
        """Lock the todo list and apply the request's changes in one transaction."""
        func_name = "CrudTodoListUsecase.UpdateByID"
        todo_id = request.id
        fields = {"user_id": to_string(request.user_id), "payload": to_string(request)}
        repo = self.todo_list_repo

        def work(trx: Any) -> None:
            try:
                locked = repo.lock_by_id(trx, todo_id)
            except Exception as error:
                log_error("todoListRepo.LockByID", func_name, error, fields, "")
                raise
            if locked is None:
                raise LookupError("DATA IS NOT EXIST")

            changes = TodoList(
                title=request.title,
                description=request.description,
                doing_at=_parse_doing_at(request.doing_at),
                updated_at=datetime.now(timezone.utc),
            )
            try:
                repo.update(trx, locked, changes)
            except Exception as error:
                log_error("todoListRepo.Update", func_name, error, fields, "")
                raise

        try:
            db_transaction(repo, work)
        except Exception as error:
            log_error("todoListRepo.DBTransaction", func_name, error, fields, "")
            raise

    def delete_by_id(self, todo_id: int) -> None:
        func_name = "CrudTodoListUsecase.DeleteByID"
        fields = {"todo_list_id": to_string(todo_id)}
        try:
            self.todo_list_repo.delete_by_id(None, todo_id)
        except Exception as error:
            log_error("todoListRepo.DeleteByID", func_name, error, fields, "")
            raise