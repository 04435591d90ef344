"""Business rules for creating, reading, updating and deleting todo list categories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .entity import TodoListCategory, TodoListCatReq, TodoListCatResponse
from .errors import ValidationFailed
from .helper import convert_to_jakarta_time, to_string
from .logs import log_error
from .transaction import db_transaction
from .validation import validate_struct_process


def _response(category: TodoListCategory) -> TodoListCatResponse:
    return TodoListCatResponse(
        id=category.id,
        name=category.name,
        description=category.description,
        created_at="" if category.created_at is None else convert_to_jakarta_time(category.created_at),
    )


class CrudTodoListCategoryUsecase:
    """CRUD operations on todo list categories, with validation and error logging."""

    def __init__(self, todo_list_cat_repo: Any) -> None:
        self.todo_list_cat_repo = todo_list_cat_repo

    def get_by_id(self, category_id: int) -> TodoListCatResponse | None:
        func_name = "CrudTodoListCategoryUsecase.GetByID"
        fields = {"category_id": to_string(category_id)}
        try:
            data = self.todo_list_cat_repo.get_by_id(category_id)
        except Exception as error:
            log_error("todoListCatRepo.GetByID", func_name, error, fields, "")
            raise
        if data is None:
            return None
        return _response(data)

    def get_all(self) -> list[TodoListCatResponse]:
        func_name = "CrudTodoListCategoryUsecase.GetAll"
        try:
            data = self.todo_list_cat_repo.get_all()
        except Exception as error:
            log_error("todoListCatRepo.GetAll", func_name, error, None, "")
            raise
        return [_response(item) for item in data or []]

    def create(self, request: TodoListCatReq) -> TodoListCatResponse:
        """Validate the request and store a new category; raise ValidationFailed when invalid."""
        func_name = "CrudTodoListCategoryUsecase.Create"
        fields = {"category_id": to_string(request.id), "payload": to_string(request)}

        errors = validate_struct_process(request)
        if errors:
            raise ValidationFailed(errors)

        category = TodoListCategory(
            name=request.name,
            description=request.description,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.todo_list_cat_repo.create(None, category, False)
        except Exception as error:
            log_error("todoListCatRepo.Create", func_name, error, fields, "")
            raise
        return _response(category)

    def update_by_id(self, request: TodoListCatReq) -> None:
        """Lock the category and apply the request's changes in one transaction."""
        func_name = "CrudTodoListCategoryUsecase.UpdateByID"
        category_id = request.id
        fields = {"category_id": to_string(request.id), "payload": to_string(request)}
        repo = self.todo_list_cat_repo

        def work(trx: Any) -> None:
            try:
                locked = repo.lock_by_id(trx, category_id)
            except Exception as error:
                log_error("todoListCatRepo.LockByID", func_name, error, fields, "")
                raise
            if locked is None:
                raise LookupError("DATA IS NOT EXIST")

            changes = TodoListCategory(name=request.name, description=request.description)
            try:
                repo.update(trx, locked, changes)
            except Exception as error:
                log_error("todoListCatRepo.Update", func_name, error, fields, "")
                raise

        try:
            db_transaction(repo, work)
        except Exception as error:
            log_error("todoListCatRepo.DBTransaction", func_name, error, fields, "")
            raise

    def delete_by_id(self, category_id: int) -> None:
        func_name = "CrudTodoListCategoryUsecase.DeleteByID"
        fields = {"todo_list_category_id": to_string(category_id)}
        try:
            self.todo_list_cat_repo.delete_by_id(None, category_id)
        except Exception as error:
            log_error("todoListCatRepo.DeleteByID", func_name, error, fields, "")
            raise