"""HTTP handlers for todo lists and todo list categories."""

from __future__ import annotations

from typing import Any, Callable, Protocol

from .entity import TodoListCatReq, TodoListReq

_SUCCESS_MESSAGE = "Success"
_HTTP_OK = 200


class _Router(Protocol):
    def add_route(self, method: str, path: str, handler: Callable[[Any], Any]) -> Any: ...


class _Handler:
    def __init__(self, parser: Any, presenter: Any, usecase: Any) -> None:
        self.parser = parser
        self.presenter = presenter
        self.usecase = usecase

    def _success(self, data: Any) -> Any:
        return self.presenter.build_success(data, _SUCCESS_MESSAGE, _HTTP_OK)

    def _error(self, error: Exception) -> Any:
        return self.presenter.build_error(error)


class TodoListHandler(_Handler):
    """Routes for reading and changing the todo lists of the calling user."""

    def register(self, router: _Router) -> None:
        """Attach the todo list routes to a router with an add_route(method, path, handler)."""
        router.add_route("GET", "/todo-lists/<id>", self.get_by_id)
        router.add_route("GET", "/todo-lists", self.get_by_user_id)
        router.add_route("POST", "/todo-lists", self.create)
        router.add_route("PUT", "/todo-lists/<id>", self.update)
        router.add_route("DELETE", "/todo-lists/<id>", self.delete)

    def get_by_id(self, ctx: Any) -> Any:
        try:
            todo_id = self.parser.parse_int_id_from_path(ctx)
            data = self.usecase.get_by_id(todo_id)
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def get_by_user_id(self, ctx: Any) -> Any:
        try:
            user_id = self.parser.parse_user_id(ctx)
            data = self.usecase.get_by_user_id(user_id)
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def create(self, ctx: Any) -> Any:
        try:
            request = self.parser.parse_body_with_user_id(ctx, TodoListReq)
            data = self.usecase.create(request)
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def update(self, ctx: Any) -> Any:
        try:
            request = self.parser.parse_body_with_path_id_and_user_id(ctx, TodoListReq)
            self.usecase.update_by_id(request)
        except Exception as error:
            return self._error(error)
        return self._success(None)

    def delete(self, ctx: Any) -> Any:
        try:
            todo_id = self.parser.parse_int_id_from_path(ctx)
            self.usecase.delete_by_id(todo_id)
        except Exception as error:
            return self._error(error)
        return self._success(None)


class TodoListCategoryHandler(_Handler):
    """Routes for reading and changing todo list categories."""

    def register(self, router: _Router) -> None:
        """Attach the category routes to a router with an add_route(method, path, handler)."""
        router.add_route("GET", "/todo-category/<id>", self.get_by_id)
        router.add_route("GET", "/todo-category", self.get_all)
        router.add_route("POST", "/todo-category", self.create)
        router.add_route("PUT", "/todo-category/<id>", self.update)
        router.add_route("DELETE", "/todo-category/<id>", self.delete)

    def get_by_id(self, ctx: Any) -> Any:
        try:
            category_id = self.parser.parse_int_id_from_path(ctx)
            data = self.usecase.get_by_id(category_id)
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def get_all(self, ctx: Any) -> Any:
        try:
            data = self.usecase.get_all()
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def create(self, ctx: Any) -> Any:
        try:
            request = self.parser.parse_body(ctx, TodoListCatReq)
            data = self.usecase.create(request)
        except Exception as error:
            return self._error(error)
        return self._success(data)

    def update(self, ctx: Any) -> Any:
        """Update a category; a missing or bad path id leaves the id at zero."""
        try:
            category_id = self.parser.parse_int_id_from_path(ctx)
        except Exception:
            category_id = 0
        try:
            request = self.parser.parse_body(ctx, TodoListCatReq)
            request.id = category_id
            self.usecase.update_by_id(request)
        except Exception as error:
            return self._error(error)
        return self._success(None)

    def delete(self, ctx: Any) -> Any:
        try:
            category_id = self.parser.parse_int_id_from_path(ctx)
            self.usecase.delete_by_id(category_id)
        except Exception as error:
            return self._error(error)
        return self._success(None)