"""The HTTP API: application setup, routes and the command that serves it."""

from __future__ import annotations

import logging
import signal
import sqlite3
import sys
import threading
import time
from datetime import datetime
from typing import Any, Sequence
from wsgiref.simple_server import make_server
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request

from .category_usecase import CrudTodoListCategoryUsecase
from .config import Config, load_config
from .entity import TodoListCatReq
from .parser import RequestContext, RequestParser
from .presenter import JsonPresenter
from .repository import TodoListCategoryRepository, create_schema

_log = logging.getLogger(__name__)

_API_PREFIX = "/api/v1"
_JAKARTA = ZoneInfo("Asia/Jakarta")
_SHUTDOWN_TIMEOUT = 30


def app_title(config: Config) -> str:
    return f"{config.app_name} - {config.app_version}"


def open_database(uri: str) -> sqlite3.Connection:
    """Open the SQL database named by uri (a path or sqlite:/// URL) and create its tables."""
    path = uri
    if path.startswith("sqlite:///"):
        path = path[len("sqlite:///"):]
    if not path:
        path = ":memory:"
    connection = sqlite3.connect(path, check_same_thread=False)
    create_schema(connection)
    return connection


def _general(code: int, message: str) -> dict[str, Any]:
    return {"code": code, "message": message, "data": None}


def _install_access_log(app: Flask) -> None:
    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _access_log(response: Any) -> Any:
        started = getattr(g, "request_started", None)
        latency = 0.0 if started is None else (time.perf_counter() - started) * 1000
        stamp = datetime.now(_JAKARTA).strftime("%d-%b-%Y %H:%M:%S")
        print(f"[{stamp}] {response.status_code} - {latency:.3f}ms {request.method} {request.path}")
        return response


def create_app(config: Config, connection: Any) -> Flask:
    """Build the Flask application with its routes on the given database connection."""
    app = Flask(app_title(config))
    parser = RequestParser()
    presenter = JsonPresenter()
    categories = CrudTodoListCategoryUsecase(TodoListCategoryRepository(connection))

    _install_access_log(app)

    def context() -> RequestContext:
        return RequestContext(
            body=request.get_data(),
            params={k: str(v) for k, v in (request.view_args or {}).items()},
            query=request.args.to_dict(flat=False),
        )

    def reply(result: tuple[int, dict[str, Any]]) -> Any:
        status, body = result
        return jsonify(body), status

    def success(data: Any) -> Any:
        return reply(presenter.build_success(data, "Success", 200))

    def failure(error: Exception) -> Any:
        return reply(presenter.build_error(error))

    @app.get("/health-check")
    def health_check() -> Any:
        return jsonify(_general(200, "OK!"))

    @app.get(f"{_API_PREFIX}/todo-category/<id>")
    def category_get_by_id(id: str) -> Any:
        try:
            category_id = parser.parse_int_id_from_path(context())
            return success(categories.get_by_id(category_id))
        except Exception as error:
            return failure(error)

    @app.get(f"{_API_PREFIX}/todo-category")
    def category_get_all() -> Any:
        try:
            return success(categories.get_all())
        except Exception as error:
            return failure(error)

    @app.post(f"{_API_PREFIX}/todo-category")
    def category_create() -> Any:
        try:
            req = parser.parse_body(context(), TodoListCatReq)
            return success(categories.create(req))
        except Exception as error:
            return failure(error)

    @app.put(f"{_API_PREFIX}/todo-category/<id>")
    def category_update(id: str) -> Any:
        ctx = context()
        try:
            category_id = parser.parse_int_id_from_path(ctx)
        except ValueError:
            category_id = 0
        try:
            req = parser.parse_body(ctx, TodoListCatReq)
            req.id = category_id
            categories.update_by_id(req)
            return success(None)
        except Exception as error:
            return failure(error)

    @app.delete(f"{_API_PREFIX}/todo-category/<id>")
    def category_delete(id: str) -> Any:
        try:
            category_id = parser.parse_int_id_from_path(context())
            categories.delete_by_id(category_id)
            return success(None)
        except Exception as error:
            return failure(error)

    @app.errorhandler(404)
    @app.errorhandler(405)
    def route_not_found(error: Exception) -> Any:
        return jsonify(_general(404, "Route Not Found!")), 404

    return app


def _address(api_port: str) -> tuple[str, int]:
    host, sep, port = api_port.rpartition(":")
    if not sep:
        host, port = "", api_port
    return host, int(port)


def _serve(app: Flask, api_port: str, shutdown_timeout: int) -> None:
    host, port = _address(api_port)
    server = make_server(host, port, app)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    _log.info("Starting REST server, listening at %s", api_port)
    thread.start()

    stop = threading.Event()
    previous = {
        sig: signal.signal(sig, lambda signum, frame: stop.set())
        for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        stop.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    _log.info("Shutting down REST server...")
    server.shutdown()
    thread.join(shutdown_timeout)
    if thread.is_alive():
        _log.error("Error during server shutdown: timed out after %s seconds", shutdown_timeout)
    else:
        _log.info("REST server shut down gracefully")
    server.server_close()
    _log.info("All tasks completed. Exiting application.")


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    load_dotenv()
    cfg = load_config()
    connection = open_database(cfg.mysql.uri)
    try:
        app = create_app(cfg, connection)
        _serve(app, cfg.api_port, _SHUTDOWN_TIMEOUT)
    finally:
        connection.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())