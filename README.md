# todoskel

A layered service skeleton for a small todo-list API. It is built in layers:
entities, repositories, use cases, HTTP handlers and a JSON presenter. It also
has a MongoDB log store, consumers for log messages, and an interval scheduler.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

Settings come from environment variables. The commands read a `.env` file from
the working directory when they start. `todoskel.config.load_config(environ)`
builds a frozen `Config` from a mapping of variables. If `environ` is omitted,
it reads `os.environ`. It raises `ValueError` when a required variable is
missing or a number cannot be parsed.

Required variables:

| Variable | Meaning |
| --- | --- |
| `MYSQL_POOL` | connection pool size |
| `MYSQL_SLOW_LOG_THRESHOLD` | slow-query threshold in milliseconds |
| `RABBITMQ_URI` | message broker address |
| `MONGODB_URI` | e.g. `mongodb://localhost:27017` |
| `MONGODB_DATABASE_NAME` | database that holds the `logs` collection |
| `REDIS_HOST` | e.g. `localhost:6379` |
| `REDIS_READ_TIMEOUT`, `REDIS_WRITE_TIMEOUT` | timeouts in milliseconds |

Variables with defaults:

- `APP_ENV` defaults to `development`.
- `API_PORT` defaults to `8760`.
- `RABBITMQ_EXCHANGE` defaults to `events`.
- `RABBITMQ_QUEUE_TYPE` defaults to `topic`.
- `RABBITMQ_RETRY_COUNT` defaults to `3`.
- `POSTGRE_POOL` defaults to `1000`.
- `POSTGRE_SLOW_LOG_THRESHOLD` defaults to `200`.

Also read: `APP_NAME`, `APP_VERSION`, `MYSQL_URI` and
`ALLOWED_CREDENTIAL_ORIGINS`. `ALLOWED_CREDENTIAL_ORIGINS` is a list separated
by semicolons.

`MYSQL_URI` names the SQL database the API opens. It may be a file path or a
`sqlite:///` URL. If it is empty, an in-memory database is used.

### Logging

Logging is handled by `todoskel.logs`.

- When `APP_ENV=production` and `DEBUG_MODE=false`, log entries are written as
  JSON lines to `storage/log/YYYY/MM/YYYY-MM-DD.log`.
- Otherwise they go to standard error in a readable form.

## Commands

### `todoskel-api`

Starts the HTTP API on `API_PORT`. The port may be given as `port` or
`host:port`. The server stops on an interrupt or `SIGTERM`.

The API exposes these routes:

- `GET /health-check`
- `GET` and `POST /api/v1/todo-category`
- `GET`, `PUT` and `DELETE /api/v1/todo-category/<id>`

Successful responses look like `{"data": ..., "message": "Success", "code": "00"}`.
Errors look like `{"message", "code", "http_code"}`. Routes that do not exist
return a JSON `404` body.

### `todoskel-scheduler`

Runs an interval scheduler. Its demo job prints a line and writes an info log
entry every four seconds. Stop it with an interrupt.

## Using the pieces in code

```python
import os

from todoskel.app import create_app, open_database
from todoskel.config import load_config

config = load_config(os.environ)
connection = open_database(config.mysql.uri)
app = create_app(config, connection)  # a Flask application
```

### Storage and transactions

- `todoskel.repository` provides `TodoListRepository`,
  `TodoListCategoryRepository` and `UserRepository` over a SQLite connection.
  Call `create_schema(connection)` to create their tables.
- `todoskel.transaction.db_transaction(repo, callback)` runs `callback` inside
  a transaction. It commits when the callback returns and rolls back when it
  raises.

### Use cases and HTTP layer

- `todoskel.todo_usecase.CrudTodoListUsecase` and
  `todoskel.category_usecase.CrudTodoListCategoryUsecase` validate requests and
  call the repositories. They format times in Asia/Jakarta time.
- `todoskel.handlers.TodoListHandler` and `TodoListCategoryHandler` combine a
  `RequestParser`, a `JsonPresenter` and a use case. Their `register(router)`
  method attaches routes to any object that has
  `add_route(method, path, handler)`.
- `todoskel.presenter.JsonPresenter` turns results and errors into
  `(status, body)` pairs.
- `todoskel.parser.RequestParser` reads IDs, JSON bodies and query parameters
  out of a `RequestContext`.

### Validation

- `todoskel.validation.validate_struct_process(data)` checks the required
  fields of request objects such as `TodoListReq` and `TodoListCatReq`.
- `todoskel.validation.Validator` does the same checks and also prints the
  details of each failure.

### Log store and log messages

- `todoskel.logstore.connect_mongodb(uri, database_name)` connects to MongoDB.
- `todoskel.logstore.LogRepository(database).create(entry)` inserts a
  `LogCollection` document into the `logs` collection.
- `todoskel.consumers.LogConsumer` stores a decoded log message through a log
  repository.
- `todoskel.consumers.ExampleConsumer` prints a decoded log message.

### Helpers

`todoskel.helper` holds conversion helpers and Asia/Jakarta date helpers, such
as `to_int64`, `to_string`, `parse_date`, `convert_to_jakarta_time` and
`verify_bcrypt_hash`.

### Scheduler

`todoskel.scheduler.IntervalScheduler` runs jobs added with
`add_job(interval, func, *args)` on background threads. Start it with
`start()` and stop it with `shutdown()`, or use it as a context manager.

## What this package does not do

- **No message broker.** The package does not connect to, publish to or
  consume from a message broker. There is no worker command. `LogConsumer` and
  `ExampleConsumer` only process payloads that are handed to them. The broker
  settings are read and required by `load_config`, but nothing uses them.
- **No user or token routes.** The API server has no authentication and no
  login or sign-up routes. It does not mount the todo-list routes. Only the
  category routes and the health check are served. `TodoListHandler` can be
  attached to a router of your own.
- **SQLite only for SQL storage.** The SQL database is SQLite through Python's
  `sqlite3` module. The MySQL, PostgreSQL and Redis settings are read but not
  connected to.