"""Database transactions over a DB-API connection and a helper that runs work inside one."""

from __future__ import annotations

from typing import Any, Callable, Protocol, TypeVar

T = TypeVar("T")


class _TransactionError(RuntimeError):
    """A failure while finishing a transaction; ``__cause__`` holds the underlying error."""


class Transaction:
    """An open transaction on a connection."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self._finished = False

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError("transaction has already been committed or rolled back")

    def commit(self) -> None:
        self._ensure_open()
        self.connection.commit()
        self._finished = True

    def rollback(self) -> None:
        self._ensure_open()
        self.connection.rollback()
        self._finished = True


class _Transactional(Protocol):
    def begin(self) -> Any: ...


class TrxSupport:
    """Base for repositories that can run their statements inside a transaction."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def begin(self) -> Transaction:
        """Start a transaction that takes the write lock straight away."""
        self.connection.execute("BEGIN IMMEDIATE")
        return Transaction(self.connection)

    def trx(self, transaction: Any) -> Any:
        """Return the connection to run on: the transaction's, or the repository's own."""
        if isinstance(transaction, Transaction):
            return transaction.connection
        return self.connection


def _roll_back(transaction: Any, error: BaseException) -> None:
    try:
        transaction.rollback()
    except Exception as rollback_error:
        if isinstance(error, Exception):
            raise _TransactionError(f"{error}: {rollback_error}") from rollback_error


def db_transaction(repo: _Transactional, callback: Callable[[Any], T]) -> T:
    """Run callback inside a transaction: commit when it returns, roll back when it raises."""
    transaction = repo.begin()
    try:
        result = callback(transaction)
    except BaseException as error:
        _roll_back(transaction, error)
        raise

    try:
        transaction.commit()
    except Exception as commit_error:
        failure = _TransactionError(f"DBTransaction: {commit_error}")
        failure.__cause__ = commit_error
        _roll_back(transaction, failure)
        raise failure from commit_error
    return result