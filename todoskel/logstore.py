"""MongoDB connection and the repository that stores log documents."""

from __future__ import annotations

import dataclasses
from typing import Any

from pymongo import MongoClient

from .entity import LogCollection

SAMPLE_COLLECTION = "sample_meta"
LOG_COLLECTION = "logs"

_TIMEOUT_MS = 10_000


def connect_mongodb(uri: str, database_name: str) -> Any:
    """Connect, check the server answers a ping, and return the named database."""
    client: MongoClient = MongoClient(
        uri, serverSelectionTimeoutMS=_TIMEOUT_MS, connectTimeoutMS=_TIMEOUT_MS
    )
    try:
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    return client[database_name]


def _document(entry: LogCollection) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for f in dataclasses.fields(entry):
        value = getattr(entry, f.name)
        if isinstance(value, dict):
            value = dict(value)
        document[f.metadata.get("bson", f.name)] = value
    return document


class LogRepository:
    """Stores log entries in the logs collection."""

    def __init__(self, database: Any) -> None:
        self._collection = database[LOG_COLLECTION]

    def create(self, entry: LogCollection) -> Any:
        """Insert one log document and return its id."""
        result = self._collection.insert_one(_document(entry))
        return result.inserted_id