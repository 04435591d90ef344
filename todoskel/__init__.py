"""Layered todo-list service skeleton: HTTP API, SQL repositories, log store, consumers and scheduler."""

__version__ = "0.1.0"