"""Relational database connectors."""

from .postgresql import PostgreSQLConnector, SqlConnector

__all__ = ["PostgreSQLConnector", "SqlConnector"]
