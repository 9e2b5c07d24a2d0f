"""Test fixtures for pgmodel-cli."""

from .fake_executor import (
    FakeQueryExecutor,
    column_row,
    fk_row,
    TABLES_SQL,
    COLUMNS_SQL,
    INDEXES_SQL,
    RELATIONS_SQL,
    DATABASE_SQL,
)

__all__ = [
    "FakeQueryExecutor",
    "column_row",
    "fk_row",
    "TABLES_SQL",
    "COLUMNS_SQL",
    "INDEXES_SQL",
    "RELATIONS_SQL",
    "DATABASE_SQL",
]
