"""Database extraction module for pgmodel-cli.

This module reads PostgreSQL catalog views and normalizes tables,
columns, indexes and foreign keys into an entity model.
"""

from .models import Column, ColumnOptions, Entity, Index, IndexOptions, Relation, RelationInternal, find_entity
from .base import DatabaseDriver
from .executor import QueryExecutor, PostgresQueryExecutor, build_escaped_object_list, escape_literal
from .relationship import RelationBuilder
from .type_mappers import TypeMapper, PostgresTypeMapper, TypeMatch, MatchKind
from .postgres import PostgresDriver
from .serialization import entities_to_dict, entities_to_json

__all__ = [
    # Data models
    "Column",
    "ColumnOptions",
    "Entity",
    "Index",
    "IndexOptions",
    "Relation",
    "RelationInternal",
    "find_entity",
    # Base classes
    "DatabaseDriver",
    "QueryExecutor",
    "RelationBuilder",
    # Type mappers
    "TypeMapper",
    "PostgresTypeMapper",
    "TypeMatch",
    "MatchKind",
    # Drivers and executors
    "PostgresDriver",
    "PostgresQueryExecutor",
    "build_escaped_object_list",
    "escape_literal",
    # Serialization
    "entities_to_dict",
    "entities_to_json",
]
