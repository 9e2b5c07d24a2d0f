"""Database-specific type mapping strategies."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


class MatchKind(str, Enum):
    SUPPORTED = "supported"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TypeMatch:
    """Result of mapping a native column type.

    ``kind`` tells supported types from unknown ones; ``ts_type`` is
    ``None`` for unknown types and is never a placeholder string.
    """
    sql_type: str
    ts_type: Optional[str] = None
    is_array: bool = False
    enum_values: List[str] = field(default_factory=list)
    kind: MatchKind = MatchKind.SUPPORTED

    @property
    def is_unknown(self) -> bool:
        return self.kind is MatchKind.UNKNOWN

    @classmethod
    def unknown(cls, sql_type: str) -> "TypeMatch":
        return cls(sql_type=sql_type, kind=MatchKind.UNKNOWN)


def array_of(ts_type: str) -> str:
    """Turn every alternative of a union type into an array type.

    ``string | object`` becomes ``string[] | object[]``.
    """
    return " | ".join(f"{part.strip()}[]" for part in ts_type.split("|"))


def enum_union(labels: List[str]) -> str:
    """Union of quoted literals, e.g. ``"sad" | "ok"``."""
    return " | ".join(f'"{label}"' for label in labels)


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    @abstractmethod
    def match_column_type(
        self,
        data_type: str,
        udt_name: Optional[str] = None,
        enum_values: Optional[str] = None,
    ) -> TypeMatch:
        """Map a native column type to a generic type.

        Args:
            data_type: Native type name as reported by the catalog
            udt_name: Underlying type name (element type for arrays)
            enum_values: Comma-joined enumeration labels, if any

        Returns:
            TypeMatch describing the generic and storage types
        """
        pass


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL column types."""

    ARRAY_TYPE = "ARRAY"
    USER_DEFINED_TYPE = "USER-DEFINED"
    ENUM_SQL_TYPE = "enum"

    # Native type -> generic type
    TYPE_MAP: Dict[str, str] = {
        # Numeric
        "int2": "number",
        "int4": "number",
        "int8": "number",
        "smallint": "number",
        "integer": "number",
        "bigint": "number",
        "decimal": "number",
        "numeric": "number",
        "real": "number",
        "float": "number",
        "float4": "number",
        "float8": "number",
        "double precision": "number",
        "money": "number",
        # Character
        "character varying": "string",
        "varchar": "string",
        "character": "string",
        "char": "string",
        "bpchar": "string",
        "text": "string",
        "citext": "string",
        "hstore": "string",
        # Binary
        "bytea": "Buffer",
        # Bit strings
        "bit": "string",
        "varbit": "string",
        "bit varying": "string",
        # Date / time
        "timetz": "string",
        "timestamptz": "Date",
        "timestamp": "string",
        "timestamp without time zone": "Date",
        "timestamp with time zone": "Date",
        "date": "string",
        "time": "string",
        "time without time zone": "string",
        "time with time zone": "string",
        "interval": "any",
        # Boolean
        "bool": "boolean",
        "boolean": "boolean",
        # Geometric
        "point": "string | object",
        "line": "string",
        "lseg": "string | string[]",
        "box": "string | object",
        "path": "string",
        "polygon": "string",
        "circle": "string | object",
        # Network addresses
        "cidr": "string",
        "inet": "string",
        "macaddr": "string",
        # Text search
        "tsvector": "string",
        "tsquery": "string",
        # Structured
        "uuid": "string",
        "xml": "string",
        "json": "object",
        "jsonb": "object",
        # Ranges
        "int4range": "string",
        "int8range": "string",
        "numrange": "string",
        "tsrange": "string",
        "tstzrange": "string",
        "daterange": "string",
    }

    # Storage type renames
    SQL_TYPE_ALIASES: Dict[str, str] = {
        "bpchar": "char",
    }

    # Extension types reported as USER-DEFINED, matched case-insensitively
    EXTENSION_TYPES = frozenset({"citext", "hstore", "geography", "geometry", "ltree"})

    def match_column_type(
        self,
        data_type: str,
        udt_name: Optional[str] = None,
        enum_values: Optional[str] = None,
    ) -> TypeMatch:
        if data_type == self.ARRAY_TYPE:
            return self._match_array(udt_name or "", enum_values)
        if data_type == self.USER_DEFINED_TYPE:
            return self._match_user_defined(udt_name or "", enum_values)

        ts_type = self.TYPE_MAP.get(data_type)
        if ts_type is None:
            return TypeMatch.unknown(data_type)
        return TypeMatch(
            sql_type=self.SQL_TYPE_ALIASES.get(data_type, data_type),
            ts_type=ts_type,
        )

    def _match_array(self, udt_name: str, enum_values: Optional[str]) -> TypeMatch:
        element_type = udt_name[1:] if udt_name.startswith("_") else udt_name

        element = self.match_column_type(element_type, udt_name, enum_values)
        if element.is_unknown:
            # Arrays of extension types and enums report only the element name
            element = self._match_user_defined(element_type, enum_values)
        if element.is_unknown:
            return TypeMatch.unknown(self.ARRAY_TYPE)

        return replace(element, ts_type=array_of(element.ts_type), is_array=True)

    def _match_user_defined(self, udt_name: str, enum_values: Optional[str]) -> TypeMatch:
        if udt_name.lower() in self.EXTENSION_TYPES:
            return TypeMatch(sql_type=udt_name, ts_type="string")

        if enum_values:
            labels = enum_values.split(",")
            return TypeMatch(
                sql_type=self.ENUM_SQL_TYPE,
                ts_type=enum_union(labels),
                enum_values=labels,
            )

        return TypeMatch.unknown(self.USER_DEFINED_TYPE)
