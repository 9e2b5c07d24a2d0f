"""PostgreSQL entity extraction driver."""

import logging
import re
from typing import Any, Dict, List, Optional

from .base import DatabaseDriver
from .constants import (
    COLUMN_TYPES_WITH_LENGTH,
    COLUMN_TYPES_WITH_PRECISION,
    COLUMN_TYPES_WITH_WIDTH,
)
from .executor import build_escaped_object_list, escape_literal
from .grouping import group_ordered
from .models import Column, ColumnOptions, Entity, Index, IndexOptions
from .relationship import RelationBuilder
from .type_mappers import PostgresTypeMapper

logger = logging.getLogger(__name__)

# Strips the first type cast from a default expression: 'a'::text -> 'a'
_TYPE_CAST_RE = re.compile(r"'::[\w ]*")

JSON_DATA_TYPES = ("json", "jsonb")

# pg_constraint.confdeltype / confupdtype codes
REFERENTIAL_ACTIONS = {
    "a": "NO ACTION",
    "r": "RESTRICT",
    "c": "CASCADE",
    "n": "SET NULL",
    "d": "SET DEFAULT",
}


def _referential_action(column: str) -> str:
    """SQL CASE expression spelling out a referential action code."""
    branches = " ".join(
        f"WHEN {escape_literal(code)} THEN {escape_literal(action)}"
        for code, action in REFERENTIAL_ACTIONS.items()
    )
    return f"CASE {column} {branches} END"


def _is_yes(value: Any) -> bool:
    return value == "YES"


def _positive_or_none(value: Optional[int]) -> Optional[int]:
    if value is not None and value > 0:
        return value
    return None


class PostgresDriver(DatabaseDriver):
    """Extracts entities from PostgreSQL catalog views."""

    def __init__(self, executor, schemas=None):
        super().__init__(executor, schemas)
        self._type_mapper = PostgresTypeMapper()

    def _schema_list(self) -> str:
        return build_escaped_object_list(self.schemas)

    def get_all_tables(self) -> List[Entity]:
        """Get one entity per base table (views excluded)."""
        rows = self.run_query(f"""
            SELECT table_schema AS "TABLE_SCHEMA",
                   table_name AS "TABLE_NAME",
                   table_catalog AS "DB_NAME"
            FROM information_schema.tables
            WHERE table_type = 'BASE TABLE'
              AND table_schema IN ({self._schema_list()})
        """)

        return [Entity(name=row["TABLE_NAME"], schema=row["TABLE_SCHEMA"]) for row in rows]

    def get_columns_from_entities(self, entities: List[Entity]) -> List[Entity]:
        """Populate columns, in ordinal order, for every entity.

        Columns whose type cannot be mapped are skipped with a warning.
        """
        rows = self.run_query(f"""
            SELECT table_schema, table_name, column_name, udt_name, column_default, is_nullable,
                   data_type, character_maximum_length, numeric_precision, numeric_scale,
                   CASE WHEN column_default LIKE 'nextval%' THEN 'YES' ELSE 'NO' END AS isidentity,
                   is_identity,
                   (SELECT count(*)
                      FROM information_schema.table_constraints tc
                      INNER JOIN information_schema.constraint_column_usage cu
                          ON cu.constraint_name = tc.constraint_name
                     WHERE tc.constraint_type = 'UNIQUE'
                       AND tc.table_name = c.table_name
                       AND cu.column_name = c.column_name
                       AND tc.table_schema = c.table_schema) AS isunique,
                   (SELECT string_agg(e.enumlabel, ',' ORDER BY e.enumsortorder)
                      FROM pg_enum e
                      INNER JOIN pg_type t ON t.oid = e.enumtypid
                      INNER JOIN pg_namespace n ON n.oid = t.typnamespace
                     WHERE n.nspname = c.table_schema
                       AND (t.typname = c.udt_name OR '_' || t.typname = c.udt_name)) AS enumvalues
            FROM information_schema.columns c
            WHERE table_schema IN ({self._schema_list()})
            ORDER BY ordinal_position
        """)
        logger.debug("Fetched %d column rows", len(rows))

        rows_by_table = group_ordered(rows, lambda row: (row["table_schema"], row["table_name"]))
        for entity in entities:
            for row in rows_by_table.get((entity.schema, entity.name), []):
                column = self._build_column(row)
                if column is not None:
                    entity.columns.append(column)

        return entities

    def _build_column(self, row: Dict[str, Any]) -> Optional[Column]:
        data_type = row["data_type"]
        match = self._type_mapper.match_column_type(data_type, row["udt_name"], row["enumvalues"])
        if match.is_unknown:
            if data_type in (PostgresTypeMapper.USER_DEFINED_TYPE, PostgresTypeMapper.ARRAY_TYPE):
                logger.warning(
                    "Unknown %s column type: %s table name: %s column name: %s",
                    data_type, row["udt_name"], row["table_name"], row["column_name"],
                )
            else:
                logger.warning(
                    "Unknown column type: %s table name: %s column name: %s",
                    data_type, row["table_name"], row["column_name"],
                )
            return None

        options = ColumnOptions(name=row["column_name"])
        if _is_yes(row["is_nullable"]):
            options.nullable = True
        if int(row["isunique"] or 0) > 0:
            options.unique = True
        if match.is_array:
            options.array = True
        if match.enum_values:
            options.enum = list(match.enum_values)

        generated = True if _is_yes(row["isidentity"]) or _is_yes(row["is_identity"]) else None
        default = None if generated else self.default_value_expression(row["column_default"], data_type)

        column_type = match.sql_type
        if column_type in COLUMN_TYPES_WITH_PRECISION:
            if row["numeric_precision"] is not None:
                options.precision = row["numeric_precision"]
            if row["numeric_scale"] is not None:
                options.scale = row["numeric_scale"]
        if column_type in COLUMN_TYPES_WITH_LENGTH:
            options.length = _positive_or_none(row["character_maximum_length"])
        if column_type in COLUMN_TYPES_WITH_WIDTH:
            options.width = _positive_or_none(row["character_maximum_length"])

        return Column(
            tsc_name=row["column_name"],
            tsc_type=match.ts_type,
            type=column_type,
            options=options,
            generated=generated,
            default=default,
        )

    @staticmethod
    def default_value_expression(raw_default: Optional[str], data_type: str) -> Optional[str]:
        """Derive a column default from the catalog's default expression.

        JSON defaults become the bare literal payload; anything else is
        wrapped as a deferred expression, e.g. ``() => "now()"``.
        """
        if not raw_default:
            return None

        default = _TYPE_CAST_RE.sub("'", raw_default, count=1)
        if data_type in JSON_DATA_TYPES:
            return default[1:-1]
        return f'() => "{default}"'

    def get_indexes_from_entities(self, entities: List[Entity]) -> List[Entity]:
        """Populate one Index per distinct index name of every entity."""
        rows = self.run_query(f"""
            SELECT n.nspname AS tableschema,
                   c.relname AS tablename,
                   i.relname AS indexname,
                   f.attname AS columnname,
                   CASE WHEN ix.indisunique = true THEN 1 ELSE 0 END AS is_unique,
                   CASE WHEN ix.indisprimary = true THEN 1 ELSE 0 END AS is_primary_key
            FROM pg_attribute f
            JOIN pg_class c ON c.oid = f.attrelid
            JOIN pg_namespace n ON n.oid = c.relnamespace
            JOIN pg_index ix ON f.attnum = ANY(ix.indkey) AND c.oid = ix.indrelid
            JOIN pg_class i ON ix.indexrelid = i.oid
            WHERE c.relkind = 'r'::char
              AND n.nspname IN ({self._schema_list()})
              AND f.attnum > 0
              AND i.oid <> 0
            ORDER BY n.nspname, c.relname, array_position(ix.indkey::int2[], f.attnum)
        """)
        logger.debug("Fetched %d index rows", len(rows))

        rows_by_table = group_ordered(rows, lambda row: (row["tableschema"], row["tablename"]))
        for entity in entities:
            table_rows = rows_by_table.get((entity.schema, entity.name), [])
            for index_name, records in group_ordered(table_rows, lambda row: row["indexname"]).items():
                index = Index(name=index_name, options=IndexOptions())
                if any(record["is_primary_key"] == 1 for record in records):
                    index.primary = True
                if any(record["is_unique"] == 1 for record in records):
                    index.options.unique = True
                index.columns = [record["columnname"] for record in records]
                entity.indices.append(index)

        return entities

    def get_relations(self, entities: List[Entity]) -> List[Entity]:
        """Attach foreign-key relations to owning and referenced entities."""
        rows = self.run_query(f"""
            SELECT DISTINCT
                   con.nspname AS tableschema,
                   con.relname AS tablewithforeignkey,
                   con.fk_partno AS fk_partno,
                   att_owner.attname AS foreignkeycolumn,
                   ns_ref.nspname AS referencedschema,
                   cl.relname AS tablereferenced,
                   att_ref.attname AS foreignkeycolumnreferenced,
                   {_referential_action("con.confdeltype")} AS ondelete,
                   {_referential_action("con.confupdtype")} AS onupdate,
                   concat_ws(':', con.conname, con.conrelid, con.confrelid) AS object_id
            FROM (
                SELECT k.parent, k.child, k.fk_partno,
                       con1.confrelid, con1.conrelid, con1.confdeltype, con1.confupdtype,
                       cl_1.relname, con1.conname, ns.nspname
                FROM pg_constraint con1
                JOIN pg_class cl_1 ON con1.conrelid = cl_1.oid
                JOIN pg_namespace ns ON cl_1.relnamespace = ns.oid
                CROSS JOIN LATERAL unnest(con1.conkey, con1.confkey)
                    WITH ORDINALITY AS k(parent, child, fk_partno)
                WHERE con1.contype = 'f'::"char"
                  AND ns.nspname IN ({self._schema_list()})
            ) con
            JOIN pg_attribute att_ref ON att_ref.attrelid = con.confrelid AND att_ref.attnum = con.child
            JOIN pg_class cl ON cl.oid = con.confrelid
            JOIN pg_namespace ns_ref ON ns_ref.oid = cl.relnamespace
            JOIN pg_attribute att_owner ON att_owner.attrelid = con.conrelid AND att_owner.attnum = con.parent
            ORDER BY object_id, fk_partno
        """)
        logger.debug("Fetched %d foreign-key rows", len(rows))

        RelationBuilder(entities).build(rows)
        return entities

    def check_if_db_exists(self, db_name: str) -> bool:
        rows = self.run_query(
            f"SELECT datname FROM pg_database WHERE datname = {escape_literal(db_name)}"
        )
        return len(rows) > 0
