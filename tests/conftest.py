"""Shared pytest fixtures for pgmodel-cli tests."""

import pytest

from .fixtures import (
    FakeQueryExecutor,
    column_row,
    fk_row,
    TABLES_SQL,
    COLUMNS_SQL,
    INDEXES_SQL,
    RELATIONS_SQL,
)


@pytest.fixture
def fake_executor():
    return FakeQueryExecutor()


@pytest.fixture
def shop_executor(fake_executor):
    """Executor serving a small shop schema: customers, orders, order_lines."""
    fake_executor.add_response(TABLES_SQL, [
        {"TABLE_SCHEMA": "public", "TABLE_NAME": "customers", "DB_NAME": "shop"},
        {"TABLE_SCHEMA": "public", "TABLE_NAME": "orders", "DB_NAME": "shop"},
        {"TABLE_SCHEMA": "public", "TABLE_NAME": "order_lines", "DB_NAME": "shop"},
    ])
    fake_executor.add_response(COLUMNS_SQL, [
        column_row("customers", "id", "integer", "int4",
                   column_default="nextval('customers_id_seq'::regclass)", isidentity="YES",
                   numeric_precision=32, numeric_scale=0),
        column_row("orders", "id", "bigint", "int8", is_identity="YES"),
        column_row("order_lines", "order_id", "bigint", "int8"),
        column_row("customers", "email", "character varying", "varchar",
                   character_maximum_length=255, isunique=1),
        column_row("orders", "customer_id", "integer", "int4", is_nullable="YES"),
        column_row("order_lines", "line_no", "smallint", "int2"),
        column_row("customers", "mood", "USER-DEFINED", "mood", enumvalues="sad,ok,happy",
                   column_default="'ok'::mood"),
        column_row("orders", "placed_at", "timestamp with time zone", "timestamptz",
                   column_default="now()"),
        column_row("order_lines", "tags", "ARRAY", "_varchar"),
        column_row("orders", "meta", "jsonb", "jsonb", column_default="'{}'::jsonb"),
        column_row("order_lines", "shape", "USER-DEFINED", "some_composite"),
        column_row("order_lines", "weird", "tid", "tid"),
    ])
    fake_executor.add_response(INDEXES_SQL, [
        {"tableschema": "public", "tablename": "customers", "indexname": "customers_pkey", "columnname": "id",
         "is_unique": 1, "is_primary_key": 1},
        {"tableschema": "public", "tablename": "customers", "indexname": "customers_email_key", "columnname": "email",
         "is_unique": 1, "is_primary_key": 0},
        {"tableschema": "public", "tablename": "order_lines", "indexname": "order_lines_pkey", "columnname": "order_id",
         "is_unique": 1, "is_primary_key": 1},
        {"tableschema": "public", "tablename": "order_lines", "indexname": "order_lines_pkey", "columnname": "line_no",
         "is_unique": 1, "is_primary_key": 1},
        {"tableschema": "public", "tablename": "orders", "indexname": "orders_pkey", "columnname": "id",
         "is_unique": 1, "is_primary_key": 1},
    ])
    fake_executor.add_response(RELATIONS_SQL, [
        fk_row("orders_customer_id_fkey1638416385", "orders", "customer_id", "customers", "id",
               on_delete="CASCADE"),
        fk_row("order_lines_order_id_fkey1638716384", "order_lines", "order_id", "orders", "id"),
        fk_row("invoices_customer_fkey1700016385", "invoices", "customer_id", "customers", "id"),
    ])
    return fake_executor
