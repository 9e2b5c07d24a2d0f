"""Tests for column extraction."""

import logging

import pytest

from pgmodel_cli.database import PostgresDriver
from pgmodel_cli.database.models import Entity

from ..fixtures import COLUMNS_SQL, column_row


def _extract_columns(fake_executor, rows, tables=("items",)):
    fake_executor.add_response(COLUMNS_SQL, rows)
    driver = PostgresDriver(fake_executor)
    entities = [Entity(name=name, schema="public") for name in tables]
    driver.get_columns_from_entities(entities)
    return entities


def _single_column(fake_executor, **row):
    entities = _extract_columns(fake_executor, [column_row("items", **row)])
    assert len(entities[0].columns) == 1
    return entities[0].columns[0]


class TestColumnAssignment:
    """Rows are split per entity and keep catalog order."""

    def test_columns_follow_row_order(self, shop_executor):
        driver = PostgresDriver(shop_executor)
        entities = driver.get_all_tables()
        driver.get_columns_from_entities(entities)

        by_name = {e.name: [c.tsc_name for c in e.columns] for e in entities}
        assert by_name["customers"] == ["id", "email", "mood"]
        assert by_name["orders"] == ["id", "customer_id", "placed_at", "meta"]
        assert by_name["order_lines"] == ["order_id", "line_no", "tags"]

    def test_rows_for_unlisted_tables_are_ignored(self, fake_executor):
        entities = _extract_columns(fake_executor, [
            column_row("items", "id", "integer"),
            column_row("some_view", "id", "integer"),
        ])

        assert len(entities) == 1
        assert [c.tsc_name for c in entities[0].columns] == ["id"]

    def test_same_table_name_in_two_schemas(self, fake_executor):
        fake_executor.add_response(COLUMNS_SQL, [
            column_row("users", "id", "integer"),
            column_row("users", "id", "integer", table_schema="billing"),
            column_row("users", "email", "text"),
            column_row("users", "invoice_no", "text", table_schema="billing"),
        ])
        public_users = Entity(name="users", schema="public")
        billing_users = Entity(name="users", schema="billing")

        PostgresDriver(fake_executor, schemas=["public", "billing"]).get_columns_from_entities(
            [public_users, billing_users]
        )

        assert [c.tsc_name for c in public_users.columns] == ["id", "email"]
        assert [c.tsc_name for c in billing_users.columns] == ["id", "invoice_no"]

    def test_query_is_restricted_to_schemas(self, fake_executor):
        fake_executor.add_response(COLUMNS_SQL, [])
        PostgresDriver(fake_executor, schemas=["public", "o'brien"]).get_columns_from_entities([])

        sql = fake_executor.queries[0]
        assert "table_schema IN ('public', 'o''brien')" in sql
        assert "ORDER BY ordinal_position" in sql


class TestColumnOptions:
    def test_name_is_always_set(self, fake_executor):
        column = _single_column(fake_executor, name="title", data_type="text")

        assert column.options.name == "title"
        assert column.tsc_name == "title"

    def test_nullable(self, fake_executor):
        column = _single_column(fake_executor, name="title", data_type="text", is_nullable="YES")

        assert column.options.nullable is True

    def test_not_nullable_omits_option(self, fake_executor):
        column = _single_column(fake_executor, name="title", data_type="text", is_nullable="NO")

        assert column.options.nullable is None
        assert "nullable" not in column.options.to_dict()

    @pytest.mark.parametrize("count, expected", [(0, None), (1, True), (2, True), ("1", True), (None, None)])
    def test_unique_from_constraint_count(self, fake_executor, count, expected):
        column = _single_column(fake_executor, name="code", data_type="text", isunique=count)

        assert column.options.unique is expected


class TestGeneratedAndDefaults:
    def test_serial_column_is_generated_without_default(self, fake_executor):
        column = _single_column(
            fake_executor, name="id", data_type="integer",
            column_default="nextval('items_id_seq'::regclass)", isidentity="YES",
        )

        assert column.generated is True
        assert column.default is None

    def test_identity_column_is_generated(self, fake_executor):
        column = _single_column(fake_executor, name="id", data_type="bigint", is_identity="YES")

        assert column.generated is True
        assert column.default is None

    def test_plain_column_is_not_generated(self, fake_executor):
        column = _single_column(fake_executor, name="qty", data_type="integer")

        assert column.generated is None

    def test_default_is_wrapped_as_deferred_expression(self, fake_executor):
        column = _single_column(fake_executor, name="created", data_type="timestamp with time zone",
                                column_default="now()")

        assert column.default == '() => "now()"'

    def test_default_type_cast_is_stripped(self, fake_executor):
        column = _single_column(fake_executor, name="status", data_type="character varying",
                                column_default="'new'::character varying")

        assert column.default == """() => "'new'\""""

    def test_json_default_is_bare_payload(self, fake_executor):
        column = _single_column(fake_executor, name="meta", data_type="jsonb",
                                column_default="'{}'::jsonb")

        assert column.default == "{}"

    def test_missing_default(self, fake_executor):
        column = _single_column(fake_executor, name="qty", data_type="integer", column_default=None)

        assert column.default is None

    @pytest.mark.parametrize("raw, data_type, expected", [
        (None, "text", None),
        ("", "text", None),
        ("0", "integer", '() => "0"'),
        ("'a'::text", "text", """() => "'a'\""""),
        ("'{\"a\": 1}'::json", "json", '{"a": 1}'),
    ])
    def test_default_value_expression(self, raw, data_type, expected):
        assert PostgresDriver.default_value_expression(raw, data_type) == expected


class TestTypeResolution:
    def test_integer_column(self, fake_executor):
        column = _single_column(fake_executor, name="qty", data_type="integer", udt_name="int4")

        assert column.tsc_type == "number"
        assert column.type == "integer"

    def test_enum_column(self, fake_executor):
        column = _single_column(fake_executor, name="mood", data_type="USER-DEFINED", udt_name="mood",
                                enumvalues="sad,ok,happy")

        assert column.type == "enum"
        assert column.tsc_type == '"sad" | "ok" | "happy"'
        assert column.options.enum == ["sad", "ok", "happy"]

    def test_array_column(self, fake_executor):
        column = _single_column(fake_executor, name="tags", data_type="ARRAY", udt_name="_varchar")

        assert column.tsc_type == "string[]"
        assert column.type == "varchar"
        assert column.options.array is True

    def test_array_of_union_column(self, fake_executor):
        column = _single_column(fake_executor, name="spots", data_type="ARRAY", udt_name="_point")

        assert column.tsc_type == "string[] | object[]"

    def test_unknown_type_is_skipped_and_logged(self, fake_executor, caplog):
        with caplog.at_level(logging.WARNING):
            entities = _extract_columns(fake_executor, [
                column_row("items", "id", "integer"),
                column_row("items", "loc", "tid"),
                column_row("items", "name", "text"),
            ])

        assert [c.tsc_name for c in entities[0].columns] == ["id", "name"]
        assert "Unknown column type: tid table name: items column name: loc" in caplog.text

    def test_unknown_user_defined_type_is_logged_with_udt(self, fake_executor, caplog):
        with caplog.at_level(logging.WARNING):
            entities = _extract_columns(fake_executor, [
                column_row("items", "address", "USER-DEFINED", "address_type"),
            ])

        assert entities[0].columns == []
        assert "Unknown USER-DEFINED column type: address_type table name: items column name: address" in caplog.text

    def test_unknown_array_type_is_logged_with_udt(self, fake_executor, caplog):
        with caplog.at_level(logging.WARNING):
            _extract_columns(fake_executor, [column_row("items", "locs", "ARRAY", "_tid")])

        assert "Unknown ARRAY column type: _tid table name: items column name: locs" in caplog.text


class TestSizeOptions:
    def test_length_for_character_types(self, fake_executor):
        column = _single_column(fake_executor, name="code", data_type="character varying",
                                character_maximum_length=40)

        assert column.options.length == 40
        assert column.options.width is None
        assert column.options.precision is None

    @pytest.mark.parametrize("length", [0, -1, None])
    def test_non_positive_length_is_omitted(self, fake_executor, length):
        column = _single_column(fake_executor, name="code", data_type="character varying",
                                character_maximum_length=length)

        assert column.options.length is None
        assert "length" not in column.options.to_dict()

    def test_bpchar_array_uses_char_length(self, fake_executor):
        column = _single_column(fake_executor, name="codes", data_type="ARRAY", udt_name="_bpchar",
                                character_maximum_length=3)

        assert column.options.length == 3

    def test_precision_and_scale_for_numeric(self, fake_executor):
        column = _single_column(fake_executor, name="price", data_type="numeric",
                                numeric_precision=10, numeric_scale=2)

        assert column.options.precision == 10
        assert column.options.scale == 2
        assert column.options.length is None

    def test_null_precision_is_omitted(self, fake_executor):
        column = _single_column(fake_executor, name="price", data_type="numeric")

        assert column.options.precision is None
        assert column.options.scale is None

    def test_integer_has_no_size_options(self, fake_executor):
        column = _single_column(fake_executor, name="qty", data_type="integer",
                                numeric_precision=32, numeric_scale=0)

        options = column.options.to_dict()
        assert options == {"name": "qty"}

    def test_width_for_width_bearing_types(self, fake_executor):
        column = _single_column(fake_executor, name="n", data_type="smallint", character_maximum_length=5)

        assert column.options.width == 5

    def test_width_omitted_without_length(self, fake_executor):
        column = _single_column(fake_executor, name="n", data_type="bigint")

        assert column.options.width is None
