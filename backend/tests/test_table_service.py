"""Tests for the generic table editor against a live database."""

import pytest
from sqlalchemy.exc import IntegrityError

from biodata.exceptions import TableNotFoundError, ValidationError
from biodata.schemas.table import ColumnDefinition
from biodata.services.table_service import TableService


def _products(service: TableService):
    return service.create_table("products", [
        ColumnDefinition(name="id", type="integer", nullable=False, primary_key=True),
        ColumnDefinition(name="name", type="text", nullable=False),
        ColumnDefinition(name="qty", type="integer"),
        ColumnDefinition(name="price", type="numeric"),
        ColumnDefinition(name="in_stock", type="boolean"),
    ])


class TestCreateTable:

    def test_creates_table_with_allowed_types(self, db):
        service = TableService(db)
        columns = _products(service)

        assert "products" in service.list_tables()
        assert [c.name for c in columns] == ["id", "name", "qty", "price", "in_stock"]
        by_name = {c.name: c for c in columns}
        assert by_name["qty"].sql_type == "integer"
        assert by_name["price"].sql_type.startswith("numeric")
        assert by_name["name"].nullable is False
        assert by_name["qty"].nullable is True

    def test_disallowed_type_creates_nothing(self, db):
        service = TableService(db)
        with pytest.raises(ValidationError, match="money"):
            service.create_table("products", [
                ColumnDefinition(name="id", type="integer", nullable=False),
                ColumnDefinition(name="bogus", type="money", nullable=True),
            ])
        assert "products" not in service.list_tables()

    def test_requires_name_and_columns(self, db):
        service = TableService(db)
        with pytest.raises(ValidationError, match="Table name required"):
            service.create_table("  ", [ColumnDefinition(name="a", type="text")])
        with pytest.raises(ValidationError, match="Columns required"):
            service.create_table("empty", [])

    def test_rejects_non_identifier_names(self, db):
        service = TableService(db)
        with pytest.raises(ValidationError):
            service.create_table("x; DROP TABLE users", [ColumnDefinition(name="a", type="text")])
        with pytest.raises(ValidationError):
            service.create_table("ok_name", [ColumnDefinition(name="bad name", type="text")])

    def test_rejects_duplicate_columns(self, db):
        with pytest.raises(ValidationError, match="Duplicate column"):
            TableService(db).create_table("dupes", [
                ColumnDefinition(name="a", type="text"),
                ColumnDefinition(name="a", type="integer"),
            ])

    def test_rejects_existing_table(self, db):
        service = TableService(db)
        _products(service)
        with pytest.raises(ValidationError, match="already exists"):
            _products(service)


class TestRows:

    def test_unknown_table_is_not_found(self, db):
        service = TableService(db)
        with pytest.raises(TableNotFoundError):
            service.get_rows("no_such_table")
        with pytest.raises(TableNotFoundError):
            service.insert_row("no_such_table", {"a": 1})

    def test_insert_and_read_back(self, db):
        service = TableService(db)
        _products(service)

        affected = service.insert_row("products", {
            "id": 99,
            "name": "Bolt",
            "qty": "12",
            "price": "2.50",
            "in_stock": "true",
            "colour": "silver",
        })

        assert affected == 1
        rows = service.get_rows("products")
        assert len(rows) == 1
        row = rows[0]
        assert row["id"] != 99  # auto-managed, assigned by the database
        assert row["name"] == "Bolt"
        assert row["qty"] == 12
        assert float(row["price"]) == 2.5
        assert row["in_stock"]
        assert "colour" not in row

    def test_non_numeric_nullable_integer_stored_as_null(self, db):
        service = TableService(db)
        _products(service)
        service.insert_row("products", {"name": "Washer", "qty": "plenty"})
        assert service.get_rows("products")[0]["qty"] is None

    def test_blank_required_column_left_to_database(self, db):
        service = TableService(db)
        _products(service)
        with pytest.raises(IntegrityError):
            service.insert_row("products", {"name": "", "qty": "1"})
        assert service.get_rows("products") == []

    def test_insert_with_no_usable_columns(self, db):
        service = TableService(db)
        _products(service)
        with pytest.raises(ValidationError, match="No valid columns to insert"):
            service.insert_row("products", {"id": 1, "createdAt": "2024-01-01"})

    def test_row_limit(self, db):
        service = TableService(db, row_limit=2)
        _products(service)
        for name in ("a", "b", "c"):
            service.insert_row("products", {"name": name})
        assert len(service.get_rows("products")) == 2


class TestUpdateRow:

    def test_updates_by_primary_key(self, db):
        service = TableService(db)
        _products(service)
        service.insert_row("products", {"name": "Bolt", "qty": "1"})
        row = service.get_rows("products")[0]

        affected = service.update_row(
            "products",
            original=row,
            values={"id": 500, "name": "Nut", "qty": "7", "colour": "red"},
        )

        assert affected == 1
        updated = service.get_rows("products")[0]
        assert updated["id"] == row["id"]
        assert updated["name"] == "Nut"
        assert updated["qty"] == 7

    def test_primary_key_value_coerced_from_text(self, db):
        service = TableService(db)
        _products(service)
        service.insert_row("products", {"name": "Bolt"})
        row_id = service.get_rows("products")[0]["id"]

        assert service.update_row("products", {"id": str(row_id)}, {"qty": 3}) == 1

    def test_missing_primary_key_value(self, db):
        service = TableService(db)
        _products(service)
        with pytest.raises(ValidationError, match="Primary key missing"):
            service.update_row("products", {"name": "Bolt"}, {"qty": 1})

    def test_table_without_primary_key(self, db):
        service = TableService(db)
        service.create_table("notes", [ColumnDefinition(name="body", type="text")])
        service.insert_row("notes", {"body": "hello"})
        with pytest.raises(ValidationError, match="Primary key missing"):
            service.update_row("notes", {"body": "hello"}, {"body": "bye"})

    def test_no_match_affects_nothing(self, db):
        service = TableService(db)
        _products(service)
        assert service.update_row("products", {"id": 12345}, {"name": "Ghost"}) == 0
