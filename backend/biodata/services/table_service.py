"""Generic table editor: browse, insert into, update and create arbitrary tables.

Identifiers versus values
-------------------------
Table and column names have to be spliced into the statement text. They are
only ever taken from the live catalog (``SchemaIntrospector``) or, for
``create_table``, checked against an identifier pattern, and are always
quoted with the dialect's identifier preparer. Cell values are always bound
parameters.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import TableNotFoundError, ValidationError
from ..schemas.table import ColumnDefinition
from .row_codec import coerce_value, decode_row, encode_assignments, encode_row
from .schema_introspector import ColumnDescriptor, SchemaIntrospector

logger = logging.getLogger(__name__)

# Column types a user may request for a new table, with the DDL emitted for each.
COLUMN_TYPE_MAP: Dict[str, str] = {
    "text": "TEXT",
    "integer": "INTEGER",
    "numeric": "NUMERIC(12,2)",
    "boolean": "BOOLEAN",
    "timestamp": "TIMESTAMP",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TableService:
    """Row and schema operations over tables whose shape is only known at runtime.

    Public methods:
        list_tables  -- every table in the catalog
        get_columns  -- column descriptors in declaration order
        get_rows     -- up to ``row_limit`` rows, unordered
        insert_row   -- coerced INSERT of the recognised columns
        update_row   -- UPDATE matched on the single-column primary key
        create_table -- CREATE TABLE from the allow-listed column types
    """

    def __init__(self, db: Session, row_limit: Optional[int] = None):
        self.db = db
        self.introspector = SchemaIntrospector(db)
        self.row_limit = row_limit or settings.table_row_limit

    def list_tables(self) -> List[str]:
        return self.introspector.list_tables()

    def get_columns(self, table: str) -> List[ColumnDescriptor]:
        self._require_table(table)
        return self.introspector.get_columns(table)

    def get_rows(self, table: str) -> List[Dict[str, Any]]:
        self._require_table(table)
        stmt = text(f"SELECT * FROM {self._quote(table)} LIMIT :row_limit")
        result = self.db.execute(stmt, {"row_limit": self.row_limit})
        return [decode_row(row) for row in result.mappings()]

    def insert_row(self, table: str, values: Mapping[str, Any]) -> int:
        """Insert one row. Returns the affected-row count."""
        columns = self.get_columns(table)
        row = encode_row(values, columns)

        names = list(row)
        params = {f"p{i}": row[name] for i, name in enumerate(names)}
        column_sql = ", ".join(self._quote(name) for name in names)
        placeholders = ", ".join(f":p{i}" for i in range(len(names)))
        stmt = text(f"INSERT INTO {self._quote(table)} ({column_sql}) VALUES ({placeholders})")

        affected = self._execute_and_commit(stmt, params)
        logger.info("Inserted row", extra={"table": table, "columns": names})
        return affected

    def update_row(
        self,
        table: str,
        original: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> int:
        """Update the row whose primary key equals ``original[pk]``.

        Raises:
            ValidationError: If the table has no primary key, *original*
                lacks its value, or no assignable column remains.
        """
        columns = self.get_columns(table)
        pk = self.introspector.get_primary_key_column(table)
        if pk is None or original.get(pk) is None:
            raise ValidationError("Primary key missing", field="original")

        assignments = encode_assignments(values, columns, pk)
        pk_type = next(c.sql_type for c in columns if c.name == pk)

        names = list(assignments)
        params = {f"p{i}": assignments[name] for i, name in enumerate(names)}
        params["pk_value"] = coerce_value(pk_type, original[pk])
        set_sql = ", ".join(f"{self._quote(name)} = :p{i}" for i, name in enumerate(names))
        stmt = text(
            f"UPDATE {self._quote(table)} SET {set_sql} WHERE {self._quote(pk)} = :pk_value"
        )

        affected = self._execute_and_commit(stmt, params)
        logger.info(
            "Updated row",
            extra={"table": table, "columns": names, "affected_rows": affected},
        )
        return affected

    def create_table(
        self, table_name: str, columns: Sequence[ColumnDefinition]
    ) -> List[ColumnDescriptor]:
        """Create a table. Every column is validated before any SQL runs.

        Raises:
            ValidationError: On a blank or malformed name, an empty or
                duplicated column list, a type outside ``COLUMN_TYPE_MAP``,
                or a table that already exists.
        """
        table_name = (table_name or "").strip()
        if not table_name:
            raise ValidationError("Table name required", field="tableName")
        if not columns:
            raise ValidationError("Columns required", field="columns")
        self._check_identifier(table_name, "tableName")

        definitions: List[str] = []
        primary_keys: List[str] = []
        seen: set[str] = set()
        for column in columns:
            column_type = (column.type or "").lower()
            if not column.name or column_type not in COLUMN_TYPE_MAP:
                raise ValidationError(
                    f"Invalid column: {column.name or '?'} ({column.type}). "
                    f"Allowed types: {', '.join(COLUMN_TYPE_MAP)}",
                    field="columns",
                )
            self._check_identifier(column.name, "columns")
            if column.name in seen:
                raise ValidationError(f"Duplicate column: {column.name}", field="columns")
            seen.add(column.name)

            parts = [self._quote(column.name), COLUMN_TYPE_MAP[column_type]]
            if not column.nullable or column.primary_key:
                parts.append("NOT NULL")
            definitions.append(" ".join(parts))
            if column.primary_key:
                primary_keys.append(self._quote(column.name))

        if primary_keys:
            definitions.append(f"PRIMARY KEY ({', '.join(primary_keys)})")

        if self.introspector.has_table(table_name):
            raise ValidationError(f"Table already exists: {table_name}", field="tableName")

        stmt = text(f"CREATE TABLE {self._quote(table_name)} ({', '.join(definitions)})")
        self._execute_and_commit(stmt, {})
        logger.info("Created table", extra={"table": table_name, "columns": sorted(seen)})
        return self.introspector.get_columns(table_name)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_table(self, table: str) -> None:
        if not self.introspector.has_table(table):
            raise TableNotFoundError(table)

    def _quote(self, identifier: str) -> str:
        preparer = self.db.get_bind().dialect.identifier_preparer
        # text() treats ":name" as a bind parameter; escape colons in identifiers.
        return preparer.quote_identifier(identifier).replace(":", "\\:")

    @staticmethod
    def _check_identifier(name: str, field: str) -> None:
        if not _IDENTIFIER.match(name):
            raise ValidationError(
                f"Invalid identifier: {name!r} (letters, digits and underscores only)",
                field=field,
            )

    def _execute_and_commit(self, stmt, params: Dict[str, Any]) -> int:
        try:
            result = self.db.execute(stmt, params)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return result.rowcount
