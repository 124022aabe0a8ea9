"""Live catalog lookups for arbitrary tables.

Nothing here is cached: every call builds a fresh SQLAlchemy inspector on the
session's connection, so tables created or altered a moment ago (even in
the same transaction) are visible immediately.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Inspector
from sqlalchemy.exc import CompileError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column of a live table, in declaration order."""
    name: str
    sql_type: str
    nullable: bool


class SchemaIntrospector:
    """Reads table names, columns and primary keys from the database catalog.

    Table names passed in are looked up, never interpolated into SQL, so
    this class is safe to call with untrusted names. A table that does not
    exist yields empty results; callers decide whether that is an error.
    """

    def __init__(self, db: Session):
        self.db = db

    def _inspector(self) -> Inspector:
        return inspect(self.db.connection())

    def list_tables(self) -> List[str]:
        return sorted(self._inspector().get_table_names())

    def has_table(self, table: str) -> bool:
        return table in self.list_tables()

    def get_columns(self, table: str) -> List[ColumnDescriptor]:
        inspector = self._inspector()
        if table not in inspector.get_table_names():
            return []
        return [
            ColumnDescriptor(
                name=col["name"],
                sql_type=self._render_type(col["type"]),
                nullable=bool(col.get("nullable", True)),
            )
            for col in inspector.get_columns(table)
        ]

    def get_primary_key_column(self, table: str) -> Optional[str]:
        inspector = self._inspector()
        if table not in inspector.get_table_names():
            return None
        columns = inspector.get_pk_constraint(table).get("constrained_columns") or []
        if len(columns) > 1:
            # Composite keys are not supported; row updates match on the first column only.
            logger.warning(
                "Table %s has a composite primary key %s; using %s",
                table, columns, columns[0],
            )
        return columns[0] if columns else None

    def _render_type(self, type_) -> str:
        try:
            rendered = type_.compile(dialect=self.db.get_bind().dialect)
        except CompileError:
            rendered = type(type_).__name__
        return rendered.lower()
