"""Schemas for the generic table editor."""

from typing import Any, Dict, List

from pydantic import Field, field_validator

from .base import CamelModel


class ColumnResponse(CamelModel):
    """Introspected column of a live table."""
    name: str
    sql_type: str
    nullable: bool


class RowInsertRequest(CamelModel):
    values: Dict[str, Any]


class RowUpdateRequest(CamelModel):
    original: Dict[str, Any]
    values: Dict[str, Any]


class RowMutationResponse(CamelModel):
    affected_rows: int


class ColumnDefinition(CamelModel):
    """Column requested for a new table. ``type`` is checked against the allow-list."""
    name: str
    type: str
    nullable: bool = True
    primary_key: bool = False

    @field_validator("name", "type")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()


class TableCreateRequest(CamelModel):
    table_name: str
    columns: List[ColumnDefinition] = Field(default_factory=list)


class TableCreateResponse(CamelModel):
    table_name: str
    columns: List[ColumnResponse]
