"""Generic table editor API.

Thin router over TableService. Table names in the path are looked up in the
live catalog before they reach any SQL.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import require_auth
from ..database import get_db
from ..schemas.table import (
    ColumnResponse,
    RowInsertRequest,
    RowMutationResponse,
    RowUpdateRequest,
    TableCreateRequest,
    TableCreateResponse,
)
from ..services.table_service import TableService

router = APIRouter(prefix="/tables", tags=["tables"], dependencies=[Depends(require_auth)])


@router.get("", response_model=List[str])
def list_tables(db: Session = Depends(get_db)):
    return TableService(db).list_tables()


@router.post("", response_model=TableCreateResponse, status_code=201)
def create_table(body: TableCreateRequest, db: Session = Depends(get_db)):
    """Create a table. Column types: text, integer, numeric, boolean, timestamp."""
    columns = TableService(db).create_table(body.table_name, body.columns)
    return TableCreateResponse(
        table_name=body.table_name.strip(),
        columns=[ColumnResponse.model_validate(c) for c in columns],
    )


@router.get("/{table}/columns", response_model=List[ColumnResponse])
def get_columns(table: str, db: Session = Depends(get_db)):
    return [ColumnResponse.model_validate(c) for c in TableService(db).get_columns(table)]


@router.get("/{table}/rows", response_model=List[Dict[str, Any]])
def get_rows(table: str, db: Session = Depends(get_db)):
    """Up to the configured row cap, in storage order."""
    return TableService(db).get_rows(table)


@router.post("/{table}/rows", response_model=RowMutationResponse, status_code=201)
def insert_row(table: str, body: RowInsertRequest, db: Session = Depends(get_db)):
    affected = TableService(db).insert_row(table, body.values)
    return RowMutationResponse(affected_rows=affected)


@router.put("/{table}/rows", response_model=RowMutationResponse)
def update_row(table: str, body: RowUpdateRequest, db: Session = Depends(get_db)):
    """Update the row identified by the primary-key value in ``original``."""
    affected = TableService(db).update_row(table, body.original, body.values)
    return RowMutationResponse(affected_rows=affected)
