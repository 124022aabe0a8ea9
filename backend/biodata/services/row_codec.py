"""Converts loosely typed form values into bind parameters for arbitrary tables.

The dashboard submits every cell as whatever the browser produced: strings,
booleans, numbers or null. The column's declared SQL type (from the live
catalog) decides what Python value is bound:

    integer / bigint / smallint          -> int   (leading-integer parse, else NULL)
    numeric / decimal / real / double    -> float (leading-number parse, else NULL)
    boolean                              -> True only for True, "true", "1", 1
    timestamp* / datetime / date         -> datetime (ISO string or epoch ms, else NULL)
    anything else                        -> str

Blank input ("" or None) becomes NULL for nullable columns and is left out
entirely for NOT NULL columns, so the database applies its own default or
raises.
"""

import json
import logging
import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence

from ..exceptions import ValidationError
from .schema_introspector import ColumnDescriptor

logger = logging.getLogger(__name__)

# Maintained by the database or the ORM; never written from user input.
AUTO_MANAGED_COLUMNS = frozenset({"id", "createdAt", "updatedAt", "created_at", "updated_at"})

INTEGER_TYPES = frozenset({"integer", "int", "bigint", "smallint"})
REAL_TYPES = frozenset({"numeric", "decimal", "real", "double precision", "double", "float"})
BOOLEAN_TYPES = frozenset({"boolean", "bool"})

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def base_type(sql_type: str) -> str:
    """``"numeric(12, 2)"`` -> ``"numeric"``."""
    return sql_type.split("(", 1)[0].strip().lower()


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _is_temporal(name: str) -> bool:
    return name.startswith("timestamp") or name in ("datetime", "date")


def coerce_value(sql_type: str, value: Any) -> Any:
    """Convert one raw input value for a column declared as *sql_type*."""
    if is_blank(value):
        return None

    name = base_type(sql_type)
    if name in INTEGER_TYPES:
        return _parse_int(value)
    if name in REAL_TYPES:
        return _parse_float(value)
    if name in BOOLEAN_TYPES:
        return _parse_bool(value)
    if _is_temporal(name):
        return _parse_timestamp(value)
    return _stringify(value)


def encode_row(values: Mapping[str, Any], columns: Sequence[ColumnDescriptor]) -> Dict[str, Any]:
    """Build the column -> bind value mapping for an INSERT.

    Raises:
        ValidationError: If no column survives filtering.
    """
    by_name = {column.name: column for column in columns}
    row: Dict[str, Any] = {}

    for key, value in values.items():
        if key in AUTO_MANAGED_COLUMNS:
            logger.debug("Skipping %s: auto-managed column", key)
            continue
        column = by_name.get(key)
        if column is None:
            logger.debug("Skipping %s: not in table schema", key)
            continue
        if is_blank(value) and not column.nullable:
            logger.debug("Skipping %s: blank value for NOT NULL column", key)
            continue
        row[key] = coerce_value(column.sql_type, value)

    if not row:
        raise ValidationError("No valid columns to insert", field="values")
    return row


def encode_assignments(
    values: Mapping[str, Any],
    columns: Sequence[ColumnDescriptor],
    primary_key: str,
) -> Dict[str, Any]:
    """Build the SET mapping for an UPDATE keyed on *primary_key*.

    Same filtering as ``encode_row``, and the key column itself is never
    reassigned.

    Raises:
        ValidationError: If nothing is left to update.
    """
    by_name = {column.name: column for column in columns}
    row: Dict[str, Any] = {}
    for key, value in values.items():
        column = by_name.get(key)
        if key == primary_key or key in AUTO_MANAGED_COLUMNS or column is None:
            continue
        if is_blank(value) and not column.nullable:
            continue
        row[key] = coerce_value(column.sql_type, value)

    if not row:
        raise ValidationError("No valid columns to update", field="values")
    return row


def decode_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Stored values are returned as the driver produced them."""
    return dict(row)


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        result = float(value)
        return result if not math.isnan(result) else None
    match = _LEADING_FLOAT.match(str(value))
    return float(match.group(1)) if match else None


def _parse_bool(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, str):
        return value in ("true", "1")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 1
    return False


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Numbers are epoch milliseconds, as browsers send them.
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)
