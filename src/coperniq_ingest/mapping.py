"""Map raw CSV rows into Coperniq project records."""

import json
import math
import re
from typing import Any, Optional

from coperniq_ingest.models.project import ProjectRecord
from coperniq_ingest.models.raw import RawRow

# CSV columns mapped directly onto ProjectRecord; everything else goes to `custom`.
STANDARD_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "address",
        "isActive",
        "status",
        "primaryEmail",
        "primaryPhone",
        "workflowId",
        "clientId",
        "value",
        "size",
        "ownerId",
        "salesRepId",
        "projectManagerId",
        "trades",
    }
)

INT_FIELDS = ("workflowId", "clientId", "ownerId", "salesRepId", "projectManagerId")
FLOAT_FIELDS = ("value", "size")

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class RowMappingError(ValueError):
    """A standard column is missing or holds a value of the wrong type."""

    def __init__(self, column: str, value: Optional[str], reason: str):
        self.column = column
        self.value = value
        super().__init__(f"{column}: {reason} (value={value!r})")


def try_parse_structured(text: str) -> Optional[Any]:
    """Parse a JSON object/array literal. Returns None when it is not valid JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return None


def _parse_number(text: str) -> Optional[int | float]:
    """Parse a plain decimal literal; int when it has no fraction or exponent."""
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    try:
        if any(c in text for c in ".eE"):
            result = float(text)
            return result if math.isfinite(result) else None
        return int(text)
    except ValueError:
        # digit-count limit on int conversion
        return None


def infer_custom_value(value: str) -> Any:
    """
    Best-effort typing of a custom column value.
    Order: boolean, number, JSON object/array, raw string.
    """
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in ("true", "false"):
        return lowered == "true"

    number = _parse_number(stripped)
    if number is not None:
        return number

    if value.startswith(("{", "[")):
        parsed = try_parse_structured(value)
        if parsed is not None:
            return parsed
    return value


def _require(row: RawRow, column: str) -> str:
    value = row.get(column)
    if value is None:
        raise RowMappingError(column, None, "missing column")
    return value


def _parse_int(row: RawRow, column: str) -> int:
    value = _require(row, column)
    try:
        return int(value.strip(), 10)
    except ValueError:
        raise RowMappingError(column, value, "not an integer") from None


def _parse_float(row: RawRow, column: str) -> float:
    value = _require(row, column)
    try:
        result = float(value.strip())
    except ValueError:
        raise RowMappingError(column, value, "not a number") from None
    if not math.isfinite(result):
        raise RowMappingError(column, value, "not a finite number")
    return result


def split_trades(value: str) -> list[str]:
    """Split a comma-separated trades cell and trim each entry."""
    return [t.strip() for t in value.split(",")]


def map_row(row: RawRow) -> ProjectRecord:
    """
    Convert one CSV row to a ProjectRecord.
    Raises RowMappingError for a missing standard column or an unparseable number.
    """
    custom = {
        key: infer_custom_value(value)
        for key, value in row.items()
        if key not in STANDARD_FIELDS
    }

    ints = {column: _parse_int(row, column) for column in INT_FIELDS}
    floats = {column: _parse_float(row, column) for column in FLOAT_FIELDS}

    return ProjectRecord(
        title=_require(row, "title"),
        description=_require(row, "description"),
        address=[_require(row, "address")],
        is_active=_require(row, "isActive").lower() == "true",
        status=_require(row, "status"),
        primary_email=_require(row, "primaryEmail"),
        primary_phone=_require(row, "primaryPhone"),
        workflow_id=ints["workflowId"],
        client_id=ints["clientId"],
        owner_id=ints["ownerId"],
        sales_rep_id=ints["salesRepId"],
        project_manager_id=ints["projectManagerId"],
        value=floats["value"],
        size=floats["size"],
        trades=split_trades(_require(row, "trades")),
        custom=custom,
    )
