from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Sequence
import logging
import numbers
import re
import pandas as pd

from .result_set import ResultSet

log = logging.getLogger("chartview.inference")


class ColumnType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    TEXT = "string"


# Calendar structure required before the (lenient) parser sees a string:
# numeric y-m-d / m-d-y with a separator, or a month name with day and year.
_CALENDAR_RE = re.compile(
    r"^(\d{4}[-/.]\d{1,2}[-/.]\d{1,2}"
    r"|\d{1,2}[-/.]\d{1,2}[-/.]\d{2,4}"
    r"|[A-Za-z]{3,9}\.?\s+\d{1,2},?\s+\d{4}"
    r"|\d{1,2}\s+[A-Za-z]{3,9}\.?,?\s+\d{4})"
    r"([T\s].*)?$"
)


def is_number_cell(v: Any) -> bool:
    """True only for values that are numeric at runtime; text is never coerced."""
    if isinstance(v, bool):
        return False
    return isinstance(v, numbers.Number) and not isinstance(v, complex)


def is_date_cell(v: Any) -> bool:
    """True when the cell is already an instant or a string the date parser accepts."""
    if v is None or v is pd.NaT:
        return False
    if isinstance(v, (datetime, date, pd.Timestamp)):
        return True
    if not isinstance(v, str):
        return False
    s = v.strip()
    if not _CALENDAR_RE.match(s):
        return False
    try:
        ts = pd.to_datetime(s, errors="raise")
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(ts)


def infer_column(cells: Sequence[Any]) -> ColumnType:
    """
    All-or-nothing classification of one projected column.
    Fixed order: NUMBER, then DATE, then TEXT. No rows -> TEXT.
    """
    if len(cells) == 0:
        return ColumnType.TEXT
    if all(is_number_cell(v) for v in cells):
        return ColumnType.NUMBER
    if all(is_date_cell(v) for v in cells):
        return ColumnType.DATE
    return ColumnType.TEXT


def infer_types(rs: ResultSet) -> List[ColumnType]:
    """One ColumnType per column, in column order."""
    types = [infer_column(rs.column(i)) for i in range(len(rs.columns))]
    log.debug(
        "inferred column types",
        extra={"columns": list(rs.columns), "types": [t.value for t in types], "rows": rs.row_count},
    )
    return types


def indices_of(types: Iterable[ColumnType], kind: ColumnType) -> List[int]:
    return [i for i, t in enumerate(types) if t == kind]
