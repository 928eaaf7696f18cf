from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple
import numpy as np
import pandas as pd


class MalformedResultSet(ValueError):
    """Raised when a result set is not rectangular or has duplicate column names."""


def _to_python_scalar(v: Any) -> Any:
    # pandas/numpy scalars -> plain python; NaT/NA -> None. float NaN stays a float.
    if v is None or v is pd.NaT or v is pd.NA:
        return None
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime()
    if isinstance(v, np.generic):
        return v.item()
    return v


@dataclass(frozen=True)
class ResultSet:
    """
    Rectangular query output: ordered column names plus row-major cells.
    Every row has exactly len(columns) cells; construction raises otherwise.
    """
    columns: Tuple[str, ...]
    values: Tuple[Tuple[Any, ...], ...] = ()

    def __post_init__(self) -> None:
        cols = tuple(str(c) for c in self.columns)
        rows = tuple(tuple(r) for r in self.values)
        seen = set()
        for c in cols:
            if c in seen:
                raise MalformedResultSet(f"duplicate column name {c!r}")
            seen.add(c)
        width = len(cols)
        for i, r in enumerate(rows):
            if len(r) != width:
                raise MalformedResultSet(
                    f"row {i} has {len(r)} cells, expected {width} (columns={list(cols)})"
                )
        object.__setattr__(self, "columns", cols)
        object.__setattr__(self, "values", rows)

    @classmethod
    def from_rows(cls, columns: Iterable[Any], rows: Iterable[Iterable[Any]]) -> "ResultSet":
        return cls(columns=tuple(columns), values=tuple(tuple(r) for r in rows))

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "ResultSet":
        rows = [
            tuple(_to_python_scalar(v) for v in rec)
            for rec in df.itertuples(index=False, name=None)
        ]
        return cls(columns=tuple(str(c) for c in df.columns), values=tuple(rows))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.values), columns=list(self.columns))

    @property
    def row_count(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def column(self, index: int) -> List[Any]:
        """Project column `index` across all rows."""
        if not -len(self.columns) <= index < len(self.columns):
            raise IndexError(f"column index {index} out of range for {len(self.columns)} columns")
        return [r[index] for r in self.values]

    def head(self, n: int) -> "ResultSet":
        if n < 0:
            raise ValueError("n must be >= 0")
        return ResultSet(columns=self.columns, values=self.values[:n])

    def to_dict(self) -> dict:
        return {"columns": list(self.columns), "values": [list(r) for r in self.values]}


def ensure_result_set(obj: Any) -> ResultSet:
    """Accept a ResultSet, a pandas DataFrame, or a {columns, values} mapping."""
    if isinstance(obj, ResultSet):
        return obj
    if isinstance(obj, pd.DataFrame):
        return ResultSet.from_dataframe(obj)
    if isinstance(obj, dict) and "columns" in obj:
        return ResultSet.from_rows(obj["columns"], obj.get("values", []))
    raise TypeError(f"cannot build a ResultSet from {type(obj).__name__}")
