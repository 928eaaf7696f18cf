from __future__ import annotations

from .result_set import ResultSet, MalformedResultSet, ensure_result_set
from .inference import ColumnType, infer_types, infer_column, is_number_cell, is_date_cell
