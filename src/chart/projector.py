from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np

from src.tabular.inference import ColumnType, indices_of, infer_types
from src.tabular.result_set import ResultSet
from .colors import series_colors

log = logging.getLogger("chartview.projector")

DEFAULT_TITLE = "Numeric data visualization"
DEFAULT_LEGEND_POSITION = "top"
NO_NUMERIC_MESSAGE = "No numeric data found."


class NoNumericData(Exception):
    """No column of the result set is numeric, so there is nothing to chart."""

    def __init__(self, columns: Sequence[str] = ()):
        self.columns = list(columns)
        super().__init__(NO_NUMERIC_MESSAGE)


def json_point(v: Any) -> Any:
    """Chart.js-safe point: Decimal/numpy -> float/int, NaN/inf -> None (a gap)."""
    if isinstance(v, np.generic):
        v = v.item()
    if isinstance(v, Decimal):
        v = float(v)
    if isinstance(v, float) and not math.isfinite(v):
        return None
    return v


@dataclass(frozen=True)
class Dataset:
    label: str
    points: Tuple[Any, ...]
    fill_color: str
    stroke_color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "data": [json_point(v) for v in self.points],
            "backgroundColor": self.fill_color,
            "borderColor": self.stroke_color,
        }


@dataclass(frozen=True)
class DisplayOptions:
    legend_position: str = DEFAULT_LEGEND_POSITION
    title: str = DEFAULT_TITLE
    responsive: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responsive": self.responsive,
            "plugins": {
                "legend": {"position": self.legend_position},
                "title": {"display": True, "text": self.title},
            },
        }


@dataclass(frozen=True)
class ChartSpec:
    category_labels: Tuple[Any, ...]
    datasets: Tuple[Dataset, ...]
    display_options: DisplayOptions = field(default_factory=DisplayOptions)

    def to_dict(self) -> Dict[str, Any]:
        """Chart.js-shaped bar configuration."""
        return {
            "type": "bar",
            "data": {
                "labels": list(self.category_labels),
                "datasets": [d.to_dict() for d in self.datasets],
            },
            "options": self.display_options.to_dict(),
        }


def options_from_cfg(charts_cfg: Any | None) -> DisplayOptions:
    if charts_cfg is None:
        return DisplayOptions()
    return DisplayOptions(
        legend_position=getattr(charts_cfg, "legend_position", DEFAULT_LEGEND_POSITION),
        title=getattr(charts_cfg, "title", DEFAULT_TITLE),
        responsive=bool(getattr(charts_cfg, "responsive", True)),
    )


def category_labels(rs: ResultSet, types: Sequence[ColumnType]) -> List[Any]:
    # first TEXT column, otherwise 1-based row ordinals
    text_idx = indices_of(types, ColumnType.TEXT)
    if text_idx:
        j = text_idx[0]
        return [row[j] for row in rs.values]
    return [f"Row {r + 1}" for r in range(rs.row_count)]


def build_dataset(rs: ResultSet, c: int, *, charts_cfg: Any | None = None) -> Dataset:
    fill, stroke = series_colors(c, charts_cfg)
    return Dataset(
        label=rs.columns[c],
        points=tuple(row[c] for row in rs.values),
        fill_color=fill,
        stroke_color=stroke,
    )


def project(
    rs: ResultSet,
    column_types: Optional[Sequence[ColumnType]] = None,
    *,
    charts_cfg: Any | None = None,
) -> ChartSpec:
    """
    Project a result set onto a bar chart: one dataset per NUMBER column,
    category labels from the first TEXT column (or "Row N").
    Raises NoNumericData when no column is numeric.
    """
    types = list(column_types) if column_types is not None else infer_types(rs)
    if len(types) != len(rs.columns):
        raise ValueError(
            f"got {len(types)} column types for {len(rs.columns)} columns"
        )

    numeric_idx = indices_of(types, ColumnType.NUMBER)
    if not numeric_idx:
        log.info("no numeric columns to chart", extra={"columns": list(rs.columns)})
        raise NoNumericData(rs.columns)

    spec = ChartSpec(
        category_labels=tuple(category_labels(rs, types)),
        datasets=tuple(build_dataset(rs, c, charts_cfg=charts_cfg) for c in numeric_idx),
        display_options=options_from_cfg(charts_cfg),
    )
    log.info(
        "projected chart",
        extra={"datasets": len(spec.datasets), "rows": rs.row_count},
    )
    return spec
