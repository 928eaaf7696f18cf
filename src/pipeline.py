from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any, List, Optional

from src.chart.projector import ChartSpec, NoNumericData, project
from src.tabular.inference import ColumnType, infer_types
from src.tabular.result_set import ResultSet, ensure_result_set

log = logging.getLogger("chartview.pipeline")


@dataclass(frozen=True)
class Visualization:
    result_set: ResultSet
    column_types: List[ColumnType]
    chart: Optional[ChartSpec] = None
    message: Optional[str] = None

    @property
    def has_chart(self) -> bool:
        return self.chart is not None


def visualize(data: Any, *, cfg: Any | None = None) -> Visualization:
    """
    Infer column types and project a chart for a freshly materialized result.
    A result with no numeric column yields a message instead of a chart.
    """
    rs = ensure_result_set(data)
    types = infer_types(rs)
    charts_cfg = getattr(cfg, "charts", None)
    try:
        chart = project(rs, types, charts_cfg=charts_cfg)
    except NoNumericData as e:
        log.info("chart skipped", extra={"reason": str(e), "columns": e.columns})
        return Visualization(result_set=rs, column_types=types, message=str(e))
    return Visualization(result_set=rs, column_types=types, chart=chart)
