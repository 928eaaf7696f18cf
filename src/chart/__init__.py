from .colors import hue, series_colors
from .projector import (
    ChartSpec,
    Dataset,
    DisplayOptions,
    json_point,
    NoNumericData,
    project,
)
from .render import to_figure, table_figure, to_chartjs_json, export_html, export_png, png_size

__all__ = [
    "hue", "series_colors",
    "ChartSpec", "Dataset", "DisplayOptions", "NoNumericData", "json_point", "project",
    "to_figure", "table_figure", "to_chartjs_json", "export_html", "export_png", "png_size",
]
