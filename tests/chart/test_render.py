import json
from pathlib import Path
import pytest
import plotly.graph_objects as go

from src.chart.projector import project
from src.chart.render import (
    export_html,
    export_png,
    png_size,
    plotly_color,
    table_figure,
    to_chartjs_json,
    to_figure,
)

# Skip if playwright isn't importable or chromium not installed
playwright_ready = True
try:
    import playwright  # noqa: F401
except ImportError:
    playwright_ready = False

def test_to_figure_one_bar_trace_per_dataset(sales):
    spec = project(sales)
    fig = to_figure(spec)
    assert isinstance(fig, go.Figure)
    assert [t.type for t in fig.data] == ["bar", "bar"]
    assert [t.name for t in fig.data] == ["units", "revenue"]
    assert list(fig.data[0].x) == ["north", "south", "east"]
    assert list(fig.data[1].y) == [100.5, 210.0, 48.25]
    assert fig.layout.barmode == "group"
    assert fig.layout.title.text == spec.display_options.title
    assert fig.data[0].marker.color == "hsla(274,70%,50%,0.6)"

def test_plotly_color_strips_spaces():
    assert plotly_color("hsla(51, 70%, 50%, 1)") == "hsla(51,70%,50%,1)"
    assert plotly_color("#fff") == "#fff"

def test_unknown_theme_falls_back(people):
    fig = to_figure(project(people), theme_name="nope")
    assert len(fig.data) == 1

def test_table_figure_renders_none_as_blank():
    from src.tabular.result_set import ResultSet
    rs = ResultSet.from_rows(["a", "b"], [[1, None], [2, "x"]])
    fig = table_figure(rs)
    t = fig.data[0]
    assert list(t.header.values) == ["a", "b"]
    assert [list(c) for c in t.cells.values] == [["1", "2"], ["", "x"]]

def test_chartjs_json_round_trips_to_dict(people):
    spec = project(people)
    assert json.loads(to_chartjs_json(spec)) == spec.to_dict()

def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")

def test_chartjs_json_is_strict_with_nan_and_decimal_points():
    from decimal import Decimal
    from src.tabular.result_set import ResultSet
    rs = ResultSet.from_rows(["name", "score"], [["a", float("nan")], ["b", Decimal("9.75")]])
    text = to_chartjs_json(project(rs))
    assert "NaN" not in text
    doc = json.loads(text, parse_constant=_reject_constant)
    assert doc["data"]["datasets"][0]["data"] == [None, 9.75]
    assert isinstance(doc["data"]["datasets"][0]["data"][1], float)

def test_figure_gets_normalized_points():
    from decimal import Decimal
    from src.tabular.result_set import ResultSet
    rs = ResultSet.from_rows(["name", "score"], [["a", float("nan")], ["b", Decimal("9.75")]])
    fig = to_figure(project(rs))
    assert list(fig.data[0].y) == [None, 9.75]

def test_export_html_writes_file(tmp_path: Path, people):
    out = export_html(to_figure(project(people)), str(tmp_path / "nested" / "chart.html"))
    assert out.exists()
    assert "<html>" in out.read_text(encoding="utf-8").lower()

def test_export_html_temp_file_when_no_path(people):
    out = export_html(to_figure(project(people)))
    try:
        assert out.suffix == ".html" and out.stat().st_size > 0
    finally:
        out.unlink()

def test_export_html_sets_page_title(tmp_path: Path, people):
    out = export_html(to_figure(project(people)), str(tmp_path / "c.html"), title="Sales <Q1>")
    assert "<title>Sales &lt;Q1&gt;</title>" in out.read_text(encoding="utf-8")

def test_png_size_precedence(cfg):
    assert png_size() == (1200, 700, 2.0)
    assert png_size(cfg.charts) == (cfg.charts.png_width, cfg.charts.png_height, cfg.charts.png_scale)
    assert png_size(cfg.charts, width=640, scale=1) == (640, cfg.charts.png_height, 1.0)

@pytest.mark.parametrize("kw", [{"width": 0}, {"height": -1}, {"scale": 0}])
def test_png_size_rejects_non_positive(kw):
    with pytest.raises(ValueError):
        png_size(**kw)

def test_export_png_rejects_unknown_engine(tmp_path: Path, people):
    with pytest.raises(ValueError):
        export_png(to_figure(project(people)), str(tmp_path / "x.png"), engine="unknown")

@pytest.mark.skipif(not playwright_ready, reason="Playwright not available")
def test_export_png_smoke(tmp_path: Path, people, cfg):
    png = tmp_path / "bar.png"
    try:
        out = export_png(
            to_figure(project(people)),
            out_path=str(png),
            charts_cfg=cfg.charts,
            engine="playwright",
        )
    except Exception as e:  # chromium not installed / no network for the plotly CDN
        pytest.skip(f"playwright could not render: {e}")
    assert Path(out).exists()
    assert Path(out).stat().st_size > 0
