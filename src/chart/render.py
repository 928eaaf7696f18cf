from __future__ import annotations
from pathlib import Path
from html import escape
from typing import Any, Dict, Optional, Tuple
import json
import logging
import re
import tempfile
import plotly.graph_objects as go

from src.tabular.result_set import ResultSet
from .projector import ChartSpec, json_point

log = logging.getLogger("chartview.render")

PNG_DEFAULTS: Tuple[int, int, float] = (1200, 700, 2.0)

THEMES: Dict[str, Dict[str, str]] = {
    "light": {"template": "plotly_white", "font": "#111827", "header": "#e5e7eb", "cell": "#ffffff"},
    "dark_blue": {"template": "plotly_dark", "font": "#e5e7eb", "header": "#1e3a8a", "cell": "#0f172a"},
}

_HSLA_RE = re.compile(r"^hsla\((.+)\)$")

# Chart.js legend positions -> plotly legend placement
_LEGEND: Dict[str, Dict[str, Any]] = {
    "top": dict(orientation="h", x=0.5, xanchor="center", y=1.02, yanchor="bottom"),
    "bottom": dict(orientation="h", x=0.5, xanchor="center", y=-0.15, yanchor="top"),
    "left": dict(orientation="v", x=-0.15, xanchor="right", y=1.0),
    "right": dict(orientation="v", x=1.02, xanchor="left", y=1.0),
}


def theme(name: str) -> Dict[str, str]:
    return THEMES.get(name, THEMES["dark_blue"])


def plotly_color(css: str) -> str:
    """plotly's color validator rejects whitespace inside hsla(...); strip it."""
    m = _HSLA_RE.match(css.strip())
    if not m:
        return css
    parts = [p.strip() for p in m.group(1).split(",")]
    return f"hsla({','.join(parts)})"


def to_figure(spec: ChartSpec, *, theme_name: str = "dark_blue") -> go.Figure:
    """Grouped bar chart, one trace per dataset, category axis from the chart labels."""
    th = theme(theme_name)
    x = [str(v) for v in spec.category_labels]
    fig = go.Figure()
    for d in spec.datasets:
        fig.add_bar(
            x=x,
            y=[json_point(v) for v in d.points],
            name=d.label,
            marker=dict(color=plotly_color(d.fill_color), line=dict(color=plotly_color(d.stroke_color), width=1)),
        )
    opts = spec.display_options
    fig.update_layout(
        barmode="group",
        template=th["template"],
        title=dict(text=opts.title),
        legend=_LEGEND.get(opts.legend_position, _LEGEND["top"]),
        autosize=opts.responsive,
    )
    return fig


def table_figure(rs: ResultSet, *, theme_name: str = "dark_blue") -> go.Figure:
    """Tabular preview of the result set."""
    th = theme(theme_name)
    cols = [rs.column(i) for i in range(len(rs.columns))]
    fig = go.Figure(data=[go.Table(
        header=dict(values=list(rs.columns), fill_color=th["header"], font=dict(color=th["font"])),
        cells=dict(values=[["" if v is None else str(v) for v in c] for c in cols],
                   fill_color=th["cell"], font=dict(color=th["font"])),
    )])
    fig.update_layout(template=th["template"])
    return fig


def to_chartjs_json(spec: ChartSpec, *, indent: Optional[int] = None) -> str:
    return json.dumps(spec.to_dict(), indent=indent, default=str, ensure_ascii=False, allow_nan=False)


# ---------------------------- export ----------------------------

def export_html(fig: go.Figure, out_html: Optional[str] = None, *, title: Optional[str] = None) -> Path:
    """Write a standalone HTML page for the figure; temp file when no path is given."""
    from plotly.io import to_html
    html = to_html(fig, full_html=True, include_plotlyjs="cdn")
    if title:
        html = html.replace("<head>", f"<head><title>{escape(title)}</title>", 1)
    if out_html is None:
        with tempfile.NamedTemporaryFile("w", delete=False, suffix=".html", encoding="utf-8") as tmp:
            tmp.write(html)
        return Path(tmp.name)
    out = Path(out_html)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    return out


def png_size(
    charts_cfg: Any = None,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    scale: Optional[float] = None,
) -> Tuple[int, int, float]:
    """Explicit arguments win over the [charts] png_* settings, which win over the defaults."""
    w, h, s = PNG_DEFAULTS
    if charts_cfg is not None:
        w, h, s = charts_cfg.png_width, charts_cfg.png_height, charts_cfg.png_scale
    w = w if width is None else width
    h = h if height is None else height
    s = s if scale is None else scale
    if w < 1 or h < 1 or s <= 0:
        raise ValueError(f"invalid PNG size {w}x{h} @ {s}")
    return int(w), int(h), float(s)


def export_png(
    fig: go.Figure,
    out_path: str,
    *,
    charts_cfg: Any = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    scale: Optional[float] = None,
    engine: str = "playwright",
    timeout_ms: int = 10_000,
) -> str:
    """
    Static PNG of the chart.
    - engine="playwright": screenshot the exported HTML page in headless Chromium.
    - engine="kaleido": fig.write_image.
    """
    if engine not in ("playwright", "kaleido"):
        raise ValueError(f"Unknown engine '{engine}'. Use 'playwright' or 'kaleido'.")
    w, h, s = png_size(charts_cfg, width=width, height=height, scale=scale)
    out = Path(out_path).resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    log.info("exporting png", extra={"path": str(out), "engine": engine, "size": [w, h, s]})

    if engine == "kaleido":
        try:
            fig.write_image(str(out), format="png", width=w, height=h, scale=s)
        except Exception as e:
            raise RuntimeError("Kaleido export failed. Install kaleido or use engine='playwright'.") from e
        return str(out)

    try:
        from playwright.sync_api import sync_playwright
    except ImportError as e:
        raise RuntimeError("Playwright not available. Install it and run 'playwright install chromium'.") from e

    html_path = export_html(fig)
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True, args=["--allow-file-access-from-files"])
            try:
                page = browser.new_page(viewport={"width": w, "height": h}, device_scale_factor=s)
                page.goto(html_path.resolve().as_uri(), wait_until="networkidle", timeout=timeout_ms)
                page.screenshot(path=str(out), full_page=True)
            finally:
                browser.close()
    finally:
        html_path.unlink(missing_ok=True)
    return str(out)
