from __future__ import annotations
from typing import Any, Tuple

HUE_STEP = 137
SATURATION = 70
LIGHTNESS = 50
FILL_ALPHA = 0.6
STROKE_ALPHA = 1.0


def hue(c: int, step: int = HUE_STEP) -> int:
    """Hue in degrees for column index `c`; consecutive indices land far apart."""
    return (int(c) * int(step)) % 360


def _alpha(a: float) -> str:
    # 1.0 -> "1", 0.6 -> "0.6"
    return f"{float(a):g}"


def hsla(h: int, s: float, l: float, a: float) -> str:
    return f"hsla({h}, {s:g}%, {l:g}%, {_alpha(a)})"


def series_colors(c: int, charts_cfg: Any | None = None) -> Tuple[str, str]:
    """(fill, stroke) colors for the series built from column index `c`."""
    step = getattr(charts_cfg, "hue_step", HUE_STEP)
    s = getattr(charts_cfg, "saturation", SATURATION)
    l = getattr(charts_cfg, "lightness", LIGHTNESS)
    fill_a = getattr(charts_cfg, "fill_alpha", FILL_ALPHA)
    stroke_a = getattr(charts_cfg, "stroke_alpha", STROKE_ALPHA)
    h = hue(c, step)
    return hsla(h, s, l, fill_a), hsla(h, s, l, stroke_a)
