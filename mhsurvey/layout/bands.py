"""
Categorical-axis layouts: bars, lines, stacked and grouped bars, the 2x2
grid and the geographic bubble map.

Coordinates are relative to the inner plot area (the margin is returned
alongside so the renderer can translate). Y grows downwards, as in SVG.
"""
import math
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence

from . import placeholder
from .scales import Margin, band_scale, linear_scale, nice_max, sqrt_scale

DEFAULT_MARGIN = Margin()


def _frame(width, height, margin: Margin, y_max: float) -> Dict[str, Any]:
    inner_w, inner_h = margin.inner(width, height)
    return {
        "empty": False,
        "width": width,
        "height": height,
        "margin": margin.to_dict(),
        "inner_width": inner_w,
        "inner_height": inner_h,
        "y_max": y_max,
    }


def bar_layout(
    values: Mapping[Hashable, float],
    width: float = 500,
    height: float = 320,
    margin: Margin = DEFAULT_MARGIN,
    y_max: Optional[float] = None,
    padding: float = 0.3,
) -> Dict[str, Any]:
    if not values:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    y_max = y_max if y_max is not None else nice_max(max(values.values()))
    x = band_scale(list(values), (0, inner_w), padding)
    y = linear_scale((0, y_max or 1), (inner_h, 0))
    out = _frame(width, height, margin, y_max)
    out["bandwidth"] = x.bandwidth
    out["bars"] = [
        {
            "key": k,
            "value": v,
            "x": x(k),
            "y": y(v),
            "width": x.bandwidth,
            "height": inner_h - y(v),
            "label_y": y(v) - 10,
        }
        for k, v in values.items()
    ]
    return out


def line_layout(
    values: Mapping[Hashable, float],
    width: float = 500,
    height: float = 320,
    margin: Margin = DEFAULT_MARGIN,
    y_max: Optional[float] = None,
    padding: float = 0.3,
) -> Dict[str, Any]:
    """Points at the centre of each category band, in category order."""
    if not values:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    y_max = y_max if y_max is not None else nice_max(max(values.values()))
    x = band_scale(list(values), (0, inner_w), padding)
    y = linear_scale((0, y_max or 1), (inner_h, 0))
    out = _frame(width, height, margin, y_max)
    out["points"] = [{"key": k, "value": v, "x": x.center(k), "y": y(v)} for k, v in values.items()]
    return out


def stacked_layout(
    rows: Mapping[Hashable, Mapping[str, float]],
    keys: Sequence[str],
    width: float = 500,
    height: float = 320,
    margin: Margin = DEFAULT_MARGIN,
    y_max: Optional[float] = None,
    padding: float = 0.2,
) -> Dict[str, Any]:
    """
    Stack the ``keys`` of each row bottom-up, first key at the bottom.
    Missing keys stack as zero.
    """
    if not rows:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    totals = {k: sum(row.get(s, 0) for s in keys) for k, row in rows.items()}
    y_max = y_max if y_max is not None else nice_max(max(totals.values()))
    x = band_scale(list(rows), (0, inner_w), padding)
    y = linear_scale((0, y_max or 1), (inner_h, 0))

    stacks = []
    for k, row in rows.items():
        base = 0.0
        segments = []
        for s in keys:
            v = row.get(s, 0)
            top = base + v
            segments.append({
                "key": s,
                "value": v,
                "y0": base,
                "y1": top,
                "y": y(top),
                "height": y(base) - y(top),
            })
            base = top
        stacks.append({"key": k, "x": x(k), "width": x.bandwidth, "total": totals[k], "segments": segments})

    out = _frame(width, height, margin, y_max)
    out["stacks"] = stacks
    return out


def grouped_layout(
    rows: Mapping[Hashable, Mapping[str, float]],
    keys: Sequence[str],
    width: float = 500,
    height: float = 320,
    margin: Margin = DEFAULT_MARGIN,
    y_max: Optional[float] = None,
    padding: float = 0.2,
    padding_outer: Optional[float] = None,
    sub_padding: float = 0.05,
) -> Dict[str, Any]:
    """Side-by-side bars: each row's band is split evenly between ``keys``."""
    if not rows:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    if y_max is None:
        y_max = nice_max(max(row.get(s, 0) for row in rows.values() for s in keys))
    x0 = band_scale(list(rows), (0, inner_w), padding, padding_outer)
    x1 = band_scale(list(keys), (0, x0.bandwidth), sub_padding)
    y = linear_scale((0, y_max or 1), (inner_h, 0))

    groups = []
    for k, row in rows.items():
        bars = []
        for s in keys:
            v = row.get(s, 0)
            bars.append({
                "key": s,
                "value": v,
                "x": x0(k) + x1(s),
                "y": y(v),
                "width": x1.bandwidth,
                "height": inner_h - y(v),
            })
        groups.append({"key": k, "x": x0(k), "width": x0.bandwidth, "bars": bars})

    out = _frame(width, height, margin, y_max)
    out["groups"] = groups
    return out


def horizontal_bar_layout(
    values: Mapping[Hashable, float],
    width: float = 500,
    height: float = 320,
    margin: Margin = Margin(left=80),
    padding: float = 0.1,
) -> Dict[str, Any]:
    """Horizontal bars, one band per key from top to bottom."""
    if not values:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    x_max = max(values.values())
    y = band_scale(list(values), (0, inner_h), padding)
    x = linear_scale((0, x_max or 1), (0, inner_w))
    out = _frame(width, height, margin, x_max)
    out["bars"] = [
        {"key": k, "value": v, "x": 0.0, "y": y(k), "width": x(v), "height": y.bandwidth}
        for k, v in values.items()
    ]
    return out


def grid_layout(
    cells: Sequence[Mapping[str, Any]],
    row_field: str,
    col_field: str,
    rows: Sequence,
    cols: Sequence,
    width: float = 500,
    height: float = 320,
    margin: Margin = DEFAULT_MARGIN,
    bubble_range=(5, 50),
    padding: float = 0.2,
) -> Dict[str, Any]:
    """
    Lay out a cross-tab on a grid: ``col_field`` values across, ``row_field``
    values up the y axis (first value at the bottom). Each cell gets both a
    bubble (sqrt-sized) and a heatmap rectangle with a 0..1 intensity.
    """
    if not cells:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    x = band_scale(list(cols), (0, inner_w), padding)
    y = band_scale(list(rows), (inner_h, 0), padding)
    max_count = max(c["count"] for c in cells)
    size = sqrt_scale(max_count, bubble_range)

    laid = []
    for c in cells:
        col, row = c[col_field], c[row_field]
        laid.append({
            "row": row,
            "col": col,
            "count": c["count"],
            "label": c.get("label"),
            "x": x(col),
            "y": y(row),
            "width": x.bandwidth,
            "height": y.bandwidth,
            "cx": x.center(col),
            "cy": y.center(row),
            "r": size(c["count"]),
            "intensity": c["count"] / max_count if max_count else 0.0,
        })
    out = _frame(width, height, margin, max_count)
    out["cells"] = laid
    return out


# Anchor points for the bubble map as fractions of the inner plot area
LOCATION_ANCHORS = {
    "USA": (1 / 3, 1 / 2),
    "Canada": (1 / 3, 1 / 3),
    "United Kingdom": (1 / 2, 1 / 3),
    "Germany": (1 / 2, 1 / 2),
    "Australia": (2 / 3, 2 / 3),
    "India": (2 / 3, 1 / 2),
    "Brazil": (1 / 3, 2 / 3),
    "France": (1 / 2, 1 / 2.5),
    "Russia": (2 / 3, 1 / 3),
    "Japan": (3 / 4, 1 / 2),
}

GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


def bubble_map_layout(
    counts: Mapping[str, int],
    width: float = 500,
    height: float = 320,
    margin: Margin = Margin(left=80),
    bubble_range=(5, 30),
) -> Dict[str, Any]:
    """
    Bubbles per location. Well-known countries sit on fixed anchors; the
    rest are spread on a golden-angle spiral by rank so repeated renders
    place them identically.
    """
    if not counts:
        return placeholder()
    inner_w, inner_h = margin.inner(width, height)
    max_count = max(counts.values())
    size = sqrt_scale(max_count, bubble_range)
    spread = min(inner_w, inner_h) / 2

    bubbles: List[Dict[str, Any]] = []
    others = {loc: i for i, loc in enumerate(l for l in counts if l not in LOCATION_ANCHORS)}
    for loc, n in counts.items():
        if loc in LOCATION_ANCHORS:
            fx, fy = LOCATION_ANCHORS[loc]
            cx, cy = inner_w * fx, inner_h * fy
        else:
            i = others[loc]
            rho = spread * math.sqrt((i + 0.5) / len(others))
            theta = i * GOLDEN_ANGLE
            cx = inner_w / 2 + rho * math.cos(theta)
            cy = inner_h / 2 + rho * math.sin(theta)
        r = size(n)
        bubbles.append({
            "key": loc,
            "count": n,
            "cx": cx,
            "cy": cy,
            "r": r,
            "intensity": n / max_count if max_count else 0.0,
            "labelled": n > max_count / 10,
            "label_y": cy - r - 5,
        })

    out = _frame(width, height, margin, max_count)
    out["bubbles"] = bubbles
    out["legend"] = [{"value": v, "r": size(v)} for v in (max_count, max_count / 2, max_count / 5)]
    return out
