import math
from typing import Any, Dict, Mapping

import numpy as np

from . import placeholder

DONUT_INNER_RATIO = 0.5
LABEL_RADIUS_RATIO = 0.75


def pie_layout(
    buckets: Mapping[Any, Mapping[str, float]],
    width: float = 500,
    height: float = 320,
    donut: bool = False,
    margin: float = 40,
) -> Dict[str, Any]:
    """
    Angular spans for a pie or donut chart.

    Spans are proportional to each bucket's ``count`` and laid out
    clockwise from 12 o'clock in the order the buckets are given, so the
    slices do not move around between renders.
    """
    counts = np.array([b["count"] for b in buckets.values()], dtype=float)
    total = counts.sum() if len(counts) else 0.0
    if total <= 0:
        return placeholder()

    outer = min(width, height) / 2 - margin
    inner = outer * DONUT_INNER_RATIO if donut else 0.0
    ends = np.cumsum(counts) / total * 2 * math.pi
    ends[-1] = 2 * math.pi
    starts = np.concatenate(([0.0], ends[:-1]))

    arcs = []
    label_r = outer * LABEL_RADIUS_RATIO
    for (key, bucket), start, end in zip(buckets.items(), starts, ends):
        mid = (start + end) / 2
        arcs.append({
            "key": key,
            "count": int(bucket["count"]),
            "percentage": bucket.get("percentage", bucket["count"] / total * 100),
            "start_angle": float(start),
            "end_angle": float(end),
            "label_x": float(label_r * math.sin(mid)),
            "label_y": float(-label_r * math.cos(mid)),
        })

    return {
        "empty": False,
        "center": [width / 2, height / 2],
        "outer_radius": outer,
        "inner_radius": inner,
        "total": int(total),
        "arcs": arcs,
    }
