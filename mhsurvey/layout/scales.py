import math
from dataclasses import dataclass
from typing import Dict, Hashable, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Margin:
    top: float = 40
    right: float = 30
    bottom: float = 70
    left: float = 50

    def inner(self, width: float, height: float) -> Tuple[float, float]:
        return width - self.left - self.right, height - self.top - self.bottom

    def to_dict(self) -> dict:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class BandScale:
    """Evenly sized bands for a categorical axis (d3 ``scaleBand``)."""
    positions: Dict[Hashable, float]
    bandwidth: float
    step: float

    def __call__(self, key) -> float:
        return self.positions[key]

    def center(self, key) -> float:
        return self.positions[key] + self.bandwidth / 2


def band_scale(
    domain: Sequence,
    extent: Tuple[float, float],
    padding_inner: float = 0.0,
    padding_outer: float = None,
    align: float = 0.5,
    round_output: bool = False,
) -> BandScale:
    """
    ``padding_outer`` defaults to ``padding_inner`` (d3's ``.padding(p)``).
    A reversed extent (e.g. ``(height, 0)``) lays the first key out last.
    """
    if padding_outer is None:
        padding_outer = padding_inner
    n = len(domain)
    lo, hi = extent
    reverse = hi < lo
    if reverse:
        lo, hi = hi, lo
    step = (hi - lo) / max(1, n - padding_inner + padding_outer * 2)
    if round_output:
        step = math.floor(step)
    start = lo + (hi - lo - step * (n - padding_inner)) * align
    bandwidth = step * (1 - padding_inner)
    if round_output:
        start, bandwidth = round(start), round(bandwidth)
    offsets = start + step * np.arange(n)
    if reverse:
        offsets = offsets[::-1]
    return BandScale(
        positions={k: float(v) for k, v in zip(domain, offsets)},
        bandwidth=float(bandwidth),
        step=float(step),
    )


def linear_scale(domain: Tuple[float, float], extent: Tuple[float, float]):
    d0, d1 = domain
    r0, r1 = extent
    span = (d1 - d0) or 1.0

    def scale(value: float) -> float:
        return r0 + (value - d0) / span * (r1 - r0)

    return scale


def sqrt_scale(domain_max: float, extent: Tuple[float, float]):
    """Area-proportional sizing: output grows with sqrt(value / domain_max)."""
    r0, r1 = extent

    def scale(value: float) -> float:
        if domain_max <= 0:
            return float(r0)
        return float(r0 + (r1 - r0) * math.sqrt(max(value, 0) / domain_max))

    return scale


def nice_max(value: float, count: int = 10) -> float:
    """Round an axis maximum up to a tick-friendly number (1, 2, 5 x 10^k)."""
    if value <= 0:
        return 0.0
    raw = value / count
    power = math.floor(math.log10(raw))
    error = raw / 10 ** power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    step = factor * 10 ** power
    return float(math.ceil(value / step) * step)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
