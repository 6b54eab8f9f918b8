"""
Dashboard chart registry.

Each chart pairs one aggregation with the layouts for its chart types.
``render_chart`` is what the API calls with the filtered records.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from . import aggregation as agg
from .layout import arcs, bands, force, placeholder, tree
from .layout.scales import Margin
from .models import GENDERS, YES_NO, SurveyRecord

logger = logging.getLogger(__name__)


class ChartNotFound(LookupError):
    """Raised for a chart name that is not registered."""


class UnsupportedChartType(ValueError):
    """Raised when a chart is asked for a chart type it cannot draw."""


@dataclass(frozen=True)
class ChartOptions:
    width: float = 500
    height: float = 320
    scale: float = 1.0
    max_steps: int = 300
    pinned: Mapping[str, Sequence[float]] = field(default_factory=dict)


@dataclass(frozen=True)
class Chart:
    name: str
    title: str
    chart_types: Tuple[str, ...]
    aggregate: Callable[[Sequence[SurveyRecord]], Any]
    layout: Callable[[Any, str, ChartOptions], Dict[str, Any]]

    @property
    def default_type(self) -> str:
        return self.chart_types[0]


def _age_groups_layout(data, chart_type, opts):
    return arcs.pie_layout(data, opts.width, opts.height, donut=chart_type == "donut")


def _gender_layout(data, chart_type, opts):
    # factor -> {gender: rate}
    margin = Margin(bottom=60)
    keys = [g for g in GENDERS if any(g in rates for rates in data.values())]
    if not keys:
        return placeholder()
    if chart_type == "stacked":
        return bands.stacked_layout(data, keys, opts.width, opts.height, margin, padding=0.1)
    return bands.grouped_layout(
        data, keys, opts.width, opts.height, margin,
        y_max=100, padding=0.1, padding_outer=0.0, sub_padding=0.05,
    )


def _company_size_layout(data, chart_type, opts):
    rates = {size: bucket["percentage"] for size, bucket in data.items()}
    if chart_type == "line":
        return bands.line_layout(rates, opts.width, opts.height, y_max=100)
    return bands.bar_layout(rates, opts.width, opts.height, y_max=100)


def _family_history_layout(data, chart_type, opts):
    # scatter and heatmap share the same grid; the renderer picks r or intensity
    return bands.grid_layout(
        data, "sought_treatment", "family_history", (False, True), YES_NO,
        opts.width, opts.height,
    )


def _geography_layout(data, chart_type, opts):
    counts = {loc: bucket["count"] for loc, bucket in data.items()}
    if chart_type == "bar":
        top10 = dict(list(counts.items())[:10])
        return bands.horizontal_bar_layout(top10, opts.width, opts.height)
    return bands.bubble_map_layout(counts, opts.width, opts.height)


def _treatment_layout(data, chart_type, opts):
    rows = {row["age_group"]: row for row in data}
    if chart_type == "grouped":
        return bands.grouped_layout(rows, ("sought", "not_sought"), opts.width, opts.height)
    return bands.stacked_layout(rows, ("not_sought", "sought"), opts.width, opts.height)


def _tree_layout(data, chart_type, opts):
    return tree.tree_layout(data, opts.width, opts.height, scale=opts.scale)


def _network_layout(data, chart_type, opts):
    return force.network_layout(
        data, opts.width, opts.height, scale=opts.scale,
        pinned=opts.pinned, max_steps=opts.max_steps,
    )


CHARTS: Dict[str, Chart] = {
    c.name: c
    for c in (
        Chart("age-groups", "Age Group Distribution", ("pie", "donut"),
              agg.age_group_distribution, _age_groups_layout),
        Chart("gender-factors", "Mental Health Factors by Gender", ("bar", "stacked"),
              agg.gender_factor_rates, _gender_layout),
        Chart("company-size", "Mental Health Issues by Company Size", ("bar", "line"),
              agg.company_size_issue_rates, _company_size_layout),
        Chart("family-history", "Family History vs. Treatment", ("scatter", "heatmap"),
              agg.family_history_treatment_grid, _family_history_layout),
        Chart("geography", "Geographic Distribution", ("map", "bar"),
              agg.location_counts, _geography_layout),
        Chart("treatment-by-age", "Treatment-Seeking Behavior by Age Group", ("stacked", "grouped"),
              agg.treatment_by_age_group, _treatment_layout),
        Chart("tree", "Mental Health Tree", ("tree",),
              agg.mental_health_tree, _tree_layout),
        Chart("network", "Mental Health Network Graph", ("force",),
              agg.network_nodes, _network_layout),
    )
}

# the tree and network cards use a small 100x75 viewBox
SMALL_CANVAS = {"tree", "network"}


def get_chart(name: str) -> Chart:
    try:
        return CHARTS[name]
    except KeyError:
        raise ChartNotFound(name) from None


def list_charts():
    return [{"name": c.name, "title": c.title, "chart_types": list(c.chart_types)} for c in CHARTS.values()]


def render_chart(
    name: str,
    records: Sequence[SurveyRecord],
    chart_type: Optional[str] = None,
    options: Optional[ChartOptions] = None,
) -> Dict[str, Any]:
    chart = get_chart(name)
    chart_type = chart_type or chart.default_type
    if chart_type not in chart.chart_types:
        raise UnsupportedChartType(f"{name} does not support chart type {chart_type!r}")
    if options is None:
        options = ChartOptions(width=100, height=75) if name in SMALL_CANVAS else ChartOptions()

    data = chart.aggregate(records)
    layout = chart.layout(data, chart_type, options)
    logger.debug("Rendered chart %s (%s) from %d records", name, chart_type, len(records))
    return {
        "chart": name,
        "title": chart.title,
        "chart_type": chart_type,
        "data": data,
        "layout": layout,
    }
