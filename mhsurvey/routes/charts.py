import logging

from flask import Blueprint, current_app, jsonify, request

from ..charts import SMALL_CANVAS, ChartOptions, list_charts, render_chart
from .analytics import filtered_records

logger = logging.getLogger(__name__)

bp = Blueprint("charts", __name__)


def _options(name, pinned=None):
    if name in SMALL_CANVAS:
        width, height = 100, 75
    else:
        width, height = current_app.config["CHART_WIDTH"], current_app.config["CHART_HEIGHT"]
    return ChartOptions(
        width=width,
        height=height,
        scale=request.args.get("scale", 1.0, type=float),
        max_steps=current_app.config["FORCE_MAX_STEPS"],
        pinned=pinned or {},
    )


@bp.get("")
def index():
    return jsonify(list_charts())


@bp.get("/<name>")
def chart(name):
    chart_type = request.args.get("chartType") or request.args.get("chart_type")
    return jsonify(render_chart(name, filtered_records(), chart_type, _options(name)))


@bp.post("/network")
def network():
    """Re-run the network layout with dragged nodes held in place."""
    body = request.get_json(silent=True) or {}
    pinned = (body.get("pinned") or {}) if isinstance(body, dict) else None
    if not isinstance(pinned, dict) or not all(
        isinstance(xy, (list, tuple)) and len(xy) == 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in xy)
        for xy in pinned.values()
    ):
        return jsonify({"error": "pinned must map node ids to [x, y]"}), 400
    try:
        result = render_chart("network", filtered_records(), options=_options("network", pinned))
    except KeyError as e:
        return jsonify({"error": e.args[0]}), 400
    return jsonify(result)
