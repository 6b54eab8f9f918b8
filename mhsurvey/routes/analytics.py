from flask import Blueprint, request

from .. import aggregation as agg
from ..extensions import get_store
from ..filters import FilterState, apply_filters, filter_options

bp = Blueprint("analytics", __name__)


def filtered_records():
    return apply_filters(get_store().get_all(), FilterState.from_args(request.args))


@bp.get("/summary")
def summary():
    stats = agg.summary_statistics(filtered_records())
    stats["display"] = {
        "sought_treatment": agg.format_percentage(stats["sought_treatment"]),
        "family_history": agg.format_percentage(stats["family_history"]),
    }
    return stats


@bp.get("/filters")
def filters():
    # options always come from the unfiltered collection
    return filter_options(get_store().get_all())
