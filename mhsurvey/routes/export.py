import csv
import logging
from datetime import datetime
from io import BytesIO

import pandas as pd
from flask import Blueprint, Response, jsonify, request, send_file

from ..extensions import get_store
from ..frames import records_frame

logger = logging.getLogger(__name__)

bp = Blueprint("export", __name__)


@bp.get("/export")
def export_survey_data():
    """Download the whole collection as CSV (default) or Excel."""
    fmt = request.args.get("format", "csv").lower()
    if fmt not in ("csv", "xlsx"):
        return jsonify({"error": f"unsupported export format: {fmt}"}), 400

    df = records_frame(get_store().get_all(), with_id=True, by_alias=True)
    stamp = datetime.now().strftime("%Y%m%d")

    if fmt == "csv":
        body = df.to_csv(index=False, quoting=csv.QUOTE_NONNUMERIC)
        return Response(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=survey_data_{stamp}.csv"},
        )

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Survey Data", index=False)
    output.seek(0)
    logger.info("Exported %d records to xlsx", len(df))
    return send_file(
        output,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"survey_data_{stamp}.xlsx",
    )
