import logging
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from ..extensions import get_store
from ..ingest.pipeline import EmptyUploadError, RecordValidationError, ingest_file
from .survey_data import _truthy

logger = logging.getLogger(__name__)

bp = Blueprint("ingest", __name__)


@bp.post("/upload")
def upload():
    # 一定返回 JSON
    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400
    f = request.files["file"]
    if not f.filename:
        return jsonify({"error": "No file selected"}), 400
    suffix = Path(f.filename).suffix.lower()
    if suffix not in current_app.config["ALLOWED_EXTENSIONS"]:
        return jsonify({"error": "Invalid file format. Please upload .xlsx or CSV files."}), 400

    updir = Path(current_app.config["UPLOAD_DIR"])
    updir.mkdir(parents=True, exist_ok=True)
    p = updir / secure_filename(f.filename)
    f.save(p)

    try:
        count = ingest_file(p, get_store(), clear=_truthy(request.args.get("clear")))
    except RecordValidationError:
        raise
    except EmptyUploadError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Upload error: %s", e)
        return jsonify({"error": f"ingest failed: {e}"}), 400
    finally:
        p.unlink(missing_ok=True)

    return jsonify({"message": f"Successfully processed {count} records", "count": count}), 201
