import logging

from flask import Blueprint, jsonify, request

from ..extensions import get_store
from ..ingest.pipeline import validate_records

logger = logging.getLogger(__name__)

bp = Blueprint("survey_data", __name__)


def _truthy(v):
    return str(v or "").strip().lower() in ("1", "true", "yes")


@bp.get("")
def list_records():
    return jsonify([r.to_json() for r in get_store().get_all()])


@bp.post("")
def create_record():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid data format", "errors": ["expected a JSON object"]}), 400
    # RecordValidationError is turned into a 400 by the app
    (record,) = validate_records([payload])
    stored = get_store().insert_one(record)
    return jsonify(stored.to_json()), 201


@bp.post("/bulk")
def bulk_upload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, list) or not payload:
        return jsonify({"error": "Invalid data format. Expected non-empty array."}), 400

    records = validate_records(payload)
    store = get_store()
    if _truthy(request.args.get("clear")):
        store.clear()
    stored = store.insert_many(records)
    return jsonify({"message": "Bulk upload successful", "count": len(stored)}), 201


@bp.delete("")
def clear_records():
    store = get_store()
    removed = len(store)
    store.clear()
    logger.info("Cleared %d survey records", removed)
    return jsonify({"message": "Survey data cleared", "count": removed})
