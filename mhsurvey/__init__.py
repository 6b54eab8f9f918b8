# mhsurvey/__init__.py
import logging

from flask import Flask, jsonify, request

from .charts import ChartNotFound, UnsupportedChartType
from .config import config
from .extensions import cors, init_store
from .ingest.pipeline import RecordValidationError
from .routes.analytics import bp as analytics_bp
from .routes.charts import bp as charts_bp
from .routes.export import bp as export_bp
from .routes.ingest import bp as ingest_bp
from .routes.survey_data import bp as survey_data_bp

logger = logging.getLogger(__name__)


def create_app(config_name="default", store=None):
    """
    Build the dashboard API.

    ``store`` lets callers (tests, scripts) hand in their own SurveyStore;
    otherwise the app gets a fresh empty one.
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.url_map.strict_slashes = False  # 避免 308/301 重定向
    # keep aggregate buckets in their display order
    app.json.sort_keys = False

    logging.basicConfig(level=app.config["LOG_LEVEL"])
    cors.init_app(app, origins=app.config["CORS_ORIGINS"])
    init_store(app, store)

    app.register_blueprint(survey_data_bp, url_prefix="/api/survey-data")
    app.register_blueprint(ingest_bp, url_prefix="/api")
    app.register_blueprint(export_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api/analytics")
    app.register_blueprint(charts_bp, url_prefix="/api/charts")

    @app.get("/api/v1/health")
    def health():
        return {"status": "ok"}

    @app.errorhandler(RecordValidationError)
    def _invalid_record(e):
        return jsonify({"error": "Invalid data format", "row": e.row, "errors": e.errors}), 400

    @app.errorhandler(ChartNotFound)
    def _unknown_chart(e):
        return jsonify({"error": f"unknown chart: {e.args[0]}"}), 404

    @app.errorhandler(UnsupportedChartType)
    def _bad_chart_type(e):
        return jsonify({"error": str(e)}), 400

    # 所有 /api/* 错误都返回 JSON
    @app.errorhandler(404)
    def _404(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "not found", "path": request.path}), 404
        return e

    @app.errorhandler(405)
    def _405(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "method not allowed", "path": request.path}), 405
        return e

    @app.errorhandler(413)
    def _413(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "payload too large"}), 413
        return e

    @app.errorhandler(500)
    def _500(e):
        original = getattr(e, "original_exception", None) or e
        logger.error("Unhandled error on %s: %s", request.path, original)
        if request.path.startswith("/api/"):
            return jsonify({"error": "Internal server error"}), 500
        return e

    logger.debug("Routes: %s", [str(r) for r in app.url_map.iter_rules()])
    return app
