"""Flask application factory for the audiosplit HTTP API."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from audiosplit.config import Settings
from audiosplit.errors import AudioSplitError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()
    settings.work_dir.mkdir(parents=True, exist_ok=True)
    app.config["SETTINGS"] = settings
    app.config["WORK_DIR"] = settings.work_dir

    from audiosplit.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(AudioSplitError)
    def pipeline_error(error: AudioSplitError):
        if error.status_code >= 500:
            logger.error("Request failed: %s", error)
        return jsonify({"error": True, "message": str(error)}), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return jsonify({"error": True, "message": error.description}), error.code

    @app.errorhandler(Exception)
    def unexpected_error(error: Exception):
        logger.exception("Unhandled error")
        return jsonify({"error": True, "message": f"Server error: {error}"}), 500

    return app
