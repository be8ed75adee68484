"""
StudyKit Application Factory
"""
import os
from datetime import datetime, timezone

from flask import Flask, current_app, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_config
from studykit.services.cache import ResponseCache

cors = CORS()

# Version info
APP_VERSION = os.environ.get("APP_VERSION", "2026.10")
BUILD_TIME = os.environ.get("BUILD_TIME", "")
GIT_COMMIT = os.environ.get("GIT_COMMIT", "")


def get_cache() -> ResponseCache:
    return current_app.extensions["response_cache"]


def create_app(config_name=None, overrides=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    cors.init_app(app)
    app.extensions['response_cache'] = ResponseCache()

    # Scratch folders for uploads and OCR images
    for key in ('TEMP_IMAGES_DIR', 'TEMP_DOCS_DIR'):
        os.makedirs(app.config[key], exist_ok=True)

    # Register blueprints
    from studykit.api import api_bp

    app.register_blueprint(api_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return jsonify({"error": "File too large"}), 413

    # Health check endpoint
    @app.route('/healthz')
    def healthz():
        """Health check for load balancers and monitoring"""
        from studykit.services.llm_service import backend_name, client_ready
        from studykit.services.pdf_service import ocr_ready

        llm_ok, llm_msg = client_ready(app.config)
        ocr_ok, ocr_msg = ocr_ready()
        return jsonify({
            "status": "ok" if llm_ok else "degraded",
            "version": APP_VERSION,
            "backend": backend_name(app.config),
            "backend_status": "ok" if llm_ok else f"error: {llm_msg}",
            "ocr": "ok" if ocr_ok else f"error: {ocr_msg}",
            "cached_artifacts": len(app.extensions['response_cache']),
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    # Version endpoint
    @app.route('/version')
    def version():
        """Version and build info"""
        return jsonify({
            "version": APP_VERSION,
            "build_time": BUILD_TIME,
            "git_commit": GIT_COMMIT,
            "features": {
                "ocr": True,
                "docx": True,
                "office_conversion": True,
                "artifact_cache": True,
            }
        })

    app.logger.info('StudyKit ready (backend=%s)', app.config.get('GENERATION_BACKEND'))
    return app
