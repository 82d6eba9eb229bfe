"""
Flask routes orchestrator for the aligner API

Registers the route blueprints:

- blueprints/interface_routes.py: Interface page, health check, public configuration
- blueprints/session_routes.py: Session state, translation and export
"""
import logging
from flask import jsonify

from .blueprints import create_interface_blueprint, create_session_blueprint

logger = logging.getLogger(__name__)


def configure_routes(app, config, state_manager, start_translation_job, exporter):
    """
    Configure Flask routes by registering all blueprints

    Args:
        app: Flask application instance
        config: AlignerConfig instance
        state_manager: Session state manager
        start_translation_job: Callable(session_id, text) starting a translation
        exporter: WordExporter instance
    """
    app.register_blueprint(create_interface_blueprint(config))
    app.register_blueprint(create_session_blueprint(
        state_manager,
        start_translation_job,
        exporter,
        export_dir=config.export_dir or None
    ))

    _register_error_handlers(app)


def _register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({"error": "API Endpoint not found"}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.exception(f"INTERNAL SERVER ERROR: {error}")
        return jsonify({"error": "Internal server error"}), 500
