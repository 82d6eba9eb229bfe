"""
Interface, configuration and health check routes
"""
import os
import logging
from flask import Blueprint, jsonify, send_from_directory

from aligner import __version__

logger = logging.getLogger('interface_routes')

WEB_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), 'web')
TEMPLATES_DIR = os.path.join(WEB_DIR, 'templates')
INTERFACE_FILE = 'aligner_interface.html'


def create_interface_blueprint(config):
    """
    Create and configure the interface blueprint

    Args:
        config: AlignerConfig instance
    """
    bp = Blueprint('interface', __name__)

    @bp.route('/')
    def serve_interface():
        """Serve the main aligner interface"""
        interface_path = os.path.join(TEMPLATES_DIR, INTERFACE_FILE)
        if os.path.exists(interface_path):
            return send_from_directory(TEMPLATES_DIR, INTERFACE_FILE)
        return f"<h1>Error: Interface not found</h1><p>Looked in: {interface_path}</p>", 404

    @bp.route('/api/health', methods=['GET'])
    def health_check():
        """API health check endpoint"""
        return jsonify({
            "status": "ok",
            "message": "Arabic aligner API is running",
            "version": __version__,
            "model": config.model
        })

    @bp.route('/api/config', methods=['GET'])
    def get_public_config():
        """Get interface configuration (never includes credentials)"""
        return jsonify(config.to_public_dict())

    return bp
