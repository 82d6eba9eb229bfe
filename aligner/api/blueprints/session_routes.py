"""
Session routes: translate and export
"""
import io
import logging
from flask import Blueprint, request, jsonify, send_file

from aligner.core.exceptions import InputError, ExportFailedError, EXPORT_FAILED_MESSAGE
from ..session_state import SessionBusyError, SessionNotFoundError

logger = logging.getLogger('session_routes')


def create_session_blueprint(state_manager, start_translation_job, exporter, export_dir=None):
    """
    Create and configure the session blueprint

    Args:
        state_manager: Session state manager instance
        start_translation_job: Callable(session_id, text) starting the background job
        exporter: WordExporter instance
        export_dir: Optional directory where every export is also archived
    """
    bp = Blueprint('sessions', __name__)

    @bp.errorhandler(SessionNotFoundError)
    def session_not_found(error):
        return jsonify({"error": "Session not found"}), 404

    @bp.route('/api/sessions', methods=['POST'])
    def create_session():
        """Create a new idle session"""
        session_id = state_manager.create_session()
        logger.info(f"Session created: {session_id}")
        return jsonify(state_manager.get_session(session_id).to_dict()), 201

    @bp.route('/api/sessions/<session_id>', methods=['GET'])
    def get_session(session_id):
        """Get the session snapshot"""
        return jsonify(state_manager.get_session(session_id).to_dict())

    @bp.route('/api/sessions/<session_id>', methods=['DELETE'])
    def delete_session(session_id):
        if not state_manager.delete_session(session_id):
            raise SessionNotFoundError(session_id)
        return jsonify({"message": "Session deleted", "session_id": session_id})

    @bp.route('/api/sessions/<session_id>/translate', methods=['POST'])
    def translate(session_id):
        """Start translating the submitted Arabic text"""
        data = request.get_json(silent=True) or {}
        text = data.get('text', '')
        if not isinstance(text, str):
            return jsonify({"error": "Field 'text' must be a string"}), 400

        try:
            state_manager.begin_translation(session_id, text)
        except InputError as e:
            return jsonify({"error": e.message}), 400
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), 409

        start_translation_job(session_id, text)
        return jsonify(state_manager.get_session(session_id).to_dict()), 202

    @bp.route('/api/sessions/<session_id>/export', methods=['POST'])
    def export(session_id):
        """Build the Word document and send it as a download"""
        try:
            pairs = state_manager.begin_export(session_id)
        except InputError as e:
            return jsonify({"error": e.message}), 400
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), 409

        error = None
        try:
            exported = exporter.export(pairs)
            if export_dir:
                exporter.archive(exported, export_dir)
        except ExportFailedError as e:
            error = e.message
            return jsonify({"error": error}), 500
        except Exception as e:
            logger.exception(f"Unexpected export error for {session_id}: {e}")
            error = EXPORT_FAILED_MESSAGE
            return jsonify({"error": error}), 500
        finally:
            state_manager.end_export(session_id, error=error)

        return send_file(
            io.BytesIO(exported.content),
            mimetype=exported.media_type,
            as_attachment=True,
            download_name=exported.filename
        )

    return bp
