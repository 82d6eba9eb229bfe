"""
WebSocket handlers for real-time session updates
"""
import logging

from flask import request
from flask_socketio import emit, join_room

logger = logging.getLogger(__name__)


def configure_websocket_handlers(socketio, state_manager):
    """Configure WebSocket event handlers"""

    @socketio.on('connect')
    def handle_websocket_connect():
        logger.info(f'🔌 WebSocket client connected: {request.sid}')
        emit('connected', {'message': 'Connected to aligner server via WebSocket'})

    @socketio.on('disconnect')
    def handle_websocket_disconnect():
        logger.info(f'🔌 WebSocket client disconnected: {request.sid}')

    @socketio.on('watch_session')
    def handle_watch_session(data):
        """Subscribe this socket to updates for one session"""
        session_id = (data or {}).get('session_id')
        if not session_id or not state_manager.exists(session_id):
            emit('session_error', {'error': 'Session not found'})
            return
        join_room(session_id)
        emit('session_update', state_manager.get_session(session_id).to_dict())


def emit_update(socketio, session_id, state_manager, log_entry=None):
    """
    Emit the current session snapshot to the sockets watching the session

    Args:
        socketio: SocketIO instance (None disables emission)
        session_id (str): Session ID
        state_manager: Session state manager instance
        log_entry (dict): Optional log entry that triggered the update
    """
    if socketio is None or not state_manager.exists(session_id):
        return
    payload = state_manager.get_session(session_id).to_dict()
    if log_entry:
        payload['log_entry'] = log_entry
    try:
        socketio.emit('session_update', payload, to=session_id, namespace='/')
    except Exception as e:
        # Clients fall back to polling the snapshot endpoint
        logger.warning(f"WebSocket emission error for {session_id}: {e}")
