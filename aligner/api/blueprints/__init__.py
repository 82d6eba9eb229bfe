"""
API Routes
"""
from .interface_routes import create_interface_blueprint
from .session_routes import create_session_blueprint

__all__ = [
    'create_interface_blueprint',
    'create_session_blueprint'
]
