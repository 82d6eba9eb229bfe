"""
Flask application for the aligner interface and JSON API
"""
import os
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from aligner.config import AlignerConfig
from aligner.core.docx import WordExporter
from aligner.core.llm import create_llm_provider
from aligner.core.translator import SegmentTranslator
from .handlers import start_translation_job
from .routes import configure_routes
from .session_state import SessionStateManager
from .websocket import configure_websocket_handlers

STATIC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'web', 'static')


def default_translator_factory(config):
    """Return a factory building a Gemini-backed translator per job"""
    def factory(logger):
        provider = create_llm_provider(
            "gemini",
            api_key=config.gemini_api_key,
            model=config.model,
            timeout=config.timeout
        )
        return SegmentTranslator(provider, logger=logger)
    return factory


def create_app(config=None, state_manager=None, translator_factory=None,
               exporter=None, job_starter=None):
    """
    Build the Flask app and its SocketIO server

    Args:
        config: AlignerConfig (defaults to the environment)
        state_manager: SessionStateManager (defaults to one purging sessions
            older than config.session_max_age)
        translator_factory: Callable(logger) -> Translator
        exporter: WordExporter
        job_starter: Callable(session_id, text, state_manager, translator_factory, socketio);
            defaults to the background-thread starter

    Returns:
        (app, socketio)
    """
    config = config or AlignerConfig.from_env()
    state_manager = state_manager or SessionStateManager(max_session_age=config.session_max_age)
    translator_factory = translator_factory or default_translator_factory(config)
    exporter = exporter or WordExporter()
    job_starter = job_starter or start_translation_job

    app = Flask(__name__, static_folder=STATIC_DIR, static_url_path='/static')
    app.config['ALIGNER_CONFIG'] = config
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*")

    def start_job_wrapper(session_id, text):
        """Wrapper to inject dependencies into job starter"""
        job_starter(session_id, text, state_manager, translator_factory, socketio)

    configure_routes(app, config, state_manager, start_job_wrapper, exporter)
    configure_websocket_handlers(socketio, state_manager)
    return app, socketio


__all__ = ['create_app', 'SessionStateManager']
