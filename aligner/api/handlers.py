"""
Translation job handlers

Each translation runs on a daemon worker thread that owns a fresh asyncio
event loop, so the Flask request returns immediately.
"""
import asyncio
import logging
import threading

from aligner.core.exceptions import AlignerError, TranslationFailedError
from aligner.utils.unified_logger import setup_web_logger
from .session_state import SessionPhase
from .websocket import emit_update

logger = logging.getLogger(__name__)


def run_translation_async_wrapper(session_id, text, state_manager, translator_factory, socketio):
    """
    Wrapper for running a translation in its own event loop

    Args:
        session_id (str): Session ID (already moved to TRANSLATING)
        text (str): Arabic source text
        state_manager: Session state manager instance
        translator_factory: Callable(logger) -> Translator
        socketio: SocketIO instance or None
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(
            perform_translation(session_id, text, state_manager, translator_factory, socketio)
        )
    except Exception as e:
        logger.exception(f"Uncaught error in translation wrapper {session_id}: {e}")
        if (state_manager.exists(session_id) and
                state_manager.get_session(session_id).phase == SessionPhase.TRANSLATING):
            state_manager.fail_translation(session_id, TranslationFailedError().message)
            emit_update(socketio, session_id, state_manager)
    finally:
        loop.close()


async def perform_translation(session_id, text, state_manager, translator_factory, socketio):
    """
    Run one translation and move the session to SUCCEEDED or FAILED
    """
    def web_callback(log_entry):
        state_manager.append_log(session_id, log_entry)
        emit_update(socketio, session_id, state_manager, log_entry)

    session_logger = setup_web_logger(session_id, web_callback)
    translator = translator_factory(session_logger)

    try:
        pairs = await translator.translate_and_align(text)
    except AlignerError as e:
        state_manager.fail_translation(session_id, e.message)
    else:
        state_manager.complete_translation(session_id, pairs)
    finally:
        provider = getattr(translator, 'provider', None)
        if provider is not None:
            await provider.close()

    emit_update(socketio, session_id, state_manager)


def start_translation_job(session_id, text, state_manager, translator_factory, socketio=None):
    """Start the translation worker thread and return it"""
    thread = threading.Thread(
        target=run_translation_async_wrapper,
        args=(session_id, text, state_manager, translator_factory, socketio),
        name=f"translate-{session_id}",
        daemon=True
    )
    thread.start()
    return thread
