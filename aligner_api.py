"""
Flask web server for the Arabic aligner with WebSocket support
"""
import sys
import logging
import webbrowser
import threading

from aligner.config import AlignerConfig
from aligner.core.exceptions import ConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Reduce verbosity of werkzeug (Flask HTTP server logs)
logging.getLogger('werkzeug').setLevel(logging.WARNING)


def validate_configuration(config):
    """Validate required configuration before starting server"""
    issues = config.validate()

    if issues:
        logger.error("\n" + "="*70)
        logger.error("❌ CONFIGURATION ERROR")
        logger.error("="*70)
        for issue in issues:
            logger.error(f"   • {issue}")
        logger.error("\n💡 SOLUTION:")
        logger.error("   1. Create a .env file from .env.example")
        logger.error("   2. Set API_KEY to your Gemini API key")
        logger.error("   3. Restart the application")
        logger.error("\n   Quick setup:")
        logger.error("   python -m aligner.utils.env_helper setup")
        logger.error("="*70 + "\n")
        raise ConfigurationError("Configuration validation failed. See errors above.",
                                 context={'issues': len(issues)})

    logger.info("✅ Configuration validated successfully")


def open_browser(host, port):
    """Open the web interface in the default browser after a short delay"""
    def _open():
        import time
        time.sleep(1.5)
        url = f"http://{'localhost' if host == '0.0.0.0' else host}:{port}"
        logger.info(f"🌐 Opening browser at {url}")
        webbrowser.open(url)

    thread = threading.Thread(target=_open, daemon=True)
    thread.start()


def main(argv=None):
    config = AlignerConfig.from_env()
    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        validate_configuration(config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    # Imported after validation so a missing key never builds a half-configured app
    from aligner.api import create_app
    app, socketio = create_app(config)

    logger.info("="*60)
    logger.info("🚀 ARABIC TEXT ALIGNER & TRANSLATOR")
    logger.info("="*60)
    logger.info(f"   - Model: {config.model}")
    logger.info(f"   - Interface: http://{config.host}:{config.port}")
    logger.info(f"   - Health Check: http://{config.host}:{config.port}/api/health")
    if config.export_dir:
        logger.info(f"   - Export archive: {config.export_dir}")
    logger.info("")
    logger.info("💡 Press Ctrl+C to stop the server")

    if config.host == '0.0.0.0':
        logger.warning("⚠️  Server is binding to 0.0.0.0 (all network interfaces)")
        logger.warning("   For production, use a proper WSGI server")

    if '--no-browser' not in (argv if argv is not None else sys.argv[1:]):
        open_browser(config.host, config.port)

    socketio.run(app, debug=False, host=config.host, port=config.port, allow_unsafe_werkzeug=True)
    return 0


if __name__ == '__main__':
    sys.exit(main())
