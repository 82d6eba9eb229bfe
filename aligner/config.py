"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("🔍 DEBUG_MODE enabled - verbose logging active")

# Get config directory (current working directory)
_config_dir = Path.cwd()
_env_file = _config_dir / '.env'

if _debug_mode:
    _config_logger.debug(f"📁 Looking for .env at: {_env_file.absolute()}")
    _config_logger.debug(f"📁 .env exists: {_env_file.exists()}")

# Load .env file if it exists (never overrides the real environment)
_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"📁 load_dotenv() returned: {_dotenv_result}")


def _read_int(name, default):
    """Integer from the environment; a non-numeric value is kept as-is for validate()"""
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return raw


# Load from environment variables with defaults
# API_KEY is the historical name; GEMINI_API_KEY matches the provider naming
GEMINI_API_KEY = os.getenv('API_KEY') or os.getenv('GEMINI_API_KEY', '')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
GEMINI_API_BASE = 'https://generativelanguage.googleapis.com/v1beta/models'
REQUEST_TIMEOUT = _read_int('REQUEST_TIMEOUT', 120)

# Server configuration
HOST = os.getenv('HOST', '127.0.0.1')
PORT = _read_int('PORT', 5000)

# Idle browser sessions older than this are dropped when new ones are created
SESSION_MAX_AGE = _read_int('SESSION_MAX_AGE', 21600)

# Optional server-side archive of exported documents (disabled when empty)
EXPORT_DIR = os.getenv('EXPORT_DIR', '')

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'

# Language pair
SOURCE_LANGUAGE = "Arabic"
TARGET_LANGUAGE = "English"
EXPORT_LABEL = f"({SOURCE_LANGUAGE} + {TARGET_LANGUAGE})"

# Messages cycled by the interface while a translation is outstanding
LOADER_MESSAGES = [
    "Analyzing Arabic text structure...",
    "Translating with high precision...",
    "Aligning segments for side-by-side view...",
    "Polishing the output...",
    "Almost there...",
]
LOADER_INTERVAL_MS = 1500

if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("="*60)
    _config_logger.debug("📋 LOADED CONFIGURATION VALUES:")
    _config_logger.debug("="*60)
    _config_logger.debug(f"   GEMINI_MODEL: {GEMINI_MODEL}")
    _config_logger.debug(f"   GEMINI_API_KEY: {'***' + GEMINI_API_KEY[-4:] if GEMINI_API_KEY else '(not set)'}")
    _config_logger.debug(f"   REQUEST_TIMEOUT: {REQUEST_TIMEOUT}")
    _config_logger.debug(f"   HOST: {HOST}")
    _config_logger.debug(f"   PORT: {PORT}")
    _config_logger.debug(f"   SESSION_MAX_AGE: {SESSION_MAX_AGE}")
    _config_logger.debug(f"   EXPORT_DIR: {EXPORT_DIR or '(disabled)'}")
    _config_logger.debug("="*60)


@dataclass
class AlignerConfig:
    """Runtime configuration shared by the server and the translator"""

    gemini_api_key: str = GEMINI_API_KEY
    model: str = GEMINI_MODEL
    timeout: int = REQUEST_TIMEOUT
    host: str = HOST
    port: int = PORT
    export_dir: str = EXPORT_DIR
    session_max_age: int = SESSION_MAX_AGE
    debug: bool = DEBUG_MODE
    loader_messages: List[str] = field(default_factory=lambda: list(LOADER_MESSAGES))

    @classmethod
    def from_env(cls) -> 'AlignerConfig':
        """Re-read the environment (useful after .env edits or in tests)"""
        return cls(
            gemini_api_key=os.getenv('API_KEY') or os.getenv('GEMINI_API_KEY', ''),
            model=os.getenv('GEMINI_MODEL', GEMINI_MODEL),
            timeout=_read_int('REQUEST_TIMEOUT', REQUEST_TIMEOUT),
            host=os.getenv('HOST', HOST),
            port=_read_int('PORT', PORT),
            export_dir=os.getenv('EXPORT_DIR', EXPORT_DIR),
            session_max_age=_read_int('SESSION_MAX_AGE', SESSION_MAX_AGE),
            debug=os.getenv('DEBUG_MODE', 'false').lower() == 'true',
        )

    def validate(self) -> List[str]:
        """Return a list of configuration issues (empty when valid)"""
        issues = []
        if not self.gemini_api_key:
            issues.append("API_KEY (or GEMINI_API_KEY) environment variable not set")
        if not self.model:
            issues.append("GEMINI_MODEL must be configured")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            issues.append(f"PORT must be a valid port number (got {self.port!r})")
        if not isinstance(self.timeout, int) or self.timeout <= 0:
            issues.append(f"REQUEST_TIMEOUT must be a positive number of seconds (got {self.timeout!r})")
        if not isinstance(self.session_max_age, int) or self.session_max_age <= 0:
            issues.append(f"SESSION_MAX_AGE must be a positive number of seconds (got {self.session_max_age!r})")
        return issues

    def to_public_dict(self) -> dict:
        """Configuration safe to expose to the browser (no credentials)"""
        return {
            'model': self.model,
            'source_language': SOURCE_LANGUAGE,
            'target_language': TARGET_LANGUAGE,
            'export_label': EXPORT_LABEL,
            'loader_messages': self.loader_messages,
            'loader_interval_ms': LOADER_INTERVAL_MS,
        }
