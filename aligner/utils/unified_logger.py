"""
Unified logging system for the Arabic aligner
Provides consistent console output plus structured entries for the web interface
"""
import sys
import os
import threading
from datetime import datetime
from typing import Optional, Dict, Any, Callable
from enum import Enum


class LogLevel(Enum):
    """Log levels with priority values"""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogType(Enum):
    """Types of log messages for special handling"""
    GENERAL = "general"
    LLM_REQUEST = "llm_request"
    LLM_RESPONSE = "llm_response"
    TRANSLATION_START = "translation_start"
    TRANSLATION_END = "translation_end"
    EXPORT = "export"
    ERROR_DETAIL = "error_detail"


class Colors:
    """ANSI color codes for terminal output"""
    # Check if colors should be disabled
    NO_COLOR = os.environ.get('NO_COLOR') is not None or not sys.stdout.isatty()

    YELLOW = '' if NO_COLOR else '\033[93m'       # Headers
    WHITE = '' if NO_COLOR else '\033[97m'        # Main text
    GRAY = '' if NO_COLOR else '\033[90m'         # Technical details
    ORANGE = '' if NO_COLOR else '\033[38;5;214m' # Input sent to the LLM
    GREEN = '' if NO_COLOR else '\033[92m'        # Output from the LLM
    RED = '' if NO_COLOR else '\033[91m'          # Errors
    ENDC = '' if NO_COLOR else '\033[0m'          # Reset

    @classmethod
    def disable(cls):
        """Disable all colors"""
        cls.YELLOW = cls.WHITE = cls.GRAY = cls.ORANGE = cls.GREEN = cls.RED = cls.ENDC = ''


class UnifiedLogger:
    """
    Unified logger that provides consistent logging across the server and adapters
    """

    def __init__(self,
                 name: str = "ArabicAligner",
                 console_output: bool = True,
                 enable_colors: bool = True,
                 min_level: LogLevel = LogLevel.INFO,
                 web_callback: Optional[Callable] = None):
        """
        Initialize the unified logger

        Args:
            name: Logger name/identifier
            console_output: Whether to output to console
            enable_colors: Whether to use colored output
            min_level: Minimum log level to display
            web_callback: Callback receiving each structured entry (session log + WebSocket)
        """
        self.name = name
        self.console_output = console_output
        self.enable_colors = enable_colors
        self.min_level = min_level
        self.web_callback = web_callback
        self._started_at: Optional[datetime] = None

        if not enable_colors:
            Colors.disable()

    def _format_timestamp(self) -> str:
        """Format current timestamp"""
        return datetime.now().strftime("%H:%M:%S")

    def _format_console_message(self, level: LogLevel, message: str,
                                log_type: LogType = LogType.GENERAL,
                                data: Optional[Dict[str, Any]] = None) -> str:
        """Format message for console output"""
        timestamp = self._format_timestamp()

        level_colors = {
            LogLevel.DEBUG: Colors.GRAY,
            LogLevel.INFO: Colors.WHITE,
            LogLevel.WARNING: Colors.YELLOW,
            LogLevel.ERROR: Colors.RED,
            LogLevel.CRITICAL: Colors.RED
        }
        color = level_colors.get(level, Colors.WHITE)

        if log_type == LogType.LLM_REQUEST:
            return self._format_llm_request(data or {})
        elif log_type == LogType.LLM_RESPONSE:
            return self._format_llm_response(data or {})
        elif log_type == LogType.TRANSLATION_START:
            return self._format_translation_start(data or {})
        elif log_type == LogType.TRANSLATION_END:
            return self._format_translation_end(data or {})
        elif log_type == LogType.ERROR_DETAIL:
            return self._format_error_detail(message, data or {})
        else:
            level_str = f"[{level.name}]" if level != LogLevel.INFO else ""
            return f"{color}[{timestamp}] [{self.name}] {level_str} {message}{Colors.ENDC}"

    def _format_llm_request(self, data: Dict[str, Any]) -> str:
        """Format LLM request with full details"""
        output = [f"{Colors.YELLOW}{'=' * 80}{Colors.ENDC}"]
        output.append(f"{Colors.YELLOW}[{self._format_timestamp()}] SENDING TO LLM{Colors.ENDC}")
        if 'model' in data:
            output.append(f"{Colors.GRAY}Model: {data['model']}{Colors.ENDC}")
        output.append(f"\n{Colors.ORANGE}RAW PROMPT (INPUT):{Colors.ENDC}")
        output.append(f"{Colors.ORANGE}{data.get('prompt', '')}{Colors.ENDC}")
        return '\n'.join(output)

    def _format_llm_response(self, data: Dict[str, Any]) -> str:
        """Format LLM response with full details"""
        output = [f"{Colors.GREEN}[{self._format_timestamp()}] LLM RESPONSE (OUTPUT){Colors.ENDC}"]

        if 'execution_time' in data:
            output.append(f"{Colors.GRAY}Execution time: {data['execution_time']:.2f} seconds{Colors.ENDC}")
        if 'prompt_tokens' in data or 'completion_tokens' in data:
            output.append(
                f"{Colors.GRAY}[TOKENS] prompt={data.get('prompt_tokens', 0)}, "
                f"response={data.get('completion_tokens', 0)}{Colors.ENDC}"
            )

        # Full response only in debug mode for console
        if self.min_level == LogLevel.DEBUG:
            output.append(f"\n{Colors.GREEN}RAW RESPONSE:{Colors.ENDC}")
            output.append(f"{Colors.GREEN}{data.get('response', '')}{Colors.ENDC}")

        return '\n'.join(output)

    def _format_translation_start(self, data: Dict[str, Any]) -> str:
        """Format translation start message"""
        self._started_at = datetime.now()
        output = [f"{Colors.YELLOW}TRANSLATION STARTED{Colors.ENDC}"]
        output.append(f"{Colors.WHITE}Languages: {data.get('source_lang', 'Arabic')} → "
                      f"{data.get('target_lang', 'English')}{Colors.ENDC}")
        output.append(f"{Colors.GRAY}Model: {data.get('model', 'Unknown')}{Colors.ENDC}")
        if 'characters' in data:
            output.append(f"{Colors.WHITE}Source length: {data['characters']} characters{Colors.ENDC}")
        return '\n'.join(output)

    def _format_translation_end(self, data: Dict[str, Any]) -> str:
        """Format translation end message"""
        output = [f"\n{Colors.WHITE}TRANSLATION COMPLETE{Colors.ENDC}"]
        if self._started_at:
            output.append(f"{Colors.GRAY}Duration: {datetime.now() - self._started_at}{Colors.ENDC}")
            self._started_at = None
        if 'segments' in data:
            output.append(f"{Colors.WHITE}Segments: {data['segments']}{Colors.ENDC}")
        return '\n'.join(output)

    def _format_error_detail(self, message: str, data: Dict[str, Any]) -> str:
        """Format detailed error message"""
        output = [f"{Colors.RED}[{self._format_timestamp()}] ERROR: {message}{Colors.ENDC}"]
        if 'details' in data:
            output.append(f"{Colors.RED}Details: {data['details']}{Colors.ENDC}")
        return '\n'.join(output)

    def log(self, level: LogLevel, message: str,
            log_type: LogType = LogType.GENERAL,
            data: Optional[Dict[str, Any]] = None):
        """
        Main logging method

        Args:
            level: Log level
            message: Log message
            log_type: Type of log for special formatting
            data: Additional data for the log entry
        """
        if level.value < self.min_level.value:
            return

        if self.console_output:
            try:
                console_msg = self._format_console_message(level, message, log_type, data)
                if console_msg:
                    print(console_msg, flush=True)
            except UnicodeEncodeError:
                # Consoles with a narrow codec cannot print Arabic text
                safe_message = message.encode('ascii', 'replace').decode('ascii')
                print(f"[{self._format_timestamp()}] {safe_message}", flush=True)

        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'level': level.name,
            'type': log_type.value,
            'message': message,
            'data': data or {}
        }

        if self.web_callback:
            self.web_callback(log_entry)

    # Convenience methods
    def debug(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.DEBUG, message, log_type, data)

    def info(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.INFO, message, log_type, data)

    def warning(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.WARNING, message, log_type, data)

    def error(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.ERROR, message, log_type, data)

    def critical(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.CRITICAL, message, log_type, data)


# Named logger registry
_loggers: Dict[str, UnifiedLogger] = {}
_registry_lock = threading.Lock()


def _default_level() -> LogLevel:
    # Import here to avoid circular dependencies
    from aligner.config import DEBUG_MODE
    return LogLevel.DEBUG if DEBUG_MODE else LogLevel.INFO


def get_logger(name: str = "ArabicAligner", **kwargs) -> UnifiedLogger:
    """
    Get or create the shared logger registered under ``name``

    Args:
        name: Logger name
        **kwargs: Additional arguments for UnifiedLogger (first creation only)

    Returns:
        UnifiedLogger instance
    """
    with _registry_lock:
        logger = _loggers.get(name)
        if logger is None:
            kwargs.setdefault('min_level', _default_level())
            logger = UnifiedLogger(name, **kwargs)
            _loggers[name] = logger
        return logger


def setup_web_logger(session_id: str, web_callback: Callable) -> UnifiedLogger:
    """
    Create a logger bound to one browser session.

    Session loggers are not registered: each translation job gets its own
    instance so callbacks never leak between sessions.
    """
    return UnifiedLogger(
        name=f"session:{session_id}",
        console_output=True,
        enable_colors=True,
        min_level=_default_level(),
        web_callback=web_callback
    )
