"""Centralized logging configuration for pinashell - one file-backed setup shared by every module."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Global state for logging configuration
_log_enabled = False
_log_file = None
_is_configured = False


class MillisecondFormatter(logging.Formatter):
    """Formatter that keeps milliseconds in the timestamp."""

    def formatTime(self, record, datefmt=None):
        ct = datetime.fromtimestamp(record.created)
        if datefmt:
            s = ct.strftime(datefmt)[:-3]  # Remove last 3 digits to get milliseconds
        else:
            s = ct.strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        return s


def setup_logging(log_file_path: Optional[str] = None, mode: str = 'w') -> None:
    """Set up centralized logging configuration with optional file output."""
    global _log_enabled, _log_file, _is_configured

    if _is_configured:
        return

    # Enable logging if log file path is provided
    if log_file_path:
        _log_enabled = True
        _log_file = Path(log_file_path)

    if not _log_enabled:
        return

    _log_file.parent.mkdir(parents=True, exist_ok=True)

    # The terminal belongs to the editor, so nothing may log to the console
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(str(_log_file), mode=mode)
    file_handler.setLevel(logging.DEBUG)
    formatter = MillisecondFormatter('[%(asctime)s] [%(levelname)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S.%f')
    file_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG)

    _is_configured = True

    logger = get_logger(__name__)
    logger.info("Logging initialized")


def reset_logging() -> None:
    """Drop the file handler and return to the unconfigured state."""
    global _log_enabled, _log_file, _is_configured

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()

    _log_enabled = False
    _log_file = None
    _is_configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the specified module name."""
    return logging.getLogger(name)


def log_message(level: str, message: str, logger_name: Optional[str] = None) -> None:
    """Log a message, echoing ERROR and CRITICAL to stderr regardless of file logging."""

    if level in ["ERROR", "CRITICAL"]:
        print(message, file=sys.stderr)

    if not _log_enabled:
        return

    logger = get_logger(logger_name or __name__)

    # Get caller information
    import inspect
    frame = inspect.currentframe()
    try:
        caller_frame = frame.f_back

        # Skip wrappers that forward to log_message
        if caller_frame and caller_frame.f_code.co_name == 'log_message':
            caller_frame = caller_frame.f_back

        if caller_frame:
            filename = caller_frame.f_code.co_filename
            line_number = caller_frame.f_lineno
            filename = filename.split('/')[-1]
            formatted_message = f"[{filename}:{line_number}] {message}"
        else:
            formatted_message = message

        if level.upper() == "DEBUG":
            logger.debug(formatted_message)
        else:
            getattr(logger, level.lower(), logger.info)(formatted_message)
    finally:
        del frame


def is_logging_enabled() -> bool:
    """Check if logging is enabled."""
    return _log_enabled


def get_log_file() -> Optional[Path]:
    """Get the current log file path."""
    return _log_file
