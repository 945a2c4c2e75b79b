"""
Centralized Logging for Drone Editor

This module provides a configured logger with:
- Console output split by severity (warnings and errors go to stderr)
- Append-mode file logging with a separator per session
- Suppression of consecutive duplicate messages
- Configurable log levels via LOG_LEVEL environment variable

Usage:
    from drone_editor.logger import logger

    logger.info("Importing media...")
    logger.debug("Detailed debug info")
    logger.warning("Something unexpected")
    logger.error("Something failed")
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


APP_NAME = "Drone Editor"
LOGGER_NAME = "drone_editor"


# =============================================================================
# Log Level Configuration
# =============================================================================
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def parse_log_level(level) -> int:
    """Accept a level name or number, falling back to INFO."""
    if isinstance(level, int) and level in LOG_LEVEL_MAP.values():
        return level
    if isinstance(level, str):
        return LOG_LEVEL_MAP.get(level.upper(), logging.INFO)
    return logging.INFO


def default_log_file() -> Path:
    """Log file under the user's Documents folder, or the temp dir without a home."""
    override = os.environ.get("DRONE_EDITOR_LOG_FILE")
    if override:
        return Path(override)
    home = os.environ.get("USERPROFILE") or os.environ.get("HOME")
    if home:
        return Path(home) / "Documents" / "DroneEditor" / "logs" / "drone_editor.log"
    temp = os.environ.get("TEMP") or os.environ.get("TMP") or "/tmp"
    return Path(temp) / "DroneEditor" / "logs" / "drone_editor.log"


# =============================================================================
# Formatter and Filters
# =============================================================================
class LineFormatter(logging.Formatter):
    """`timestamp - LEVEL - caller - message`, shared by console and file."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(levelname)s - %(funcName)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class DedupFilter(logging.Filter):
    """
    Drop a record whose message equals the previous one.

    The filter sits on the logger so a repeated message is suppressed once
    for every handler, and emits again as soon as a different message appears.
    """

    def __init__(self):
        super().__init__()
        self.last_message: Optional[str] = None

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if message == self.last_message:
            return False
        self.last_message = message
        return True


class MaxLevelFilter(logging.Filter):
    """Pass only records below a level (keeps warnings off stdout)."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


# =============================================================================
# Logger Setup
# =============================================================================
def setup_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[Path] = None,
    level: Optional[int] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Create and configure a logger instance.

    Args:
        name: Logger name (default: drone_editor)
        log_file: Optional path to log file (opened in append mode)
        level: Log level (default: from LOG_LEVEL env var)
        console: Echo records to stdout/stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    log_level = level or get_log_level()
    logger.setLevel(log_level)
    logger.addFilter(DedupFilter())

    if console:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(LineFormatter())
        stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
        logger.addHandler(stdout_handler)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.WARNING)
        stderr_handler.setFormatter(LineFormatter())
        logger.addHandler(stderr_handler)

    if log_file:
        add_file_handler(logger, log_file)

    return logger


def add_file_handler(logger: logging.Logger, log_file: Path) -> Optional[logging.Handler]:
    """
    Attach an append-mode file handler, writing a session separator first.

    Returns None (console-only logging) when the file cannot be opened.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"\n\n--- New Session: {datetime.now():%Y-%m-%d %H:%M:%S} ---\n\n")
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        print(f"ERROR: Could not open log file {log_file}: {e}", file=sys.stderr)
        print("Will log to console only", file=sys.stderr)
        return None

    file_handler.setFormatter(LineFormatter())
    logger.addHandler(file_handler)
    return file_handler


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name (default: drone_editor)

    Returns:
        Logger instance
    """
    return setup_logger(name)


def configure_logging(
    log_file: Optional[Path] = None,
    level=None,
    console: bool = True,
) -> Optional[Path]:
    """
    (Re)configure the package logger for an editor session.

    Replaces any existing handlers. Returns the log file path in use, or
    None when file logging could not be enabled.
    """
    root_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for existing in list(root_logger.filters):
        root_logger.removeFilter(existing)

    log_file = log_file or default_log_file()
    setup_logger(LOGGER_NAME, level=parse_log_level(level) if level else None, console=console)
    handler = add_file_handler(root_logger, log_file)
    return log_file if handler else None


def set_level(level) -> None:
    """Set the minimum level of the package logger (name or number)."""
    logging.getLogger(LOGGER_NAME).setLevel(parse_log_level(level))


# =============================================================================
# Global Logger Instance
# =============================================================================
logger = get_logger()


# =============================================================================
# Convenience Functions
# =============================================================================
def log_step(step: str, emoji: str = "▶") -> None:
    """Log a processing step."""
    logger.info(f"{emoji} {step}")


def log_success(message: str) -> None:
    """Log a success message with checkmark."""
    logger.info(f"✅ {message}")


def log_error(message: str) -> None:
    """Log an error message with X mark."""
    logger.error(f"❌ {message}")


def log_warning(message: str) -> None:
    """Log a warning message."""
    logger.warning(f"⚠️  {message}")


def reset_dedup(name: str = LOGGER_NAME) -> None:
    """Forget the last message so the next one is always emitted."""
    for existing in logging.getLogger(name).filters:
        if isinstance(existing, DedupFilter):
            existing.last_message = None
