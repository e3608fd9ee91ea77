import logging
import sys
import traceback
from datetime import datetime
from typing import List, Optional, Union
from pathlib import Path

from echobot.config import settings

LOG_FORMAT = "%(levelname)s | %(name)s | (%(filename)s:%(lineno)d) | %(message)s"

# Terminal color codes for different log levels
COLORS = {
    "DEBUG": "\033[94m",  # Blue
    "INFO": "\033[92m",  # Green
    "WARNING": "\033[93m",  # Yellow
    "ERROR": "\033[91m",  # Red
    "CRITICAL": "\033[1;91m",  # Bold Red
    "RESET": "\033[0m",
}


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colours the level name of console records.
    """

    def format(self, record):
        levelname = record.levelname
        if levelname in COLORS:
            record.levelname = f"{COLORS[levelname]}{levelname}{COLORS['RESET']}"
        result = super().format(record)
        record.levelname = levelname
        return result


class ErrorFileFormatter(logging.Formatter):
    """
    Formatter for the daily error file.

    Records with exception info keep their traceback; records without one
    get the stack up to the logging call appended instead.
    """

    def format(self, record):
        result = super().format(record)
        if not (record.exc_info or record.stack_info or "Traceback" in result):
            stack = "".join(traceback.format_list(self.caller_stack(record)))
            result = f"{result}\nStack:\n{stack}"
        return result

    @staticmethod
    def caller_stack(record) -> List[traceback.FrameSummary]:
        """Current stack cut after the frame that issued the log call"""
        stack = traceback.extract_stack()
        for index in range(len(stack) - 1, -1, -1):
            frame = stack[index]
            if frame.filename == record.pathname and frame.lineno == record.lineno:
                return stack[: index + 1]
        # Call site not on this stack; drop the logging machinery frames
        return [frame for frame in stack if frame.filename != logging.__file__]


def setup_logger(
    name: str,
    level: Optional[Union[int, str]] = None,
    log_format: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level, defaults to settings.LOG_LEVEL
        log_format: Custom log format string
        log_file: Optional path to additional log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logger.setLevel(level)

    if log_format is None:
        log_format = LOG_FORMAT

    # Only add handlers if none exist already
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(log_format))
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(log_format))
            logger.addHandler(file_handler)

        # Daily error log file
        logs_dir = Path(settings.LOG_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime("%Y-%m-%d")
        error_file_handler = logging.FileHandler(logs_dir / f"{today}-errors.log")
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(ErrorFileFormatter(log_format))
        logger.addHandler(error_file_handler)

    return logger


def log_exception(logger: logging.Logger, message: str, exc: Exception = None) -> None:
    """
    Log an exception with full traceback information.

    Args:
        logger: Logger instance
        message: Error message to include
        exc: Exception object (if None, uses current exception context)
    """
    if exc is None:
        exc_type, exc_value, exc_traceback = sys.exc_info()
        if not any((exc_type, exc_value, exc_traceback)):
            logger.error(f"{message} (no exception info available)")
            return
    else:
        exc_type = type(exc)
        exc_value = exc
        exc_traceback = exc.__traceback__

    tb_lines = traceback.format_exception(exc_type, exc_value, exc_traceback)
    tb_text = "".join(tb_lines)
    logger.error(f"{message}\n{tb_text}")
