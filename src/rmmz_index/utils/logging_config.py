"""
Logging configuration for rmmz-index.

Console output goes to stderr so that command output on stdout stays
machine readable. The optional log file is semicolon separated CSV.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..settings import AppSettings
    from ..settings.logging import LoggingSettings

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Too chatty at DEBUG
QUIET_LOGGERS = ("PIL", "PIL.PngImagePlugin", "PIL.JpegImagePlugin")

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}


class ColoredFormatter(logging.Formatter):
    """Colours the level name with ANSI escapes."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{RESET}", 1)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


class CSVFormatter(logging.Formatter):
    """One row per record: time; level; uptime; logger; line; message."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return ";".join(
            [
                _quote(self.formatTime(record, self.datefmt)),
                record.levelname.ljust(8),
                _quote(f"{int(record.relativeCreated)} ms"),
                _quote(record.name),
                _quote(str(record.lineno)),
                _quote(message),
            ]
        )


def _console_handler(options: "LoggingSettings", level_name: str) -> logging.Handler:
    formatter_class = ColoredFormatter if options.console_use_colors else logging.Formatter
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level_name.upper(), logging.WARNING))
    handler.setFormatter(formatter_class(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    return handler


def _file_handler(log_path: Path) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(CSVFormatter(datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(settings: "AppSettings", console_level: Optional[str] = None) -> None:
    """
    Replace the root handlers with the ones the settings ask for.

    Args:
        settings: Application settings, the ``logging`` group is read
        console_level: Level name for this run only, overrides the stored one
    """
    options = settings.logging
    level_name = console_level or options.console_log_level

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    logging.getLogger("rmmz_index").setLevel(logging.DEBUG)

    if options.console_logging:
        root.addHandler(_console_handler(options, level_name))

    log_path: Optional[Path] = None
    if options.file_logging:
        try:
            root.addHandler(_file_handler(Path(options.log_file_path)))
            log_path = options.log_file_absolute_path
        except OSError as e:
            root.warning(f"File logging disabled, cannot open {options.log_file_path}: {e}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if options.console_logging:
        logger.debug(f"Console level {level_name}, colors {options.console_use_colors}")
    if log_path:
        logger.debug(f"Writing DEBUG log to {log_path}")
