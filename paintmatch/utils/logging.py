"""
Paint Matcher Structured Logging
Configures the process-wide loguru sink and hands out loggers that can be
bound to an analysis ID, so every line of one photo's pipeline greps together.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from paintmatch.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"

_configured = False


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None):
    """Replace loguru's default handler with the service sink."""
    global _configured
    logger.remove()
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=config.LOG_JSON if json_output is None else json_output,
    )
    _configured = True


class StructuredLogger:
    """Wrapper over loguru accepting an ``extra`` dict per call."""

    def __init__(self, bound=None):
        self._logger = bound if bound is not None else logger

    def bind(self, **context: Any) -> "StructuredLogger":
        """Logger carrying ``context`` (e.g. ``request_id``) on every record."""
        return StructuredLogger(self._logger.bind(**context))

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = self._logger.bind(**extra) if extra else self._logger
        target.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the global logger, configuring the sink on first use."""
    global _logger
    if _logger is None:
        if not _configured:
            configure_logging()
        _logger = StructuredLogger()
    return _logger
