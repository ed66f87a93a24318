"""
Logging configuration for atomfeed.

Library modules log through structlog; this module routes those events
into stdlib logging handlers with JSON, colored or plain output. Console
output goes to stderr so parsed feeds written to stdout stay clean.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import structlog

from .config import LogFormat, LoggingSettings

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord('', logging.INFO, '', 0, '', None, None).__dict__
) | {'message', 'asctime'}


def _event_context(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    """Key/value pairs a structlog call attached to the record."""
    for key, value in vars(record).items():
        if key not in _RECORD_ATTRIBUTES and not key.startswith('_'):
            yield key, value


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with structlog context as top level keys."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record):
        payload: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}:{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': self.formatException(record.exc_info),
            }

        if self.include_extra:
            for key, value in _event_context(record):
                # Context never overwrites the fixed fields
                payload.setdefault(key, value)

        return json.dumps(payload, default=repr)


class ColoredFormatter(logging.Formatter):
    """Human readable console lines, tinted by level."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        line = super().format(record)

        context = ' '.join(f"{key}={value}" for key, value in _event_context(record))
        if context:
            line = f"{line} [{context}]"

        color = self.LEVEL_COLORS.get(record.levelno)
        return f"{color}{line}{self.RESET}" if color else line


class LoggingConfig:
    """Wires structlog and the stdlib root logger together."""

    LINE_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'

    @classmethod
    def make_formatter(cls, format_type: Union[str, LogFormat]) -> logging.Formatter:
        format_type = LogFormat(format_type)
        if format_type is LogFormat.JSON:
            return JSONFormatter()
        if format_type is LogFormat.COLORED:
            return ColoredFormatter(cls.LINE_FORMAT)
        return logging.Formatter(cls.LINE_FORMAT)

    @classmethod
    def build_handlers(
        cls,
        format_type: Union[str, LogFormat],
        log_file: Optional[str],
        console_output: bool
    ) -> List[logging.Handler]:
        """Stderr handler in the requested format, JSON lines for a log file."""
        handlers: List[logging.Handler] = []
        if console_output:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(cls.make_formatter(format_type))
            handlers.append(console)
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            to_file = logging.FileHandler(log_file, encoding='utf-8')
            to_file.setFormatter(JSONFormatter())
            handlers.append(to_file)
        return handlers

    @classmethod
    def setup_logging(
        cls,
        level: Union[str, int] = logging.INFO,
        format_type: Union[str, LogFormat] = LogFormat.COLORED,
        log_file: Optional[str] = None,
        console_output: bool = True
    ):
        """
        Replace the root logger's handlers and route structlog through them.

        Args:
            level: Level name or number, case-insensitive
            format_type: 'json', 'colored', or 'standard' for the console
            log_file: Also write JSON lines here when given
            console_output: Write to stderr
        """
        if isinstance(level, str):
            level = level.upper()

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        root_logger.setLevel(level)
        for handler in cls.build_handlers(format_type, log_file, console_output):
            root_logger.addHandler(handler)

        cls._configure_structlog()

        structlog.get_logger(__name__).info(
            "Logging system initialized",
            level=logging.getLevelName(root_logger.level),
            format_type=LogFormat(format_type).value,
            log_file=log_file
        )

    @classmethod
    def setup_from_settings(cls, settings: LoggingSettings, log_file: Optional[str] = None):
        cls.setup_logging(
            level=settings.log_level.value,
            format_type=settings.log_format,
            log_file=log_file
        )

    @classmethod
    def _configure_structlog(cls):
        """Send structlog events through the stdlib handlers."""
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.stdlib.render_to_log_kwargs,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
