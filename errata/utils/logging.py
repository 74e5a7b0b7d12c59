"""\
Logging
=======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides logging utilities and configuration helpers for the
framework. It builds on the standard Python logging library and adds
formatters for plain, coloured and JSON output.

Whenever a record carries a classified exception, the formatters surface
its error class and SQL state next to the message, so logs can be
searched by error class instead of by message text.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import typing as t

from errata.utils.filesystem import mkdir

if t.TYPE_CHECKING:
    from errata.core.config import LoggerConfig

__all__: tuple[str, ...] = (
    "ColouredFormatter",
    "ErrataFormatter",
    "JSONFormatter",
    "configure",
    "get_logger",
)


def _classification(record: logging.LogRecord) -> dict[str, str]:
    """Return the error class and SQL state of a logged exception.

    Only values that are present are returned. Records without an
    exception, or with an unclassified one, yield an empty dictionary.

    :param record: The log record to inspect.
    :return: Mapping with the `error_class` and `sql_state` keys.
    """
    if not record.exc_info or record.exc_info[1] is None:
        return {}
    error = record.exc_info[1]
    fields = {
        "error_class": getattr(error, "error_class", None),
        "sql_state": getattr(error, "sql_state", None),
    }
    return {key: value for key, value in fields.items() if value is not None}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records in JSON format, which is useful
    for structured logging, usually in the production environments. It
    captures the timestamp, log level, logger name, message, module,
    function, line number, any exception information and, for classified
    exceptions, their error class and SQL state.

    :param extras: Whether to include extra fields in output, defaults
        to `True`. If set to `False`, only the standard log fields will
        be included in the output.
    """

    def __init__(self, extras: bool = True) -> None:
        """Initialise the JSON formatter instance."""
        super().__init__()
        self.extras = extras

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        :param record: The log record to format.
        :return: JSON-formatted log message.
        """
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
            payload.update(_classification(record))
        if self.extras:
            for key, value in record.__dict__.items():
                if (
                    key not in payload
                    and key not in ErrataFormatter.LOG_RECORD_ATTRS
                    and not key.startswith("_")
                ):
                    payload[key] = value
        return json.dumps(payload, default=str)


class ErrataFormatter(logging.Formatter):
    """Custom formatter that automatically includes extra fields.

    This formatter extends the standard logging formatter to
    automatically format and include extra fields in log messages. The
    extra fields are made available as `%(extra)s` in the format string.

    Extra fields are those not part of the standard `LogRecord`
    attributes. The error class and SQL state of a logged classified
    exception are added to them automatically.

    :param fmt: The format string for log messages. Can include
        `%(extra)s` placeholder for automatically formatted extra fields,
        defaults to `None`.
    :param datefmt: The format string for timestamps in log messages,
        defaults to `None`.
    :param extra_format: Format string for individual extra fields,
        defaults to `key: value` pairs.
    :param extra_separator: Separator between multiple extra fields,
        defaults to a single space.
    :var LOG_RECORD_ATTRS: Set of standard `LogRecord` attributes.
    """

    LOG_RECORD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "taskName",
        "extra",
    }

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        extra_format: str = "{key}: {value}",
        extra_separator: str = " ",
    ) -> None:
        """Initialise the custom formatter."""
        super().__init__(fmt, datefmt)
        self.extra = extra_format
        self.extra_separator = extra_separator

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with automatic extra field handling.

        :param record: The log record to format.
        :return: Formatted log message with extra fields.
        """
        clone = logging.makeLogRecord(record.__dict__)
        extras = _classification(record)
        for key, value in record.__dict__.items():
            if key not in self.LOG_RECORD_ATTRS and not key.startswith("_"):
                extras[key] = value
        clone.extra = self.extra_separator.join(
            self.extra.format(key=key, value=value)
            for key, value in sorted(extras.items())
        )
        return super().format(clone)


class ColouredFormatter(ErrataFormatter):
    """Formatter with colour coded, fixed width level names.

    Colours are only applied when `is_tty` is set, ensuring that log
    files remain clean and free of ANSI escape sequences.

    :var COLORS: Dictionary mapping log levels to ANSI colour codes.
    """

    COLORS = {
        "DEBUG": "\x1b[38;5;14m",
        "INFO": "\x1b[38;5;41m",
        "WARNING": "\x1b[38;5;215m",
        "ERROR": "\x1b[38;5;204m",
        "CRITICAL": "\x1b[38;5;197m",
        "RESET": "\x1b[0m",
    }

    is_tty: bool = False

    def format(self, record: logging.LogRecord) -> str:
        """Format log record.

        :param record: The log record to format.
        :return: Formatted log message, with colours only for TTY
            output.
        """
        clone = logging.makeLogRecord(record.__dict__)
        if self.is_tty:
            colour = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            clone.levelname = (
                f"{colour}{record.levelname:>8s}{self.COLORS['RESET']}"
            )
        else:
            clone.levelname = f"{record.levelname:>8s}"
        return super().format(clone)


def configure(config: LoggerConfig) -> None:
    """Configure logging based on provided configuration settings.

    This function sets up the root logger with a console handler and a
    rotating file handler, as enabled in the configuration. JSON output
    is used for both when `as_json` is set.

    :param config: Logging configuration settings.
    """
    handlers: list[logging.Handler] = []
    levels: list[int] = []
    logger = logging.getLogger()
    logger.handlers.clear()
    if config.tty.enable:
        tty = logging.StreamHandler(sys.stdout)
        tty.setLevel(getattr(logging, config.tty.level.upper()))
        if config.as_json:
            formatter: logging.Formatter = JSONFormatter()
        else:
            formatter = ColouredFormatter(
                fmt=config.tty.fmt,
                datefmt=config.datefmt,
                extra_format="[{key}: {value}]",
            )
            formatter.is_tty = config.tty.colour and sys.stdout.isatty()
        tty.setFormatter(formatter)
        handlers.append(tty)
    if config.file.enable:
        path = os.path.join(mkdir(config.file.path), config.file.output)
        handler = logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=config.file.max_bytes,
            backupCount=config.file.backups,
            encoding=config.file.encoding,
        )
        handler.setLevel(getattr(logging, config.file.level.upper()))
        if config.as_json:
            formatter = JSONFormatter()
        else:
            formatter = ColouredFormatter(
                fmt=config.file.fmt,
                datefmt=config.datefmt,
                extra_format="[{key}: {value}]",
            )
        handler.setFormatter(formatter)
        handlers.append(handler)
    for handler in handlers:
        levels.append(handler.level)
        logger.addHandler(handler)
    logger.setLevel(
        min(levels) if levels else getattr(logging, config.level.upper())
    )


def get_logger(logger_name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    :param logger_name: Logger name.
    :return: Logger instance.
    """
    return logging.getLogger(logger_name)
