"""
Structured JSON logging with trace correlation.

Call sites keep using stdlib loggers; :class:`JsonLogFormatter` is a
``structlog`` processor formatter that renders every record as a single
JSON object carrying the timestamp, level, message and service name, plus
the ``trace_id`` and ``span_id`` the caller passed through ``extra``.
Missing identifiers are rendered as null.

Example:
    >>> import logging
    >>> from tracechain.logs import configure_logging
    >>> configure_logging("service-a")
    >>> logging.getLogger("demo").info(
    ...     "Processing user request",
    ...     extra={"trace_id": "4bf9...", "span_id": "00f0..."},
    ... )
    {"timestamp": "...", "level": "info", "message": "Processing user request", ...}
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Union

import structlog
from structlog.types import EventDict, Processor

_CORRELATION_KEYS = ("trace_id", "span_id")

# Attributes other formatters may have set on a shared record.
_FORMATTER_ARTIFACTS = ("asctime", "color_message")

_LEVEL_NAMES = {
    "warning": "warn",
    "critical": "error",
}


def add_service_fields(service_name: str) -> Processor:
    """Build a processor that shapes an event into the log line layout.

    The processor stamps ``service``, shortens level names, defaults the
    correlation ids to None and renames ``event`` to ``message``.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        level = event_dict.get("level", method_name)
        event_dict["level"] = _LEVEL_NAMES.get(level, level)
        event_dict["message"] = event_dict.pop("event", "")
        event_dict["service"] = service_name
        for key in _CORRELATION_KEYS:
            event_dict.setdefault(key, None)
        for key in _FORMATTER_ARTIFACTS:
            event_dict.pop(key, None)
        return event_dict

    return processor


class JsonLogFormatter(structlog.stdlib.ProcessorFormatter):
    """Render stdlib log records as one JSON object per line.

    Attributes:
        service_name: Value of the ``service`` field on every line
    """

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(
            foreign_pre_chain=[
                structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
                structlog.stdlib.add_log_level,
                structlog.stdlib.ExtraAdder(),
                add_service_fields(service_name),
                structlog.processors.format_exc_info,
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )


def configure_logging(
    service_name: str,
    level: Union[int, str] = logging.INFO,
    stream: Optional[Any] = None,
) -> logging.Handler:
    """Install the JSON formatter on the root logger.

    Existing handlers installed by a previous call are replaced, so calling
    this twice does not duplicate output.

    Args:
        service_name: Service label written on every line
        level: Root log level
        stream: Output stream (defaults to stdout)

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonLogFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonLogFormatter(service_name))
    root.addHandler(handler)
    return handler
