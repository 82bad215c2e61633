"""
Logging configuration for the pgpkeydump command line tool.

Log events go to stderr; stdout carries only the JSON document.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def reorder_keys(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Reorder keys so level and logger come first."""
    level = event_dict.pop("level", None)
    name = event_dict.pop("logger", None)

    new_dict: EventDict = {}
    if level is not None:
        new_dict["level"] = level
    if name is not None:
        new_dict["logger"] = name

    new_dict.update(event_dict)
    return new_dict


def configure_logging(log_level: str = "WARNING", json_logs: bool = False) -> None:
    """Route structlog and stdlib logging to stderr at ``log_level``."""
    level = getattr(logging, log_level.upper(), logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if json_logs:
        renderers: list[Processor] = [reorder_keys, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
