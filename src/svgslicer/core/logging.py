"""
structlog setup for svgslicer.

Every module gets its logger from ``get_logger(__name__)`` and logs
snake_case events with key/value context (``hatch_pass_complete``,
``toolpath_assembled``, ``gcode_generated``). Output always goes to stderr,
because the CLI may be streaming G-code on stdout, and optionally to a file
as well.

Example::

    configure_logging(level="DEBUG", json_output=True)
    with generation_context(source="vector", plotter_mode=True):
        get_logger(__name__).info("svg_loaded", shapes=3)
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import structlog

# Decoder libraries that chatter at DEBUG (Pillow logs every PNG chunk)
NOISY_LOGGERS = ("PIL", "svgpathtools")


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _event_processors() -> list[structlog.types.Processor]:
    """Processors run on every event before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Route svgslicer events through stdlib logging with a structlog formatter.

    Safe to call more than once; each call replaces the previous handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Unknown names fall
            back to INFO.
        json_output: One JSON object per line instead of the coloured
            console format.
        log_file: Also append log lines to this file.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)

    # Decoder debug output drowns the generation events
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))

    structlog.configure(
        processors=[*_event_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_output),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for module ``name``; pass ``__name__``."""
    return structlog.get_logger(name)


@contextmanager
def generation_context(**context: Any) -> Iterator[None]:
    """
    Bind context (job kind, source size, ...) to every event logged while
    one generation run is in progress.

    Bindings are held in contextvars, so concurrent runs in different
    threads or tasks keep their own context.
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield
