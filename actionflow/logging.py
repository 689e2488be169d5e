"""
structlog setup for the actionflow CLI.

Library modules only call ``structlog.get_logger(__name__)``; ``main()``
calls ``setup_logging()`` once. Everything is written to stderr so that
stdout carries only command output (``list --json`` stays parseable).
"""

import sys

import structlog

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def setup_logging(level: str | int = "WARNING", json_output: bool = False) -> None:
    """
    Args:
        level: A name from LOG_LEVELS or a numeric level. Unknown names
               fall back to WARNING.
        json_output: One JSON object per line, with ISO timestamps, for
                     CI logs. Otherwise a compact console format, colored
                     only when stderr is a terminal.
    """
    if isinstance(level, str):
        level = LOG_LEVELS.get(level.upper(), LOG_LEVELS["WARNING"])

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if json_output:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
