# renderkit/logging_setup.py
import logging
import sys
from typing import Optional, TextIO
import structlog

LOGGER_NAME = "renderkit"

def configure_logging(log_level_str: str = "warning", force_json_logs: bool = False, stream: Optional[TextIO] = None):
    """Routes renderkit's structlog events through the ``renderkit`` stdlib logger.

    Events render as JSON lines with ``force_json_logs``, otherwise as console
    lines (colored when the target stream is a tty). ``stream`` defaults to
    stderr. Host applications that configure logging themselves never need this.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    target = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if force_json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        is_tty = hasattr(target, "isatty") and target.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=is_tty)

    handler = logging.StreamHandler(target)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)

    structlog.get_logger(__name__).info("logging_configured", level=log_level_str, json=force_json_logs)
