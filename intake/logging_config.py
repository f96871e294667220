import os
import sys
from typing import Optional

from loguru import logger


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# "true" switches stderr output to one JSON object per record
LOG_JSON = os.getenv("LOG_JSON", "false").lower() in ("1", "true", "yes")

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure the shared Loguru sink for the intake service.

    Records logged inside a request carry its ``request_id`` (see
    ``RequestLoggingMiddleware``); everything else is tagged ``-``.
    """
    logger.remove()
    logger.configure(extra={"module": "intake", "request_id": "-"})
    serialize = LOG_JSON if json_output is None else json_output
    logger.add(
        sys.stderr,
        level=level or LOG_LEVEL,
        format="{message}" if serialize else LOG_FORMAT,
        serialize=serialize,
        backtrace=False,
        diagnose=False,
    )


def get_logger(name: Optional[str] = None, **kwargs):
    """Return a logger bound with an optional module/component name."""
    if name:
        return logger.bind(module=name, **kwargs)
    return logger.bind(**kwargs)
