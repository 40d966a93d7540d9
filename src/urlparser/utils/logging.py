"""Structured JSON logging for the URL parser service."""
import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger
from urlparser.config import settings

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None, stream=None) -> None:
    """Install a single JSON handler on the root logger."""
    root = logging.getLogger()

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s %(filename)s %(lineno)d',
        datefmt='%Y-%m-%dT%H:%M:%S%z',
        rename_fields={
            'asctime': 'timestamp',
            'levelname': 'level'
        }
    ))
    root.addHandler(handler)

    resolved = (level or settings.log_level).upper()
    root.setLevel(getattr(logging, resolved, logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
