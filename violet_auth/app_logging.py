"""JSON log output for command-line and service entry points."""

import logging
from typing import IO, Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: int = logging.INFO,
                 stream: Optional[IO[str]] = None) -> logging.Handler:
    """Send records from every logger to ``stream`` (stderr) as JSON."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(jsonlogger.JsonFormatter(
        LOG_FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    ))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    return handler
