import logging
import sys
from typing import TextIO

ROOT_LOGGER_NAME = "lightsailctl"

logger = logging.getLogger(ROOT_LOGGER_NAME)


def setup_logging(debug: bool = False, stream: TextIO | None = None) -> None:
    """Send lightsailctl logs to stderr as bare messages."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def set_debug(debug: bool) -> None:
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if debug:
        import boto3

        boto3.set_stream_logger("botocore", logging.DEBUG)
