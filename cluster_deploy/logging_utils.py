import logging
import sys
from typing import IO, Optional


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(verbosity: int = 0, *, quiet: bool = False,
                  stream: Optional[IO[str]] = None) -> None:
    """
    -v 는 DEBUG, -q 는 WARNING 이상만 출력한다. (-q 가 우선)
    """
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG
    if quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=stream if stream is not None else sys.stdout,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
