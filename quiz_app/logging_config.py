import logging
import os
import sys
from typing import Optional, Union

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Send the application's logs to stdout. Safe to call more than once;
    the handler is only installed the first time.
    """
    logger = logging.getLogger("quiz_app")
    logger.setLevel(level or os.getenv("LOG_LEVEL", "INFO").upper())

    if not any(getattr(handler, "_quiz_app", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._quiz_app = True
        logger.addHandler(handler)

    return logger
