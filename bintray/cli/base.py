import logging
import os
import pydoc
import sys
from typing import Optional


def setup_logging(log_level: int):
    handlers = []

    # Messages at level INFO or lower go to stdout
    info_handler = logging.StreamHandler(stream=sys.stdout)
    info_handler.setLevel(log_level)
    info_handler.addFilter(lambda record: record.levelno <= logging.INFO)  # pragma: no cover
    handlers.append(info_handler)

    # Warnings and errors go to stderr
    logging.lastResort.addFilter(lambda record: record.levelno > logging.INFO)  # pragma: no cover
    handlers.append(logging.lastResort)

    if log_level == logging.INFO:
        # In normal operation, don't decorate messages
        for handler in handlers:
            handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(level=log_level, handlers=handlers)

    if log_level > logging.DEBUG:
        # connection pool chatter
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def page(text: str, enabled: Optional[bool] = False) -> None:
    """Show output, through a pager if enabled and writing to a terminal.

    Options for less can be set in $BINTRAY_LESS, the default is `FXMK`:
    don't page if it fits on one screen, don't clear the screen, verbose
    prompt, quit on ^C.
    """
    if enabled and sys.stdout.isatty():
        os.environ["LESS"] = os.getenv("BINTRAY_LESS", "FXMK")
        pydoc.pager(text)
    else:
        print(text)
