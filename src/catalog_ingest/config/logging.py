"""Logging setup for the ingestion CLI."""

from __future__ import annotations

import logging

RUN_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DEBUG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# request-level chatter from the HTTP stack
_QUIET_LOGGERS = ("httpx", "httpcore", "hishel", "aiolimiter")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger once.

    A normal run prints one line per phase and per candidate outcome. With
    ``verbose`` the module name is included and the HTTP libraries are allowed
    to log each request.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=DEBUG_FORMAT if verbose else RUN_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet_level = logging.DEBUG if verbose else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
