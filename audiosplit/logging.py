"""Logging setup shared by the CLI and the HTTP server.

Every module logs through ``logging.getLogger(__name__)``, so records carry
their module path under the ``audiosplit`` namespace.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route ``audiosplit.*`` records to stderr.

    Only the package's own loggers drop to DEBUG in verbose mode; yt-dlp,
    werkzeug and other libraries stay at WARNING.
    """
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("audiosplit").setLevel(
        logging.DEBUG if verbose else logging.INFO
    )
