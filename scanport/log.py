import logging
import sys

LOGGER_NAME = "scanport"


def create_logger(debug: bool = False) -> logging.Logger:
    """
    Configures the package logger: diagnostics go to stderr, one bare
    message per line. Probe outcomes are logged at DEBUG, so they only
    show up with debug enabled.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    # Prevent duplicate handlers if configured twice; sys.stderr may have been swapped
    for h in list(logger.handlers):
        logger.removeHandler(h)

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(sh)
    return logger
