import logging
import logging.handlers
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

try:
    __version__ = version("xlsxgen")
except PackageNotFoundError:  # pragma: no cover
    # package is not installed
    __version__ = "0.0.0"

# All module loggers of the package are children of this one.
logger = logging.getLogger(__name__)

CONSOLE_HANDLER_NAME = "xlsxgen-console"
FILE_HANDLER_NAME = "xlsxgen-file"


def setup_logging(
    loglevel: int = logging.INFO, logfile: Path | None = None
) -> logging.Logger:
    """
    Setup logging of the xlsxgen package to console and optionally a file.

    The default loglevel is INFO. The LOGLEVEL environment variable wins.
    Calling it again replaces the handlers added by an earlier call, so the
    level or log file can be changed between generations. Records still
    propagate to the root logger.
    """
    loglevel_name = os.getenv("LOGLEVEL", "").strip().upper()
    if loglevel_name in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        loglevel = getattr(logging, loglevel_name, logging.INFO)

    # CRITICAL=FATAL=50 is the maximum, NOTSET=0 the minimum.
    loglevel = min(logging.FATAL, max(loglevel, logging.NOTSET))

    for handler in list(logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(loglevel)

    console = logging.StreamHandler()
    console.set_name(CONSOLE_HANDLER_NAME)
    console.setFormatter(logging.Formatter("%(levelname)-8s|%(message)s"))
    logger.addHandler(console)

    if logfile is not None:
        fh = logging.handlers.RotatingFileHandler(
            logfile, maxBytes=100000, backupCount=5
        )
        fh.set_name(FILE_HANDLER_NAME)
        fh.setLevel(loglevel)
        fh_formatter = logging.Formatter(
            fmt="%(asctime)s|%(name)-20s|%(levelname)-8s|%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        fh.setFormatter(fh_formatter)
        logger.addHandler(fh)

    return logger
