"""Logging helper module."""


from logging import DEBUG
from logging import INFO
from logging import FileHandler
from logging import Formatter
from logging import Logger
from logging import StreamHandler
from logging import getLogger
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = 'rindent'

_FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def init_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Initialize logging for the application.

    Should be called once when the application starts. Library use of the
    indenter does not need it, records then go wherever the host sends them.

    Args:
        verbose (bool): Log at DEBUG instead of INFO. Defaults to False.
        log_file (Path): Also write the log to this file. Optional.
    """
    level = DEBUG if verbose else INFO
    root_logger = getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Console handler for user-facing logs
    console_handler = StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(Formatter(_CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = FileHandler(log_file, mode='w')
        file_handler.setLevel(DEBUG)
        file_handler.setFormatter(Formatter(_FILE_FORMAT))
        root_logger.addHandler(file_handler)

    if verbose:
        root_logger.debug('Debug logging enabled.')


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)
