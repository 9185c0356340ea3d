"""Rich log output for the ``corpus_forensics`` logger tree.

Library modules only ever call :func:`get_logger`; nothing is emitted until
a host calls :func:`setup_logging` (or :func:`configure_logging` with an
``EngineConfig``). Handlers are attached to the package logger rather than
the root logger, and calling setup again replaces them instead of stacking
duplicates.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import EngineConfig, Verbosity

ROOT_LOGGER = "corpus_forensics"

LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_OWNED = "_corpus_forensics_handler"


def setup_logging(verbosity: Verbosity = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """Install a stderr RichHandler (and optionally a plain file handler).

    Args:
        verbosity: "quiet" keeps errors only, "verbose" adds debug output
            with source paths and traceback locals
        log_file: Optional path appended to with timestamped plain lines

    Returns:
        The package logger
    """
    try:
        level = LEVELS[verbosity]
    except KeyError:
        raise ValueError(f"verbosity must be one of {', '.join(LEVELS)}") from None
    verbose = level == logging.DEBUG

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )
    handlers: list[logging.Handler] = [rich_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        handler.setLevel(level)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def configure_logging(config: EngineConfig, log_file: Optional[str] = None) -> logging.Logger:
    """Apply ``config.verbosity``."""
    return setup_logging(config.verbosity, log_file)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, always inside the package tree.

    ``get_logger(__name__)`` and ``get_logger("search.index")`` both give
    ``corpus_forensics.search.index``.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not name or name == ROOT_LOGGER:
        return root
    if name.startswith(ROOT_LOGGER + "."):
        name = name[len(ROOT_LOGGER) + 1 :]
    return root.getChild(name)
