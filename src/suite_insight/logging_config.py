"""
Logging for Suite Insight runs.

Diagnostics go to stderr through rich so that report output on stdout stays
clean for redirection (``suite-insight report -f json > report.json``). The
Kubernetes client and urllib3 log every request at DEBUG; they are held at
WARNING even under ``--verbose`` so probe traces stay readable.
"""

import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

CHATTY_LIBRARIES: Sequence[str] = ("kubernetes", "urllib3")


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route Suite Insight logs to a rich handler on stderr.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance for suite_insight
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = Console(stderr=True)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger("suite_insight")
    logger.setLevel(level)

    for name in CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'suite_insight.engine')
              If None, returns the root suite_insight logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("suite_insight")

    if not name.startswith("suite_insight"):
        name = f"suite_insight.{name}"

    return logging.getLogger(name)
