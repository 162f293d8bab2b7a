"""Rich console logging for dtkbuild."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Chatty during remote page and script fetches
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route log records through a RichHandler.

    Args:
        verbose: Log at DEBUG and include locals in tracebacks.
        console: Console shared with other Rich output.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )
    # force=True replaces handlers installed by earlier calls
    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
