import logging
from typing import Optional

from rich.logging import RichHandler

from .config import settings


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Route all logging through a rich console handler and return the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger()
