"""Process-wide logging setup."""

import logging

from quickclock.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once from LOG_LEVEL."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # APScheduler logs every job execution at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
