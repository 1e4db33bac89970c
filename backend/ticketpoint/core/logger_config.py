import logging

from ticketpoint.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the ``ticketpoint`` logger.

    Safe to call repeatedly (e.g. when the app module is imported by tests).
    """
    logger = logging.getLogger("ticketpoint")
    logger.setLevel((level or settings.log_level).upper())
    if not any(getattr(h, "_ticketpoint", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ticketpoint = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
