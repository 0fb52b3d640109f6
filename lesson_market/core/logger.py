import logging

from lesson_market.core.config import settings

LOG_FORMAT = "%(filename)s:%(lineno)d #%(levelname)-8s [%(asctime)s] - %(name)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the whole application."""
    logging.basicConfig(level=level or settings.log_level, format=LOG_FORMAT)
    logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)
