import sys

from loguru import logger

from core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a single stderr sink at the configured level."""
    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


def get_logger(name: str | None = None):
    """Get the application logger, bound to ``name`` when given."""
    if name:
        return logger.bind(name=name)
    return logger
