# booking_engine/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from booking_engine.config.settings import get_settings


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # SQL echo and per-request access lines duplicate our own logs
    for name in ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if not verbose:
        for name in ("sqlalchemy", "alembic", "celery", "uvicorn", "uvicorn.error"):
            logger = logging.getLogger(name)
            logger.setLevel(logging.ERROR)
            logger.propagate = False
