# weekly_survey/core/logging.py
from __future__ import annotations
import logging
from logging.config import dictConfig

from weekly_survey.core.config import settings

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configura logging de la app una sola vez (consola, formato uniforme)."""
    global _configured
    if _configured:
        return

    level = (level or settings.LOG_LEVEL or "INFO").upper()
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "weekly_survey": {"level": level, "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    })
    _configured = True
    logging.getLogger(__name__).debug("logging configurado (nivel %s)", level)
