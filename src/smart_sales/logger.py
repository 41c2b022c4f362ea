"""Настройка логирования приложения."""
import logging
from typing import Optional

from smart_sales.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    root = logging.getLogger("smart_sales")
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(h)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    return root
