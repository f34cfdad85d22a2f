import logging
from logging import Logger

from .config import get_settings

LOG_FORMAT = "[%(levelname)s] %(asctime)s | %(name)s | %(message)s"


def configure_logging(component: str | None = None) -> Logger:
    """تهيئة مسجل موحد للعميل وواجهة FastAPI.

    يُضاف المعالج مرة واحدة إلى مسجل التطبيق، أما المكونات فتحصل على
    مسجل فرعي (مثل ``Image Compressor.workflow``) يرث نفس المعالج.
    """
    settings = get_settings()

    logger = logging.getLogger(settings.app_name)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    return logger.getChild(component) if component else logger
