import logging
import logging.config
import os

from .core.config import settings

if os.path.exists(settings.LOG_CONFIG_PATH):
    logging.config.fileConfig(settings.LOG_CONFIG_PATH, disable_existing_loggers=False)
else:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")


logger = logging.getLogger("prelovin")
