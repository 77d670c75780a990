import logging
import logging.handlers
from pathlib import Path
from .config import settings


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("gemstats")
    logger.setLevel(settings.log_level)

    # Avoid adding handlers twice if the app factory runs again
    if logger.handlers:
        return logger

    # log_file sits under logs_dir unless configured as an absolute path
    Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        str(settings.log_file), when="D", interval=7, backupCount=10, encoding="utf-8"
    )
    file_handler.suffix = "_%Y-%m-%d"
    console_handler = logging.StreamHandler()

    fmt = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(fmt)
    console_handler.setFormatter(fmt)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.info(f"Logging to {settings.log_file} with 7-day rotation")
    return logger
