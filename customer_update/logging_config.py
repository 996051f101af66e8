# customer_update/logging_config.py
import logging
from pathlib import Path

from customer_update.config import Settings


def configure_logging(settings: Settings) -> None:
    """
    Simple logging setup:

    - Reset any existing handlers on the root logger.
    - Attach a StreamHandler to stdout so logs show in uvicorn's console.
    - Also attach a FileHandler when LOG_FILE is set.
    - Use LOG_LEVEL from settings (default INFO).
    """
    level_name = settings.log_level or "INFO"
    level = getattr(logging, level_name.upper(), logging.INFO)

    root_logger = logging.getLogger()

    # Remove any handlers uvicorn or previous config attached
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    root_logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.log_file:
        log_path = Path(settings.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging configured (level=%s)", level_name)
