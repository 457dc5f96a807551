"""Logging configuration for TalentX."""
import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotate at 10 MB, keep five old files
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Per-request chatter from HTTP clients, the ORM and the access log
NOISY_LOGGERS = ("urllib3", "requests", "sqlalchemy", "uvicorn.access")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for the API and scripts.

    Safe to call from every app factory: if the root logger already has
    handlers (a previous call, or a host such as uvicorn or pytest), it
    is left alone.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Also write to this rotating file, creating its directory
    """
    root = logging.getLogger()
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
