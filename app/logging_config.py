import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config import settings

FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"

# third-party loggers that flood INFO
QUIET_LOGGERS = ("passlib", "sqlalchemy.engine", "multipart")


def setup_logging(level: str = None, log_dir: str = None):
    """
    - Console + rotating file (LOG_DIR/app.log, 5MB x 5)
    - Safe to call twice, handlers are only added once
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_path = Path(log_dir or settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Prevent duplicate handlers
    if root.handlers:
        return

    formatter = logging.Formatter(fmt=FMT, datefmt=DATEFMT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_path / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root.addHandler(console)
    root.addHandler(file_handler)
