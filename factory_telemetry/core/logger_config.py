"""
Unified logging configuration for the telemetry service
Console output plus an optional rotating log file per day
"""
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_configured = False


class TelemetryLogFormatter(logging.Formatter):
    """
    Formatter shared by console and file handlers
    """

    def __init__(self):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        formatted = super().format(record)
        # reading context is attached by the ingestion pipeline through `extra`
        context = getattr(record, "context", None)
        if context:
            formatted += f" | {context}"
        return formatted


def _create_file_handler(log_dir: str, name: str) -> logging.Handler:
    """Create rotating file handler (10MB max, keep 5 backups)"""
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    filepath = directory / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
    return logging.handlers.RotatingFileHandler(
        filepath,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None, name: str = "telemetry") -> None:
    """
    Configure root logging once. Safe to call multiple times.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for rotating log files; console only when None
        name: Log file prefix
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = TelemetryLogFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_dir:
        file_handler = _create_file_handler(log_dir, name)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    _configured = True
