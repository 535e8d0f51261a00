import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Settings, get_settings

ROOT_LOGGER_NAME = "trasporti"

# LogRecord attributes that are not user supplied extras
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, extras included."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update({k: v for k, v in vars(record).items() if k not in _RESERVED})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def _build_handlers(settings: Settings) -> list:
    log = settings.logging
    formatter = JSONFormatter() if log.json_format else logging.Formatter(log.format, "%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log.file:
        path = Path(log.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path, maxBytes=log.max_bytes, backupCount=log.backup_count, encoding="utf-8"
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure the root logger from LOG_* settings, replacing previous handlers."""
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.logging.level.upper(), logging.INFO))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in _build_handlers(settings):
        root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``trasporti`` namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
