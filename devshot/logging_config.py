import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from devshot.config import settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    lvl = (level or settings.log_level or "INFO").upper()
    root.setLevel(lvl)

    json_formatter = JsonFormatter()
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(json_formatter)

    # Clear existing handlers to avoid duplicates when the CLI is invoked more than once
    root.handlers = []
    root.addHandler(stdout_handler)

    if settings.log_to_file:
        Path(settings.logs_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(Path(settings.logs_dir) / f"{settings.app_name}.log"), maxBytes=5_000_000, backupCount=3
        )
        file_handler.setFormatter(json_formatter)
        root.addHandler(file_handler)
