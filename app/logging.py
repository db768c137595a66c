"""Process-wide logging setup."""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar

from app.config import settings

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [rid=%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; the previous handler installed here is
    replaced rather than duplicated.
    """
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json_output is None else json_output

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name("app")
    handler.addFilter(RequestIdFilter())
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "app":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))
