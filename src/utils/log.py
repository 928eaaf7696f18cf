from __future__ import annotations
import json, logging, sys
from typing import Any, Dict, IO, Optional

# LogRecord attributes that are not extra= fields
_STD_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "taskName", "message", "asctime",
))


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _STD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extra= fields (sql, rows, columns, ...) are merged at top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        return json.dumps(payload, separators=(",", ":"), default=str)


def get_logger(
    name: str = "chartview",
    level: str = "INFO",
    structured_json: bool = True,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Attach a handler to `name` once. Library modules log to children of
    "chartview" and inherit it through propagation. Logs go to stderr by
    default: stdout carries the chart JSON when the CLI has no --outdir.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if structured_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def logger_from_cfg(cfg: Any, name: str = "chartview", stream: Optional[IO[str]] = None) -> logging.Logger:
    return get_logger(name, cfg.logging.level, cfg.logging.structured_json, stream=stream)
