import json
import logging
import sys
from typing import Any

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        """Formats a log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A JSON string representation of the log record.

        """
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "funcName": record.funcName,
            "lineno": record.lineno,
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def setup_logging(level: int | str = logging.WARNING, fmt: str = "json") -> None:
    """Configures the root logger on stderr.

    Args:
        level: Root log level.
        fmt: ``"json"`` for :class:`JSONFormatter`, anything else for plain text.

    """
    root = logging.getLogger()
    root.setLevel(level)
    # Keep handlers installed by the host (tests, embedding apps)
    if root.handlers:
        return
    # Notes go to stdout, so log lines use stderr
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
