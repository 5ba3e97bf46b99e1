import logging
import json

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_ATTRS = frozenset((
    "levelname", "msg", "args", "name", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "message",
    "asctime", "taskName",
))


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""
    def format(self, record):
        log_record = {
            "level": record.levelname,
            "time": self.formatTime(record, self.datefmt),
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_record[key] = value
        return json.dumps(log_record, default=str)


def setup_logging(level=logging.INFO, json_format: bool = False):
    """Configure the root logger, optionally with JSON formatting."""
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
