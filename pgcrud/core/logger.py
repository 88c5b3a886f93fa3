from datetime import datetime
import re
import sys
import json
import logging
import traceback

from pgcrud.core.config import get_settings
from pgcrud.core.logging_context import ContextFilter

SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

_RESERVED_ATTRS = [
    "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "process", "processName", "scope", "name", "taskName"
]


class CustomLogger(logging.Logger):
    def success(self, message, *args, **kwargs):
        if self.isEnabledFor(SUCCESS_LEVEL):
            self.log(SUCCESS_LEVEL, message, *args, **kwargs, stacklevel=2)


def stringify_extra(value):
    if isinstance(value, (list, dict)):
        return str(value)
    else:
        return value


class CustomFormatter(logging.Formatter):

    def __init__(self, fmt="%(message)s", include_location=False):
        super().__init__(fmt)
        self.include_location = include_location

    def format(self, record):
        scope = f"{record.scope}" if hasattr(record, "scope") else ""
        location = ""
        if self.include_location:
            # path:line is clickable in most editors
            location = f"{record.pathname}:{record.lineno}\n({record.module}:{record.funcName}:{record.lineno})"

        metadata_line = f"{datetime.now().isoformat()} [{record.levelname}] {scope} {location}".strip()

        message = record.getMessage()
        message_split = message.splitlines()
        if len(message_split) > 1:
            message_line = f"     Message: {message_split[0]}"
            for line in message_split[1:]:
                message_line += f"\n             {line}"
        else:
            message_line = f"     Message: {message}"

        extra_items = [
            f"{key}: {stringify_extra(value)}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        extra_info = ""
        if extra_items:
            extra_info = f"\n     {' '.join(extra_items)}"
        formatted_log = f"{metadata_line}\n{message_line}{extra_info}"
        if record.exc_info:
            format_exception = traceback.format_exception(*record.exc_info)
            format_exception = "".join(
                re.sub(r'File "([^"]+)", line (\d+),', r'File "\1:\2"', line)
                for line in format_exception
            )
            formatted_log += f"\n{format_exception}"
        return formatted_log


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_dict = {
            "level": record.levelname,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
            "logger": record.name,
        }
        if hasattr(record, "scope"):
            log_dict["scope"] = record.scope
        log_dict["location"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        extra = {
            key: stringify_extra(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in log_dict
        }
        if extra:
            log_dict["extra"] = extra
        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_dict, ensure_ascii=False, default=str)


def setup_logger(name: str, include_location=False, use_json=None, level=None):
    """
    Return a stdout logger with the pgcrud formatter and context filter.

    ``use_json`` and ``level`` default to the validated settings
    (PGCRUD_LOG_JSON / PGCRUD_LOG_LEVEL, environment or .env files).
    Calling it again for the same name reuses the existing handler.
    """
    if use_json is None or level is None:
        settings = get_settings()
        if use_json is None:
            use_json = settings.log_json
        if level is None:
            level = settings.log_level

    logging.setLoggerClass(CustomLogger)
    logger = logging.getLogger(name)
    if not any(isinstance(f, ContextFilter) for f in logger.filters):
        logger.addFilter(ContextFilter())

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(logging.DEBUG)
        if use_json:
            stream_handler.setFormatter(JSONFormatter())
        else:
            stream_handler.setFormatter(CustomFormatter(include_location=include_location))
        logger.addHandler(stream_handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
