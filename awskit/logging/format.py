"""Formatters of the awskit logs: a compact line format for the CLI and a trace format for the request logger."""
import logging
from functools import lru_cache

THREAD_COLUMN_WIDTH = 12
LOGGER_COLUMN_WIDTH = 24

# thread pools of the generated clients name their workers "awskit-<service>_<n>"
WORKER_THREAD_PREFIX = "awskit-"

LOG_FORMAT = (
    f"%(asctime)s.%(msecs)03d %(short_level)-5s [%(short_thread){THREAD_COLUMN_WIDTH}s] "
    f"%(short_name)-{LOGGER_COLUMN_WIDTH}s : %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

SHORT_LEVEL_NAMES = {logging.WARNING: "WARN", logging.CRITICAL: "FATAL"}


@lru_cache(maxsize=256)
def shorten_logger_name(name: str, width: int = LOGGER_COLUMN_WIDTH) -> str:
    """
    Abbreviates the package parts of a logger name, from the left, until the name fits into ``width`` characters.
    ``awskit.codegen.generator.context`` turns into ``a.c.generator.context`` (width 24) or ``a.c.g.context``
    (width 15). If even the abbreviated name is too long, its end is kept.
    """
    parts = name.split(".")
    for i in range(len(parts) - 1):
        if len(".".join(parts)) <= width:
            break
        parts[i] = parts[i][0]

    shortened = ".".join(parts)
    if len(shortened) > width:
        return shortened[-width:].lstrip(".")
    return shortened


class CompactFormatter(logging.Formatter):
    """
    Formats records with ``LOG_FORMAT``: level names of at most five characters, the worker name of the thread and
    the shortened logger name.
    """

    def __init__(self, fmt: str = LOG_FORMAT, name_width: int = LOGGER_COLUMN_WIDTH):
        super().__init__(fmt=fmt, datefmt=LOG_DATE_FORMAT)
        self.name_width = name_width

    def format(self, record: logging.LogRecord) -> str:
        record.short_level = SHORT_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.short_name = shorten_logger_name(record.name, self.name_width)
        thread = record.threadName or ""
        if thread.startswith(WORKER_THREAD_PREFIX):
            thread = thread[len(WORKER_THREAD_PREFIX) :]
        record.short_thread = thread[-THREAD_COLUMN_WIDTH:]
        return super().format(record)


class RequestTraceFormatter(CompactFormatter):
    """
    Formatter for the ``awskit.request`` logger, which appends the operation, the request body and the response
    body (both truncated to ``body_length_display_threshold`` characters) to each record.
    """

    request_trace_log_format = (
        LOG_FORMAT + "; %(operation)s(%(request_body)s); %(status_code)s(%(response_body)s)"
    )
    body_length_display_threshold = 512

    def __init__(self):
        super().__init__(fmt=self.request_trace_log_format)

    def _shorten(self, body) -> str:
        if isinstance(body, bytes):
            if len(body) > self.body_length_display_threshold:
                return f"Bytes({len(body)})"
            body = body.decode("utf-8", errors="replace")
        body = str(body or "")
        if len(body) > self.body_length_display_threshold:
            return body[: self.body_length_display_threshold] + "..."
        return body

    def format(self, record: logging.LogRecord) -> str:
        record.operation = getattr(record, "operation", "-")
        record.status_code = getattr(record, "status_code", "-")
        record.request_body = self._shorten(getattr(record, "request_body", None))
        record.response_body = self._shorten(getattr(record, "response_body", None))
        return super().format(record)
