import logging
import logging.handlers
import os
from typing import Optional

from utils.io_utils import ensure_log_dir

METRICS_LOGGER_NAME = "session_router.metrics"


def get_metrics_logger(log_dir: str, label: str, retention_days: int) -> logging.Logger:
    """
    Return the per-request metrics logger.

    Lines go only to <log_dir>/<label>.log, rotated at midnight and kept for
    retention_days days. A handler pointing at another file or retention is
    replaced, so the most recently built app decides where lines go.
    """
    metrics_logger = logging.getLogger(METRICS_LOGGER_NAME)
    metrics_logger.setLevel(logging.INFO)
    metrics_logger.propagate = False
    path = os.path.abspath(ensure_log_dir(log_dir) / f"{label}.log")
    for handler in list(metrics_logger.handlers):
        if (
            isinstance(handler, logging.handlers.TimedRotatingFileHandler)
            and handler.baseFilename == path
            and handler.backupCount == retention_days
        ):
            return metrics_logger
        metrics_logger.removeHandler(handler)
        handler.close()
    handler = logging.handlers.TimedRotatingFileHandler(
        path,
        when="midnight",
        interval=1,
        backupCount=retention_days,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    metrics_logger.addHandler(handler)
    return metrics_logger


def format_metrics_line(
    latency_ms: int, method: str, status: int, path: str, title: Optional[str], label: str
) -> str:
    fields = [
        str(latency_ms),
        method,
        str(status),
        f"{label}-user",
        f"{label.capitalize()}-NA",
        f"{label}{path}",
        f"{label}{path}",
        f"{label}{path}/{title if title is not None else 'NA'}",
        label,
        "0.0.0.0",
        "NA",
        "NA",
        "NA",
    ]
    return ",".join(fields)
