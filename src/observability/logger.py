"""
Structured logging for the provider validation pipeline

Records are emitted as JSON (python-json-logger) so job ids, row numbers and
field names passed through ``extra`` stay filterable. LOG_FORMAT=text
switches to a plain format for local runs.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "provider-validation"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] - %(message)s"


class PipelineJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding timestamp, level, logger, module, function and the
    worker thread name, so records from concurrent jobs can be told apart.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["thread"] = record.threadName


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Attach a stdout handler to a logger

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; defaults to LOG_LEVEL
        format_type: "json" or "text"; defaults to LOG_FORMAT

    Returns:
        The configured logger
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format_type == "json":
        handler.setFormatter(PipelineJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    # caplog and host applications listen on ancestors
    logger.propagate = True

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return a logger, configuring it on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


class log_operation:
    """
    Context manager logging the start, end and duration of a pipeline step

    Usage:
        with log_operation("Validating upload", logger=logger, job_id=job.id):
            ...

    Failures are logged with the exception type and re-raised.
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float | None = None
        self.duration: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(
            f"Starting: {self.operation_name}",
            extra={"operation": self.operation_name, **self.extra_fields},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        fields = {
            "operation": self.operation_name,
            "duration_seconds": round(self.duration, 3),
            **self.extra_fields,
        }

        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra={**fields, "status": "success"})
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={
                    **fields,
                    "status": "error",
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                },
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False
