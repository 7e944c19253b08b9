"""
Structured Logging Configuration for the Story API test suite

Provides:
- JSON-formatted structured logging
- Step correlation via context variables
- Per-request timing
- Error tracking with context
"""
import sys
import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional, Callable
from functools import wraps
from contextvars import ContextVar

# Context variables for step correlation
run_id_var: ContextVar[str] = ContextVar("run_id", default="")
step_var: ContextVar[str] = ContextVar("step", default="")

# Fields emitted by log_step/log_request, lifted to the top level of each line
EVENT_FIELDS = (
    "event_type", "step_name", "method", "path",
    "status_code", "duration_ms", "error_type", "error_message",
)

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message", "run_id", "step"
}


class StructuredJSONFormatter(logging.Formatter):
    """
    One JSON object per line: run and step correlation, the step/request
    event fields at top level, source location for warnings and errors.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": run_id_var.get(""),
            "step": step_var.get(""),
        }

        for key in EVENT_FIELDS:
            if key in record.__dict__:
                log_data[key] = record.__dict__[key]

        if record.levelno >= logging.WARNING:
            log_data["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"

        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        extra_fields = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in EVENT_FIELDS:
                continue
            try:
                json.dumps(value)
                extra_fields[key] = value
            except (TypeError, ValueError):
                extra_fields[key] = str(value)

        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data)


def log_step(
    step_name: str,
    logger: logging.Logger = None
) -> Callable:
    """
    Decorator to log a test step with timing.

    Usage:
        @log_step("create_story")
        def create_story_step(client):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            step_logger = logger or logging.getLogger(f"storyapp.steps.{step_name}")
            token = step_var.set(step_name)
            start_time = time.time()

            step_logger.info(
                f"Step started: {step_name}",
                extra={"event_type": "step_start", "step_name": step_name}
            )

            try:
                result = func(*args, **kwargs)

                duration_ms = (time.time() - start_time) * 1000
                step_logger.info(
                    f"Step passed: {step_name}",
                    extra={
                        "event_type": "step_complete",
                        "step_name": step_name,
                        "duration_ms": round(duration_ms, 2),
                    }
                )
                return result

            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                step_logger.error(
                    f"Step failed: {step_name} - {type(e).__name__}",
                    extra={
                        "event_type": "step_error",
                        "step_name": step_name,
                        "duration_ms": round(duration_ms, 2),
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                    exc_info=True
                )
                raise
            finally:
                step_var.reset(token)

        return wrapper
    return decorator


def log_request(
    method: str,
    path: str,
    status_code: Optional[int],
    duration_ms: float,
    error: Optional[str] = None,
    logger: logging.Logger = None
):
    """Log a single HTTP call made against the Story API."""
    request_logger = logger or logging.getLogger("storyapp.requests")

    if error:
        request_logger.error(
            f"Request failed: {method} {path} - {error}",
            extra={
                "event_type": "request_error",
                "method": method,
                "path": path,
                "duration_ms": round(duration_ms, 2),
                "error_message": error,
            }
        )
        return

    request_logger.debug(
        f"Request completed: {method} {path} - {status_code}",
        extra={
            "event_type": "request_complete",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }
    )


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
):
    """
    Configure logging for a test run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting for structured logging
        log_file: Optional file path to write logs
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)

    if json_format:
        console_handler.setFormatter(StructuredJSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))

    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredJSONFormatter())
        root_logger.addHandler(file_handler)

    # Quiet noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return root_logger
