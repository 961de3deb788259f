# flagdeskutils/logging.py
"""
structlog setup for flagdesk.

Console rendering while DEBUG is on, one JSON object per line otherwise.
Django's and Celery's stdlib loggers are routed through python-json-logger
so both streams share a format.

    from flagdeskutils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("flag_agreed", reviewable_id=12, disposition="delete")
"""

import logging
import logging.config
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import structlog
from django.conf import settings
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.types import Processor

APP_NAME = "flagdesk"

# Leading keys of a JSON entry; the rest keep insertion order
KEY_ORDER = ("timestamp", "level", "logger", "message", "request_id", "reviewable_id")


def is_development() -> bool:
    return bool(getattr(settings, "DEBUG", False))


def get_log_level() -> int:
    level = logging.getLevelName(getattr(settings, "LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logs_dir() -> Path:
    logs_dir = Path(settings.BASE_DIR) / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


def add_service_fields(logger, name: str, event_dict: dict) -> dict:
    event_dict["app"] = APP_NAME
    event_dict["environment"] = getattr(settings, "ENVIRONMENT", "unknown")
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def event_to_message(logger, name: str, event_dict: dict) -> dict:
    event_dict["message"] = event_dict.pop("event")
    return event_dict


def drop_noise(logger, name: str, event_dict: dict) -> dict:
    """Tracebacks only on error entries; None-valued keys are dropped."""
    if event_dict.get("level") not in ("error", "critical"):
        event_dict.pop("exc_info", None)
        event_dict.pop("exception", None)
    return {key: value for key, value in event_dict.items() if value is not None}


def order_keys(logger, name: str, event_dict: dict) -> dict:
    ordered = {key: event_dict.pop(key) for key in KEY_ORDER if key in event_dict}
    ordered.update(event_dict)
    return ordered


def build_processors(development: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [
            event_to_message,
            drop_noise,
            order_keys,
            structlog.processors.JSONRenderer(),
        ]
    return processors


def get_standard_logging_config(log_to_file: bool = True) -> dict:
    """dictConfig for the stdlib loggers (django, celery, flagdesk)."""
    level = get_log_level()
    formatter = "console" if is_development() else "json"

    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": formatter,
        },
    }
    if log_to_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": get_logs_dir() / "flagdesk.log",
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
        }
    names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
            "console": {"format": "%(levelname)-8s %(name)s: %(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            "django": {"handlers": names, "level": level, "propagate": False},
            "django.db.backends": {"handlers": names, "level": "WARNING", "propagate": False},
            "celery": {"handlers": names, "level": "INFO", "propagate": False},
            APP_NAME: {
                "handlers": names,
                "level": logging.DEBUG if is_development() else level,
                "propagate": False,
            },
        },
        "root": {"handlers": names, "level": level},
    }


def configure_logging(log_to_file: bool = True) -> None:
    """Configure stdlib logging and structlog; called from FlagdeskConfig.ready()."""
    logging.config.dictConfig(get_standard_logging_config(log_to_file=log_to_file))
    structlog.configure(
        processors=build_processors(is_development()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class StructlogMiddleware:
    """
    Binds a request id (X-Request-ID, or a fresh uuid4) to every entry
    logged while the request runs, and echoes it on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        clear_contextvars()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        bind_contextvars(request_id=request_id, path=request.path, method=request.method)

        request.request_id = request_id
        response = self.get_response(request)
        response["X-Request-ID"] = request_id
        return response


class CeleryLogger:
    """Logger for task bodies, bound to the running task's name and id."""

    @staticmethod
    def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
        from celery import current_task

        if current_task and current_task.request.id:
            bind_contextvars(
                task_name=current_task.name,
                task_id=current_task.request.id,
                task_retries=current_task.request.retries,
            )
        return get_logger(name)
