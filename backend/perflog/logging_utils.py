from __future__ import annotations

import contextvars
import json
import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml
from prometheus_client import Counter, REGISTRY

from .core.config import Settings

_DEFAULT_CONTEXT = "-"
_OPERATION_ID = contextvars.ContextVar("operation_id", default=_DEFAULT_CONTEXT)
_OPERATION_NAME = contextvars.ContextVar("operation_name", default=_DEFAULT_CONTEXT)

ContextToken = Tuple[contextvars.Token, contextvars.Token]


def _register_error_counter() -> Counter:
    try:
        return Counter(
            "perflog_log_errors_total",
            "Total log statements at error level or above",
            ["module", "level"],
            registry=REGISTRY,
        )
    except ValueError:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get("perflog_log_errors_total")
        if existing:
            return existing  # type: ignore[return-value]
        raise


LOG_ERROR_COUNTER = _register_error_counter()


def bind_operation_context(operation_id: str, operation_name: str) -> ContextToken:
    """Make the given measurement the current one for log records."""
    return _OPERATION_ID.set(operation_id), _OPERATION_NAME.set(operation_name)


def reset_operation_context(token: ContextToken) -> None:
    """Restore the measurement context that was current before binding."""
    id_token, name_token = token
    _OPERATION_ID.reset(id_token)
    _OPERATION_NAME.reset(name_token)


def clear_context() -> None:
    _OPERATION_ID.set(_DEFAULT_CONTEXT)
    _OPERATION_NAME.set(_DEFAULT_CONTEXT)


def current_context() -> Dict[str, str]:
    return {
        "operation_id": _OPERATION_ID.get(),
        "operation_name": _OPERATION_NAME.get(),
    }


class ContextFilter(logging.Filter):
    """Inject contextvars into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.operation_id = _OPERATION_ID.get()
        record.operation_name = _OPERATION_NAME.get()
        return True


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        return serialize_log_record(record)


class PrometheusErrorHandler(logging.Handler):
    """A logging handler that increments a Prometheus counter on errors."""

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            LOG_ERROR_COUNTER.labels(module=record.name, level=record.levelname).inc()
        except Exception:  # pragma: no cover - never raise from logging
            pass


def setup_logging(settings: Settings) -> None:
    """Load logging.yaml and configure handlers per environment."""

    config_path = settings.log_config_path or Path(__file__).with_name("logging.yaml")
    if not config_path.exists():
        raise FileNotFoundError(f"Logging configuration not found at {config_path}")

    with config_path.open("r", encoding="utf-8") as fp:
        config: Dict[str, Any] = yaml.safe_load(fp)

    handlers = config.setdefault("handlers", {})
    if settings.enable_file_logging and "file" in handlers:
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"]["filename"] = str(log_dir / "perflog.log")
    else:
        handlers.pop("file", None)

    env = settings.environment.lower()

    package_handlers: list[str]
    if env == "development" or not settings.enable_json_logs:
        package_handlers = ["console", "error_metrics"]
        config["root"]["handlers"] = ["console"]
    else:
        package_handlers = ["json", "error_metrics"]
        if "file" in handlers:
            package_handlers.append("file")
        config["root"]["handlers"] = ["json"]

    config.setdefault("loggers", {})
    config["loggers"]["perflog"] = {
        "handlers": package_handlers,
        "level": settings.log_level.upper(),
        "propagate": False,
    }

    for handler_name in ("console", "json"):
        handler = handlers.get(handler_name)
        if handler:
            handler["level"] = settings.log_level.upper()

    logging.config.dictConfig(config)


def serialize_log_record(record: logging.LogRecord) -> str:
    payload = {
        "timestamp": record.created,
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
        "context": current_context(),
    }
    for key in ("type_name", "elapsed_ms"):
        if hasattr(record, key):
            payload[key] = getattr(record, key)
    if record.exc_info:
        payload["exception"] = logging.Formatter().formatException(record.exc_info)
    return json.dumps(payload, ensure_ascii=False, default=str)


__all__ = [
    "bind_operation_context",
    "reset_operation_context",
    "clear_context",
    "ContextFilter",
    "JsonFormatter",
    "PrometheusErrorHandler",
    "setup_logging",
    "current_context",
    "serialize_log_record",
]
