from __future__ import annotations

import json
import logging
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from logging.config import dictConfig
from typing import Any

from timesheets.settings import Settings, get_settings

AUDIT_LOGGER_NAME = "timesheets.security.audit"

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_request_id: ContextVar[str | None] = ContextVar("timesheets_request_id", default=None)

# Escapes for values that may carry user input (names, access codes, paths).
_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def normalize_log_level(raw_level: str) -> str:
    level = raw_level.strip().upper()
    return level if level in _LEVELS else "INFO"


def get_request_id() -> str | None:
    return _request_id.get()


def set_request_id(request_id: str) -> Token[str | None]:
    return _request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id.reset(token)


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; ``log_with_fields`` values land under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _escape(value: object) -> str:
    text = value if isinstance(value, str) else str(value)
    out: list[str] = []
    for char in text:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\x{ord(char):02x}")
        else:
            out.append(char)
    return "".join(out)


def _clean_fields(fields: dict[str, object]) -> dict[str, str]:
    return {key: _escape(fields[key]) for key in sorted(fields) if fields[key] is not None}


def format_log_fields(**fields: object) -> str:
    return " ".join(f"{key}={value}" for key, value in _clean_fields(fields).items())


def log_with_fields(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    exc_info: Any | None = None,
    **fields: object,
) -> None:
    cleaned = _clean_fields(fields)
    extra = {"fields": cleaned}
    if not cleaned:
        logger.log(level, "%s", message, exc_info=exc_info, extra=extra)
        return

    rendered = " ".join(f"{key}={value}" for key, value in cleaned.items())
    logger.log(level, "%s %s", message, rendered, exc_info=exc_info, extra=extra)


def log_security_audit_event(
    *,
    audit_event: str,
    outcome: str,
    audit_level: int = logging.INFO,
    **fields: object,
) -> None:
    log_with_fields(
        logging.getLogger(AUDIT_LOGGER_NAME),
        audit_level,
        "security audit event",
        audit_event=audit_event,
        outcome=outcome,
        **fields,
    )


def build_logging_config(settings: Settings) -> dict[str, Any]:
    level = normalize_log_level(settings.log_level)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_context": {"()": "timesheets.logging_config.RequestContextFilter"},
        },
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)s [%(name)s] [req=%(request_id)s] %(message)s",
            },
            "json": {"()": "timesheets.logging_config.JsonLogFormatter"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "filters": ["request_context"],
                "formatter": "json" if settings.log_json else "plain",
            }
        },
        "root": {"handlers": ["default"], "level": level},
        "loggers": {
            # Sign-in and admin audit records are kept whatever the root level.
            AUDIT_LOGGER_NAME: {"level": "INFO"},
            "uvicorn": {"level": level},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"level": level},
        },
    }


def configure_logging(settings: Settings | None = None) -> None:
    dictConfig(build_logging_config(settings if settings is not None else get_settings()))
