# logging_config.py
"""
Structured logging for the RentMate backend.

Every module logs through ``logging.getLogger(__name__)`` under the
``rentmate`` namespace. ``configure_logging`` attaches a single handler to
that namespace, formatting records either as one JSON object per line or as
plain text. Request-scoped fields (request id, acting user, lease) live in
``LogContext`` and are merged into every record emitted while they are bound.
"""
import json
import logging
import sys
import threading
from contextvars import ContextVar
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

__all__ = [
     "LogContext",
     "StructuredFormatter",
     "configure_logging",
     "reset_logging",
]

_LOGGER_PREFIX = "rentmate"


class LogContext:
     """Async-safe holder for request-scoped log fields."""

     _request_id: ContextVar[Optional[str]] = ContextVar("log_request_id", default=None)
     _actor_id: ContextVar[Optional[str]] = ContextVar("log_actor_id", default=None)
     _lease_id: ContextVar[Optional[str]] = ContextVar("log_lease_id", default=None)

     _FIELD_NAMES = ("request_id", "actor_id", "lease_id")

     @classmethod
     def set(cls, **fields: Any) -> None:
          """Set context fields. Only non-None values are updated."""
          for name, value in fields.items():
               var = getattr(cls, f"_{name}", None)
               if var is not None and value is not None:
                    var.set(str(value))

     @classmethod
     def get_all(cls) -> dict:
          ctx = {}
          for name in cls._FIELD_NAMES:
               value = getattr(cls, f"_{name}").get()
               if value is not None:
                    ctx[name] = value
          return ctx

     @classmethod
     def clear(cls) -> None:
          for name in cls._FIELD_NAMES:
               getattr(cls, f"_{name}").set(None)

     @classmethod
     def bind(cls, **fields: Any) -> "_BoundContext":
          """Context manager that sets fields on entry and restores them on exit."""
          return _BoundContext(fields)


class _BoundContext:
     def __init__(self, fields: dict):
          self._fields = fields
          self._tokens = {}

     def __enter__(self):
          for name, value in self._fields.items():
               var = getattr(LogContext, f"_{name}", None)
               if var is not None and value is not None:
                    self._tokens[name] = var.set(str(value))
          return LogContext

     def __exit__(self, *exc):
          for name, token in self._tokens.items():
               getattr(LogContext, f"_{name}").reset(token)


_STDLIB_KEYS = frozenset(
     vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
     if isinstance(obj, datetime):
          return obj.isoformat()
     if isinstance(obj, Decimal):
          return str(obj)
     return str(obj)


class StructuredFormatter(logging.Formatter):
     """Formats each log record as a single JSON line."""

     def format(self, record: logging.LogRecord) -> str:
          payload = {
               "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
               "level": record.levelname,
               "logger": record.name,
               "message": record.getMessage(),
          }
          payload.update(LogContext.get_all())

          for key, value in vars(record).items():
               if key not in _STDLIB_KEYS and key not in payload:
                    payload[key] = value

          if record.exc_info and record.exc_info[1] is not None:
               exc = record.exc_info[1]
               payload["exc_type"] = type(exc).__name__
               payload["exc_message"] = str(exc)
               if hasattr(exc, "code"):
                    payload["exc_code"] = exc.code
               payload["traceback"] = self.formatException(record.exc_info)

          return json.dumps(payload, default=_json_default)


_configured = False
_lock = threading.Lock()


def configure_logging(
     *,
     level: str = "INFO",
     fmt: str = "json",
     stream: Any = None,
     handler: Optional[logging.Handler] = None,
) -> None:
     """Configure the ``rentmate`` logger hierarchy. Safe to call repeatedly."""
     global _configured
     with _lock:
          if _configured:
               return
          _configured = True

     root = logging.getLogger(_LOGGER_PREFIX)
     root.setLevel(level)
     root.propagate = False

     h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
     if fmt == "json":
          h.setFormatter(StructuredFormatter())
     else:
          h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
     root.addHandler(h)


def reset_logging() -> None:
     """Drop handlers and allow reconfiguration. Used by tests."""
     global _configured
     with _lock:
          _configured = False
     root = logging.getLogger(_LOGGER_PREFIX)
     root.handlers.clear()
     root.setLevel(logging.WARNING)
     root.propagate = True
