"""
Structured logging with key=value output.

Wraps the standard library ``logging`` module so that discovery code can
attach context as keyword arguments::

    logger = Logger("discoverer")
    logger.info("bootstrap_eose", relay="wss://nos.lol", urls=412)
    # info discoverer bootstrap_eose relay=wss://nos.lol urls=412

The [StructuredFormatter][relaymap.core.logger.StructuredFormatter] reads the
``structured_kv`` extra attached by ``Logger`` and is installed on the root
handler by the CLI, so plain ``logging.getLogger(__name__)`` calls from the
utils and nips layers come out in the same ``level name message`` shape.
"""

import logging
from typing import Any, ClassVar


def _truncate(value: Any, max_value_length: int | None) -> str:
    s = str(value)
    if max_value_length and len(s) > max_value_length:
        return s[:max_value_length] + f"...<truncated {len(s) - max_value_length} chars>"
    return s


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated. Values that are
    empty or contain whitespace, ``=``, or quotes are escaped and wrapped in
    double quotes.

    Args:
        kwargs: Key-value pairs to format.
        max_value_length: Maximum characters per value, or None for no limit.
        prefix: String prepended to a non-empty result.

    Returns:
        Formatted string such as ``' relay=wss://nos.lol reason="eose seen"'``,
        or an empty string when ``kwargs`` is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for key, value in kwargs.items():
        s = _truncate(value, max_value_length)
        if not s or any(c in s for c in " =\"'"):
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        else:
            parts.append(f"{key}={s}")
    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render every record as ``level name message key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            line += format_kv_pairs(extra)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """Structured logger that turns keyword arguments into log fields.

    Mirrors the stdlib logging methods ``debug`` through ``error``,
    each taking an event name plus arbitrary ``**kwargs``.

    Attributes:
        name: Name of the wrapped ``logging.Logger``.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        max_value_length: int | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Logger name passed to ``logging.getLogger``.
            max_value_length: Maximum characters per field value (default 1000).
        """
        self._logger = logging.getLogger(name)
        self._max_value_length = (
            self._DEFAULT_MAX_VALUE_LENGTH if max_value_length is None else max_value_length
        )

    @property
    def name(self) -> str:
        return self._logger.name

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        # Pre-truncate so the formatter receives clean values; short values keep their type
        limit = self._max_value_length
        truncated = {
            key: _truncate(value, limit) if limit and len(str(value)) > limit else value
            for key, value in kwargs.items()
        }
        return {"structured_kv": truncated}

    def _log(self, level: int, msg: str, kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, msg, extra=self._make_extra(kwargs))

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level message with optional key=value pairs."""
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level message with optional key=value pairs."""
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level message with optional key=value pairs."""
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with optional key=value pairs."""
        self._log(logging.ERROR, msg, kwargs)
