"""Logging configuration for scrybe.

This module defines the logging setup shared by the library and the CLI:
- Standard application logging with optional file rotation
- Structured JSON logging for machine parsing
- Timing of long operations such as bulk downloads

The library itself only creates module loggers. Applications (and the CLI)
call ``configure_logging`` once at startup.
"""

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Structured fields passed as extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


@contextmanager
def log_performance(operation: str, logger: Optional[logging.Logger] = None) -> Iterator[None]:
    """Context manager for logging operation performance.

    Args:
        operation: Name of the operation
        logger: Logger to use (default: root logger)

    Example:
        with log_performance("bulk download oracle_cards", logger):
            await cache.download(entry)
    """
    if logger is None:
        logger = logging.getLogger()

    start_time = time.perf_counter()
    success = False
    try:
        yield
        success = True
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "%s completed in %.2fms (success=%s)",
            operation,
            duration_ms,
            success,
            extra={
                "extra_fields": {
                    "event_type": "performance",
                    "operation": operation,
                    "duration_ms": round(duration_ms, 2),
                    "success": success,
                }
            },
        )


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(
    log_file: Optional[Path] = None,
    level: Union[int, str] = logging.INFO,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    use_json: bool = False,
    console_output: bool = True,
) -> None:
    """Configure root logging handlers with optional JSON formatting.

    Parameters
    ----------
    log_file: Path, optional
        If provided, logs will be written to this file with rotation.  The
        directory will be created if it does not exist.
    level: int or str
        Logging level (``logging.DEBUG`` or ``"DEBUG"``).
    max_bytes: int
        Maximum size of each log file before rotation.
    backup_count: int
        Number of rotated log files to keep.
    use_json: bool
        If True, use JSON structured logging format.
    console_output: bool
        If True, enable console output handler.
    """
    level = _coerce_level(level)

    # Prevent duplicate handlers if configure_logging is called multiple times
    root = logging.getLogger()
    if any(getattr(h, "_scrybe_handler", False) for h in root.handlers):
        root.setLevel(level)
        return

    root.setLevel(level)

    if use_json:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers = []
    if console_output:
        handlers.append(logging.StreamHandler())

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler._scrybe_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # httpx logs every request at INFO; keep it to warnings unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)


def configure_from_config(config: Any, **overrides: Any) -> None:
    """Configure logging from the ``logging.*`` configuration keys.

    Args:
        config: A ``Config`` instance
        **overrides: Explicit values (e.g. from CLI flags) that win over config
    """
    log_file = overrides.get("log_file") or config.get("logging.file") or None
    configure_logging(
        log_file=Path(log_file) if log_file else None,
        level=overrides.get("level") or config.get("logging.level", "INFO"),
        use_json=bool(overrides.get("use_json")) or config.get_bool("logging.json", False),
        console_output=overrides.get("console_output", True),
    )
