"""Structured logging module with JSON output support."""

import json
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.utils.config import LOG_LEVELS, config
from src.utils.trace_context import get_current_trace

_SEVERITY = {level: index for index, level in enumerate(LOG_LEVELS)}


class StructuredLogger:
    """Logger that emits one JSON object per line."""

    def __init__(
        self,
        component: str,
        file_path: str | None = None,
        min_level: str | None = None,
    ):
        """
        Initialize the structured logger.

        Args:
            component: Name of the component using this logger
            file_path: Optional path to append log lines to (defaults to LOG_FILE)
            min_level: Entries below this level are dropped (defaults to LOG_LEVEL)
        """
        self.component = component
        self.file_path = file_path if file_path is not None else config.logging.file_path
        self.min_level = (min_level or config.logging.level).upper()
        if self.file_path:
            Path(self.file_path).parent.mkdir(parents=True, exist_ok=True)

    def is_enabled(self, level: str) -> bool:
        return _SEVERITY.get(level, _SEVERITY["INFO"]) >= _SEVERITY.get(self.min_level, 0)

    def _build_entry(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None,
        exception: BaseException | None,
    ) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level,
            "component": self.component,
            "message": message,
        }

        merged = dict(context or {})
        trace_id = get_current_trace()
        if trace_id and "trace_id" not in merged:
            merged["trace_id"] = trace_id
        if merged:
            entry["context"] = merged

        if exception is not None:
            entry["exception"] = {
                "type": type(exception).__name__,
                "message": str(exception),
                "stack_trace": "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                ),
            }

        return json.dumps(entry, default=str)

    def _emit(self, line: str) -> None:
        try:
            print(line, file=sys.stdout)
            if self.file_path:
                with open(self.file_path, "a") as f:
                    f.write(line + "\n")
        except OSError as e:
            print(f"Failed to write log: {e}", file=sys.stderr)

    def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """
        Log a message at the given level.

        Unknown levels are logged as INFO.
        """
        level = level.upper()
        if level not in _SEVERITY:
            level = "INFO"
        if not self.is_enabled(level):
            return
        self._emit(self._build_entry(level, message, context, exception))

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("DEBUG", message, context)

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("INFO", message, context)

    def warning(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        self.log("WARNING", message, context, exception)

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """Log an error message with optional exception details."""
        self.log("ERROR", message, context, exception)

    def critical(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        self.log("CRITICAL", message, context, exception)
