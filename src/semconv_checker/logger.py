"""
Structured logging for compliance findings.

Outputs one JSON object per finding so a log pipeline can filter on
``event`` and ``section``.  Every entry carries the signal type
(``metrics``) and the section it refers to (``resource`` or ``metric``).

Logged events:
- version_mismatch     (info)
- missing_attributes   (warn)
- extra_attributes     (info)
- unmatched_metric     (info)
- unsupported_metric   (warn)
- export_checked       (debug summary per call)

Usage:
    from semconv_checker.logger import ComplianceLogger

    events = ComplianceLogger()
    events.version_mismatch(Section.RESOURCE, version="", expected=url)
    events.attributes(Section.METRIC, result, scope_name="app", name="http.server.duration")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from semconv_checker.types import Section

EVENTS_LOGGER_NAME = "semconv_checker.events"

_events_logger = logging.getLogger(EVENTS_LOGGER_NAME)


class JsonLineFormatter(logging.Formatter):
    """Pass finding lines through; wrap plain diagnostics as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        if record.name == EVENTS_LOGGER_NAME:
            return record.getMessage()
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "json") -> None:
    """Install a stdout handler on the package logger.

    Safe to call more than once; the previous handler is replaced.
    """
    root = logging.getLogger("semconv_checker")
    root.setLevel(level.upper())
    for existing in list(root.handlers):
        if getattr(existing, "_semconv_checker", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._semconv_checker = True  # type: ignore[attr-defined]
    root.addHandler(handler)


class ComplianceLogger:
    """
    Structured logger for compliance findings.

    Stateless apart from its labels, so one instance is shared by every
    concurrent Export call.
    """

    def __init__(
        self,
        signal: str = "metrics",
        logger: Optional[logging.Logger] = None,
    ):
        self.signal = signal
        self._logger = logger or _events_logger

    def _emit(
        self,
        event: str,
        section: Section,
        level: str = "info",
        **fields: Any,
    ) -> None:
        """Emit a structured log entry; ``None`` fields are dropped."""
        if level == "debug" and not self._logger.isEnabledFor(logging.DEBUG):
            return

        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "event": event,
            "type": self.signal,
            "section": section.value,
        }
        entry.update({k: v for k, v in fields.items() if v is not None})

        log_line = json.dumps(entry, default=str)

        if level == "warn":
            self._logger.warning(log_line)
        elif level == "debug":
            self._logger.debug(log_line)
        else:
            self._logger.info(log_line)

    def version_mismatch(
        self,
        section: Section,
        version: str,
        expected: str,
        scope_name: Optional[str] = None,
    ) -> None:
        """Log a schema URL that differs from the catalog version."""
        self._emit(
            event="version_mismatch",
            section=section,
            version=version,
            expected=expected,
            **{"scope.name": scope_name},
        )

    def attributes(
        self,
        section: Section,
        missing: Sequence[str],
        extra: Sequence[str],
        version: Optional[str] = None,
        scope_name: Optional[str] = None,
        name: Optional[str] = None,
    ) -> None:
        """Log the missing and extra keys of one comparison.

        Nothing is logged for an empty list.
        """
        context = {"version": version, "scope.name": scope_name, "name": name}
        if missing:
            self._emit(
                event="missing_attributes",
                section=section,
                level="warn",
                missing=list(missing),
                **context,
            )
        if extra:
            self._emit(
                event="extra_attributes",
                section=section,
                extra=list(extra),
                **context,
            )

    def unmatched_metric(self, name: str, scope_name: Optional[str] = None) -> None:
        """Log a metric no rule matched."""
        self._emit(
            event="unmatched_metric",
            section=Section.METRIC,
            name=name,
            **{"scope.name": scope_name},
        )

    def unsupported_metric(
        self, name: str, shape: str, scope_name: Optional[str] = None
    ) -> None:
        """Log a metric skipped because of its data shape."""
        self._emit(
            event="unsupported_metric",
            section=Section.METRIC,
            level="warn",
            name=name,
            shape=shape,
            **{"scope.name": scope_name},
        )

    def export_checked(
        self, violations: int, scopes: Sequence[str], cancelled: bool = False
    ) -> None:
        """Debug summary of one export call."""
        self._emit(
            event="export_checked",
            section=Section.METRIC,
            level="debug",
            violations=violations,
            scopes=list(scopes),
            cancelled=cancelled or None,
        )
