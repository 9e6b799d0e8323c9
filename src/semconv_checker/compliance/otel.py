"""
OTel span event emission for compliance verdicts.

Usage::

    from semconv_checker.compliance.otel import emit_verdict

    emit_verdict(verdict)
"""

from __future__ import annotations

import logging

from semconv_checker._otel_helpers import add_span_event
from semconv_checker.compliance.verdict import Verdict

logger = logging.getLogger(__name__)


def emit_verdict(verdict: Verdict) -> None:
    """Emit a span event summarising one checked export call.

    Event name: ``semconv.export.checked``
    """
    attrs: dict[str, str | int | float | bool] = {
        "semconv.passed": verdict.passed,
        "semconv.violations": verdict.violation_count,
        "semconv.implicated_scopes": len(verdict.implicated_scopes),
        "semconv.cancelled": verdict.cancelled,
    }

    if verdict.passed:
        logger.debug("Export call compliant")
    else:
        logger.debug(
            "Export call FAILED: violations=%d scopes=%s",
            verdict.violation_count,
            list(verdict.implicated_scopes),
        )

    add_span_event("semconv.export.checked", attrs)
