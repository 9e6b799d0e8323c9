"""
OTLP/gRPC metrics service that checks every export call.

``MetricsComplianceServicer`` implements ``MetricsService.Export``.  It
runs the compliance checker, sets the gRPC status from the verdict and
returns the response.  It never ends the process; in one-shot mode it
hands the first verdict to a ``VerdictLatch`` and the hosting entry
point decides what to do with it.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import grpc
from opentelemetry import trace
from opentelemetry.proto.collector.metrics.v1 import metrics_service_pb2_grpc

from semconv_checker.compliance.traversal import ComplianceChecker
from semconv_checker.compliance.verdict import Verdict, build_response

logger = logging.getLogger(__name__)

tracer = trace.get_tracer(__name__)


class VerdictLatch:
    """Holds the first verdict published to it.

    Later publications are ignored (first call wins).  ``wait()`` blocks
    until a verdict is available.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._verdict: Optional[Verdict] = None

    def publish(self, verdict: Verdict) -> bool:
        """Record ``verdict`` if none is recorded yet; True when it was."""
        with self._lock:
            if self._verdict is not None:
                return False
            self._verdict = verdict
        self._event.set()
        return True

    @property
    def verdict(self) -> Optional[Verdict]:
        return self._verdict

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> Optional[Verdict]:
        self._event.wait(timeout)
        return self._verdict


class MetricsComplianceServicer(metrics_service_pb2_grpc.MetricsServiceServicer):
    """OTLP ``MetricsService`` that validates instead of storing.

    Args:
        checker: Shared, read-only compliance checker.
        latch: Set in one-shot mode; receives the first verdict.
    """

    def __init__(
        self,
        checker: ComplianceChecker,
        latch: Optional[VerdictLatch] = None,
    ) -> None:
        self.checker = checker
        self.latch = latch

    def Export(self, request, context):
        with tracer.start_as_current_span(
            "semconv.metrics.export", kind=trace.SpanKind.SERVER
        ):
            verdict = self.checker.check(request, cancelled=lambda: not context.is_active())

            if self.latch is not None and not verdict.cancelled:
                if not self.latch.publish(verdict):
                    logger.debug("One-shot verdict already recorded; ignoring later call")

            outcome = build_response(verdict)
            if not outcome.ok:
                context.set_code(outcome.status_code)
                context.set_details(outcome.details)
            return outcome.response


def add_to_server(servicer: MetricsComplianceServicer, server: grpc.Server) -> None:
    metrics_service_pb2_grpc.add_MetricsServiceServicer_to_server(servicer, server)
