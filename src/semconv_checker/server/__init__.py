"""
OTLP/gRPC hosting and offline payload input.

Public API::

    from semconv_checker.server import (
        MetricsComplianceServicer,
        VerdictLatch,
        create_server,
        load_requests,
        serve,
    )
"""

from semconv_checker.server.app import create_server, serve
from semconv_checker.server.payload import load_requests
from semconv_checker.server.service import MetricsComplianceServicer, VerdictLatch

__all__ = [
    "MetricsComplianceServicer",
    "VerdictLatch",
    "create_server",
    "load_requests",
    "serve",
]
