"""
gRPC host for the compliance service.

``serve()`` owns the process-level decisions: it binds the listener,
and in one-shot mode waits for the first verdict, stops the server and
returns the exit code for the caller to exit with.
"""

from __future__ import annotations

import logging
from concurrent import futures
from typing import Callable, Optional

import grpc

from semconv_checker.compliance.traversal import ComplianceChecker
from semconv_checker.compliance.verdict import exit_code
from semconv_checker.constants import DEFAULT_MAX_WORKERS, DEFAULT_SHUTDOWN_GRACE_S
from semconv_checker.errors import ConfigurationError
from semconv_checker.server.service import (
    MetricsComplianceServicer,
    VerdictLatch,
    add_to_server,
)
from semconv_checker.types import ExitCode

logger = logging.getLogger(__name__)


def create_server(
    servicer: MetricsComplianceServicer,
    address: str,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> tuple[grpc.Server, int]:
    """Build an unstarted server with ``servicer`` bound to ``address``.

    Returns:
        The server and the port actually bound (useful with port 0).

    Raises:
        ConfigurationError: If the address cannot be bound.
    """
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    add_to_server(servicer, server)
    try:
        port = server.add_insecure_port(address)
    except RuntimeError as exc:
        raise ConfigurationError("address", f"cannot bind {address}: {exc}") from exc
    if port == 0:
        raise ConfigurationError("address", f"cannot bind {address}")
    return server, port


def serve(
    checker: ComplianceChecker,
    address: str,
    one_shot: bool = False,
    max_workers: int = DEFAULT_MAX_WORKERS,
    shutdown_grace_s: float = DEFAULT_SHUTDOWN_GRACE_S,
    on_ready: Optional[Callable[[int], None]] = None,
) -> Optional[ExitCode]:
    """Run the OTLP metrics service.

    Args:
        checker: Compliance checker shared by all calls.
        address: host:port to listen on.
        one_shot: Return after the first completed export call.
        max_workers: Thread pool size.
        shutdown_grace_s: Grace period for in-flight calls on stop.
        on_ready: Called with the bound port once the server is started.

    Returns:
        The exit code in one-shot mode; None when a long-running server
        terminates.
    """
    latch = VerdictLatch() if one_shot else None
    servicer = MetricsComplianceServicer(checker, latch=latch)
    server, port = create_server(servicer, address, max_workers)

    server.start()
    logger.info(
        "OTLP metrics checker listening: address=%s port=%d one_shot=%s rules=%d",
        address,
        port,
        one_shot,
        len(checker.match_table),
    )
    if on_ready is not None:
        on_ready(port)

    try:
        if latch is None:
            server.wait_for_termination()
            return None

        verdict = latch.wait()
        code = exit_code(verdict)
        logger.info(
            "One-shot check finished: violations=%d exit_code=%d",
            verdict.violation_count,
            int(code),
        )
        return code
    finally:
        server.stop(shutdown_grace_s).wait()
