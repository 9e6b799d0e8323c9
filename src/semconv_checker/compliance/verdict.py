"""
Verdict aggregation and rendering.

A ``Verdict`` is the compliance outcome of one export call: how many
required attributes were missing on matched metrics, and which scopes
held a metric that some rule matched.  Verdicts are immutable and combine with
``merge``, so the traversal folds per-metric fragments instead of
mutating a shared counter.

The verdict is rendered in one of two ways:

- ``exit_code()`` for one-shot and offline checks.
- ``build_response()`` for the OTLP service: a partial-success response
  paired with ``FAILED_PRECONDITION`` when anything is missing, or an
  empty response with ``OK``.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Iterable

import grpc
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import (
    ExportMetricsPartialSuccess,
    ExportMetricsServiceResponse,
)

from semconv_checker.compliance.comparator import ComparisonResult
from semconv_checker.constants import REJECTION_MESSAGE
from semconv_checker.types import ExitCode


@dataclass(frozen=True)
class Verdict:
    """Compliance outcome of a single export call."""

    violation_count: int = 0
    implicated_scopes: tuple[str, ...] = ()
    cancelled: bool = False

    def __post_init__(self) -> None:
        if self.violation_count < 0:
            raise ValueError("violation_count must be >= 0")

    @classmethod
    def empty(cls) -> "Verdict":
        return cls()

    @classmethod
    def from_comparison(cls, result: ComparisonResult, scope_name: str) -> "Verdict":
        """Fragment for one rule applied to one metric.

        The scope is recorded for every matched rule.  Extras are not
        violations; only missing keys count.
        """
        return cls(
            violation_count=len(result.missing),
            implicated_scopes=(scope_name,),
        )

    @property
    def passed(self) -> bool:
        return self.violation_count == 0

    def merge(self, other: "Verdict") -> "Verdict":
        """Combine two fragments; associative, with ``empty()`` as identity."""
        return Verdict(
            violation_count=self.violation_count + other.violation_count,
            implicated_scopes=tuple(
                dict.fromkeys(self.implicated_scopes + other.implicated_scopes)
            ),
            cancelled=self.cancelled or other.cancelled,
        )


def fold(verdicts: Iterable[Verdict]) -> Verdict:
    return functools.reduce(Verdict.merge, verdicts, Verdict.empty())


def exit_code(verdict: Verdict) -> ExitCode:
    """Process status for a finished one-shot or offline check."""
    return ExitCode.CLEAN if verdict.passed else ExitCode.VIOLATION


@dataclass(frozen=True)
class ExportOutcome:
    """Response message plus the gRPC status to send with it."""

    response: ExportMetricsServiceResponse = field(
        default_factory=ExportMetricsServiceResponse
    )
    status_code: grpc.StatusCode = grpc.StatusCode.OK
    details: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == grpc.StatusCode.OK


def build_response(verdict: Verdict) -> ExportOutcome:
    """Render a verdict as an OTLP Export reply."""
    if verdict.passed:
        return ExportOutcome()

    response = ExportMetricsServiceResponse(
        partial_success=ExportMetricsPartialSuccess(
            rejected_data_points=verdict.violation_count,
            error_message=REJECTION_MESSAGE,
        )
    )
    scopes = ", ".join(verdict.implicated_scopes)
    return ExportOutcome(
        response=response,
        status_code=grpc.StatusCode.FAILED_PRECONDITION,
        details=f"{REJECTION_MESSAGE}: [{scopes}]",
    )
