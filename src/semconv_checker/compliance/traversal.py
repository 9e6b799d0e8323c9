"""
Compliance traversal of an OTLP metrics export request.

Walks resources -> scopes -> metrics -> data points.  Resources are
compared against the ``ResourceSchema``; every metric is compared
against each ``MatchRule`` whose pattern matches its name.

Only missing keys on matched metrics count toward the verdict.
Resource findings, schema version mismatches, unmatched metrics and
unsupported metric shapes are logged and never counted.

Malformed data never raises: a ``None`` request or metric is skipped
silently.

Usage::

    from semconv_checker.compliance.traversal import build_checker

    checker = build_checker(config, catalog)
    verdict = checker.check(request)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Mapping, Optional, Sequence

from semconv_checker.catalog.registry import SchemaCatalog
from semconv_checker.compliance.comparator import attribute_keys, compare
from semconv_checker.compliance.match_table import (
    MatchTable,
    ResourceSchema,
    build_match_table,
)
from semconv_checker.compliance.otel import emit_verdict
from semconv_checker.compliance.schema import RulesConfig
from semconv_checker.compliance.verdict import Verdict, fold
from semconv_checker.logger import ComplianceLogger
from semconv_checker.types import MetricShape, Section

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric shape dispatch
# ---------------------------------------------------------------------------

# Number-valued shapes and how to reach their data points.
_SUPPORTED_SHAPES: Mapping[MetricShape, Callable] = {
    MetricShape.GAUGE: lambda metric: metric.gauge.data_points,
    MetricShape.SUM: lambda metric: metric.sum.data_points,
}

_UNSUPPORTED_SHAPES: frozenset[MetricShape] = frozenset({
    MetricShape.HISTOGRAM,
    MetricShape.EXPONENTIAL_HISTOGRAM,
    MetricShape.SUMMARY,
    MetricShape.UNSET,
})

# Every shape must be classified explicitly.
_unclassified = set(MetricShape) - set(_SUPPORTED_SHAPES) - _UNSUPPORTED_SHAPES
if _unclassified or set(_SUPPORTED_SHAPES) & _UNSUPPORTED_SHAPES:
    raise RuntimeError(
        f"MetricShape members must be either supported or unsupported: "
        f"{sorted(s.value for s in _unclassified)}"
    )


def metric_shape(metric) -> Optional[MetricShape]:
    """Shape of ``metric``'s data oneof; None for a kind this build does not know."""
    kind = metric.WhichOneof("data") or MetricShape.UNSET.value
    try:
        return MetricShape(kind)
    except ValueError:
        return None


def data_points(metric) -> Optional[Sequence]:
    """Number data points of a gauge or sum; None for any other shape."""
    shape = metric_shape(metric)
    if shape is None or shape in _UNSUPPORTED_SHAPES:
        return None
    return _SUPPORTED_SHAPES[shape](metric)


def observed_keys(points: Sequence) -> tuple[str, ...]:
    """Keys carried by every data point, in the first point's order.

    A key absent from any single point is not observed for the metric.
    """
    if not points:
        return ()
    first, *rest = (attribute_keys(point.attributes) for point in points)
    shared = set(first).intersection(*rest)
    return tuple(key for key in first if key in shared)


# ---------------------------------------------------------------------------
# Checker
# ---------------------------------------------------------------------------


class ComplianceChecker:
    """Checks export requests against a match table and resource schema.

    Holds only read-only state, so one instance serves any number of
    concurrent calls.

    Args:
        match_table: Compiled metric rules.
        resource_schema: Requirements for every resource.
        report_unmatched: Log metrics that no rule matched.
        events: Structured finding logger.
    """

    def __init__(
        self,
        match_table: MatchTable,
        resource_schema: ResourceSchema,
        report_unmatched: bool = False,
        events: Optional[ComplianceLogger] = None,
    ) -> None:
        self.match_table = match_table
        self.resource_schema = resource_schema
        self.report_unmatched = report_unmatched
        self._events = events or ComplianceLogger()

    @property
    def expected_version(self) -> str:
        return self.resource_schema.expected_version

    def check(
        self,
        request,
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> Verdict:
        """Check one ``ExportMetricsServiceRequest``.

        Args:
            request: The export request, or None.
            cancelled: Polled between resources and between scopes;
                when it returns True the walk stops early and the
                partial verdict is returned with ``cancelled=True``.
        """
        if request is None:
            return Verdict.empty()

        verdict = fold(self._walk(request, cancelled))
        self._events.export_checked(
            verdict.violation_count, verdict.implicated_scopes, verdict.cancelled
        )
        emit_verdict(verdict)
        return verdict

    def _walk(
        self, request, cancelled: Optional[Callable[[], bool]]
    ) -> Iterator[Verdict]:
        for resource_metrics in request.resource_metrics:
            if cancelled is not None and cancelled():
                yield Verdict(cancelled=True)
                return
            if resource_metrics is None:
                continue

            self.check_resource(resource_metrics)

            for scope_metrics in resource_metrics.scope_metrics:
                if cancelled is not None and cancelled():
                    yield Verdict(cancelled=True)
                    return
                if scope_metrics is None:
                    continue
                yield from self._walk_scope(scope_metrics)

    def check_resource(self, resource_metrics) -> None:
        """Log version and attribute findings for one resource.

        Resource findings are advisory and never enter the verdict.
        """
        version = resource_metrics.schema_url
        if version != self.expected_version:
            self._events.version_mismatch(
                Section.RESOURCE, version=version, expected=self.expected_version
            )

        result = compare(
            self.resource_schema.required,
            attribute_keys(resource_metrics.resource.attributes),
            self.resource_schema.ignore,
        )
        self._events.attributes(
            Section.RESOURCE, result.missing, result.extra, version=version
        )

    def _walk_scope(self, scope_metrics) -> Iterator[Verdict]:
        scope_name = scope_metrics.scope.name

        if scope_metrics.schema_url != self.expected_version:
            self._events.version_mismatch(
                Section.METRIC,
                version=scope_metrics.schema_url,
                expected=self.expected_version,
                scope_name=scope_name,
            )

        for metric in scope_metrics.metrics:
            if metric is None:
                continue
            yield self.check_metric(metric, scope_name)

    def check_metric(self, metric, scope_name: str = "") -> Verdict:
        """Apply every matching rule to one metric."""
        if metric is None:
            return Verdict.empty()

        points = data_points(metric)
        if points is None:
            self._events.unsupported_metric(
                metric.name,
                shape=metric.WhichOneof("data") or MetricShape.UNSET.value,
                scope_name=scope_name or None,
            )
            return Verdict.empty()

        rules = list(self.match_table.matching(metric.name))
        if not rules:
            if self.report_unmatched:
                self._events.unmatched_metric(metric.name, scope_name=scope_name or None)
            return Verdict.empty()
        if not points:
            logger.debug("Metric %s has no data points; nothing to compare", metric.name)
            return Verdict.empty()

        observed = observed_keys(points)
        verdict = Verdict.empty()
        for rule in rules:
            result = compare(rule.required, observed, rule.ignore)
            self._events.attributes(
                Section.METRIC,
                result.missing,
                result.extra,
                scope_name=scope_name or None,
                name=metric.name,
            )
            verdict = verdict.merge(Verdict.from_comparison(result, scope_name))
        return verdict


def build_checker(
    config: RulesConfig,
    catalog: SchemaCatalog,
    report_unmatched: Optional[bool] = None,
    events: Optional[ComplianceLogger] = None,
) -> ComplianceChecker:
    """Compile ``config`` and return a ready checker.

    Raises:
        ConfigurationError: Invalid pattern or unknown group.
    """
    match_table, resource_schema = build_match_table(config, catalog)
    return ComplianceChecker(
        match_table,
        resource_schema,
        report_unmatched=config.report_unmatched if report_unmatched is None else report_unmatched,
        events=events,
    )
