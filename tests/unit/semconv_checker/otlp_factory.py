"""Builders for OTLP metrics protobuf fixtures."""

from __future__ import annotations

import textwrap

from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import (
    ExportMetricsServiceRequest,
)
from opentelemetry.proto.common.v1.common_pb2 import (
    AnyValue,
    InstrumentationScope,
    KeyValue,
)
from opentelemetry.proto.metrics.v1.metrics_pb2 import (
    Gauge,
    Histogram,
    HistogramDataPoint,
    Metric,
    NumberDataPoint,
    ResourceMetrics,
    ScopeMetrics,
    Sum,
)
from opentelemetry.proto.resource.v1.resource_pb2 import Resource

SCHEMA_URL = "https://opentelemetry.io/schemas/1.24.0"

CATALOG_YAML = textwrap.dedent("""\
    schema_url: https://opentelemetry.io/schemas/1.24.0
    groups:
      - id: resource.service
        prefix: service
        attributes:
          - id: name
          - id: version
      - id: http.common
        attributes:
          - ref: http.method
          - ref: http.status_code
      - id: http.server
        extends: http.common
        attributes:
          - ref: http.route
      - id: db
        prefix: db
        attributes:
          - id: system
          - ref: http.method
""")

RULES_YAML = textwrap.dedent("""\
    resource:
      groups: [resource.service]
    metrics:
      - match: "^http\\\\..*"
        groups: [http.common]
""")


def kv(key: str, value: str = "v") -> KeyValue:
    return KeyValue(key=key, value=AnyValue(string_value=value))


def number_points(*point_keys):
    return [
        NumberDataPoint(attributes=[kv(k) for k in keys], as_double=1.0)
        for keys in point_keys
    ]


def gauge_metric(name: str, *point_keys) -> Metric:
    return Metric(name=name, gauge=Gauge(data_points=number_points(*point_keys)))


def sum_metric(name: str, *point_keys) -> Metric:
    return Metric(
        name=name,
        sum=Sum(data_points=number_points(*point_keys), is_monotonic=True),
    )


def histogram_metric(name: str, *point_keys) -> Metric:
    return Metric(
        name=name,
        histogram=Histogram(
            data_points=[
                HistogramDataPoint(attributes=[kv(k) for k in keys], count=1)
                for keys in point_keys
            ]
        ),
    )


def scope(name: str, *metrics: Metric, schema_url: str = SCHEMA_URL) -> ScopeMetrics:
    return ScopeMetrics(
        scope=InstrumentationScope(name=name),
        metrics=list(metrics),
        schema_url=schema_url,
    )


def resource(
    keys=("service.name", "service.version"),
    *scopes: ScopeMetrics,
    schema_url: str = SCHEMA_URL,
) -> ResourceMetrics:
    return ResourceMetrics(
        resource=Resource(attributes=[kv(k) for k in keys]),
        scope_metrics=list(scopes),
        schema_url=schema_url,
    )


def request(*resources: ResourceMetrics) -> ExportMetricsServiceRequest:
    return ExportMetricsServiceRequest(resource_metrics=list(resources))
